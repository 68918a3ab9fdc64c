"""Single round of proportional matching over a fixed set of paths."""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence
import logging

from ..models import (
    Ask,
    ConsumptionPool,
    GenerationPool,
    Match,
    MatchPath,
)
from .distribute import distribute_volume

logger = logging.getLogger(__name__)


@dataclass
class RoundResult:
    """Asks and matches produced by one round."""

    asks: List[Ask] = field(default_factory=list)
    matches: List[Match] = field(default_factory=list)

    @property
    def matched_volume(self) -> int:
        return sum(m.volume for m in self.matches)


class MatchRound:
    """Runs one round of asks followed by matches.

    Paths tell each consumer which generators it may take energy from.

    Asks: every consumer splits its volume across its reachable generators
    in proportion to their volumes.

    Matches: every generator splits its own volume across the asks it
    received in proportion to the ask volumes, never giving a consumer more
    than it asked for.

    Example with every consumer pathed to every generator::

        ConsumerA: 24, ConsumerB: 12, GeneratorA: 10, GeneratorB: 20

        Asks:    A->GenA 8, A->GenB 16, B->GenA 4, B->GenB 8
        Matches: A-GenA 7,  B-GenA 3,   A-GenB 14, B-GenB 6
    """

    def execute(
        self,
        consumptions: ConsumptionPool,
        generations: GenerationPool,
        paths: Sequence[MatchPath],
    ) -> RoundResult:
        """Run the round.

        Args:
            consumptions: Consumptions taking part, keyed by id
            generations: Generations taking part, keyed by id
            paths: Eligible pairs. Paths naming ids outside the pools are ignored.

        Returns:
            RoundResult with every positive ask and match
        """
        reachable = self._collect_reachable_generators(consumptions, generations, paths)

        asks = self._create_asks(consumptions, generations, reachable)

        asks_by_generator: Dict[str, List[Ask]] = {}
        for ask in asks:
            asks_by_generator.setdefault(ask.generation_id, []).append(ask)

        matches: List[Match] = []
        for generation_id, generation in generations.items():
            generator_asks = asks_by_generator.get(generation_id)
            if not generator_asks:
                continue
            matches.extend(self._create_matches(generation_id, generation.volume, generator_asks))

        logger.debug(
            f"Round produced {len(asks)} asks and {len(matches)} matches "
            f"from {len(paths)} paths"
        )
        return RoundResult(asks=asks, matches=matches)

    @staticmethod
    def _collect_reachable_generators(
        consumptions: ConsumptionPool,
        generations: GenerationPool,
        paths: Sequence[MatchPath],
    ) -> Dict[str, List[str]]:
        # dict keys keep first-seen order and drop duplicate paths
        reachable: Dict[str, Dict[str, None]] = {}
        for path in paths:
            if path.consumption_id in consumptions and path.generation_id in generations:
                reachable.setdefault(path.consumption_id, {})[path.generation_id] = None
        return {k: list(v) for k, v in reachable.items()}

    @staticmethod
    def _create_asks(
        consumptions: ConsumptionPool,
        generations: GenerationPool,
        reachable: Dict[str, List[str]],
    ) -> List[Ask]:
        asks: List[Ask] = []

        for consumption_id, consumption in consumptions.items():
            generator_ids = reachable.get(consumption_id)
            if not generator_ids:
                continue

            # Largest generators first so they absorb the rounding remainder
            sorted_ids = sorted(generator_ids, key=lambda g: generations[g].volume, reverse=True)
            volumes = distribute_volume(
                consumption.volume,
                [generations[g].volume for g in sorted_ids],
                cap=False,
            )

            for generation_id, volume in zip(sorted_ids, volumes):
                # A zero ask would only turn into an empty match
                if volume > 0:
                    asks.append(Ask(consumption_id, generation_id, volume))

        return asks

    @staticmethod
    def _create_matches(generation_id: str, volume: int, asks: List[Ask]) -> List[Match]:
        sorted_asks = sorted(asks, key=lambda a: a.volume, reverse=True)
        distributed = distribute_volume(volume, [a.volume for a in sorted_asks], cap=True)

        return [
            Match(
                consumption_id=ask.consumption_id,
                generation_id=generation_id,
                volume=matched,
            )
            for ask, matched in zip(sorted_asks, distributed)
            if matched > 0
        ]
