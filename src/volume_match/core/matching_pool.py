"""Working pool of consumptions and generations for one matching run."""

from typing import Any, Dict, Iterable, List
import logging

from ..models import Consumption, Generation, Match
from ..validation.exceptions import AllocationError

logger = logging.getLogger(__name__)


class MatchingPool:
    """Owns the volumes a single matching invocation works on.

    The pool keeps its own copies of every entity keyed by id. Matched volume
    is removed by replacing an entity with a copy holding less volume, so the
    caller's records are never touched and nothing outside the pool can see
    the intermediate state.
    """

    def __init__(self, consumptions: List[Consumption], generations: List[Generation]):
        """Initialize the pool with the validated input entities.

        Args:
            consumptions: Consumptions in input order
            generations: Generations in input order
        """
        self._consumptions: Dict[str, Consumption] = {
            c.id: c.model_copy(deep=True) for c in consumptions
        }
        self._generations: Dict[str, Generation] = {
            g.id: g.model_copy(deep=True) for g in generations
        }

        self._original_consumption_volume = sum(c.volume for c in consumptions)
        self._original_generation_volume = sum(g.volume for g in generations)

        # (consumption_id, generation_id, volume) per recorded match
        self._match_history: List[tuple[str, str, int]] = []

        logger.info(
            f"Initialized matching pool with {len(consumptions)} consumptions "
            f"and {len(generations)} generations"
        )

    def get_active_consumptions(self) -> Dict[str, Consumption]:
        """Get consumptions that still have volume, in input order."""
        return {k: c for k, c in self._consumptions.items() if c.volume > 0}

    def get_active_generations(self) -> Dict[str, Generation]:
        """Get generations that still have volume, in input order."""
        return {k: g for k, g in self._generations.items() if g.volume > 0}

    def get_volume(self, entity_id: str) -> int:
        """Get remaining volume of a consumption or generation.

        Raises:
            KeyError: If the id is in neither side of the pool
        """
        if entity_id in self._consumptions:
            return self._consumptions[entity_id].volume
        return self._generations[entity_id].volume

    def record_matches(self, matches: Iterable[Match]) -> None:
        """Atomically remove matched volume from both sides of the pool.

        Every match of the batch is checked against remaining volume before
        anything is applied, so a bad batch leaves the pool unchanged.

        Args:
            matches: Matches of one round, at most one per pair

        Raises:
            AllocationError: If a match references an unknown entity or takes
                more volume than remains
        """
        matches = list(matches)
        consumption_totals: Dict[str, int] = {}
        generation_totals: Dict[str, int] = {}

        for match in matches:
            if match.consumption_id not in self._consumptions:
                raise AllocationError(
                    "Match references unknown consumption", entity_id=match.consumption_id
                )
            if match.generation_id not in self._generations:
                raise AllocationError(
                    "Match references unknown generation", entity_id=match.generation_id
                )
            consumption_totals[match.consumption_id] = (
                consumption_totals.get(match.consumption_id, 0) + match.volume
            )
            generation_totals[match.generation_id] = (
                generation_totals.get(match.generation_id, 0) + match.volume
            )

        for entity_id, requested in consumption_totals.items():
            self._verify_available(entity_id, requested, self._consumptions[entity_id].volume)
        for entity_id, requested in generation_totals.items():
            self._verify_available(entity_id, requested, self._generations[entity_id].volume)

        for entity_id, taken in consumption_totals.items():
            consumption = self._consumptions[entity_id]
            self._consumptions[entity_id] = consumption.with_volume(consumption.volume - taken)
        for entity_id, taken in generation_totals.items():
            generation = self._generations[entity_id]
            self._generations[entity_id] = generation.with_volume(generation.volume - taken)

        for match in matches:
            self._match_history.append(
                (match.consumption_id, match.generation_id, match.volume)
            )

        logger.debug(f"Recorded {len(matches)} matches in pool")

    @staticmethod
    def _verify_available(entity_id: str, requested: int, available: int) -> None:
        if requested > available:
            raise AllocationError(
                "Match volume exceeds remaining volume",
                entity_id=entity_id,
                requested=requested,
                available=available,
            )

    def get_leftover_consumptions(self) -> List[Consumption]:
        """Get consumptions with unmatched volume, in input order."""
        return list(self.get_active_consumptions().values())

    def get_leftover_generations(self) -> List[Generation]:
        """Get generations with unmatched volume, in input order."""
        return list(self.get_active_generations().values())

    def get_match_statistics(self) -> dict[str, Any]:
        """Get matching statistics.

        Returns:
            Dictionary with volume totals, counts and match rates
        """
        leftover_consumption_volume = sum(c.volume for c in self._consumptions.values())
        leftover_generation_volume = sum(g.volume for g in self._generations.values())
        matched_volume = self._original_consumption_volume - leftover_consumption_volume

        return {
            "original_consumption_count": len(self._consumptions),
            "original_generation_count": len(self._generations),
            "original_consumption_volume": self._original_consumption_volume,
            "original_generation_volume": self._original_generation_volume,
            "matched_volume": matched_volume,
            "leftover_consumption_volume": leftover_consumption_volume,
            "leftover_generation_volume": leftover_generation_volume,
            "leftover_consumption_count": len(self.get_active_consumptions()),
            "leftover_generation_count": len(self.get_active_generations()),
            "consumption_match_rate": (
                matched_volume / max(self._original_consumption_volume, 1)
            )
            * 100,
            "generation_match_rate": (
                matched_volume / max(self._original_generation_volume, 1)
            )
            * 100,
            "total_matches": len(self._match_history),
        }
