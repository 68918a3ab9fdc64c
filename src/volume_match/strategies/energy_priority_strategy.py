"""Energy priority path strategy, optionally filtered by a predicate."""

from typing import Dict, List, Optional, Union

from ..models import ConsumptionPool, GenerationPool, MatchPath, Priority
from .base_strategy import BaseStrategy, StrategyKind
from .path_predicates import PathPredicate


class EnergyPriorityStrategy(BaseStrategy):
    """Builds paths from each consumer's energy priorities at one level.

    For every consumption, the energy types it ranks at ``priority`` are
    collected and the consumption is paired with every generation of those
    types. Types with no generation in the pool contribute nothing. With a
    predicate, pairs failing the predicate are dropped.
    """

    kind = StrategyKind.ENERGY_PRIORITY

    def __init__(self, priority: Priority, predicate: Optional[PathPredicate] = None):
        """Initialize energy priority strategy.

        Args:
            priority: Priority level this strategy serves
            predicate: Optional filter applied to every candidate pair
        """
        self.priority = priority
        self.predicate = predicate

    @property
    def name(self) -> str:
        if self.predicate is None:
            return f"Energy priority (level: {self.priority})"
        return f"Energy priority (level: {self.priority}, predicate: {self.predicate.name})"

    def execute(
        self, consumptions: ConsumptionPool, generations: GenerationPool
    ) -> List[MatchPath]:
        generations_by_energy = self.group_generations(generations, lambda g: g.energy_type)
        paths: List[MatchPath] = []

        for consumption in consumptions.values():
            for energy_type in consumption.energy_types_for_priority(self.priority):
                for generation in generations_by_energy.get(energy_type, []):
                    if self.predicate is None or self.predicate(consumption, generation):
                        paths.append(MatchPath(consumption.id, generation.id))

        return paths

    def get_strategy_info(self) -> Dict[str, Union[str, Priority, List[str]]]:
        info: Dict[str, Union[str, Priority, List[str]]] = {
            "name": self.name,
            "kind": self.kind.value,
            "priority": self.priority,
            "description": "Pairs consumptions with generations of the energy types ranked at this level",
            "matched_fields": ["energy_priorities", "energy_type"],
        }
        if self.predicate is not None:
            info["predicate"] = self.predicate.name
        return info
