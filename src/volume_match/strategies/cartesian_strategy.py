"""Cartesian product path strategy."""

from typing import Dict, List, Union

from ..models import ConsumptionPool, GenerationPool, MatchPath
from .base_strategy import BaseStrategy, StrategyKind


class CartesianStrategy(BaseStrategy):
    """Pairs every consumption with every generation. Lowest priority fallback."""

    kind = StrategyKind.CARTESIAN

    @property
    def name(self) -> str:
        return "Cartesian product"

    def execute(
        self, consumptions: ConsumptionPool, generations: GenerationPool
    ) -> List[MatchPath]:
        return [
            MatchPath(consumption_id, generation_id)
            for consumption_id in consumptions
            for generation_id in generations
        ]

    def get_strategy_info(self) -> Dict[str, Union[str, int, List[str]]]:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "description": "Pairs every consumption with every generation",
            "matched_fields": [],
        }
