"""Region path strategy."""

from typing import Dict, List, Union

from ..models import ConsumptionPool, GenerationPool, MatchPath
from .base_strategy import BaseStrategy, StrategyKind


class RegionStrategy(BaseStrategy):
    """Pairs region-opted-in consumptions with generations in their region."""

    kind = StrategyKind.REGION

    @property
    def name(self) -> str:
        return "Region"

    def execute(
        self, consumptions: ConsumptionPool, generations: GenerationPool
    ) -> List[MatchPath]:
        generations_by_region = self.group_generations(generations, lambda g: g.region_id)

        return [
            MatchPath(consumption.id, generation.id)
            for consumption in consumptions.values()
            if consumption.should_match_by_region
            for generation in generations_by_region.get(consumption.region_id, [])
        ]

    def get_strategy_info(self) -> Dict[str, Union[str, int, List[str]]]:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "description": "Pairs consumptions matching by region with generations in that region",
            "matched_fields": ["region_id", "should_match_by_region"],
        }
