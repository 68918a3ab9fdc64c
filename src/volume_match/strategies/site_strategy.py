"""Site path strategy."""

from typing import Dict, List, Union

from ..models import ConsumptionPool, GenerationPool, MatchPath
from .base_strategy import BaseStrategy, StrategyKind


class SiteStrategy(BaseStrategy):
    """Pairs consumptions with generations located on the same site.

    Runs first: energy produced on site is always used on site before any
    other strategy sees it.
    """

    kind = StrategyKind.SITE

    @property
    def name(self) -> str:
        return "Site"

    def execute(
        self, consumptions: ConsumptionPool, generations: GenerationPool
    ) -> List[MatchPath]:
        generations_by_site = self.group_generations(generations, lambda g: g.site_id)

        return [
            MatchPath(consumption.id, generation.id)
            for consumption in consumptions.values()
            for generation in generations_by_site.get(consumption.site_id, [])
        ]

    def get_strategy_info(self) -> Dict[str, Union[str, int, List[str]]]:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "description": "Pairs consumptions and generations sharing a site",
            "matched_fields": ["site_id"],
        }
