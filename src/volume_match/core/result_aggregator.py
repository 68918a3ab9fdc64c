"""Match summing and result assembly for the volume matching engine."""

from typing import Dict, Iterable, List
import logging

from ..models import Match, MatchingResult, StrategyResult
from .matching_pool import MatchingPool

logger = logging.getLogger(__name__)


def sum_matches(matches: Iterable[Match]) -> List[Match]:
    """Merge matches sharing a consumption id and generation id.

    Output is grouped by consumption (first-seen order), then by generation
    (first-seen order within that consumption). Summing an already summed
    list returns it unchanged.

    Args:
        matches: Matches in any order, possibly with repeated pairs

    Returns:
        One match per distinct pair with the summed volume
    """
    totals: Dict[str, Dict[str, int]] = {}

    for match in matches:
        per_consumption = totals.setdefault(match.consumption_id, {})
        per_consumption[match.generation_id] = (
            per_consumption.get(match.generation_id, 0) + match.volume
        )

    return [
        Match(consumption_id=consumption_id, generation_id=generation_id, volume=volume)
        for consumption_id, per_consumption in totals.items()
        for generation_id, volume in per_consumption.items()
    ]


class ResultAggregator:
    """Collects per-strategy matches and builds the final MatchingResult."""

    def __init__(self) -> None:
        self.strategy_results: List[StrategyResult] = []

    def add_strategy_result(
        self, strategy_name: str, matches: List[Match], rounds: int
    ) -> StrategyResult:
        """Add the matches one strategy contributed.

        Args:
            strategy_name: Name of the strategy
            matches: Every match of every round of the strategy
            rounds: Number of rounds the strategy ran

        Returns:
            The stored StrategyResult with summed matches
        """
        result = StrategyResult(
            strategy_name=strategy_name,
            matches=sum_matches(matches),
            rounds=rounds,
        )
        self.strategy_results.append(result)
        logger.info(
            f"Strategy '{strategy_name}' matched {result.total_volume} volume "
            f"in {len(result.matches)} pairs over {rounds} rounds"
        )
        return result

    def get_aggregated_result(self, pool: MatchingPool) -> MatchingResult:
        """Build the final result from the collected strategies and the pool.

        Args:
            pool: Pool after the last strategy ran

        Returns:
            MatchingResult with summed matches and leftovers
        """
        all_matches = [m for r in self.strategy_results for m in r.matches]

        return MatchingResult(
            matches=sum_matches(all_matches),
            leftover_consumptions=pool.get_leftover_consumptions(),
            leftover_generations=pool.get_leftover_generations(),
            strategy_results=list(self.strategy_results),
        )

    def clear_results(self) -> None:
        """Clear all stored strategy results."""
        self.strategy_results.clear()
