"""Proportional matcher: runs path strategies to exhaustion in priority order."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .config import MatcherConfigManager
from .core import MatchingPool, MatchRound, ResultAggregator, sum_matches
from .models import Consumption, LoopTermination, Match, MatchingResult
from .strategies import (
    BaseStrategy,
    CartesianStrategy,
    EnergyPriorityStrategy,
    SiteStrategy,
    OTHER_COUNTRY,
    SAME_COUNTRY,
    SAME_REGION,
)
from .validation import InputValidator, IterationLimitExceeded, ValidatedInput
from .validation.input_validator import EntityInput

logger = logging.getLogger(__name__)


@dataclass
class StrategyRun:
    """Outcome of running one strategy until it stopped."""

    strategy_name: str
    termination: LoopTermination
    rounds: int = 0
    matches: List[Match] = field(default_factory=list)


class ProportionalMatcher:
    """Matches consumption volume against generation volume.

    Strategies run from most to least specific: same site first, then for
    each priority level (highest first) same region, then same country, then
    other countries. Each strategy repeats rounds against the shrinking pool
    until a round matches nothing.
    """

    config_manager: MatcherConfigManager
    validator: InputValidator
    match_round: MatchRound

    def __init__(
        self,
        config_manager: Optional[MatcherConfigManager] = None,
        match_round: Optional[MatchRound] = None,
    ):
        """Initialize proportional matcher.

        Args:
            config_manager: Optional config manager. Creates default if None.
            match_round: Optional round implementation. Creates default if None.
        """
        self.config_manager = config_manager or MatcherConfigManager()
        self.validator = InputValidator()
        self.match_round = match_round or MatchRound()

        logger.info(
            f"Initialized proportional matcher with max "
            f"{self.config_manager.get_max_iterations()} rounds per strategy"
        )

    def match(
        self,
        consumptions: Sequence[EntityInput],
        generations: Sequence[EntityInput],
    ) -> MatchingResult:
        """Run the complete matching process.

        Args:
            consumptions: Consumption records (models or mappings)
            generations: Generation records (models or mappings)

        Returns:
            MatchingResult with summed matches, leftovers and per-strategy results

        Raises:
            InputValidationError: If any record is invalid; nothing is matched
            IterationLimitExceeded: If a strategy never stops matching
        """
        result, _ = self.match_with_statistics(consumptions, generations)
        return result

    def match_with_statistics(
        self,
        consumptions: Sequence[EntityInput],
        generations: Sequence[EntityInput],
    ) -> Tuple[MatchingResult, Dict[str, Any]]:
        """Run the matching process and also return pool statistics.

        Args:
            consumptions: Consumption records (models or mappings)
            generations: Generation records (models or mappings)

        Returns:
            Tuple of (result, statistics)
        """
        validated = self.validator.validate(consumptions, generations)
        return self.match_validated(validated)

    def match_validated(
        self, validated: ValidatedInput
    ) -> Tuple[MatchingResult, Dict[str, Any]]:
        """Run the matching process on input that already passed validation.

        Args:
            validated: Output of InputValidator.validate

        Returns:
            Tuple of (result, statistics)
        """
        pool = MatchingPool(validated.consumptions, validated.generations)
        aggregator = ResultAggregator()

        for strategy in self.build_strategies(validated.consumptions):
            logger.info(f"Running strategy '{strategy.name}'")

            run = self.run_until_exhausted(strategy, pool)
            if run.termination == LoopTermination.LIMIT_EXCEEDED:
                logger.error(
                    f"Strategy '{strategy.name}' still matching after {run.rounds} rounds"
                )
                raise IterationLimitExceeded(
                    strategy.name, self.config_manager.get_max_iterations()
                )

            aggregator.add_strategy_result(strategy.name, run.matches, run.rounds)

        result = aggregator.get_aggregated_result(pool)

        statistics = pool.get_match_statistics()
        logger.info(
            f"Matched {statistics['matched_volume']} volume in {len(result.matches)} pairs; "
            f"{len(result.leftover_consumptions)} consumptions and "
            f"{len(result.leftover_generations)} generations left over"
        )
        return result, statistics

    def build_strategies(self, consumptions: Sequence[Consumption]) -> List[BaseStrategy]:
        """Build the ordered strategy list for the given consumptions.

        Args:
            consumptions: All validated consumptions

        Returns:
            Site strategy, then predicate strategies per priority level
            (descending) for same region, same country and other countries,
            then the cartesian fallback when enabled
        """
        priorities = sorted(
            {level for c in consumptions for level in c.priority_levels},
            reverse=True,
        )

        strategies: List[BaseStrategy] = [SiteStrategy()]
        for predicate in (SAME_REGION, SAME_COUNTRY, OTHER_COUNTRY):
            strategies.extend(EnergyPriorityStrategy(p, predicate) for p in priorities)

        if self.config_manager.is_cartesian_fallback_enabled():
            strategies.append(CartesianStrategy())

        logger.debug(f"Strategy order: {[s.name for s in strategies]}")
        return strategies

    def run_until_exhausted(self, strategy: BaseStrategy, pool: MatchingPool) -> StrategyRun:
        """Repeat rounds of one strategy until a round matches nothing.

        Args:
            strategy: Strategy building the paths of every round
            pool: Working pool; matched volume is removed from it

        Returns:
            StrategyRun ending EXHAUSTED, or LIMIT_EXCEEDED when the round
            ceiling was reached while rounds were still matching
        """
        max_iterations = self.config_manager.get_max_iterations()
        run = StrategyRun(strategy_name=strategy.name, termination=LoopTermination.LIMIT_EXCEEDED)

        while run.rounds < max_iterations:
            consumptions = pool.get_active_consumptions()
            generations = pool.get_active_generations()

            paths = strategy.execute(consumptions, generations)
            round_result = self.match_round.execute(consumptions, generations, paths)
            run.rounds += 1

            round_matches = sum_matches(round_result.matches)
            if not round_matches:
                run.termination = LoopTermination.EXHAUSTED
                break

            pool.record_matches(round_matches)
            run.matches.extend(round_matches)

            logger.debug(
                f"Strategy '{strategy.name}' round {run.rounds}: "
                f"{len(round_matches)} matches from {len(paths)} paths"
            )

        return run


def match(
    consumptions: Sequence[EntityInput],
    generations: Sequence[EntityInput],
    config_manager: Optional[MatcherConfigManager] = None,
) -> MatchingResult:
    """Match consumptions against generations with a fresh matcher.

    Args:
        consumptions: Consumption records (models or mappings)
        generations: Generation records (models or mappings)
        config_manager: Optional config manager

    Returns:
        MatchingResult of the run
    """
    return ProportionalMatcher(config_manager).match(consumptions, generations)
