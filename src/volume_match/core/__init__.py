"""Core components of the volume matching engine."""

from .distribute import distribute_volume
from .matching_pool import MatchingPool
from .match_round import MatchRound, RoundResult
from .result_aggregator import ResultAggregator, sum_matches

__all__ = [
    "distribute_volume",
    "MatchingPool",
    "MatchRound",
    "RoundResult",
    "ResultAggregator",
    "sum_matches",
]
