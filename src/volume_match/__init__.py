"""Proportional volume matching engine for energy consumption and generation."""

from .matcher import ProportionalMatcher, StrategyRun, match
from .models import (
    Consumption,
    EnergyPriority,
    Generation,
    Match,
    MatchingResult,
    StrategyResult,
)
from .validation import InputValidationError, IterationLimitExceeded, MatchingError

__version__ = "0.1.0"

__all__ = [
    "ProportionalMatcher",
    "StrategyRun",
    "match",
    "Consumption",
    "EnergyPriority",
    "Generation",
    "Match",
    "MatchingResult",
    "StrategyResult",
    "InputValidationError",
    "IterationLimitExceeded",
    "MatchingError",
]
