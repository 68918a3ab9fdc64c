"""Volume matching data models."""

from typing import Mapping

from .entity import Entity, EnergyPriority, Consumption, Generation, Priority
from .match_result import (
    MatchPath,
    Ask,
    LoopTermination,
    Match,
    StrategyResult,
    MatchingResult,
)

# Working pools handed to strategies and match rounds, keyed by entity id
ConsumptionPool = Mapping[str, Consumption]
GenerationPool = Mapping[str, Generation]

__all__ = [
    "Entity",
    "EnergyPriority",
    "Consumption",
    "Generation",
    "Priority",
    "MatchPath",
    "Ask",
    "LoopTermination",
    "Match",
    "StrategyResult",
    "MatchingResult",
    "ConsumptionPool",
    "GenerationPool",
]
