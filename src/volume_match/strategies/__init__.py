"""Path strategies and predicates."""

from .base_strategy import BaseStrategy, StrategyKind
from .site_strategy import SiteStrategy
from .region_strategy import RegionStrategy
from .energy_priority_strategy import EnergyPriorityStrategy
from .cartesian_strategy import CartesianStrategy
from .path_predicates import (
    PathPredicate,
    and_,
    or_,
    SAME_REGION,
    ANY_REGION,
    NO_REGION,
    SAME_COUNTRY,
    OTHER_COUNTRY,
)

__all__ = [
    "BaseStrategy",
    "StrategyKind",
    "SiteStrategy",
    "RegionStrategy",
    "EnergyPriorityStrategy",
    "CartesianStrategy",
    "PathPredicate",
    "and_",
    "or_",
    "SAME_REGION",
    "ANY_REGION",
    "NO_REGION",
    "SAME_COUNTRY",
    "OTHER_COUNTRY",
]
