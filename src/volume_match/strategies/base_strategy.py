"""Base class for path strategies."""

from abc import ABC, abstractmethod
from collections import defaultdict
from enum import Enum
from typing import Any, Callable, Dict, List, Union
import logging

from ..models import ConsumptionPool, Generation, GenerationPool, MatchPath

logger = logging.getLogger(__name__)


class StrategyKind(str, Enum):
    """The fixed set of path strategies the matcher knows about."""

    SITE = "site"
    REGION = "region"
    ENERGY_PRIORITY = "energy_priority"
    CARTESIAN = "cartesian"


class BaseStrategy(ABC):
    """Base class for all path strategies.

    A strategy turns the current pools into the list of pairs allowed to
    exchange volume in the next round. Strategies hold no state between
    calls and only read grouping ids, energy types and priorities.
    """

    kind: StrategyKind

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable strategy name, used in strategy results."""

    @abstractmethod
    def execute(
        self, consumptions: ConsumptionPool, generations: GenerationPool
    ) -> List[MatchPath]:
        """Build candidate paths for the given pools.

        Args:
            consumptions: Consumptions with remaining volume, keyed by id
            generations: Generations with remaining volume, keyed by id

        Returns:
            Paths ordered by consumption, then generation, in pool order
        """

    @abstractmethod
    def get_strategy_info(self) -> Dict[str, Union[str, int, List[str]]]:
        """Get information about this strategy for display."""

    @staticmethod
    def group_generations(
        generations: GenerationPool, key: Callable[[Generation], Any]
    ) -> Dict[Any, List[Generation]]:
        """Group generations by a key, keeping pool order inside each group."""
        grouped: Dict[Any, List[Generation]] = defaultdict(list)
        for generation in generations.values():
            grouped[key(generation)].append(generation)
        return dict(grouped)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"
