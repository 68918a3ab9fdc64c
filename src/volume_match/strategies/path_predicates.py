"""Predicates over a (consumption, generation) pair for filtering paths.

Predicates can be combined with ``and_`` and ``or_``. They only read the
grouping ids and matching preferences, never volumes.
"""

from dataclasses import dataclass
from typing import Callable

from ..models import Consumption, Generation


@dataclass(frozen=True)
class PathPredicate:
    """Named boolean check on a consumption/generation pair."""

    name: str
    check: Callable[[Consumption, Generation], bool]

    def __call__(self, consumption: Consumption, generation: Generation) -> bool:
        return self.check(consumption, generation)

    def __str__(self) -> str:
        return self.name


def and_(*predicates: PathPredicate) -> PathPredicate:
    """Predicate that holds when every given predicate holds."""
    return PathPredicate(
        name=f"and({', '.join(p.name for p in predicates)})",
        check=lambda c, g: all(p(c, g) for p in predicates),
    )


def or_(*predicates: PathPredicate) -> PathPredicate:
    """Predicate that holds when any given predicate holds."""
    return PathPredicate(
        name=f"or({', '.join(p.name for p in predicates)})",
        check=lambda c, g: any(p(c, g) for p in predicates),
    )


SAME_REGION = PathPredicate(
    name="sameRegion",
    check=lambda c, g: c.should_match_by_region and c.region_id == g.region_id,
)

ANY_REGION = PathPredicate(
    name="anyRegion",
    check=lambda c, g: c.should_match_by_region,
)

NO_REGION = PathPredicate(
    name="noRegion",
    check=lambda c, g: not c.should_match_by_region,
)

SAME_COUNTRY = PathPredicate(
    name="sameCountry",
    check=lambda c, g: c.should_match_by_country and c.country_id == g.country_id,
)

OTHER_COUNTRY = PathPredicate(
    name="otherCountry",
    check=lambda c, g: c.should_match_by_other_countries and c.country_id != g.country_id,
)
