"""Output utilities."""

from .dataframe_output import (
    create_matches_dataframe,
    create_leftovers_dataframe,
    create_strategy_dataframe,
)

__all__ = [
    "create_matches_dataframe",
    "create_leftovers_dataframe",
    "create_strategy_dataframe",
]
