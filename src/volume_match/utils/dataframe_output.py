"""DataFrame output utilities for matching results."""

from typing import List
import pandas as pd

from ..models import MatchingResult

MATCH_COLUMNS = ["consumption_id", "generation_id", "volume"]
LEFTOVER_COLUMNS = ["entity_id", "side", "volume", "site_id", "region_id", "country_id"]
STRATEGY_COLUMNS = ["strategy_order", "strategy_name", "rounds", "consumption_id", "generation_id", "volume"]


def create_matches_dataframe(result: MatchingResult) -> pd.DataFrame:
    """Create a DataFrame with one row per summed match."""
    records = [
        {
            "consumption_id": m.consumption_id,
            "generation_id": m.generation_id,
            "volume": m.volume,
        }
        for m in result.matches
    ]
    return pd.DataFrame(records, columns=MATCH_COLUMNS)


def create_leftovers_dataframe(result: MatchingResult) -> pd.DataFrame:
    """Create a DataFrame of leftover consumptions followed by leftover generations."""
    records: List[dict] = []

    for side, entities in (
        ("consumption", result.leftover_consumptions),
        ("generation", result.leftover_generations),
    ):
        for entity in entities:
            records.append({
                "entity_id": entity.id,
                "side": side,
                "volume": entity.volume,
                "site_id": entity.site_id,
                "region_id": entity.region_id,
                "country_id": entity.country_id,
            })

    return pd.DataFrame(records, columns=LEFTOVER_COLUMNS)


def create_strategy_dataframe(result: MatchingResult) -> pd.DataFrame:
    """Create a DataFrame of matches broken down by the strategy that found them.

    Strategies that matched nothing still get one row with empty ids and a
    volume of 0, so every strategy of the run appears.
    """
    records: List[dict] = []

    for order, strategy_result in enumerate(result.strategy_results, 1):
        if not strategy_result.matches:
            records.append({
                "strategy_order": order,
                "strategy_name": strategy_result.strategy_name,
                "rounds": strategy_result.rounds,
                "consumption_id": None,
                "generation_id": None,
                "volume": 0,
            })
            continue

        for m in strategy_result.matches:
            records.append({
                "strategy_order": order,
                "strategy_name": strategy_result.strategy_name,
                "rounds": strategy_result.rounds,
                "consumption_id": m.consumption_id,
                "generation_id": m.generation_id,
                "volume": m.volume,
            })

    return pd.DataFrame(records, columns=STRATEGY_COLUMNS)
