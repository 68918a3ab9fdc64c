"""Adapters between asset-level data and the matcher."""

from .asset_matching import (
    MeterAsset,
    GenerationAsset,
    BatteryDischarge,
    ConsumerPreference,
    AssetMatchingInput,
    AssetMatch,
    LeftoverGeneration,
    LeftoverConsumption,
    BatteryCharge,
    BatteryDischargeMatch,
    BatteryLeftoverDischarge,
    AssetMatchingResult,
    AssetMatchingOutput,
    build_matcher_input,
    match_assets,
    composite_id,
    split_composite_id,
)

__all__ = [
    "MeterAsset",
    "GenerationAsset",
    "BatteryDischarge",
    "ConsumerPreference",
    "AssetMatchingInput",
    "AssetMatch",
    "LeftoverGeneration",
    "LeftoverConsumption",
    "BatteryCharge",
    "BatteryDischargeMatch",
    "BatteryLeftoverDischarge",
    "AssetMatchingResult",
    "AssetMatchingOutput",
    "build_matcher_input",
    "match_assets",
    "composite_id",
    "split_composite_id",
]
