"""Asset-level adapter around the proportional matcher.

Turns metered assets, consumer preferences and battery activity into matcher
entities and maps the result back to asset ids.

Battery discharges are matched as generations. Each discharged generation
gets a composite id joining the battery id and the generation id, so the
result can tell which battery the energy went through. Battery charges are
matched as consumptions.
"""

from typing import Any, Dict, List, Optional, Union
import logging

from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel

from ..config import MatcherConfigManager
from ..matcher import ProportionalMatcher
from ..models import Priority, StrategyResult
from ..validation.exceptions import InputValidationError

logger = logging.getLogger(__name__)

COMPOSITE_SEPARATOR = "_,-,_"

Volume = Union[int, float]


class _AssetModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class MeterAsset(_AssetModel):
    """Metered asset reading (consumer or battery)."""

    asset_id: str = Field(..., min_length=1)
    site_id: str = Field(..., min_length=1)
    region_id: str = Field(..., min_length=1)
    country_id: str = Field(..., min_length=1)
    volume: Volume = Field(..., ge=0)


class GenerationAsset(MeterAsset):
    """Metered generation reading of one energy type."""

    energy_type: str = Field(..., min_length=1)


class BatteryDischarge(MeterAsset):
    """Battery discharge together with the generations stored in it."""

    generations: List[GenerationAsset] = Field(default_factory=list)


class ConsumerPreference(_AssetModel):
    """How a consumer (or charging battery) wants to be matched."""

    match_regionally: bool = False
    match_nationally: bool = False
    match_internationally: bool = False
    energy_source_priority: Dict[str, Priority] = Field(default_factory=dict)


class AssetMatchingInput(_AssetModel):
    consumptions: List[MeterAsset] = Field(default_factory=list)
    generations: List[GenerationAsset] = Field(default_factory=list)
    battery_charges: List[MeterAsset] = Field(default_factory=list)
    battery_discharges: List[BatteryDischarge] = Field(default_factory=list)
    preferences: Dict[str, ConsumerPreference] = Field(default_factory=dict)


class AssetMatch(_AssetModel):
    consumption_id: str
    generation_id: str
    through_battery_id: Optional[str] = None
    volume: int


class LeftoverGeneration(_AssetModel):
    id: str
    through_battery_id: Optional[str] = None
    volume: int


class LeftoverConsumption(_AssetModel):
    id: str
    volume: int


class BatteryCharge(_AssetModel):
    battery_id: str
    generation_id: str
    volume: int


class BatteryDischargeMatch(_AssetModel):
    battery_id: str
    generation_id: str
    consumption_id: str
    volume: int


class BatteryLeftoverDischarge(_AssetModel):
    battery_id: str
    generation_id: str
    volume: int


class AssetMatchingResult(_AssetModel):
    matches: List[AssetMatch] = Field(default_factory=list)
    leftover_consumptions: List[LeftoverConsumption] = Field(default_factory=list)
    leftover_generations: List[LeftoverGeneration] = Field(default_factory=list)
    strategy_results: List[StrategyResult] = Field(default_factory=list)


class AssetMatchingOutput(_AssetModel):
    matching_result: AssetMatchingResult
    battery_matched_charges: List[BatteryCharge] = Field(default_factory=list)
    battery_matched_discharges: List[BatteryDischargeMatch] = Field(default_factory=list)
    battery_leftover_discharges: List[BatteryLeftoverDischarge] = Field(default_factory=list)


def composite_id(battery_id: str, generation_id: str) -> str:
    """Join a battery id and a generation id into one matcher id."""
    return f"{battery_id}{COMPOSITE_SEPARATOR}{generation_id}"


def is_composite_id(value: str) -> bool:
    return COMPOSITE_SEPARATOR in value


def split_composite_id(value: str) -> tuple[Optional[str], str]:
    """Split a matcher id into (battery id, generation id).

    Plain generation ids come back with no battery id.
    """
    if not is_composite_id(value):
        return None, value
    battery_id, generation_id = value.split(COMPOSITE_SEPARATOR, 1)
    return battery_id, generation_id


def build_matcher_input(data: AssetMatchingInput) -> tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """Convert assets into consumption and generation records for the matcher.

    Raises:
        InputValidationError: If a consumer or charging battery has no preferences
    """
    consumers = [*data.consumptions, *data.battery_charges]

    missing = [c.asset_id for c in consumers if c.asset_id not in data.preferences]
    if missing:
        raise InputValidationError(
            f"Missing preferences for {len(missing)} consumers", entity_ids=missing
        )

    consumptions = []
    for consumer in consumers:
        preference = data.preferences[consumer.asset_id]
        consumptions.append({
            "id": consumer.asset_id,
            "volume": consumer.volume,
            "site_id": consumer.site_id,
            "region_id": consumer.region_id,
            "country_id": consumer.country_id,
            "energy_priorities": [
                {"energy_type": energy_type, "priority": priority}
                for energy_type, priority in preference.energy_source_priority.items()
            ],
            "should_match_by_region": preference.match_regionally,
            "should_match_by_country": preference.match_nationally,
            "should_match_by_other_countries": preference.match_internationally,
        })

    generations = [
        {
            "id": g.asset_id,
            "volume": g.volume,
            "site_id": g.site_id,
            "region_id": g.region_id,
            "country_id": g.country_id,
            "energy_type": g.energy_type,
        }
        for g in data.generations
    ]

    # Discharged energy sits at the battery's location, keeps its energy type
    for battery in data.battery_discharges:
        for g in battery.generations:
            generations.append({
                "id": composite_id(battery.asset_id, g.asset_id),
                "volume": g.volume,
                "site_id": battery.site_id,
                "region_id": battery.region_id,
                "country_id": battery.country_id,
                "energy_type": g.energy_type,
            })

    return consumptions, generations


def match_assets(
    data: AssetMatchingInput,
    config_manager: Optional[MatcherConfigManager] = None,
) -> AssetMatchingOutput:
    """Match assets and break the result down by battery activity.

    Args:
        data: Assets, battery activity and consumer preferences
        config_manager: Optional matcher config manager

    Returns:
        AssetMatchingOutput with asset-level matches and battery breakdowns
    """
    consumptions, generations = build_matcher_input(data)
    result = ProportionalMatcher(config_manager).match(consumptions, generations)

    matches = []
    battery_discharges = []
    for m in result.matches:
        battery_id, generation_id = split_composite_id(m.generation_id)
        matches.append(AssetMatch(
            consumption_id=m.consumption_id,
            generation_id=generation_id,
            through_battery_id=battery_id,
            volume=m.volume,
        ))
        if battery_id is not None:
            battery_discharges.append(BatteryDischargeMatch(
                battery_id=battery_id,
                generation_id=generation_id,
                consumption_id=m.consumption_id,
                volume=m.volume,
            ))

    leftover_generations = []
    leftover_discharges = []
    for g in result.leftover_generations:
        battery_id, generation_id = split_composite_id(g.id)
        leftover_generations.append(LeftoverGeneration(
            id=generation_id, through_battery_id=battery_id, volume=g.volume
        ))
        if battery_id is not None:
            leftover_discharges.append(BatteryLeftoverDischarge(
                battery_id=battery_id, generation_id=generation_id, volume=g.volume
            ))

    charging_ids = {b.asset_id for b in data.battery_charges}
    battery_charges = [
        BatteryCharge(battery_id=m.consumption_id, generation_id=m.generation_id, volume=m.volume)
        for m in result.matches
        if m.consumption_id in charging_ids
    ]

    logger.info(
        f"Asset matching produced {len(matches)} matches, {len(battery_charges)} battery "
        f"charges and {len(battery_discharges)} battery discharges"
    )

    return AssetMatchingOutput(
        matching_result=AssetMatchingResult(
            matches=matches,
            leftover_consumptions=[
                LeftoverConsumption(id=c.id, volume=c.volume)
                for c in result.leftover_consumptions
            ],
            leftover_generations=leftover_generations,
            strategy_results=result.strategy_results,
        ),
        battery_matched_charges=battery_charges,
        battery_matched_discharges=battery_discharges,
        battery_leftover_discharges=leftover_discharges,
    )
