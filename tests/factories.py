"""Model factories shared by the test modules."""

from typing import Dict, Optional

from volume_match.models import Consumption, EnergyPriority, Generation, Match


def consumption(
    id: str,
    volume: int,
    priorities: Optional[Dict[str, float]] = None,
    site_id: str = "s1",
    region_id: str = "r1",
    country_id: str = "c1",
    by_region: bool = True,
    by_country: bool = True,
    by_other_countries: bool = True,
) -> Consumption:
    if priorities is None:
        priorities = {"pv": 1}
    return Consumption(
        id=id,
        volume=volume,
        site_id=site_id,
        region_id=region_id,
        country_id=country_id,
        energy_priorities=[
            EnergyPriority(energy_type=energy_type, priority=priority)
            for energy_type, priority in priorities.items()
        ],
        should_match_by_region=by_region,
        should_match_by_country=by_country,
        should_match_by_other_countries=by_other_countries,
    )


def generation(
    id: str,
    volume: int,
    energy_type: str = "pv",
    site_id: str = "s1",
    region_id: str = "r1",
    country_id: str = "c1",
) -> Generation:
    return Generation(
        id=id,
        volume=volume,
        energy_type=energy_type,
        site_id=site_id,
        region_id=region_id,
        country_id=country_id,
    )


def match(consumption_id: str, generation_id: str, volume: int) -> Match:
    return Match(consumption_id=consumption_id, generation_id=generation_id, volume=volume)


def pool(*entities):
    """Key entities by id, keeping the given order."""
    return {e.id: e for e in entities}
