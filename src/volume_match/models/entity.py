"""Consumption and generation data models for the volume matching engine."""

import math
from typing import List, Union
from pydantic import BaseModel, Field, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

# Any numeric rank; fractional tiers such as 1.5 sit between 1 and 2
Priority = Union[int, float]


class Entity(BaseModel):
    """Base model for anything that holds matchable volume.

    Volumes are plain non-negative integers. Site, region and country ids are
    grouping keys read by path strategies and predicates.
    """

    model_config = ConfigDict(
        frozen=True,  # Working copies are replaced, never mutated
        validate_assignment=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(..., min_length=1, description="Unique entity identifier")
    volume: int = Field(..., ge=0, strict=True, description="Volume still available")
    site_id: str = Field(..., description="Site the entity belongs to")
    region_id: str = Field(..., description="Region the entity belongs to")
    country_id: str = Field(..., description="Country the entity belongs to")

    def with_volume(self, volume: int) -> "Entity":
        """Return a copy of this entity holding a different volume."""
        return self.model_copy(update={"volume": volume})

    def __str__(self) -> str:
        """String representation for debugging."""
        return f"{self.__class__.__name__}({self.id}: {self.volume})"


class EnergyPriority(BaseModel):
    """How much a consumer prefers one energy type (higher is matched first)."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    energy_type: str = Field(..., description="Energy type tag (pv, wind, ...)")
    priority: Priority = Field(..., description="Priority rank, higher first")

    @field_validator("priority")
    @classmethod
    def normalize_priority(cls, v: Priority) -> Priority:
        """Reject non-finite ranks and store integral floats as int (2.0 -> 2)."""
        if isinstance(v, float):
            if not math.isfinite(v):
                raise ValueError("priority must be a finite number")
            if v.is_integer():
                return int(v)
        return v


class Consumption(Entity):
    """Energy demand with the consumer's matching preferences."""

    energy_priorities: List[EnergyPriority] = Field(
        default_factory=list,
        description="Energy types the consumer accepts, with priority ranks",
    )
    should_match_by_region: bool = Field(
        default=False, description="Accept generation from the same region"
    )
    should_match_by_country: bool = Field(
        default=False, description="Accept generation from the same country"
    )
    should_match_by_other_countries: bool = Field(
        default=False, description="Accept generation from other countries"
    )

    @property
    def priority_levels(self) -> set[Priority]:
        """Distinct priority ranks referenced by this consumer."""
        return {p.priority for p in self.energy_priorities}

    def energy_types_for_priority(self, priority: Priority) -> List[str]:
        """Get energy types this consumer ranks at the given priority."""
        return [p.energy_type for p in self.energy_priorities if p.priority == priority]


class Generation(Entity):
    """Energy supply of a single energy type."""

    energy_type: str = Field(..., description="Energy type tag of this generation")
