"""Match and result data models for the volume matching engine."""

from enum import Enum
from typing import List, NamedTuple, Optional
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel

from .entity import Consumption, Generation


class MatchPath(NamedTuple):
    """A pair eligible to exchange volume in a round. Carries no volume."""

    consumption_id: str
    generation_id: str


class Ask(NamedTuple):
    """Volume a consumer requests from one generator within a single round."""

    consumption_id: str
    generation_id: str
    volume: int


class LoopTermination(str, Enum):
    """Why a strategy stopped running rounds."""

    EXHAUSTED = "exhausted"  # A round produced no matches
    LIMIT_EXCEEDED = "limit_exceeded"  # Round ceiling hit while still matching


class Match(BaseModel):
    """Volume allocated from one generation to one consumption."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    consumption_id: str = Field(..., description="Matched consumption id")
    generation_id: str = Field(..., description="Matched generation id")
    volume: int = Field(..., ge=0, description="Matched volume")

    @property
    def pair(self) -> tuple[str, str]:
        """The (consumption id, generation id) key of this match."""
        return (self.consumption_id, self.generation_id)

    def __str__(self) -> str:
        return f"Match({self.consumption_id} <- {self.generation_id}: {self.volume})"


class StrategyResult(BaseModel):
    """Matches a single strategy contributed to the run."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    strategy_name: str = Field(..., description="Name of the strategy")
    matches: List[Match] = Field(
        default_factory=list, description="Summed matches found by this strategy"
    )
    rounds: int = Field(default=0, ge=0, description="Rounds executed, including the final empty one")

    @property
    def total_volume(self) -> int:
        """Total volume matched by this strategy."""
        return sum(m.volume for m in self.matches)


class MatchingResult(BaseModel):
    """Outcome of one matching invocation.

    Field order is fixed and every volume is a plain integer, so identical
    input always serializes to identical JSON.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    matches: List[Match] = Field(default_factory=list)
    leftover_consumptions: List[Consumption] = Field(default_factory=list)
    leftover_generations: List[Generation] = Field(default_factory=list)
    strategy_results: List[StrategyResult] = Field(default_factory=list)

    @property
    def total_matched_volume(self) -> int:
        """Total volume matched across all strategies."""
        return sum(m.volume for m in self.matches)

    def consumed_volume_for(self, consumption_id: str) -> int:
        """Total volume matched to the given consumption."""
        return sum(m.volume for m in self.matches if m.consumption_id == consumption_id)

    def generated_volume_for(self, generation_id: str) -> int:
        """Total volume matched from the given generation.

        Consumption and generation ids are separate namespaces, so the same id
        may name one entity on each side.
        """
        return sum(m.volume for m in self.matches if m.generation_id == generation_id)

    def to_dict(self) -> dict:
        """Plain dictionary using the camelCase field names."""
        return self.model_dump(by_alias=True, mode="json")

    def to_json(self, indent: Optional[int] = None) -> str:
        """Serialize to JSON using the camelCase field names."""
        return self.model_dump_json(by_alias=True, indent=indent)
