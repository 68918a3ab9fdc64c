"""Input validator for consumption and generation records."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Sequence, Type, TypeVar, Union

from pydantic import ValidationError as PydanticValidationError

from ..models import Consumption, Entity, Generation
from .exceptions import InputValidationError

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=Entity)
EntityInput = Union[Entity, Mapping[str, Any]]


@dataclass
class ValidatedInput:
    """
    Consumptions and generations that passed validation.

    Every volume is a plain non-negative int and every id is unique within
    its side, so the matcher can build its working pool without further checks.
    """

    consumptions: List[Consumption]
    generations: List[Generation]

    @property
    def consumption_count(self) -> int:
        return len(self.consumptions)

    @property
    def generation_count(self) -> int:
        return len(self.generations)


class InputValidator:
    """
    Validates raw matcher input and converts it to models.

    Records may be model instances or mappings using either camelCase or
    snake_case keys. Errors are collected across both sides and raised once
    as a single InputValidationError.
    """

    def validate(
        self,
        consumptions: Sequence[EntityInput],
        generations: Sequence[EntityInput],
    ) -> ValidatedInput:
        """
        Validate both sides of the matcher input.

        Args:
            consumptions: Consumption records
            generations: Generation records

        Returns:
            ValidatedInput with model instances in input order

        Raises:
            InputValidationError: If any record is invalid
        """
        errors: List[Dict[str, Any]] = []

        validated_consumptions = self._validate_records(
            consumptions, Consumption, "consumption", errors
        )
        validated_generations = self._validate_records(
            generations, Generation, "generation", errors
        )

        if errors:
            entity_ids = list(dict.fromkeys(str(e["id"]) for e in errors))
            logger.warning(f"Input validation failed for {len(entity_ids)} entities")
            raise InputValidationError(
                f"Validation failed for {len(entity_ids)} entities",
                entity_ids=entity_ids,
                errors=errors,
            )

        logger.info(
            f"Validated {len(validated_consumptions)} consumptions and "
            f"{len(validated_generations)} generations"
        )
        return ValidatedInput(
            consumptions=validated_consumptions,
            generations=validated_generations,
        )

    def _validate_records(
        self,
        records: Sequence[EntityInput],
        model: Type[EntityT],
        data_type: str,
        errors: List[Dict[str, Any]],
    ) -> List[EntityT]:
        """Validate one side of the input, appending problems to ``errors``."""
        validated: List[EntityT] = []
        seen_ids: set[str] = set()

        for index, record in enumerate(records):
            entity_id = self._get_field(record, "id")
            if entity_id is None:
                entity_id = f"{data_type}[{index}]"

            volume = self._normalize_volume(self._get_field(record, "volume"))
            if volume is None:
                errors.append({
                    "id": entity_id,
                    "data_type": data_type,
                    "field": "volume",
                    "value": self._get_field(record, "volume"),
                    "error": "volume must be a non-negative integer",
                })
                continue

            try:
                if isinstance(record, model):
                    entity = record if record.volume == volume else record.with_volume(volume)
                elif isinstance(record, Entity):
                    entity = model.model_validate(
                        {**record.model_dump(), "volume": volume}
                    )
                else:
                    entity = model.model_validate({**record, "volume": volume})
            except PydanticValidationError as e:
                errors.append({
                    "id": entity_id,
                    "data_type": data_type,
                    "error": e.errors(include_url=False),
                })
                continue

            if entity.id in seen_ids:
                errors.append({
                    "id": entity.id,
                    "data_type": data_type,
                    "field": "id",
                    "error": f"duplicate {data_type} id",
                })
                continue

            seen_ids.add(entity.id)
            validated.append(entity)  # type: ignore[arg-type]

        return validated

    @staticmethod
    def _get_field(record: EntityInput, name: str) -> Any:
        if isinstance(record, Entity):
            return getattr(record, name, None)
        return record.get(name)

    @staticmethod
    def _normalize_volume(value: Any) -> Optional[int]:
        """
        Convert a raw volume to int, or None when it is not a whole number.

        Integral floats and Decimals (10.0) are accepted because JSON sources
        do not distinguish them from integers. Fractions are never truncated.

        Examples:
            >>> InputValidator._normalize_volume(10)
            10
            >>> InputValidator._normalize_volume(10.0)
            10
            >>> InputValidator._normalize_volume(10.5) is None
            True
        """
        if isinstance(value, bool):
            return None

        if isinstance(value, int):
            normalized = value
        elif isinstance(value, float):
            if not value.is_integer():
                return None
            normalized = int(value)
        elif isinstance(value, Decimal):
            if not value.is_finite() or value != value.to_integral_value():
                return None
            normalized = int(value)
        else:
            return None

        return normalized if normalized >= 0 else None
