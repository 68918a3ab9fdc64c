"""JSON loader for matching input files."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List
import logging

from ..validation.exceptions import InputFileError

logger = logging.getLogger(__name__)


@dataclass
class MatchingInput:
    """Raw consumption and generation records read from a file."""

    consumptions: List[Dict[str, Any]]
    generations: List[Dict[str, Any]]


def load_matching_input(json_path: Path) -> MatchingInput:
    """Load a JSON file holding ``consumptions`` and ``generations`` arrays.

    Records are returned as plain dictionaries; the matcher validates them.
    Either array may be omitted, in which case it is treated as empty.

    Args:
        json_path: Path to JSON file

    Returns:
        MatchingInput with the raw records

    Raises:
        InputFileError: If the file is missing, unreadable, or malformed
    """
    json_path = Path(json_path)

    if not json_path.is_file():
        raise InputFileError("Input file not found", file_path=str(json_path))

    try:
        with open(json_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InputFileError(f"Invalid JSON: {e}", file_path=str(json_path)) from e
    except OSError as e:
        raise InputFileError(f"Cannot read file: {e}", file_path=str(json_path)) from e

    if not isinstance(data, dict):
        raise InputFileError(
            "Input must be an object with 'consumptions' and 'generations'",
            file_path=str(json_path),
        )

    consumptions = data.get("consumptions", [])
    generations = data.get("generations", [])

    for name, records in (("consumptions", consumptions), ("generations", generations)):
        if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
            raise InputFileError(
                f"'{name}' must be an array of objects", file_path=str(json_path)
            )

    logger.info(
        f"Loaded {len(consumptions)} consumptions and {len(generations)} generations "
        f"from {json_path}"
    )
    return MatchingInput(consumptions=consumptions, generations=generations)
