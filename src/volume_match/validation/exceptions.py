"""Custom exceptions for the volume matching engine."""

from typing import Any, Dict, List, Optional


class MatchingError(Exception):
    """Base exception for all volume matching errors."""


class InputValidationError(MatchingError):
    """
    Raised when consumption or generation input fails validation.

    Validation always runs before any matching work, so no partial result
    exists when this is raised. All offending records are reported at once.
    """

    def __init__(
        self,
        message: str,
        entity_ids: Optional[List[str]] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        """
        Initialize InputValidationError with the offending records.

        Args:
            message: Human-readable error message
            entity_ids: Ids of every entity that failed validation
            errors: Detailed error dictionaries (one per problem found)
        """
        super().__init__(message)
        self.entity_ids = entity_ids or []
        self.errors = errors or []

    def __str__(self) -> str:
        """Return detailed error message."""
        parts = [str(self.args[0]) if self.args else "Input validation error"]

        if self.entity_ids:
            parts.append(f"Entity ids: {', '.join(self.entity_ids)}")

        if self.errors:
            parts.append(f"Errors: {self.errors}")

        return " | ".join(parts)


class IterationLimitExceeded(MatchingError):
    """Raised when a strategy keeps producing matches past the round ceiling.

    A strategy that converges always ends with an empty round, so hitting the
    ceiling means leftover volume stopped decreasing.
    """

    def __init__(self, strategy_name: str, max_iterations: int):
        super().__init__(
            f"Matching loop exceeded maximum number of {max_iterations} iterations"
        )
        self.strategy_name = strategy_name
        self.max_iterations = max_iterations

    def __str__(self) -> str:
        return f"{self.args[0]} | Strategy: {self.strategy_name}"


class AllocationError(MatchingError):
    """Raised when a round tries to take more volume than an entity holds."""

    def __init__(
        self,
        message: str,
        entity_id: Optional[str] = None,
        requested: Optional[int] = None,
        available: Optional[int] = None,
    ):
        super().__init__(message)
        self.entity_id = entity_id
        self.requested = requested
        self.available = available

    def __str__(self) -> str:
        parts = [str(self.args[0])]

        if self.entity_id is not None:
            parts.append(f"Entity: {self.entity_id}")
        if self.requested is not None:
            parts.append(f"Requested: {self.requested}")
        if self.available is not None:
            parts.append(f"Available: {self.available}")

        return " | ".join(parts)


class InputFileError(MatchingError):
    """Raised when a matching input file cannot be read or parsed."""

    def __init__(self, message: str, file_path: Optional[str] = None):
        super().__init__(message)
        self.file_path = file_path

    def __str__(self) -> str:
        if self.file_path:
            return f"{self.args[0]} | File: {self.file_path}"
        return str(self.args[0])


class ConfigurationError(MatchingError):
    """Raised when the matcher configuration file is invalid."""
