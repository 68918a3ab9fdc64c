"""Input validation components."""

from .exceptions import (
    MatchingError,
    InputValidationError,
    IterationLimitExceeded,
    AllocationError,
    InputFileError,
    ConfigurationError,
)
from .input_validator import InputValidator, ValidatedInput

__all__ = [
    "MatchingError",
    "InputValidationError",
    "IterationLimitExceeded",
    "AllocationError",
    "InputFileError",
    "ConfigurationError",
    "InputValidator",
    "ValidatedInput",
]
