"""Configuration manager for the volume matching engine."""

import json
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from ..validation.exceptions import ConfigurationError

CONFIG_FILE_NAME = "matcher_config.json"


class MatcherConfig(BaseModel):
    """Configuration for the proportional matcher.

    Contains the round ceiling and optional strategy switches.
    """

    model_config = ConfigDict(
        frozen=True,
        validate_assignment=True,  # Immutable configuration
        extra="forbid",
    )

    # Ceiling on rounds per strategy; reaching it means volume stopped decreasing
    max_iterations: int = Field(
        default=50_000,
        ge=1,
        description="Maximum rounds a single strategy may run",
    )

    cartesian_fallback: bool = Field(
        default=False,
        description="Append a cartesian strategy after all other strategies",
    )


class MatcherConfigManager:
    """Manages configuration for the volume matching engine.

    Loads configuration from a JSON file and provides accessors for the
    matcher settings.
    """

    def __init__(
        self,
        config_path: Optional[Path] = None,
        config: Optional[MatcherConfig] = None,
    ):
        """Initialize configuration manager.

        Args:
            config_path: Optional path to config directory. Defaults to this module's dir.
            config: Optional in-memory configuration. No file is read when given.
        """
        if config_path is None:
            config_path = Path(__file__).parent

        self.config_path = Path(config_path)
        self.matcher_config_path: Optional[Path] = self.config_path / CONFIG_FILE_NAME

        if config is not None:
            self.matcher_config_path = None
            self.matching_config = config
        else:
            self.matching_config = self._load_matcher_config()

    @classmethod
    def from_config(cls, config: MatcherConfig) -> "MatcherConfigManager":
        """Build a manager around an in-memory configuration.

        Args:
            config: Configuration to use

        Returns:
            Manager that does not read any file
        """
        return cls(config=config)

    def _load_matcher_config(self) -> MatcherConfig:
        """Load matcher configuration from JSON file."""
        try:
            with open(self.matcher_config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise FileNotFoundError(
                f"Matcher config not found at {self.matcher_config_path}"
            ) from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in matcher config: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError("Matcher config must be a dictionary")

        try:
            return MatcherConfig(**data)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid matcher config: {e}") from e

    def get_max_iterations(self) -> int:
        """Get the maximum number of rounds a strategy may run.

        Returns:
            Round ceiling per strategy
        """
        return self.matching_config.max_iterations

    def is_cartesian_fallback_enabled(self) -> bool:
        """Check whether a cartesian strategy runs after all other strategies."""
        return self.matching_config.cartesian_fallback

    def reload_config(self) -> None:
        """Reload configuration from file.

        Useful for development and testing when config files change.
        """
        if self.matcher_config_path is None:
            return
        self.matching_config = self._load_matcher_config()
