"""Configuration management for the volume matching engine."""

from .config_manager import MatcherConfigManager, MatcherConfig

__all__ = ["MatcherConfigManager", "MatcherConfig"]
