"""Terminal display for matching results."""

from .display import MatchingDisplay

__all__ = ["MatchingDisplay"]
