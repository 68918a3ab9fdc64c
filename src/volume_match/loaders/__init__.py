"""Input loaders for the volume matching engine."""

from .json_loader import MatchingInput, load_matching_input

__all__ = ["MatchingInput", "load_matching_input"]
