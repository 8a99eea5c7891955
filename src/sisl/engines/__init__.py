"""Merge and split engines."""

from .merge_engine import MergeEngine
from .split_engine import SplitEngine

__all__ = ["MergeEngine", "SplitEngine"]
