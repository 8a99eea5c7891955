"""Data models for the SISL exchange engine."""

from .token import Token
from .syntax_tree import Element, Grouping, StringValue
from .mergeable import MergeKind, MergeableValue

__all__ = ["Token", "Element", "Grouping", "StringValue", "MergeKind", "MergeableValue"]
