"""
Configuration and limits for SISL processing.

Bounds applied while parsing, decoding and merging untrusted input.
"""

from dataclasses import dataclass


@dataclass
class SislLimits:
    """Structural limits for parsing and decoding."""
    max_nesting_depth: int = 200
    max_list_index: int = 1_000_000

    def __post_init__(self):
        if self.max_nesting_depth <= 0:
            raise ValueError("max_nesting_depth must be positive")
        if self.max_list_index < 0:
            raise ValueError("max_list_index must not be negative")
