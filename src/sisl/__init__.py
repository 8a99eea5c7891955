"""
SISL - self-describing, explicitly typed text serialization.

Encodes JSON-like values with a type tag on every element, merges
independently parsed fragments back into one document, and splits large
documents into parts under a byte budget.
"""

from typing import Any, Dict, Sequence

from .config import SislLimits
from .transformer import SislTransformer
from .types import ErrorCode, ErrorType, SislError, SplitResult

__version__ = "1.0.0"
__all__ = [
    "SislTransformer",
    "SislLimits",
    "SislError",
    "ErrorType",
    "ErrorCode",
    "SplitResult",
    "dumps",
    "loads",
    "merge",
    "split",
]


def dumps(value: Dict[str, Any]) -> str:
    """Encode a map as a SISL document."""
    return SislTransformer().dumps(value)


def loads(text: str) -> Dict[str, Any]:
    """Decode a SISL document."""
    return SislTransformer().loads(text)


def merge(fragments: Sequence[str]) -> Dict[str, Any]:
    """Merge SISL fragments into one value."""
    return SislTransformer().merge(fragments)


def split(value: Dict[str, Any], max_length: int) -> SplitResult:
    """Split a map into SISL parts of at most max_length bytes."""
    return SislTransformer().split(value, max_length)
