"""Utility modules for the SISL exchange engine."""

from .escape import escape, unescape
from .validation import ValidationUtils

__all__ = ["escape", "unescape", "ValidationUtils"]
