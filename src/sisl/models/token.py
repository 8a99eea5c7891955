"""Lexer token model."""

from typing import NamedTuple
from ..types import TokenType


class Token(NamedTuple):
    """Token with kind, raw text and 1-based position."""

    kind: TokenType
    text: str
    line: int
    column: int

    def describe(self) -> str:
        """Text used in error messages."""
        if self.kind == TokenType.END:
            return "end of input"
        return f"'{self.text}'"
