"""Recursive-descent parser for SISL documents."""

import logging
from typing import Optional
from .config import SislLimits
from .lexer import Lexer
from .models import Element, Grouping, StringValue, Token
from .types import ErrorCode, ErrorType, SislError, TokenType


class SislParser:
    """
    Parser building an ordered syntax tree from SISL text.

    Grammar::

        Grouping := '{' [ Element (',' Element)* [','] ] '}'
        Element  := NAME ':' '!' NAME Value
        Value    := STRING | Grouping

    Parsing stops at the first error; there is no recovery.
    """

    def __init__(self, limits: Optional[SislLimits] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the parser.

        Args:
            limits: Optional structural limits (nesting depth)
            logger: Optional logger instance
        """
        self.limits = limits or SislLimits()
        self.logger = logger or logging.getLogger(__name__)
        self._lexer: Optional[Lexer] = None
        self._depth = 0

    def parse(self, text: str) -> Grouping:
        """
        Parse a complete document.

        Args:
            text: SISL source text

        Returns:
            The top-level Grouping

        Raises:
            SislError: On any lexical or syntax error, including input
                left over after the top-level grouping
        """
        self._lexer = Lexer(text)
        self._depth = 0

        grouping = self._parse_grouping()

        trailing = self._lexer.next()
        if trailing.kind != TokenType.END:
            raise SislError(
                f"Unexpected token after grouping: {trailing.describe()}",
                ErrorType.PARSE, ErrorCode.UNEXPECTED_TRAILING_TOKEN,
                line=trailing.line, column=trailing.column,
                context={"actual": trailing.text}
            )

        self.logger.debug(f"Parsed grouping with {len(grouping)} top-level elements")
        return grouping

    def _expect(self, kind: TokenType, what: str) -> Token:
        token = self._lexer.next()
        if token.kind != kind:
            raise SislError(
                f"Expected {what}, got {token.describe()}",
                ErrorType.PARSE, ErrorCode.EXPECTED_TOKEN,
                line=token.line, column=token.column,
                context={"expected": kind.name, "actual": token.text}
            )
        return token

    def _parse_grouping(self) -> Grouping:
        opening = self._expect(TokenType.LBRACE, "'{'")

        self._depth += 1
        if self._depth > self.limits.max_nesting_depth:
            raise SislError(
                f"Nesting depth exceeds {self.limits.max_nesting_depth}",
                ErrorType.PARSE, ErrorCode.NESTING_TOO_DEEP,
                line=opening.line, column=opening.column
            )

        grouping = Grouping()
        if self._lexer.peek().kind == TokenType.RBRACE:
            self._lexer.next()
            self._depth -= 1
            return grouping

        while True:
            grouping.elements.append(self._parse_element())

            if self._lexer.peek().kind == TokenType.COMMA:
                self._lexer.next()
                # one trailing comma is allowed before the closing brace
                if self._lexer.peek().kind == TokenType.RBRACE:
                    break
                continue
            break

        self._expect(TokenType.RBRACE, "'}'")
        self._depth -= 1
        return grouping

    def _parse_element(self) -> Element:
        name = self._expect(TokenType.NAME, "element name")
        self._expect(TokenType.COLON, "':'")
        self._expect(TokenType.BANG, "'!'")
        type_tag = self._expect(TokenType.NAME, "type name")

        upcoming = self._lexer.peek()
        if upcoming.kind == TokenType.STRING:
            value = StringValue(self._lexer.next().text)
        elif upcoming.kind == TokenType.LBRACE:
            value = self._parse_grouping()
        else:
            raise SislError(
                f"Expected string or grouping, got {upcoming.describe()}",
                ErrorType.PARSE, ErrorCode.EXPECTED_TOKEN,
                line=upcoming.line, column=upcoming.column,
                context={"expected": "STRING or LBRACE", "actual": upcoming.text}
            )

        return Element(name.text, type_tag.text, value, name.line, name.column)


def parse(text: str, limits: Optional[SislLimits] = None) -> Grouping:
    """Parse SISL text with a throwaway parser."""
    return SislParser(limits).parse(text)
