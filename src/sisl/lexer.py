"""Lexer for SISL text: turns source into positioned tokens."""

from typing import Iterator, Optional
from .models import Token
from .types import ErrorCode, ErrorType, SislError, TokenType


WHITESPACE = frozenset(" \t\r\n")
NAME_START = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")
NAME_CHARS = NAME_START | frozenset("0123456789-.")

PUNCTUATION = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
    "!": TokenType.BANG,
}

# Number of payload characters copied after \x, \u and \U.
HEX_PAYLOAD_WIDTHS = {"x": 2, "u": 4, "U": 8}


class Lexer:
    """
    Lexical analyzer for SISL input.

    String tokens keep their escape sequences verbatim; resolving them is
    left to the value codec once the element's type tag is known.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1
        self._lookahead: Optional[Token] = None

    def _current(self) -> str:
        if self.pos >= len(self.text):
            return ""
        return self.text[self.pos]

    def _advance(self) -> str:
        """Consume one character, tracking line and column."""
        if self.pos >= len(self.text):
            return ""

        char = self.text[self.pos]
        self.pos += 1

        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        return char

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in WHITESPACE:
            self._advance()

    def _error(self, message: str, code: ErrorCode, line: int, column: int) -> SislError:
        return SislError(message, ErrorType.LEX, code, line=line, column=column)

    def _read_string(self) -> Token:
        start_line, start_column = self.line, self.column
        self._advance()  # opening quote
        chars = []

        while True:
            char = self._current()
            if not char:
                raise self._error("Unterminated string", ErrorCode.UNTERMINATED_STRING,
                                  start_line, start_column)
            if char == '"':
                self._advance()
                return Token(TokenType.STRING, "".join(chars), start_line, start_column)

            if char == "\\":
                chars.append(self._advance())
                letter = self._current()
                if not letter:
                    raise self._error("Unexpected end of input in escape sequence",
                                      ErrorCode.UNEXPECTED_END_OF_INPUT,
                                      self.line, self.column)
                chars.append(self._advance())
                for _ in range(HEX_PAYLOAD_WIDTHS.get(letter, 0)):
                    payload_char = self._current()
                    if not payload_char or payload_char == '"':
                        break
                    chars.append(self._advance())
                continue

            chars.append(self._advance())

    def _read_name(self) -> Token:
        start_line, start_column = self.line, self.column
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] in NAME_CHARS:
            self._advance()
        return Token(TokenType.NAME, self.text[start:self.pos], start_line, start_column)

    def _scan(self) -> Token:
        self._skip_whitespace()

        char = self._current()
        if not char:
            return Token(TokenType.END, "", self.line, self.column)

        kind = PUNCTUATION.get(char)
        if kind is not None:
            token = Token(kind, char, self.line, self.column)
            self._advance()
            return token

        if char == '"':
            return self._read_string()

        if char in NAME_START:
            return self._read_name()

        raise self._error(f"Unexpected character '{char}'", ErrorCode.UNEXPECTED_CHARACTER,
                          self.line, self.column)

    def next(self) -> Token:
        """Return the next token and advance past it."""
        if self._lookahead is not None:
            token, self._lookahead = self._lookahead, None
            return token
        return self._scan()

    def peek(self) -> Token:
        """Return the next token without consuming it."""
        if self._lookahead is None:
            self._lookahead = self._scan()
        return self._lookahead

    def tokens(self) -> Iterator[Token]:
        """Yield every token up to and including END."""
        while True:
            token = self.next()
            yield token
            if token.kind == TokenType.END:
                return
