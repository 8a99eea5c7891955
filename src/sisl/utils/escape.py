"""Escape sequence handling for SISL string literals."""

from ..types import ErrorCode, ErrorType, SislError


SIMPLE_ESCAPES = {
    '"': 0x22,
    '\\': 0x5C,
    'r': 0x0D,
    't': 0x09,
    'n': 0x0A,
}

# Byte value -> two-character escape emitted by ``escape``.
REVERSE_ESCAPES = {
    0x22: '\\"',
    0x5C: '\\\\',
    0x0D: '\\r',
    0x09: '\\t',
    0x0A: '\\n',
}

HEX_ESCAPE_WIDTHS = {'x': 2, 'u': 4, 'U': 8}

HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

MAX_CODEPOINT = 0x10FFFF


def _escape_error(message: str, code: ErrorCode) -> SislError:
    return SislError(message, ErrorType.ESCAPE, code)


def codepoint_to_utf8(codepoint: int) -> bytes:
    """
    Pack a codepoint into UTF-8 bytes.

    Surrogate codepoints are packed like any other 3-byte value, so
    ``\\uD800`` produces bytes that only fail later, at UTF-8 decoding.

    Raises:
        SislError: If the codepoint is 0x110000 or above
    """
    if codepoint < 0x80:
        return bytes([codepoint])
    if codepoint < 0x800:
        return bytes([
            0xC0 | (codepoint >> 6),
            0x80 | (codepoint & 0x3F),
        ])
    if codepoint < 0x10000:
        return bytes([
            0xE0 | (codepoint >> 12),
            0x80 | ((codepoint >> 6) & 0x3F),
            0x80 | (codepoint & 0x3F),
        ])
    if codepoint <= MAX_CODEPOINT:
        return bytes([
            0xF0 | (codepoint >> 18),
            0x80 | ((codepoint >> 12) & 0x3F),
            0x80 | ((codepoint >> 6) & 0x3F),
            0x80 | (codepoint & 0x3F),
        ])
    raise _escape_error(f"Invalid Unicode codepoint: U+{codepoint:X}", ErrorCode.INVALID_CODEPOINT)


def unescape(raw: str) -> bytes:
    """
    Resolve escape sequences in raw string-literal content.

    Args:
        raw: Content between the quotes, as scanned by the lexer

    Returns:
        The literal's bytes

    Raises:
        SislError: On an unknown escape letter, a short or non-hex
            payload, or a codepoint outside Unicode
    """
    out = bytearray()
    pos = 0
    length = len(raw)

    while pos < length:
        char = raw[pos]
        if char != '\\':
            out += char.encode('utf-8', errors='surrogatepass')
            pos += 1
            continue

        if pos + 1 >= length:
            raise _escape_error("Invalid escape sequence: dangling backslash",
                                ErrorCode.INVALID_ESCAPE_SEQUENCE)

        letter = raw[pos + 1]
        pos += 2

        if letter in SIMPLE_ESCAPES:
            out.append(SIMPLE_ESCAPES[letter])
            continue

        width = HEX_ESCAPE_WIDTHS.get(letter)
        if width is None:
            raise _escape_error(f"Invalid escape sequence: \\{letter}",
                                ErrorCode.INVALID_ESCAPE_SEQUENCE)

        payload = raw[pos:pos + width]
        if len(payload) != width or not all(digit in HEX_DIGITS for digit in payload):
            raise _escape_error(f"Invalid hex escape sequence: \\{letter}{payload}",
                                ErrorCode.INVALID_HEX_ESCAPE)
        pos += width

        number = int(payload, 16)
        if letter == 'x':
            out.append(number)
        else:
            out += codepoint_to_utf8(number)

    return bytes(out)


def escape(data: bytes) -> str:
    """
    Render bytes as string-literal content.

    Quote, backslash, CR, TAB and LF use their short escapes; printable
    ASCII passes through; every other byte becomes a lowercase ``\\xHH``.
    The output is pure ASCII and never contains ``\\u`` escapes.
    """
    parts = []
    for byte in data:
        short = REVERSE_ESCAPES.get(byte)
        if short is not None:
            parts.append(short)
        elif 0x20 <= byte <= 0x7E:
            parts.append(chr(byte))
        else:
            parts.append(f"\\x{byte:02x}")
    return "".join(parts)
