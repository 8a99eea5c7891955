"""Tests for escape sequence handling."""

import pytest
from sisl.types import ErrorCode, ErrorType, SislError
from sisl.utils.escape import codepoint_to_utf8, escape, unescape


class TestUnescape:
    """Tests for unescape."""

    def test_plain_text(self):
        """Test text without escapes becomes its UTF-8 bytes."""
        assert unescape("hello") == b"hello"
        assert unescape("é") == b"\xc3\xa9"

    def test_simple_escapes(self):
        """Test single-character escapes."""
        assert unescape(r'\"\\\r\t\n') == b'"\\\r\t\n'

    def test_hex_escape(self):
        """Test \\xHH yields one raw byte."""
        assert unescape(r"\x41\xff\x00") == b"A\xff\x00"

    def test_unicode_escapes(self):
        """Test \\u and \\U yield UTF-8 encoded codepoints."""
        assert unescape("\\" "u0041") == b"A"
        assert unescape("\\" "u00e9") == b"\xc3\xa9"
        assert unescape("\\" "u20ac") == b"\xe2\x82\xac"
        assert unescape(r"\U0001F600") == "\U0001F600".encode("utf-8")

    def test_surrogate_codepoint_is_bit_packed(self):
        """Test surrogates are packed like any other 3-byte codepoint."""
        assert unescape(r"\uD800") == b"\xed\xa0\x80"

    def test_invalid_escape_letter(self):
        """Test unknown escape letters."""
        with pytest.raises(SislError, match=r"Invalid escape sequence: \\q") as exc_info:
            unescape(r"\q")

        assert exc_info.value.error_type == ErrorType.ESCAPE
        assert exc_info.value.code == ErrorCode.INVALID_ESCAPE_SEQUENCE

    @pytest.mark.parametrize("raw", [r"\x4", r"\xZZ", r"\u12", r"\u12G4", r"\U0001F60", r"\x"])
    def test_malformed_hex(self, raw):
        """Test short or non-hex payloads."""
        with pytest.raises(SislError) as exc_info:
            unescape(raw)

        assert exc_info.value.code == ErrorCode.INVALID_HEX_ESCAPE

    def test_codepoint_out_of_range(self):
        """Test codepoints at or above 0x110000."""
        with pytest.raises(SislError) as exc_info:
            unescape(r"\U00110000")

        assert exc_info.value.code == ErrorCode.INVALID_CODEPOINT

    def test_dangling_backslash(self):
        """Test a lone trailing backslash."""
        with pytest.raises(SislError) as exc_info:
            unescape("abc\\")

        assert exc_info.value.code == ErrorCode.INVALID_ESCAPE_SEQUENCE


class TestEscape:
    """Tests for escape."""

    def test_printable_ascii_passes_through(self):
        """Test printable ASCII is unchanged."""
        assert escape(b"Hello, World! ~") == "Hello, World! ~"

    def test_short_escapes(self):
        """Test quote, backslash, CR, TAB and LF."""
        assert escape(b'"\\\r\t\n') == r'\"\\\r\t\n'

    def test_other_bytes_use_lowercase_hex(self):
        """Test control, DEL and high bytes become \\xHH."""
        assert escape(b"\x00\x1f\x7f\xff") == r"\x00\x1f\x7f\xff"
        assert escape("é".encode("utf-8")) == r"\xc3\xa9"

    def test_never_emits_unicode_escapes(self):
        """Test output is ASCII and free of \\u forms."""
        text = escape("☕ \U0001F600".encode("utf-8"))

        assert text.isascii()
        assert "\\u" not in text and "\\U" not in text

    def test_round_trip_all_bytes(self):
        """Test unescape inverts escape for every byte value."""
        data = bytes(range(256))

        assert unescape(escape(data)) == data

    def test_unicode_forms_collapse_to_hex(self):
        """Test \\u input re-escapes as raw bytes."""
        assert escape(unescape("\\" "u00e9")) == r"\xc3\xa9"


class TestCodepointToUtf8:
    """Tests for codepoint_to_utf8."""

    @pytest.mark.parametrize("codepoint", [0x0, 0x7F, 0x80, 0x7FF, 0x800, 0xFFFF, 0x10000, 0x10FFFF])
    def test_boundaries_match_utf8(self, codepoint):
        """Test byte lengths at every encoding boundary."""
        assert codepoint_to_utf8(codepoint) == chr(codepoint).encode("utf-8")
