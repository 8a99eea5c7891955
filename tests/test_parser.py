"""Tests for the SISL parser."""

import pytest
from sisl.config import SislLimits
from sisl.models import Grouping, StringValue
from sisl.parser import SislParser, parse
from sisl.types import ErrorCode, ErrorType, SislError


class TestSislParser:
    """Tests for SislParser class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.parser = SislParser()

    def test_parse_single_element(self):
        """Test parsing one scalar element."""
        grouping = self.parser.parse('{name: !str "Alice"}')

        assert len(grouping) == 1
        element = grouping.elements[0]
        assert element.name == "name"
        assert element.type_tag == "str"
        assert element.value == StringValue("Alice")

    def test_parse_preserves_order_and_duplicates(self):
        """Test element order and repeated names survive parsing."""
        grouping = self.parser.parse('{b: !int "1", a: !int "2", b: !int "3"}')

        assert grouping.names() == ["b", "a", "b"]

    def test_parse_nested_grouping(self):
        """Test nested groupings become Grouping values."""
        grouping = self.parser.parse('{o: !obj {x: !list {_0: !null ""}}}')

        outer = grouping.elements[0]
        assert outer.is_grouping
        inner = outer.value.elements[0]
        assert inner.name == "x"
        assert isinstance(inner.value, Grouping)
        assert inner.value.elements[0].name == "_0"

    def test_parse_empty_grouping(self):
        """Test that {} is a valid document."""
        assert len(self.parser.parse("{}")) == 0
        assert len(self.parser.parse("  { }  \n")) == 0

    def test_trailing_comma_allowed(self):
        """Test a single trailing comma before the closing brace."""
        grouping = self.parser.parse('{a: !int "1", b: !int "2",}')

        assert grouping.names() == ["a", "b"]

    def test_double_trailing_comma_rejected(self):
        """Test only one trailing comma is accepted."""
        with pytest.raises(SislError) as exc_info:
            self.parser.parse('{a: !int "1",,}')

        assert exc_info.value.code == ErrorCode.EXPECTED_TOKEN

    def test_missing_colon(self):
        """Test expectation errors name the expected and actual tokens."""
        with pytest.raises(SislError, match="Expected ':', got '!'") as exc_info:
            self.parser.parse('{a !int "1"}')

        error = exc_info.value
        assert error.error_type == ErrorType.PARSE
        assert error.context["expected"] == "COLON"
        assert error.context["actual"] == "!"
        assert (error.line, error.column) == (1, 4)

    def test_value_must_be_string_or_grouping(self):
        """Test a name in value position is rejected."""
        with pytest.raises(SislError, match="Expected string or grouping, got 'abc'"):
            self.parser.parse("{a: !int abc}")

    def test_missing_closing_brace(self):
        """Test end of input where a brace is expected."""
        with pytest.raises(SislError, match="got end of input"):
            self.parser.parse('{a: !int "1"')

    def test_empty_input(self):
        """Test that empty input is not a document."""
        with pytest.raises(SislError) as exc_info:
            self.parser.parse("")

        assert exc_info.value.code == ErrorCode.EXPECTED_TOKEN

    def test_trailing_input_rejected(self):
        """Test anything after the top-level grouping is an error."""
        with pytest.raises(SislError) as exc_info:
            self.parser.parse("{} {}")

        assert exc_info.value.code == ErrorCode.UNEXPECTED_TRAILING_TOKEN
        assert exc_info.value.column == 4

    def test_lex_errors_propagate(self):
        """Test lexer errors surface unchanged through the parser."""
        with pytest.raises(SislError) as exc_info:
            self.parser.parse('{a: !str "open}')

        assert exc_info.value.error_type == ErrorType.LEX
        assert exc_info.value.code == ErrorCode.UNTERMINATED_STRING

    def test_nesting_limit(self):
        """Test groupings nested beyond the limit are rejected."""
        parser = SislParser(SislLimits(max_nesting_depth=3))
        ok = "{a: !obj {b: !obj {}}}"
        too_deep = "{a: !obj {b: !obj {c: !obj {}}}}"

        assert len(parser.parse(ok)) == 1
        with pytest.raises(SislError) as exc_info:
            parser.parse(too_deep)
        assert exc_info.value.code == ErrorCode.NESTING_TOO_DEEP

    def test_parser_is_reusable(self):
        """Test one parser instance can parse several documents."""
        self.parser.parse('{a: !int "1"}')
        grouping = self.parser.parse('{b: !int "2"}')

        assert grouping.names() == ["b"]

    def test_element_positions(self):
        """Test elements remember where their name started."""
        grouping = parse('{a: !int "1",\n  b: !int "2"}')

        second = grouping.elements[1]
        assert (second.line, second.column) == (2, 3)
