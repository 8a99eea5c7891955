"""Integration tests for SISL."""

import json
import pytest
import sisl
from sisl import ErrorCode, ErrorType, SislError, SislLimits, SislTransformer


class TestSislTransformerIntegration:
    """Integration tests for the complete SISL system."""

    def setup_method(self):
        """Set up test fixtures."""
        self.transformer = SislTransformer()

    def test_dumps_loads_round_trip(self, sample_document):
        """Test loads(dumps(v)) == v."""
        text = self.transformer.dumps(sample_document)

        assert self.transformer.loads(text) == sample_document

    def test_split_merge_round_trip(self, sample_document):
        """Test merge(split(v).parts) == v."""
        result = self.transformer.split(sample_document, 128)

        assert result.split_required
        assert all(size <= 128 for size in result.part_sizes)
        assert self.transformer.merge(result.parts) == sample_document

    def test_split_without_need(self, sample_document):
        """Test a large budget returns the plain encoding."""
        result = self.transformer.split(sample_document, 100_000)

        assert not result.split_required
        assert result.parts == [self.transformer.dumps(sample_document)]

    def test_split_rejects_invalid_budget(self, sample_document):
        """Test budgets are validated before splitting."""
        with pytest.raises(SislError) as exc_info:
            self.transformer.split(sample_document, 0)

        assert exc_info.value.code == ErrorCode.INVALID_BUDGET

    def test_dumps_rejects_cycles(self):
        """Test cyclic values fail validation instead of recursing."""
        data = {"a": []}
        data["a"].append(data)

        with pytest.raises(SislError) as exc_info:
            self.transformer.dumps(data)

        assert exc_info.value.code == ErrorCode.CIRCULAR_REFERENCE

    def test_limits_shared_across_components(self):
        """Test one limits object bounds encoding and decoding."""
        transformer = SislTransformer(SislLimits(max_nesting_depth=2))

        with pytest.raises(SislError):
            transformer.dumps({"a": {"b": {}}})
        with pytest.raises(SislError) as exc_info:
            transformer.loads("{a: !obj {b: !obj {}}}")
        assert exc_info.value.code == ErrorCode.NESTING_TOO_DEEP

    def test_loads_auto(self):
        """Test documents and fragment arrays are both accepted."""
        parts = ['{a: !int "1"}', '{b: !int "2"}']

        assert self.transformer.loads_auto(json.dumps(parts)) == {"a": 1, "b": 2}
        assert self.transformer.loads_auto('{a: !int "1"}') == {"a": 1}

    def test_xml_through_sisl(self, sample_document):
        """Test XML to SISL to XML keeps typed documents intact."""
        xml = self.transformer.to_xml(sample_document)
        sisl_text = self.transformer.dumps(self.transformer.from_xml(xml))

        assert self.transformer.to_xml(self.transformer.loads(sisl_text)) == xml

    def test_dumps_json_text_split(self, large_document):
        """Test text-level dumps emits a compact JSON array when splitting."""
        output = self.transformer.dumps_json_text(json.dumps(large_document), max_length=300)

        parts = json.loads(output)
        assert isinstance(parts, list)
        assert output.startswith('["{')
        assert self.transformer.loads_text(output) == json.dumps(
            large_document, ensure_ascii=False, separators=(",", ":")
        )

    def test_deeply_nested_json_text(self):
        """Test JSON too deep for the json module is an input error."""
        with pytest.raises(SislError) as exc_info:
            self.transformer.dumps_json_text("[" * 100000 + "]" * 100000)

        assert exc_info.value.code == ErrorCode.INVALID_JSON

    def test_loads_auto_deeply_nested_json(self):
        """Test deep brackets are not a fragment array and reach the SISL lexer."""
        with pytest.raises(SislError) as exc_info:
            self.transformer.loads_auto("[" * 100000)

        assert exc_info.value.error_type == ErrorType.LEX

    def test_invalid_json_text(self):
        """Test malformed JSON input."""
        with pytest.raises(SislError, match="Invalid JSON input") as exc_info:
            self.transformer.dumps_json_text("{")

        assert exc_info.value.error_type == ErrorType.IO
        assert exc_info.value.code == ErrorCode.INVALID_JSON


class TestModuleFunctions:
    """Tests for the package-level convenience functions."""

    def test_dumps_and_loads(self):
        """Test the scenario document through the module functions."""
        value = {"name": "Alice", "age": 30, "tags": ["a", "b"]}
        text = sisl.dumps(value)

        assert text == '{name: !str "Alice", age: !int "30", tags: !list {_0: !str "a", _1: !str "b"}}'
        assert sisl.loads(text) == value

    def test_split_and_merge(self, large_document):
        """Test split and merge through the module functions."""
        result = sisl.split(large_document, 150)

        assert sisl.merge(result.parts) == large_document

    def test_merge_nothing(self):
        """Test merging no fragments."""
        assert sisl.merge([]) == {}
