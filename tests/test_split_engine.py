"""Tests for the split engine."""

import pytest
from sisl.codec import ValueCodec
from sisl.engines.merge_engine import MergeEngine
from sisl.engines.split_engine import Leaf, SplitEngine
from sisl.types import ErrorCode, ErrorType, SislError, SparseList


class TestSplitEngine:
    """Tests for SplitEngine class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.engine = SplitEngine()
        self.merger = MergeEngine()
        self.codec = ValueCodec()

    def assert_inverse(self, value, budget):
        result = self.engine.split(value, budget)
        for part in result.parts:
            assert len(part.encode("utf-8")) <= budget
        assert self.merger.merge(result.parts) == value
        return result

    def test_no_split_when_document_fits(self):
        """Test a fitting document is returned whole."""
        value = {"a": 1, "b": [1, 2]}
        full = self.codec.encode_document(value)

        result = self.engine.split(value, len(full))

        assert not result.split_required
        assert result.parts == [full]
        assert result.total_size == len(full)

    def test_split_and_merge_inverse(self, sample_document):
        """Test merge(split(v)) == v with every part in budget."""
        result = self.assert_inverse(sample_document, 120)

        assert result.split_required
        assert len(result.parts) > 1
        assert result.fragment_count >= len(result.parts)

    def test_inverse_at_smallest_budget(self, sample_document):
        """Test the inverse holds at exactly the largest fragment size."""
        leaves = self.engine.collect_leaves(sample_document)
        largest = max(
            len(self.codec.encode_document(self.engine.build_fragment(leaf)))
            for leaf in leaves
        )

        result = self.assert_inverse(sample_document, largest)

        assert len(result.parts) > 1

    @pytest.mark.parametrize("budget", [70, 120, 250, 500])
    def test_inverse_across_budgets(self, large_document, budget):
        """Test the inverse for a range of budgets."""
        self.assert_inverse(large_document, budget)

    def test_key_order_preserved(self, large_document):
        """Test merged key order matches the input."""
        result = self.engine.split(large_document, 100)
        merged = self.merger.merge(result.parts)

        assert list(merged) == list(large_document)
        assert list(merged["section_3"]) == list(large_document["section_3"])

    def test_budget_too_small(self):
        """Test a budget below the smallest fragment fails with the minimum."""
        value = {"name": "Alice", "age": 30}

        with pytest.raises(SislError, match=r"minimum needed: 20 bytes") as exc_info:
            self.engine.split(value, 10)

        error = exc_info.value
        assert error.error_type == ErrorType.SPLIT
        assert error.code == ErrorCode.BUDGET_TOO_SMALL
        assert error.context["minimum_required"] == 20

    def test_empty_document_below_two_bytes(self):
        """Test {} needs at least two bytes."""
        with pytest.raises(SislError) as exc_info:
            self.engine.split({}, 1)

        assert exc_info.value.context["minimum_required"] == 2

    def test_empty_containers_survive(self):
        """Test empty lists and maps are kept as leaves."""
        value = {"a": [], "b": {}, "c": {"d": []}, "e": [1, {}]}

        self.assert_inverse(value, 30)

    def test_sparse_list_fragments(self):
        """Test list elements split apart keep their indices."""
        value = {"l": ["aaaa", "bbbb", "cccc"]}

        result = self.assert_inverse(value, 30)

        assert result.parts[1] == '{l: !list {_1: !str "bbbb"}}'

    def test_top_level_collision_starts_new_part(self):
        """Test fragments sharing a top-level key never share a part."""
        value = {"a": {"x": 1, "y": 2}}

        result = self.assert_inverse(value, 30)

        assert result.parts == ['{a: !obj {x: !int "1"}}', '{a: !obj {y: !int "2"}}']

    def test_disjoint_fragments_pack_together(self):
        """Test consecutive fragments with new keys share a part when they fit."""
        value = {"a": 1, "b": 2, "c": "long text"}

        result = self.assert_inverse(value, 30)

        assert result.parts[0] == '{a: !int "1", b: !int "2"}'

    def test_collect_leaves(self):
        """Test depth-first leaf collection with key and index steps."""
        leaves = self.engine.collect_leaves({"a": {"b": 1}, "c": [2, []], "d": {}})

        assert leaves == [
            Leaf(("a", "b"), 1),
            Leaf(("c", 0), 2),
            Leaf(("c", 1), []),
            Leaf(("d",), {}),
        ]

    def test_build_fragment(self):
        """Test list steps become single-index sparse lists."""
        fragment = self.engine.build_fragment(Leaf(("c", 1, "x"), True))

        assert fragment == {"c": SparseList({1: {"x": True}})}
        assert self.codec.encode_document(fragment) == '{c: !list {_1: !obj {x: !bool "true"}}}'

    def test_part_sizes_reported(self, large_document):
        """Test the result records each part's size."""
        result = self.engine.split(large_document, 200)

        assert result.part_sizes == [len(part) for part in result.parts]
        assert max(result.part_sizes) <= 200
