"""Split engine for breaking one document into size-bounded SISL parts."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from ..codec import ValueCodec
from ..types import (
    ErrorCode,
    ErrorType,
    PathStep,
    SislError,
    SparseList,
    SplitEngineInterface,
    SplitResult
)
from ..utils.size_calculator import SizeCalculator


@dataclass
class Leaf:
    """A scalar or empty container together with its path from the root."""
    path: Tuple[PathStep, ...]
    value: Any


class SplitEngine(SplitEngineInterface):
    """
    Split engine that fragments a document under a byte budget.

    Every leaf is wrapped into a self-contained single-path document,
    then consecutive fragments are packed greedily into parts. Merging
    the parts in order reproduces the input.
    """

    def __init__(self, codec: Optional[ValueCodec] = None,
                 size_calculator: Optional[SizeCalculator] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the split engine.

        Args:
            codec: Optional ValueCodec instance
            size_calculator: Optional SizeCalculator instance
            logger: Optional logger instance
        """
        self.codec = codec or ValueCodec()
        self.size_calculator = size_calculator or SizeCalculator(self.codec)
        self.logger = logger or logging.getLogger(__name__)

    def split(self, value: Dict[str, Any], max_length: int) -> SplitResult:
        """
        Split a map into encoded parts of at most max_length bytes.

        Args:
            value: Top-level map
            max_length: Byte budget per part

        Returns:
            SplitResult; ``split_required`` is False when the whole
            encoding already fits, in which case ``parts`` holds it alone

        Raises:
            SislError: If some single fragment exceeds the budget
        """
        full_text = self.codec.encode_document(value)
        total_size = self.size_calculator.calculate_text_size(full_text)

        if total_size <= max_length:
            self.logger.debug(f"Document of {total_size} bytes fits in {max_length}, no split")
            return SplitResult(
                split_required=False,
                parts=[full_text],
                budget=max_length,
                total_size=total_size,
                part_sizes=[total_size]
            )

        if not value:
            raise self._budget_error(total_size)

        leaves = self.collect_leaves(value)
        fragments = [self.build_fragment(leaf) for leaf in leaves]
        texts = [self.codec.encode_document(fragment) for fragment in fragments]

        largest = max(self.size_calculator.calculate_text_size(text) for text in texts)
        if largest > max_length:
            raise self._budget_error(largest)

        parts = self.pack(fragments, texts, max_length)
        part_sizes = [self.size_calculator.calculate_text_size(part) for part in parts]

        stats = self.size_calculator.get_size_statistics(parts, max_length)
        self.logger.info(f"Split {total_size} bytes into {len(parts)} parts "
                         f"from {len(leaves)} fragments "
                         f"(utilization {stats['utilization']:.0%})")

        return SplitResult(
            split_required=True,
            parts=parts,
            budget=max_length,
            total_size=total_size,
            fragment_count=len(fragments),
            part_sizes=part_sizes
        )

    def collect_leaves(self, value: Any, path: Tuple[PathStep, ...] = ()) -> List[Leaf]:
        """
        Flatten a value depth-first into leaves.

        Scalars and empty containers are leaves; non-empty dicts and lists
        are descended into, keys and indices recorded in order.
        """
        leaves: List[Leaf] = []

        if isinstance(value, dict) and (value or not path):
            for key, child in value.items():
                leaves.extend(self.collect_leaves(child, path + (key,)))
        elif isinstance(value, (list, tuple)) and value:
            for index, child in enumerate(value):
                leaves.extend(self.collect_leaves(child, path + (index,)))
        else:
            leaves.append(Leaf(path, value))

        return leaves

    def build_fragment(self, leaf: Leaf) -> Dict[str, Any]:
        """
        Wrap a leaf in single-entry containers up to the root.

        List steps become single-index SparseLists so the literal index
        survives encoding.
        """
        current = leaf.value
        for step in reversed(leaf.path):
            if isinstance(step, int):
                current = SparseList({step: current})
            else:
                current = {step: current}
        return current

    def should_start_new_part(self, current: Dict[str, Any], fragment: Dict[str, Any]) -> bool:
        """
        Check for a top-level key collision.

        Only top-level keys are compared; colliding fragments are never
        merged deeply while packing.
        """
        return any(key in current for key in fragment)

    def pack(self, fragments: List[Dict[str, Any]], texts: List[str],
             max_length: int) -> List[str]:
        """
        Greedily pack fragments, in order, into parts within max_length.

        Args:
            fragments: Fragment values in leaf order
            texts: Encodings of ``fragments``
            max_length: Byte budget per part

        Returns:
            Encoded parts
        """
        parts: List[str] = []
        current: Optional[Dict[str, Any]] = None
        current_text = ""

        for fragment, text in zip(fragments, texts):
            if current is None:
                current, current_text = dict(fragment), text
                continue

            if not self.should_start_new_part(current, fragment):
                candidate = {**current, **fragment}
                candidate_text = self.codec.encode_document(candidate)
                if self.size_calculator.fits(candidate_text, max_length):
                    current, current_text = candidate, candidate_text
                    continue

            parts.append(current_text)
            self.logger.debug(f"Closed part {len(parts)} at "
                              f"{self.size_calculator.calculate_text_size(current_text)} bytes")
            current, current_text = dict(fragment), text

        if current is not None:
            parts.append(current_text)

        return parts

    def _budget_error(self, minimum: int) -> SislError:
        return SislError(
            f"max-length too small to encode any fragment (minimum needed: {minimum} bytes)",
            ErrorType.SPLIT, ErrorCode.BUDGET_TOO_SMALL,
            context={"minimum_required": minimum}
        )
