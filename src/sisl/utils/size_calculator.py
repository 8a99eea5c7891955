"""Size calculation utilities for encoded SISL text."""

import logging
from typing import Any, Dict, List, Optional
from ..codec import ValueCodec


class SizeCalculator:
    """
    Utility class for measuring encoded SISL documents.

    Sizes are UTF-8 byte counts. Encoder output is pure ASCII, so for
    encoded fragments the byte count equals the character count, but
    arbitrary input text is measured in bytes too.
    """

    def __init__(self, codec: Optional[ValueCodec] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the size calculator.

        Args:
            codec: Optional ValueCodec used to encode values
            logger: Optional logger instance
        """
        self.codec = codec or ValueCodec()
        self.logger = logger or logging.getLogger(__name__)

    def calculate_text_size(self, text: str) -> int:
        """Return the UTF-8 byte length of text."""
        return len(text.encode("utf-8"))

    def calculate_document_size(self, value: Dict[str, Any]) -> int:
        """
        Calculate the byte length of a map's full encoding.

        Raises:
            SislError: If the value cannot be encoded
        """
        return self.calculate_text_size(self.codec.encode_document(value))

    def fits(self, text: str, budget: int) -> bool:
        """Check whether text fits within budget bytes."""
        return self.calculate_text_size(text) <= budget

    def get_size_statistics(self, parts: List[str], budget: int) -> Dict[str, Any]:
        """
        Summarize part sizes against a budget.

        Args:
            parts: Encoded parts
            budget: Byte budget the parts were packed into

        Returns:
            Dictionary with size statistics
        """
        if not parts:
            return {
                "part_count": 0,
                "total_size": 0,
                "average_size": 0,
                "utilization": 0.0
            }

        sizes = [self.calculate_text_size(part) for part in parts]
        total = sum(sizes)
        return {
            "part_count": len(parts),
            "total_size": total,
            "average_size": total / len(parts),
            "min_size": min(sizes),
            "max_size": max(sizes),
            "utilization": total / (len(parts) * budget) if budget > 0 else 0.0
        }
