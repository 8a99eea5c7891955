"""Main SISL transformer: one entry point over the codec, engines and XML adapter."""

import json
import logging
from typing import Any, Dict, Optional, Sequence
from .codec import ValueCodec
from .config import SislLimits
from .engines import MergeEngine, SplitEngine
from .error_handler import ErrorHandler
from .io.file_writer import FileWriter
from .parser import SislParser
from .types import ErrorCode, ErrorType, SislError, SplitResult
from .utils.size_calculator import SizeCalculator
from .utils.validation import ValidationUtils
from .xml_adapter import XmlAdapter


class SislTransformer:
    """
    Facade over the SISL components.

    Provides value-level operations (``dumps``, ``loads``, ``merge``,
    ``split``) and the text-in/text-out operations the CLI is built on.
    """

    def __init__(self, limits: Optional[SislLimits] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the transformer.

        Args:
            limits: Optional structural limits shared by all components
            logger: Optional logger instance
        """
        self.limits = limits or SislLimits()
        self.logger = logger or logging.getLogger(__name__)

        self.error_handler = ErrorHandler(self.logger)
        self.codec = ValueCodec(self.limits, self.logger)
        self.parser = SislParser(self.limits, self.logger)
        self.merge_engine = MergeEngine(self.codec, self.limits, self.logger)
        self.size_calculator = SizeCalculator(self.codec, self.logger)
        self.split_engine = SplitEngine(self.codec, self.size_calculator, self.logger)
        self.xml_adapter = XmlAdapter(self.codec, self.limits, self.logger)
        self.file_writer = FileWriter(self.logger)

    # Value-level operations

    def dumps(self, value: Dict[str, Any]) -> str:
        """
        Encode a map as one SISL document.

        Raises:
            SislError: If the value is not a map, is cyclic or too deep,
                or holds values with no SISL form
        """
        self.error_handler.raise_for_validation(
            self.error_handler.validate_document(value, self.limits)
        )
        return self.codec.encode_document(value)

    def loads(self, text: str) -> Dict[str, Any]:
        """Decode one SISL document."""
        return self.codec.decode(self.parser.parse(text))

    def merge(self, fragments: Sequence[str]) -> Dict[str, Any]:
        """Merge SISL fragments, in order, into one value."""
        return self.merge_engine.merge(fragments)

    def split(self, value: Dict[str, Any], max_length: int) -> SplitResult:
        """
        Split a map into SISL parts of at most max_length bytes.

        Raises:
            SislError: On an invalid budget or value, or when a single
                fragment cannot fit
        """
        self.error_handler.raise_for_validation(self.error_handler.validate_budget(max_length))
        self.error_handler.raise_for_validation(
            self.error_handler.validate_document(value, self.limits)
        )
        return self.split_engine.split(value, max_length)

    def loads_auto(self, text: str) -> Dict[str, Any]:
        """
        Decode a document or a fragment array.

        Text that parses as a non-empty JSON array of strings is treated
        as merge fragments; anything else is one SISL document.
        """
        try:
            data = json.loads(text)
        except (ValueError, RecursionError):
            data = None

        if ValidationUtils.is_fragment_array(data):
            self.logger.debug(f"Input is a fragment array of {len(data)} parts")
            return self.merge(data)
        return self.loads(text)

    def to_xml(self, value: Dict[str, Any]) -> str:
        """Convert a map to typed or generic XML."""
        return self.xml_adapter.to_xml(value)

    def from_xml(self, text: str) -> Dict[str, Any]:
        """Convert XML to a map."""
        return self.xml_adapter.from_xml(text)

    # Text-level operations

    def parse_json(self, text: str) -> Any:
        """
        Parse JSON input.

        Raises:
            SislError: If text is not valid JSON
        """
        try:
            return json.loads(text)
        except (ValueError, RecursionError) as e:
            raise SislError(f"Invalid JSON input: {e}", ErrorType.IO, ErrorCode.INVALID_JSON)

    def dumps_json_text(self, text: str, max_length: Optional[int] = None,
                        xml: bool = False) -> str:
        """
        Convert JSON (or XML) text to SISL.

        Args:
            text: JSON document, or XML when ``xml`` is set
            max_length: Optional byte budget per part
            xml: Read the input as XML

        Returns:
            One SISL document, or a compact JSON array of parts when
            the document had to be split
        """
        value = self.from_xml(text) if xml else self.parse_json(text)

        if max_length is None:
            return self.dumps(value)

        result = self.split(value, max_length)
        if not result.split_required:
            return result.parts[0]
        self.logger.info(f"Emitting {len(result.parts)} parts")
        return json.dumps(result.parts, separators=(",", ":"))

    def loads_text(self, text: str, xml: bool = False) -> str:
        """
        Convert SISL (or a fragment array) to compact JSON or XML text.

        Args:
            text: SISL document or JSON array of SISL fragments
            xml: Emit XML instead of JSON
        """
        value = self.loads_auto(text)
        if xml:
            return self.to_xml(value)
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
