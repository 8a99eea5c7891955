"""Value codec: maps SISL syntax trees to and from plain Python values."""

import logging
import math
import re
from typing import Any, Dict, List, Optional, Tuple
from .config import SislLimits
from .models import Element, Grouping, StringValue
from .types import ErrorCode, ErrorType, SislError, SparseList, ValueCodecInterface
from .utils.escape import escape, unescape


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

INT_PATTERN = re.compile(r"[+-]?[0-9]+")
FLOAT_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
LIST_NAME_PATTERN = re.compile(r"_([0-9]+)")

SCALAR_TAGS = frozenset(["null", "bool", "int", "float", "str"])
CONTAINER_TAGS = frozenset(["obj", "list"])


def format_float(value: float) -> str:
    """Shortest round-trip text for a finite float, always float-looking."""
    text = repr(value)
    if not any(marker in text for marker in ".eE"):
        text += ".0"
    return text


class ValueCodec(ValueCodecInterface):
    """
    Bidirectional mapping between syntax trees and the value model.

    Every value carries an explicit type tag::

        None   -> !null ""          list -> !list {_0: ..., _1: ...}
        bool   -> !bool "true"      dict -> !obj {key: ...}
        int    -> !int "42"         str  -> !str "escaped utf-8"
        float  -> !float "1.5"

    Map keys are emitted verbatim and in iteration order.
    """

    def __init__(self, limits: Optional[SislLimits] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the codec.

        Args:
            limits: Optional limits (largest accepted list index)
            logger: Optional logger instance
        """
        self.limits = limits or SislLimits()
        self.logger = logger or logging.getLogger(__name__)

    # Encoding

    def encode(self, value: Any) -> Tuple[str, str]:
        """
        Encode a value into its type tag and literal.

        Args:
            value: None, bool, int, float, str, list, dict, or SparseList

        Returns:
            Tuple of (type_tag, literal); the literal is either a quoted
            string or a brace grouping

        Raises:
            SislError: If the value cannot be represented
        """
        if value is None:
            return "null", '""'
        # bool before int: bool is an int subclass
        if isinstance(value, bool):
            return "bool", '"true"' if value else '"false"'
        if isinstance(value, int):
            if not INT64_MIN <= value <= INT64_MAX:
                raise SislError(f"Integer {value} does not fit in 64 bits",
                                ErrorType.CODEC, ErrorCode.INT_OUT_OF_RANGE)
            return "int", f'"{value}"'
        if isinstance(value, float):
            if not math.isfinite(value):
                raise SislError(f"Cannot encode non-finite float {value!r}",
                                ErrorType.CODEC, ErrorCode.UNREPRESENTABLE_FLOAT)
            return "float", f'"{format_float(value)}"'
        if isinstance(value, str):
            return "str", f'"{self.encode_string(value)}"'
        if isinstance(value, dict):
            return "obj", self._encode_map(value)
        if isinstance(value, (list, tuple)):
            return "list", self._encode_pairs((f"_{index}", item) for index, item in enumerate(value))
        if isinstance(value, SparseList):
            return "list", self._encode_pairs(
                (f"_{index}", value.items[index]) for index in sorted(value.items)
            )
        raise SislError(f"Cannot encode value of type {type(value).__name__}",
                        ErrorType.CODEC, ErrorCode.UNSUPPORTED_VALUE)

    def encode_string(self, value: str) -> str:
        """Escape a string's UTF-8 bytes for use between quotes."""
        try:
            data = value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise SislError(f"String is not valid Unicode: {e.reason}",
                            ErrorType.CODEC, ErrorCode.INVALID_UTF8)
        return escape(data)

    def encode_document(self, value: Dict[str, Any]) -> str:
        """
        Encode a top-level map.

        Raises:
            SislError: If value is not a dict, or holds unencodable values
        """
        if not isinstance(value, dict):
            raise SislError(f"Top-level SISL must be an object, got {type(value).__name__}",
                            ErrorType.CODEC, ErrorCode.NON_OBJECT_TOP_LEVEL)
        return self._encode_map(value)

    def _encode_map(self, value: Dict[str, Any]) -> str:
        for key in value:
            if not isinstance(key, str):
                raise SislError(f"Object keys must be strings, got {type(key).__name__}",
                                ErrorType.CODEC, ErrorCode.INVALID_KEY)
        return self._encode_pairs(value.items())

    def _encode_pairs(self, pairs) -> str:
        parts = []
        for name, item in pairs:
            type_tag, literal = self.encode(item)
            parts.append(f"{name}: !{type_tag} {literal}")
        return "{" + ", ".join(parts) + "}"

    # Decoding

    def decode(self, grouping: Grouping) -> Dict[str, Any]:
        """
        Decode a top-level grouping into a dict.

        Later duplicate names overwrite earlier ones.
        """
        result: Dict[str, Any] = {}
        for element in grouping:
            result[element.name] = self.decode_element(element)
        return result

    def decode_element(self, element: Element) -> Any:
        """
        Decode one element according to its type tag.

        Raises:
            SislError: On unknown tags, tag/value shape mismatches, bad
                scalar text, or bad list element names
        """
        type_tag = element.type_tag

        if type_tag in SCALAR_TAGS:
            if not isinstance(element.value, StringValue):
                raise self._element_error(element, f"Type '{type_tag}' requires a string value",
                                          ErrorCode.TYPE_MISMATCH)
            return self.decode_scalar(type_tag, element.value.raw, element)

        if type_tag in CONTAINER_TAGS:
            if not isinstance(element.value, Grouping):
                raise self._element_error(element, f"Type '{type_tag}' requires a grouping",
                                          ErrorCode.TYPE_MISMATCH)
            if type_tag == "obj":
                return self.decode(element.value)
            return self._decode_list(element.value)

        raise self._element_error(element, f"Unknown type: !{type_tag}", ErrorCode.UNKNOWN_TYPE)

    def _decode_list(self, grouping: Grouping) -> List[Any]:
        indexed: Dict[int, Any] = {}
        for child in grouping:
            indexed[self.list_index(child)] = self.decode_element(child)

        if not indexed:
            return []
        dense = [None] * (max(indexed) + 1)
        for index, item in indexed.items():
            dense[index] = item
        return dense

    def list_index(self, element: Element) -> int:
        """
        Parse the literal index out of a ``_N`` element name.

        Raises:
            SislError: If the name is not ``_<digits>`` or the index is
                above the configured limit
        """
        match = LIST_NAME_PATTERN.fullmatch(element.name)
        if match is None:
            raise self._element_error(element, f"Invalid list element name '{element.name}'",
                                      ErrorCode.INVALID_LIST_ELEMENT_NAME)
        digits = match.group(1).lstrip("0") or "0"
        max_index = self.limits.max_list_index
        if len(digits) > len(str(max_index)) or int(digits) > max_index:
            raise self._element_error(element, f"List index {digits} exceeds limit {max_index}",
                                      ErrorCode.LIST_INDEX_OUT_OF_RANGE)
        return int(digits)

    def decode_scalar(self, type_tag: str, raw: str, element: Optional[Element] = None) -> Any:
        """
        Unescape and validate scalar literal text.

        Args:
            type_tag: One of null, bool, int, float, str
            raw: Literal content with escapes unresolved
            element: Optional element, used for error positions

        Returns:
            The decoded scalar
        """
        data = unescape(raw)
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise self._element_error(element, f"Invalid UTF-8 in string: {e.reason}",
                                      ErrorCode.INVALID_UTF8)

        if type_tag == "str":
            return text
        if type_tag == "null":
            if text:
                raise self._element_error(element, f"Null value must be empty, got '{text}'",
                                          ErrorCode.INVALID_SCALAR)
            return None
        if type_tag == "bool":
            if text == "true":
                return True
            if text == "false":
                return False
            raise self._element_error(element, f"Invalid bool value '{text}'",
                                      ErrorCode.INVALID_SCALAR)
        if type_tag == "int":
            return self._decode_int(text, element)
        if type_tag == "float":
            return self._decode_float(text, element)
        raise self._element_error(element, f"Unknown type: !{type_tag}", ErrorCode.UNKNOWN_TYPE)

    def decode_number_text(self, type_tag: str, text: str) -> Any:
        """Validate already unescaped int or float text."""
        if type_tag == "int":
            return self._decode_int(text, None)
        return self._decode_float(text, None)

    def _decode_int(self, text: str, element: Optional[Element]) -> int:
        if not INT_PATTERN.fullmatch(text):
            raise self._element_error(element, f"Invalid int value '{text}'",
                                      ErrorCode.INVALID_SCALAR)
        # skip int() on absurdly long digit runs
        if len(text.lstrip("+-").lstrip("0")) > 19:
            raise self._element_error(element, f"Int value '{text}' out of range",
                                      ErrorCode.INVALID_SCALAR)
        number = int(text)
        if not INT64_MIN <= number <= INT64_MAX:
            raise self._element_error(element, f"Int value '{text}' out of range",
                                      ErrorCode.INVALID_SCALAR)
        return number

    def _decode_float(self, text: str, element: Optional[Element]) -> float:
        if not FLOAT_PATTERN.fullmatch(text):
            raise self._element_error(element, f"Invalid float value '{text}'",
                                      ErrorCode.INVALID_SCALAR)
        number = float(text)
        if not math.isfinite(number):
            raise self._element_error(element, f"Float value '{text}' out of range",
                                      ErrorCode.INVALID_SCALAR)
        return number

    def _element_error(self, element: Optional[Element], message: str,
                       code: ErrorCode) -> SislError:
        if element is None or not element.line:
            return SislError(message, ErrorType.CODEC, code)
        return SislError(message, ErrorType.CODEC, code,
                         line=element.line, column=element.column,
                         context={"element": element.name})
