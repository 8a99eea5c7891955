"""Core type definitions for the SISL exchange engine."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union


# A path step is an object key (str) or a literal list index (int).
PathStep = Union[str, int]


class TokenType(Enum):
    """Token kinds produced by the lexer."""
    LBRACE = "{"
    RBRACE = "}"
    COLON = ":"
    COMMA = ","
    BANG = "!"
    STRING = "string"
    NAME = "name"
    END = "end of input"


class ErrorType(Enum):
    """Phase that raised an error."""
    LEX = "lex"
    PARSE = "parse"
    ESCAPE = "escape"
    CODEC = "codec"
    MERGE = "merge"
    SPLIT = "split"
    XML = "xml"
    IO = "io"


class ErrorCode(Enum):
    """Specific failure mode within a phase."""
    # lexer
    UNTERMINATED_STRING = "unterminated_string"
    UNEXPECTED_END_OF_INPUT = "unexpected_end_of_input"
    UNEXPECTED_CHARACTER = "unexpected_character"
    # parser
    EXPECTED_TOKEN = "expected_token"
    UNEXPECTED_TRAILING_TOKEN = "unexpected_trailing_token"
    NESTING_TOO_DEEP = "nesting_too_deep"
    # escape codec
    INVALID_ESCAPE_SEQUENCE = "invalid_escape_sequence"
    INVALID_HEX_ESCAPE = "invalid_hex_escape"
    INVALID_CODEPOINT = "invalid_codepoint"
    # value codec
    UNKNOWN_TYPE = "unknown_type"
    TYPE_MISMATCH = "type_mismatch"
    INVALID_SCALAR = "invalid_scalar"
    INVALID_LIST_ELEMENT_NAME = "invalid_list_element_name"
    LIST_INDEX_OUT_OF_RANGE = "list_index_out_of_range"
    NON_OBJECT_TOP_LEVEL = "non_object_top_level"
    UNSUPPORTED_VALUE = "unsupported_value"
    INT_OUT_OF_RANGE = "int_out_of_range"
    UNREPRESENTABLE_FLOAT = "unrepresentable_float"
    INVALID_UTF8 = "invalid_utf8"
    INVALID_KEY = "invalid_key"
    CIRCULAR_REFERENCE = "circular_reference"
    # merge / split
    TYPE_CONFLICT = "type_conflict"
    BUDGET_TOO_SMALL = "budget_too_small"
    INVALID_BUDGET = "invalid_budget"
    # xml adapter
    MALFORMED_XML = "malformed_xml"
    INVALID_ELEMENT_NAME = "invalid_element_name"
    MISSING_TYPE_ATTRIBUTE = "missing_type_attribute"
    # outer surface
    INPUT_UNREADABLE = "input_unreadable"
    OUTPUT_UNWRITABLE = "output_unwritable"
    INVALID_JSON = "invalid_json"


class SislError(Exception):
    """
    Error raised by every SISL component.

    One class tagged by phase (``error_type``) and failure mode (``code``)
    rather than a hierarchy of exception types. Lexer and parser errors
    carry the 1-based position of the offending token.
    """

    def __init__(self, message: str, error_type: ErrorType, code: ErrorCode,
                 line: Optional[int] = None, column: Optional[int] = None,
                 context: Optional[Dict[str, Any]] = None):
        if line is not None:
            full_message = f"{message} at line {line}, column {column}"
        else:
            full_message = message
        super().__init__(full_message)
        self.message = message
        self.error_type = error_type
        self.code = code
        self.line = line
        self.column = column
        self.context = context or {}


class SparseList:
    """
    List container that keeps literal indices.

    Only the splitter builds these: a fragment holding element ``_7`` of a
    list must encode as ``!list {_7: ...}`` rather than be renumbered.
    """

    __slots__ = ("items",)

    def __init__(self, items: Optional[Dict[int, Any]] = None):
        self.items: Dict[int, Any] = dict(items or {})

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SparseList) and self.items == other.items

    def __repr__(self) -> str:
        return f"SparseList({self.items!r})"


@dataclass
class ValidationError:
    """Validation error details."""
    type: ErrorType
    message: str
    location: Optional[str] = None
    code: Optional[ErrorCode] = None


@dataclass
class ValidationResult:
    """Result of input validation."""
    is_valid: bool
    errors: List[ValidationError]
    warnings: List[str]


@dataclass
class ErrorResponse:
    """How a caller should react to a failed operation."""
    exit_code: int
    message: str
    suggested_action: str


@dataclass
class SplitResult:
    """Result of a size-bounded split."""
    split_required: bool
    parts: List[str]
    budget: int
    total_size: int
    fragment_count: int = 0
    part_sizes: List[int] = field(default_factory=list)


# Abstract base classes for interfaces

class ValueCodecInterface(ABC):
    """Abstract interface for the value codec."""

    @abstractmethod
    def encode(self, value: Any) -> Tuple[str, str]:
        """Encode a value into its type tag and literal text."""
        pass

    @abstractmethod
    def encode_document(self, value: Dict[str, Any]) -> str:
        """Encode a top-level map into a SISL document."""
        pass

    @abstractmethod
    def decode(self, grouping: Any) -> Dict[str, Any]:
        """Decode a parsed grouping into a map."""
        pass


class MergeEngineInterface(ABC):
    """Abstract interface for the fragment merge engine."""

    @abstractmethod
    def merge(self, fragments: Sequence[str]) -> Dict[str, Any]:
        """Merge independently parsed fragments into one value."""
        pass


class SplitEngineInterface(ABC):
    """Abstract interface for the size-bounded splitter."""

    @abstractmethod
    def split(self, value: Dict[str, Any], max_length: int) -> SplitResult:
        """Split a value into encoded parts no longer than max_length."""
        pass


class ErrorHandlerInterface(ABC):
    """Abstract interface for error handling."""

    @abstractmethod
    def validate_budget(self, max_length: int) -> ValidationResult:
        """Validate a split budget."""
        pass

    @abstractmethod
    def handle_error(self, error: BaseException) -> ErrorResponse:
        """Map an error to an exit code and a suggested action."""
        pass
