"""Error handling for SISL operations."""

import logging
from typing import Any, Optional
from .config import SislLimits
from .types import (
    ErrorCode,
    ErrorHandlerInterface,
    ErrorResponse,
    ErrorType,
    SislError,
    ValidationResult
)
from .utils.validation import ValidationUtils


EXIT_ERROR = 2
EXIT_INTERNAL = 3


class ErrorHandler(ErrorHandlerInterface):
    """
    Error handler for SISL operations.

    Runs pre-flight validation and maps failures to exit codes and
    suggested actions. Every SislError is a caller-facing failure
    (exit 2); anything else is an internal error (exit 3).
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the error handler.

        Args:
            logger: Optional logger instance for error reporting
        """
        self.logger = logger or logging.getLogger(__name__)

    def validate_budget(self, max_length: Any) -> ValidationResult:
        """Validate a split budget, logging any warnings."""
        result = ValidationUtils.validate_budget(max_length)
        for warning in result.warnings:
            self.logger.warning(warning)
        return result

    def validate_document(self, value: Any, limits: Optional[SislLimits] = None) -> ValidationResult:
        """Validate a value before encoding it as a document."""
        return ValidationUtils.validate_document(value, limits)

    def raise_for_validation(self, result: ValidationResult) -> None:
        """
        Raise the first validation error, if any.

        Raises:
            SislError: Built from the first ValidationError
        """
        if result.is_valid:
            return
        error = result.errors[0]
        raise SislError(error.message, error.type, error.code,
                        context={"location": error.location})

    def handle_error(self, error: BaseException) -> ErrorResponse:
        """
        Map an error to an exit code and a suggested action.

        Args:
            error: Exception raised by an operation

        Returns:
            ErrorResponse for the caller
        """
        if not isinstance(error, SislError):
            self.logger.debug(f"Internal error: {type(error).__name__}: {error}", exc_info=error)
            return ErrorResponse(
                exit_code=EXIT_INTERNAL,
                message=f"Internal error: {error}",
                suggested_action="This is a bug. Please report it with the input that triggered it."
            )

        self.logger.debug(f"{error.error_type.value} error ({error.code.value}): {error}")

        if error.error_type in (ErrorType.LEX, ErrorType.PARSE, ErrorType.ESCAPE):
            return self._handle_syntax_error(error)
        elif error.error_type == ErrorType.CODEC:
            return self._handle_codec_error(error)
        elif error.error_type == ErrorType.MERGE:
            return self._handle_merge_error(error)
        elif error.error_type == ErrorType.SPLIT:
            return self._handle_split_error(error)
        elif error.error_type == ErrorType.XML:
            return self._handle_xml_error(error)
        else:
            return self._handle_io_error(error)

    def _response(self, error: SislError, suggested_action: str) -> ErrorResponse:
        message = str(error)
        if "fragment" in error.context:
            message = f"fragment {error.context['fragment']}: {message}"
        return ErrorResponse(exit_code=EXIT_ERROR, message=message,
                             suggested_action=suggested_action)

    def _handle_syntax_error(self, error: SislError) -> ErrorResponse:
        """Handle lexer, parser and escape errors."""
        return self._response(
            error,
            "Check the SISL text near the reported position. Elements have the form "
            "name: !type \"value\" and groupings are wrapped in braces."
        )

    def _handle_codec_error(self, error: SislError) -> ErrorResponse:
        """Handle value codec errors."""
        if error.code == ErrorCode.UNREPRESENTABLE_FLOAT:
            action = "NaN and Infinity have no SISL form. Replace them before encoding."
        elif error.code == ErrorCode.NON_OBJECT_TOP_LEVEL:
            action = "Wrap the value in an object; documents must be maps at the top level."
        else:
            action = "Check type tags and scalar literals against the SISL type table."
        return self._response(error, action)

    def _handle_merge_error(self, error: SislError) -> ErrorResponse:
        """Handle merge type conflicts."""
        return self._response(
            error,
            "Fragments disagree on the shape of a value at the reported path. "
            "Check that all fragments come from the same document."
        )

    def _handle_split_error(self, error: SislError) -> ErrorResponse:
        """Handle split budget errors."""
        minimum = error.context.get("minimum_required")
        if minimum is not None:
            action = f"Increase --max-length to at least {minimum}."
        else:
            action = "Use a positive --max-length."
        return self._response(error, action)

    def _handle_xml_error(self, error: SislError) -> ErrorResponse:
        """Handle XML adapter errors."""
        return self._response(
            error,
            "Check that the XML is well formed; typed documents need a type "
            "attribute on every element under <root>."
        )

    def _handle_io_error(self, error: SislError) -> ErrorResponse:
        """Handle input and output errors."""
        return self._response(
            error,
            "Check file paths and permissions, and that the input is valid JSON."
        )
