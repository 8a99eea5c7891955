"""Validation utilities for values and parameters entering the engine."""

from typing import Any, List, Optional, Set
from ..config import SislLimits
from ..types import ErrorCode, ErrorType, SparseList, ValidationError, ValidationResult


class ValidationUtils:
    """Utility class for validating documents and split parameters."""

    SMALL_BUDGET_WARNING = 64

    @staticmethod
    def validate_budget(max_length: Any) -> ValidationResult:
        """
        Validate a split budget.

        Args:
            max_length: Maximum byte length per part

        Returns:
            ValidationResult with validation details
        """
        errors = []
        warnings = []

        if isinstance(max_length, bool) or not isinstance(max_length, int):
            errors.append(ValidationError(
                type=ErrorType.SPLIT,
                message=f"max-length must be an integer, got {type(max_length).__name__}",
                location="max_length",
                code=ErrorCode.INVALID_BUDGET
            ))
        elif max_length <= 0:
            errors.append(ValidationError(
                type=ErrorType.SPLIT,
                message="max-length must be a positive integer",
                location="max_length",
                code=ErrorCode.INVALID_BUDGET
            ))
        elif max_length < ValidationUtils.SMALL_BUDGET_WARNING:
            warnings.append(f"max-length {max_length} is very small; expect many parts")

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings
        )

    @staticmethod
    def validate_document(data: Any, limits: Optional[SislLimits] = None) -> ValidationResult:
        """
        Validate a value before it is encoded as a top-level document.

        Args:
            data: Value to validate
            limits: Optional limits (nesting depth)

        Returns:
            ValidationResult with validation details
        """
        limits = limits or SislLimits()
        errors = []
        warnings = []

        if not isinstance(data, dict):
            errors.append(ValidationError(
                type=ErrorType.CODEC,
                message=f"Top-level SISL must be an object, got {type(data).__name__}",
                location="root",
                code=ErrorCode.NON_OBJECT_TOP_LEVEL
            ))
            return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

        if ValidationUtils._has_circular_references(data, limits.max_nesting_depth):
            errors.append(ValidationError(
                type=ErrorType.CODEC,
                message="Circular references detected in value",
                location="unknown",
                code=ErrorCode.CIRCULAR_REFERENCE
            ))
            return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

        max_depth = ValidationUtils._calculate_max_depth(data, limits.max_nesting_depth)
        if max_depth > limits.max_nesting_depth:
            errors.append(ValidationError(
                type=ErrorType.CODEC,
                message=f"Nesting depth exceeds {limits.max_nesting_depth}",
                location="root",
                code=ErrorCode.NESTING_TOO_DEEP
            ))

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings
        )

    @staticmethod
    def _children(data: Any) -> List[Any]:
        if isinstance(data, dict):
            return list(data.values())
        if isinstance(data, (list, tuple)):
            return list(data)
        if isinstance(data, SparseList):
            return list(data.items.values())
        return []

    @staticmethod
    def _has_circular_references(data: Any, cutoff: int, seen: Set[int] = None,
                                 depth: int = 0) -> bool:
        """Check for circular references, giving up below ``cutoff`` levels."""
        if seen is None:
            seen = set()

        if depth > cutoff or not isinstance(data, (dict, list, tuple, SparseList)):
            return False

        obj_id = id(data)
        if obj_id in seen:
            return True
        seen.add(obj_id)

        for child in ValidationUtils._children(data):
            if ValidationUtils._has_circular_references(child, cutoff, seen, depth + 1):
                return True

        seen.remove(obj_id)
        return False

    @staticmethod
    def _calculate_max_depth(data: Any, cutoff: int, current_depth: int = 0) -> int:
        """Count nested containers; stops descending once past ``cutoff``."""
        if not isinstance(data, (dict, list, tuple, SparseList)):
            return current_depth

        depth = current_depth + 1
        if depth > cutoff:
            return depth

        max_child_depth = depth
        for child in ValidationUtils._children(data):
            child_depth = ValidationUtils._calculate_max_depth(child, cutoff, depth)
            max_child_depth = max(max_child_depth, child_depth)
        return max_child_depth

    @staticmethod
    def is_fragment_array(data: Any) -> bool:
        """True for a non-empty list whose items are all strings."""
        return (isinstance(data, list) and len(data) > 0
                and all(isinstance(item, str) for item in data))
