"""Error handling implementation for JSON Butler."""

import json
import logging
from typing import List, Optional

from .types import (
    ButlerError,
    ErrorResponse,
    ErrorType,
    SchemaConflict,
    ValidationError,
    ValidationResult,
)

TOO_DEEP_MESSAGE = "JSON document is nested too deeply"


class ErrorHandler:
    """
    Error handler for JSON Butler operations.

    Validates input before parsing and turns fatal errors into the single
    user-visible message a host command shows.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the error handler.

        Args:
            logger: Optional logger instance for error reporting
        """
        self.logger = logger or logging.getLogger(__name__)

    def validate_input(self, input_data: str) -> ValidationResult:
        """
        Validate input JSON text.

        Args:
            input_data: JSON text to validate

        Returns:
            ValidationResult with validation details
        """
        errors = []
        warnings = []

        if not input_data or not input_data.strip():
            errors.append(ValidationError(
                type=ErrorType.SYNTAX,
                message="JSON string is empty",
                location="input"
            ))
            return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

        try:
            json.loads(input_data)
        except json.JSONDecodeError as e:
            errors.append(ValidationError(
                type=ErrorType.SYNTAX,
                message=f"Invalid JSON syntax: {e.msg}",
                location=f"line {e.lineno}, column {e.colno}"
            ))
        except RecursionError:
            errors.append(ValidationError(
                type=ErrorType.STRUCTURE,
                message=TOO_DEEP_MESSAGE,
                location="input"
            ))

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings
        )

    def describe(self, error: ButlerError) -> ErrorResponse:
        """
        Build the user-visible message for a fatal error.

        Args:
            error: ButlerError to describe

        Returns:
            ErrorResponse with message and suggested action
        """
        self.logger.error(f"Operation failed: {error.error_type.value} - {error}")

        if error.error_type == ErrorType.SYNTAX:
            return ErrorResponse(
                message=f"Selected text is not valid JSON: {error}",
                suggested_action="Select a complete JSON document and retry."
            )
        elif error.error_type == ErrorType.RESOLUTION:
            return ErrorResponse(
                message=f"Could not resolve type: {error}",
                suggested_action="Check the qualified type name, or build the project so the type can be loaded."
            )
        elif error.error_type == ErrorType.CIRCULAR:
            return ErrorResponse(
                message=f"Reference loop detected: {error}",
                suggested_action="Use reference loop handling 'ignore' to project cyclic members as null."
            )
        else:
            return ErrorResponse(
                message=f"JSON Butler failed: {error}",
                suggested_action="Please check logs and retry."
            )

    def summarize_conflicts(self, conflicts: List[SchemaConflict]) -> str:
        """One message listing every demoted field."""
        for conflict in conflicts:
            self.logger.warning(f"Schema conflict at {conflict.path}: {conflict.message}")
        paths = ", ".join(conflict.path for conflict in conflicts)
        return f"{len(conflicts)} field(s) typed as untyped due to conflicting samples: {paths}"
