"""Error handling implementation for the bsky toolkit."""

import logging
from typing import Optional

from .memory.arena import TmpArena
from .parser import JSONParser
from .strings import Str, StrLike
from .types import (
    ErrorCode,
    ErrorFamily,
    ErrorResponse,
    ToolkitError,
    ValidationError,
    ValidationResult,
)


class ErrorHandler:
    """
    Validation and recovery advice for toolkit operations.

    Resource errors can be recovered from by resetting the arena and
    repeating the whole operation; syntax errors cannot.
    """

    def __init__(self, arena: Optional[TmpArena] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the error handler.

        Args:
            arena: Optional arena used while validating input
            logger: Optional logger instance for error reporting
        """
        self.logger = logger or logging.getLogger(__name__)
        self.parser = JSONParser(arena, self.logger)

    def validate_input(self, input_data: StrLike) -> ValidationResult:
        """
        Validate JSON text.

        Args:
            input_data: JSON text to validate

        Returns:
            ValidationResult with validation details
        """
        try:
            text = Str.of(input_data)
        except ValueError as e:
            self.logger.error(f"Unexpected error during input validation: {e}")
            return ValidationResult(
                is_valid=False,
                errors=[ValidationError(
                    code=ErrorCode.INVALID_VARIANT,
                    message=f"Validation failed: {e}",
                )],
            )

        if len(text.trim_left()) == 0:
            return ValidationResult(
                is_valid=False,
                errors=[ValidationError(
                    code=ErrorCode.INVALID_VARIANT,
                    message="JSON text is empty",
                    position=0,
                )],
            )

        result = self.parser.try_parse(text)
        if result.ok:
            return ValidationResult(is_valid=True)

        return ValidationResult(
            is_valid=False,
            errors=[ValidationError(
                code=result.error,
                message=result.message or result.error.value,
                position=result.position,
            )],
        )

    def handle_error(self, error: ToolkitError) -> ErrorResponse:
        """
        Handle toolkit errors and provide recovery suggestions.

        Args:
            error: ToolkitError to handle

        Returns:
            ErrorResponse with recovery information
        """
        self.logger.error(f"Toolkit error: {error.error_code.value} - {error}")

        family = error.error_code.family
        if family is ErrorFamily.RESOURCE:
            return self._handle_resource_error(error)
        elif family is ErrorFamily.LIFETIME:
            return self._handle_lifetime_error(error)
        else:
            return self._handle_syntax_error(error)

    def _handle_resource_error(self, error: ToolkitError) -> ErrorResponse:
        """Handle arena and array exhaustion."""
        return ErrorResponse(
            can_recover=True,
            suggested_action="Reset the temporary arena and retry the whole operation, "
                             "or configure a larger arena capacity.",
            context=error.context,
        )

    def _handle_lifetime_error(self, error: ToolkitError) -> ErrorResponse:
        """Handle reads of memory from an earlier arena generation."""
        return ErrorResponse(
            can_recover=False,
            suggested_action="Copy data out of the arena before resetting it; "
                             "values from an earlier generation cannot be recovered.",
            context=error.context,
        )

    def _handle_syntax_error(self, error: ToolkitError) -> ErrorResponse:
        """Handle malformed JSON input."""
        return ErrorResponse(
            can_recover=False,
            suggested_action="Fix the JSON syntax near the reported position and parse again.",
            context=error.context,
        )
