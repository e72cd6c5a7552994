"""Core type definitions for the bsky toolkit."""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional

if TYPE_CHECKING:
    from .json_value import JsonValue


class ErrorFamily(Enum):
    """Enumeration of error families."""
    RESOURCE = "resource"
    SYNTAX = "syntax"
    LIFETIME = "lifetime"


class ErrorCode(Enum):
    """Enumeration of error codes."""
    TMP_OVERFLOW = "tmp-overflow"
    STALE_VIEW = "stale-view"

    EXPECT_NULL = "expect-null"
    EXPECT_BOOL = "expect-bool"
    EXPECT_NUMBER = "expect-number"
    EXPECT_OPEN_QUOTE = "expect-open-quote"
    EXPECT_CLOSE_QUOTE = "expect-close-quote"
    EXPECT_OPEN_BRACKET = "expect-open-bracket"
    EXPECT_CLOSE_BRACKET = "expect-close-bracket"
    EXPECT_OPEN_BRACE = "expect-open-brace"
    EXPECT_CLOSE_BRACE = "expect-close-brace"
    EXPECT_COLON = "expect-colon"
    INVALID_VARIANT = "invalid-variant"
    TRAILING_CHARACTERS = "trailing-characters"
    EMBEDDED_NUL = "embedded-nul"
    NESTING_TOO_DEEP = "nesting-too-deep"

    @property
    def family(self) -> ErrorFamily:
        """Family the code belongs to."""
        if self is ErrorCode.TMP_OVERFLOW:
            return ErrorFamily.RESOURCE
        if self is ErrorCode.STALE_VIEW:
            return ErrorFamily.LIFETIME
        return ErrorFamily.SYNTAX


class JsonKind(Enum):
    """Enumeration of JSON value variants."""
    ARRAY = "array"
    OBJECT = "object"
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    NULL = "null"


@dataclass
class ParseResult:
    """Result of a parse attempt, with errors carried as values."""
    value: Optional["JsonValue"]
    error: Optional[ErrorCode] = None
    message: Optional[str] = None
    position: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ValidationError:
    """Validation error details."""
    code: ErrorCode
    message: str
    position: Optional[int] = None


@dataclass
class ValidationResult:
    """Result of input validation."""
    is_valid: bool
    errors: List[ValidationError] = field(default_factory=list)


@dataclass
class ErrorResponse:
    """Response for error handling."""
    can_recover: bool
    suggested_action: str
    context: Optional[Any] = None


class ToolkitError(Exception):
    """Base exception for every failure raised by the toolkit."""

    def __init__(self, message: str, error_code: ErrorCode, context: Optional[Any] = None):
        super().__init__(message)
        self.error_code = error_code
        self.context = context


class TmpOverflowError(ToolkitError):
    """Raised when the arena or a dynamic array cannot provide more space."""

    def __init__(self, message: str, context: Optional[Any] = None):
        super().__init__(message, ErrorCode.TMP_OVERFLOW, context)


class StaleViewError(ToolkitError):
    """Raised when an arena region is read after the arena was reset."""

    def __init__(self, message: str, context: Optional[Any] = None):
        super().__init__(message, ErrorCode.STALE_VIEW, context)


class JsonParseError(ToolkitError):
    """Syntax error raised by a parser production."""

    def __init__(self, error_code: ErrorCode, position: int, message: Optional[str] = None):
        super().__init__(message or f"{error_code.value} at offset {position}", error_code,
                         context={"position": position})
        self.position = position


class UnexpectedTokenError(JsonParseError):
    """
    The leading token did not belong to the production.

    Only this error lets value dispatch move on to the next alternative;
    every other JsonParseError ends the parse.
    """
