"""Recursive-descent JSON parser."""

import logging
import re
from typing import Callable, Optional, Tuple

from .json_value import (
    JSON_PAIR_SIZE,
    JSON_VALUE_SIZE,
    JsonArray,
    JsonBool,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonPair,
    JsonString,
    JsonValue,
)
from .memory.arena import TmpArena, resolve_arena
from .memory.dynamic_array import DynamicArray
from .memory.view import drain_to_arena
from .strings import WHITESPACE, Str, StrBuilder, StrLike
from .types import ErrorCode, JsonParseError, ParseResult, ToolkitError, UnexpectedTokenError

_QUOTE = ord('"')
_BACKSLASH = ord("\\")

# Decimal subset of what strtod accepts.
_NUMBER_PATTERN = re.compile(rb"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class Cursor:
    """
    Shared read position over a terminated string.

    Every production advances the same cursor, so after a successful parse
    ``offset`` is the number of bytes consumed from the input text.
    """

    def __init__(self, text: StrLike):
        try:
            self.text = Str.of(text)
        except ValueError:
            raw = text.encode("utf-8", "surrogateescape") if isinstance(text, str) else bytes(text)
            raise JsonParseError(ErrorCode.EMBEDDED_NUL, raw.index(b"\x00")) from None
        self.data = self.text.data
        self.pos = self.text.start
        self.end = self.text.end

    @property
    def offset(self) -> int:
        return self.pos - self.text.start

    def skip_whitespace(self) -> None:
        while self.pos < self.end and self.data[self.pos] in WHITESPACE:
            self.pos += 1

    def at_end(self) -> bool:
        return self.pos >= self.end

    def peek(self) -> Optional[int]:
        return None if self.at_end() else self.data[self.pos]

    def consume(self, literal: bytes) -> bool:
        """Advance past ``literal`` if the input continues with it."""
        stop = self.pos + len(literal)
        if stop <= self.end and bytes(self.data[self.pos:stop]) == literal:
            self.pos = stop
            return True
        return False

    def remaining(self) -> bytes:
        return bytes(self.data[self.pos:self.end])


def parse_null(cursor: Cursor, arena: Optional[TmpArena] = None) -> JsonNull:
    cursor.skip_whitespace()
    if not cursor.consume(b"null"):
        raise UnexpectedTokenError(ErrorCode.EXPECT_NULL, cursor.offset)
    return JsonNull()


def parse_bool(cursor: Cursor, arena: Optional[TmpArena] = None) -> JsonBool:
    cursor.skip_whitespace()
    if cursor.consume(b"true"):
        return JsonBool(True)
    if cursor.consume(b"false"):
        return JsonBool(False)
    raise UnexpectedTokenError(ErrorCode.EXPECT_BOOL, cursor.offset)


def parse_number(cursor: Cursor, arena: Optional[TmpArena] = None) -> JsonNumber:
    """Scan the longest decimal float at the cursor."""
    cursor.skip_whitespace()
    match = _NUMBER_PATTERN.match(cursor.data, cursor.pos, cursor.end)
    if match is None:
        raise UnexpectedTokenError(ErrorCode.EXPECT_NUMBER, cursor.offset)

    cursor.pos = match.end()
    return JsonNumber(float(match.group().decode("ascii")))


def parse_string(cursor: Cursor, arena: Optional[TmpArena] = None) -> JsonString:
    """
    Copy the bytes between two quotes into the arena.

    A backslash protects the byte after it from ending the string. Escape
    sequences are copied as written, not decoded.
    """
    cursor.skip_whitespace()
    if not cursor.consume(b'"'):
        raise UnexpectedTokenError(ErrorCode.EXPECT_OPEN_QUOTE, cursor.offset)

    start = cursor.pos
    while True:
        byte = cursor.peek()
        if byte is None:
            raise JsonParseError(ErrorCode.EXPECT_CLOSE_QUOTE, cursor.offset)
        if byte == _QUOTE:
            break
        cursor.pos += 2 if byte == _BACKSLASH else 1
        if cursor.pos > cursor.end:
            cursor.pos = cursor.end

    with StrBuilder(arena=arena) as builder:
        builder.push_str(cursor.data[start:cursor.pos])
        cursor.pos += 1
        return JsonString(builder.build_to_arena(arena))


def parse_array(cursor: Cursor, arena: Optional[TmpArena] = None) -> JsonArray:
    cursor.skip_whitespace()
    if not cursor.consume(b"["):
        raise UnexpectedTokenError(ErrorCode.EXPECT_OPEN_BRACKET, cursor.offset)

    with DynamicArray(element_size=JSON_VALUE_SIZE) as scratch:
        while True:
            cursor.skip_whitespace()
            if cursor.consume(b"]"):
                break
            if cursor.at_end():
                raise JsonParseError(ErrorCode.EXPECT_CLOSE_BRACKET, cursor.offset)

            scratch.push(parse_value(cursor, arena))

            cursor.skip_whitespace()
            cursor.consume(b",")

        return JsonArray(drain_to_arena(scratch, arena))


def parse_object(cursor: Cursor, arena: Optional[TmpArena] = None) -> JsonObject:
    cursor.skip_whitespace()
    if not cursor.consume(b"{"):
        raise UnexpectedTokenError(ErrorCode.EXPECT_OPEN_BRACE, cursor.offset)

    with DynamicArray(element_size=JSON_PAIR_SIZE) as scratch:
        while True:
            cursor.skip_whitespace()
            if cursor.consume(b"}"):
                break
            if cursor.at_end():
                raise JsonParseError(ErrorCode.EXPECT_CLOSE_BRACE, cursor.offset)

            try:
                name = parse_string(cursor, arena)
            except UnexpectedTokenError as e:
                # A bad member name is a broken object, not a different variant.
                raise JsonParseError(e.error_code, e.position) from e

            cursor.skip_whitespace()
            if not cursor.consume(b":"):
                raise JsonParseError(ErrorCode.EXPECT_COLON, cursor.offset)

            scratch.push(JsonPair(name.value, parse_value(cursor, arena)))

            cursor.skip_whitespace()
            cursor.consume(b",")

        return JsonObject(drain_to_arena(scratch, arena))


Production = Callable[[Cursor, Optional[TmpArena]], JsonValue]

PRODUCTIONS: Tuple[Production, ...] = (
    parse_null,
    parse_bool,
    parse_number,
    parse_string,
    parse_array,
    parse_object,
)


def parse_value(cursor: Cursor, arena: Optional[TmpArena] = None) -> JsonValue:
    """
    Parse one value by trying each production in a fixed order.

    The cursor is restored before each attempt. The first production that
    does not reject the leading token decides the outcome: its value is
    returned or its error propagates, and later alternatives are not tried.

    Raises:
        JsonParseError: With ``INVALID_VARIANT`` when every production
            rejects the leading token, or the deciding production's error
        TmpOverflowError: If the arena runs out of space
    """
    start = cursor.pos
    for production in PRODUCTIONS:
        cursor.pos = start
        try:
            return production(cursor, arena)
        except UnexpectedTokenError:
            continue

    cursor.pos = start
    cursor.skip_whitespace()
    raise JsonParseError(ErrorCode.INVALID_VARIANT, cursor.offset)


class JSONParser:
    """
    JSON parser producing arena-owned values.

    Container and string contents live in the parser's arena (or the
    thread's default arena) and stay valid until that arena is reset.
    """

    def __init__(self, arena: Optional[TmpArena] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the JSON parser.

        Args:
            arena: Optional arena for parsed data; defaults to the thread's arena
            logger: Optional logger instance
        """
        self.arena = arena
        self.logger = logger or logging.getLogger(__name__)

    def parse_cursor(self, cursor: Cursor) -> JsonValue:
        """Parse one value at the cursor and leave the cursor after it."""
        return parse_value(cursor, resolve_arena(self.arena))

    def parse(self, text: StrLike) -> JsonValue:
        """
        Parse a complete JSON document.

        Args:
            text: JSON text

        Returns:
            Parsed value

        Raises:
            JsonParseError: If the text is malformed, has trailing characters,
                contains a NUL byte or nests deeper than the interpreter's
                recursion limit allows
            TmpOverflowError: If the arena runs out of space
        """
        cursor = Cursor(text)
        try:
            value = self.parse_cursor(cursor)
        except RecursionError:
            raise JsonParseError(ErrorCode.NESTING_TOO_DEEP, cursor.offset) from None

        cursor.skip_whitespace()
        if not cursor.at_end():
            raise JsonParseError(ErrorCode.TRAILING_CHARACTERS, cursor.offset)

        self.logger.debug(f"Parsed JSON {value.kind.value} from {cursor.offset} bytes")
        return value

    def try_parse(self, text: StrLike) -> ParseResult:
        """
        Parse a complete JSON document, reporting failure as a value.

        Returns:
            ParseResult with either the value or the error code and position
        """
        try:
            return ParseResult(value=self.parse(text), position=len(Str.of(text)))
        except JsonParseError as e:
            self.logger.debug(f"JSON parse failed: {e}")
            return ParseResult(value=None, error=e.error_code, message=str(e), position=e.position)
        except ToolkitError as e:
            self.logger.error(f"JSON parse aborted: {e}")
            return ParseResult(value=None, error=e.error_code, message=str(e))
