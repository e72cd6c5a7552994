"""Compact JSON serializer."""

import logging
import math
from typing import Optional, Tuple, Union

from .json_value import JsonArray, JsonBool, JsonNull, JsonNumber, JsonObject, JsonString, JsonValue
from .memory.arena import TmpArena
from .strings import Str, StrBuilder

INTEGER_SNAP_TOLERANCE = 1e-4


def number_format(number: float) -> Tuple[str, Union[int, float]]:
    """
    Choose the template and argument used to render a number.

    Numbers within ``INTEGER_SNAP_TOLERANCE`` of their truncation are written
    as that integer; everything else gets exactly three fraction digits.
    This does not round-trip every float.

    Raises:
        ValueError: If the number is NaN or infinite
    """
    if not math.isfinite(number):
        raise ValueError(f"Cannot serialize non-finite number {number!r}")

    truncated = math.trunc(number)
    if abs(number - truncated) < INTEGER_SNAP_TOLERANCE:
        return "{:d}", truncated
    return "{:.3f}", number


def format_number(number: float) -> str:
    template, argument = number_format(number)
    return template.format(argument)


def push_json(builder: StrBuilder, value: JsonValue) -> None:
    """Write ``value`` into ``builder`` in compact form."""
    if isinstance(value, JsonArray):
        builder.push("[")
        for index, item in enumerate(value.items):
            if index:
                builder.push(",")
            push_json(builder, item)
        builder.push("]")
    elif isinstance(value, JsonObject):
        builder.push("{")
        for index, pair in enumerate(value.pairs):
            if index:
                builder.push(",")
            builder.push_fmt('"{}":', pair.name)
            push_json(builder, pair.value)
        builder.push("}")
    elif isinstance(value, JsonNumber):
        template, argument = number_format(value.value)
        builder.push_fmt(template, argument)
    elif isinstance(value, JsonString):
        builder.push_fmt('"{}"', value.value)
    elif isinstance(value, JsonBool):
        builder.push_fmt("true" if value.value else "false")
    elif isinstance(value, JsonNull):
        builder.push_fmt("null")
    else:
        raise TypeError(f"Not a JSON value: {type(value).__name__}")


def dumps(value: JsonValue, arena: Optional[TmpArena] = None) -> Str:
    """Serialize ``value`` into a new arena-owned string."""
    with StrBuilder(arena=arena) as builder:
        push_json(builder, value)
        return builder.build_to_arena(arena)


class JSONSerializer:
    """
    Serializer writing compact JSON.

    Output preserves array and object insertion order and inserts no
    whitespace.
    """

    def __init__(self, arena: Optional[TmpArena] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the serializer.

        Args:
            arena: Optional arena for rendered output; defaults to the thread's arena
            logger: Optional logger instance
        """
        self.arena = arena
        self.logger = logger or logging.getLogger(__name__)

    def write(self, value: JsonValue, builder: StrBuilder) -> None:
        push_json(builder, value)

    def dumps(self, value: JsonValue) -> Str:
        result = dumps(value, self.arena)
        self.logger.debug(f"Serialized JSON {value.kind.value} into {len(result)} bytes")
        return result
