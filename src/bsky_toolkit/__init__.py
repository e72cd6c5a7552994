"""
bsky toolkit - memory, string and JSON primitives for a bsky API client.

Provides a temporary arena, growable arrays, views, null-terminated strings
and a JSON value model with a recursive-descent parser and compact serializer.
"""

__version__ = "0.1.0"

from .types import ErrorCode, ErrorFamily, JsonKind, ToolkitError, TmpOverflowError, StaleViewError, JsonParseError
from .config import ToolkitConfig
from .memory import TmpArena, DynamicArray, View, default_arena, reset_default_arena
from .strings import Str, StrBuilder, compare
from .json_value import JsonArray, JsonObject, JsonNumber, JsonString, JsonBool, JsonNull, JsonPair, from_python
from .parser import JSONParser, Cursor, parse_value
from .serializer import JSONSerializer, dumps

__all__ = [
    "ErrorCode",
    "ErrorFamily",
    "JsonKind",
    "ToolkitError",
    "TmpOverflowError",
    "StaleViewError",
    "JsonParseError",
    "ToolkitConfig",
    "TmpArena",
    "DynamicArray",
    "View",
    "default_arena",
    "reset_default_arena",
    "Str",
    "StrBuilder",
    "compare",
    "JsonArray",
    "JsonObject",
    "JsonNumber",
    "JsonString",
    "JsonBool",
    "JsonNull",
    "JsonPair",
    "from_python",
    "JSONParser",
    "Cursor",
    "parse_value",
    "JSONSerializer",
    "dumps",
]
