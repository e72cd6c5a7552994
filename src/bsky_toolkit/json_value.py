"""JSON value model: a closed set of six variants."""

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from .strings import Str, StrLike
from .types import JsonKind

# Bytes charged per element when value and pair sequences are copied into an arena.
JSON_VALUE_SIZE = 24
JSON_PAIR_SIZE = 32

_ESCAPED = re.compile(r'\\(["\\])')


@dataclass(frozen=True, eq=False)
class JsonArray:
    """Ordered sequence of values."""
    items: Sequence["JsonValue"]

    @property
    def kind(self) -> JsonKind:
        return JsonKind.ARRAY

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> "JsonValue":
        return self.items[index]

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, JsonArray):
            return NotImplemented
        return list(self.items) == list(other.items)

    def to_python(self) -> List[Any]:
        return [item.to_python() for item in self.items]


@dataclass(frozen=True, eq=False)
class JsonPair:
    """Named member of an object."""
    name: Str
    value: "JsonValue"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, JsonPair):
            return NotImplemented
        return self.name == other.name and self.value == other.value


@dataclass(frozen=True, eq=False)
class JsonObject:
    """
    Ordered sequence of name/value pairs.

    Names are expected to be unique but this is not enforced; lookups return
    the first match and serialization keeps insertion order.
    """
    pairs: Sequence[JsonPair]

    @property
    def kind(self) -> JsonKind:
        return JsonKind.OBJECT

    def __len__(self) -> int:
        return len(self.pairs)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, JsonObject):
            return NotImplemented
        return list(self.pairs) == list(other.pairs)

    def get(self, name: StrLike, default: Optional["JsonValue"] = None) -> Optional["JsonValue"]:
        for pair in self.pairs:
            if pair.name == name:
                return pair.value
        return default

    def names(self) -> List[str]:
        return [str(pair.name) for pair in self.pairs]

    def to_python(self) -> Dict[str, Any]:
        return {unescape(str(pair.name)): pair.value.to_python() for pair in self.pairs}


@dataclass(frozen=True)
class JsonNumber:
    value: float

    @property
    def kind(self) -> JsonKind:
        return JsonKind.NUMBER

    def to_python(self) -> float:
        return self.value


@dataclass(frozen=True, eq=False)
class JsonString:
    """
    String holding raw JSON text; escape sequences are kept verbatim.

    ``of`` takes text that is already JSON-escaped. ``from_text`` takes plain
    text and escapes backslashes and quotes, which ``to_python`` undoes.
    """
    value: Str

    @classmethod
    def of(cls, text: StrLike) -> 'JsonString':
        return cls(Str.of(text))

    @classmethod
    def from_text(cls, text: str) -> 'JsonString':
        return cls(Str.of(escape(text)))

    @property
    def kind(self) -> JsonKind:
        return JsonKind.STRING

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, JsonString):
            return NotImplemented
        return self.value == other.value

    def to_python(self) -> str:
        return unescape(str(self.value))


@dataclass(frozen=True)
class JsonBool:
    value: bool

    @property
    def kind(self) -> JsonKind:
        return JsonKind.BOOLEAN

    def to_python(self) -> bool:
        return self.value


@dataclass(frozen=True)
class JsonNull:

    @property
    def kind(self) -> JsonKind:
        return JsonKind.NULL

    def to_python(self) -> None:
        return None


JsonValue = Union[JsonArray, JsonObject, JsonNumber, JsonString, JsonBool, JsonNull]


def escape(text: str) -> str:
    """Escape backslashes and double quotes for use inside a JSON string."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def unescape(text: str) -> str:
    """Undo ``escape``; other escape sequences are left as written."""
    return _ESCAPED.sub(r"\1", text)


def from_python(data: Any) -> JsonValue:
    """
    Build a JSON value from plain Python data.

    Args:
        data: None, bool, int, float, str, list, tuple or dict with string keys

    Returns:
        Equivalent JsonValue; strings and names are escaped with ``escape``

    Raises:
        TypeError: If data holds an unsupported type
        ValueError: If a number is not finite
    """
    if data is None:
        return JsonNull()
    if isinstance(data, bool):
        return JsonBool(data)
    if isinstance(data, (int, float)):
        if not math.isfinite(data):
            raise ValueError(f"JSON numbers must be finite, got {data!r}")
        return JsonNumber(float(data))
    if isinstance(data, str):
        return JsonString.from_text(data)
    if isinstance(data, (list, tuple)):
        return JsonArray([from_python(item) for item in data])
    if isinstance(data, dict):
        pairs = []
        for key, value in data.items():
            if not isinstance(key, str):
                raise TypeError(f"Object names must be strings, got {type(key).__name__}")
            pairs.append(JsonPair(Str.of(escape(key)), from_python(value)))
        return JsonObject(pairs)

    raise TypeError(f"Unsupported type for JSON conversion: {type(data).__name__}")
