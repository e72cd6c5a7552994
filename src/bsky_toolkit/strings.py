"""Null-terminated strings and the builder that produces them."""

import logging
from typing import Any, MutableSequence, Optional, Sequence, Union

from .memory.arena import TmpArena, resolve_arena
from .memory.dynamic_array import DynamicArray
from .memory.view import View

NUL = 0
WHITESPACE = b" \t\n"

# Text accepted wherever a Str is expected.
StrLike = Union["Str", str, bytes, bytearray]


class Str:
    """
    Immutable string whose ``end`` index points exactly at a NUL byte.

    The bytes are borrowed from a builder or owned by an arena region; a
    Str never copies on slicing operations such as ``trim_left``.
    """

    __slots__ = ("data", "start", "end", "owner")

    def __init__(self, data: Sequence[int], start: int = 0, end: Optional[int] = None,
                 owner: Optional[View] = None):
        if end is None:
            end = len(data) - 1
        if not 0 <= start <= end < len(data):
            raise ValueError(f"Invalid string range [{start}, {end}] over {len(data)} bytes")
        if data[end] != NUL:
            raise ValueError("Str must end at a NUL terminator")

        self.data = data
        self.start = start
        self.end = end
        self.owner = owner

    @classmethod
    def of(cls, text: StrLike) -> 'Str':
        """Build a terminated Str from text or bytes."""
        if isinstance(text, Str):
            return text
        raw = text.encode("utf-8", "surrogateescape") if isinstance(text, str) else bytes(text)
        if b"\x00" in raw:
            raise ValueError("Str cannot contain embedded NUL bytes")
        return cls(raw + b"\x00", 0, len(raw))

    def _check(self) -> None:
        if self.owner is not None:
            self.owner.check()

    def as_bytes(self) -> bytes:
        self._check()
        return bytes(self.data[self.start:self.end])

    def __bytes__(self) -> bytes:
        return self.as_bytes()

    def __str__(self) -> str:
        return self.as_bytes().decode("utf-8", "surrogateescape")

    def __repr__(self) -> str:
        return f"Str({str(self)!r})"

    def __len__(self) -> int:
        return self.end - self.start

    def __getitem__(self, index: int) -> int:
        self._check()
        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            raise IndexError("string index out of range")
        return self.data[self.start + index]

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, (Str, str, bytes, bytearray)):
            return self.as_bytes() == _bytes_of(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.as_bytes())

    def view(self) -> View[int]:
        """View of the string including its terminator."""
        if self.owner is not None:
            return View(self.data, self.start, self.end + 1, 1,
                        self.owner.arena, self.owner.generation)
        return View(self.data, self.start, self.end + 1)

    def trim_left(self) -> 'Str':
        """Skip leading spaces, tabs and newlines without copying."""
        self._check()
        start = self.start
        while start != self.end and self.data[start] in WHITESPACE:
            start += 1
        return Str(self.data, start, self.end, self.owner)

    def starts_with(self, prefix: StrLike) -> bool:
        return self.as_bytes().startswith(_bytes_of(prefix))

    def ends_with(self, suffix: StrLike) -> bool:
        return self.as_bytes().endswith(_bytes_of(suffix))

    def compare(self, other: StrLike) -> int:
        return compare(self, other)


def _bytes_of(value: StrLike) -> bytes:
    if isinstance(value, Str):
        return value.as_bytes()
    if isinstance(value, str):
        return value.encode("utf-8", "surrogateescape")
    return bytes(value)


def compare(first: StrLike, second: StrLike) -> int:
    """
    Compare two strings byte by byte.

    Returns:
        0 if the strings are equal, ``1 + i`` if ``first`` is greater and
        ``-1 - i`` if ``second`` is greater, where ``i`` is the index of the
        first differing byte. When one string is a prefix of the other, ``i``
        is the length of the shorter one.
    """
    a, b = _bytes_of(first), _bytes_of(second)

    for index, (x, y) in enumerate(zip(a, b)):
        if x > y:
            return 1 + index
        if x < y:
            return -1 - index

    if len(a) > len(b):
        return 1 + len(b)
    if len(b) > len(a):
        return -1 - len(a)
    return 0


class StrBuilder(DynamicArray[int]):
    """
    Append-only byte buffer that keeps its contents NUL-terminated.

    Once the builder holds any byte, the last live byte is the terminator
    and no earlier byte is NUL.
    """

    def __init__(self, max_capacity: Optional[int] = None, arena: Optional[TmpArena] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize an empty builder.

        Args:
            max_capacity: Optional upper bound on the buffer size in bytes
            arena: Arena used by push_fmt and build_to_arena
            logger: Optional logger instance
        """
        super().__init__(element_size=1, max_capacity=max_capacity, logger=logger)
        self.arena = arena

    def _allocate(self, capacity: int) -> MutableSequence[int]:
        return bytearray(capacity)

    @property
    def text_length(self) -> int:
        """Number of bytes before the terminator."""
        return self.length - 1 if self.length else 0

    def push(self, char: Union[str, bytes, int]) -> None:
        """Append one character and re-terminate."""
        byte = _byte_of(char)
        if self.length == 0:
            self.append(bytes((byte, NUL)))
            return

        if self.length >= self.capacity:
            self._grow(self.capacity * 2, self.length + 1)
        self.data[self.length - 1] = byte
        super().push(NUL)

    def push_str(self, string: StrLike) -> None:
        """Append the bytes of another string and restore the terminator."""
        raw = _bytes_of(string)
        if b"\x00" in raw:
            raise ValueError("Cannot push embedded NUL bytes")

        if self.length == 0:
            self.append(raw + b"\x00")
            return

        # Drop the terminator only once the new bytes are sure to fit.
        if self.length + len(raw) > self.capacity:
            self._grow((self.capacity * 2 if self.capacity else self.MIN_CAPACITY) + len(raw),
                       self.length + len(raw))
        self.length -= 1
        self.append(raw)
        super().push(NUL)

    def push_fmt(self, fmt: str, *args: Any, **kwargs: Any) -> None:
        """
        Append a ``str.format`` rendering of ``fmt``.

        The text is rendered into the arena first and then appended, so the
        arena must have room for the rendered bytes plus a terminator.
        """
        rendered = fmt.format(*args, **kwargs).encode("utf-8", "surrogateescape")
        region = resolve_arena(self.arena).allocate(len(rendered) + 1)
        region.buffer[region.start:region.end] = rendered + b"\x00"
        self.push_str(Str(region.buffer, region.start, region.end - 1, owner=region))

    def build(self) -> Str:
        """
        Finalize a Str that borrows the builder's buffer.

        The builder must be cleared before it is reused.
        """
        if self.length == 0:
            self.append(b"\x00")
        return Str(self.data, 0, self.length - 1)

    def build_to_arena(self, arena: Optional[TmpArena] = None) -> Str:
        """Copy the built string into the arena and free the builder."""
        try:
            region = resolve_arena(arena if arena is not None else self.arena).copy(
                self.build().view())
        finally:
            self.free()
        return Str(region.buffer, region.start, region.end - 1, owner=region)

    def __str__(self) -> str:
        if self.data is None:
            return ""
        return bytes(self.data[:self.text_length]).decode("utf-8", "surrogateescape")


def _byte_of(char: Union[str, bytes, int]) -> int:
    if isinstance(char, int):
        byte = char
    else:
        raw = char.encode("utf-8") if isinstance(char, str) else bytes(char)
        if len(raw) != 1:
            raise ValueError(f"Expected a single byte, got {char!r}")
        byte = raw[0]

    if not 0 < byte <= 0xFF:
        raise ValueError(f"Cannot push byte {byte!r}")
    return byte
