"""Half-open windows over arrays and arena memory."""

import logging
from typing import TYPE_CHECKING, Any, Generic, Iterator, List, Optional, Sequence, TypeVar

from ..types import StaleViewError

if TYPE_CHECKING:
    from .arena import TmpArena
    from .dynamic_array import DynamicArray

T = TypeVar("T")

_BYTE_BUFFERS = (bytes, bytearray, memoryview)

logger = logging.getLogger(__name__)


class View(Generic[T]):
    """
    Half-open range ``[start, end)`` over a buffer the view does not own.

    Views cut from an arena remember the arena generation; once the arena is
    reset they refuse to be read and raise StaleViewError instead of handing
    back bytes that a later allocation may have overwritten.
    """

    __slots__ = ("buffer", "start", "end", "element_size", "arena", "generation")

    def __init__(self, buffer: Sequence[T], start: int, end: int,
                 element_size: int = 1, arena: Optional["TmpArena"] = None,
                 generation: int = 0):
        if not 0 <= start <= end <= len(buffer):
            raise ValueError(f"Invalid view range [{start}, {end}) over {len(buffer)} elements")
        if element_size <= 0:
            raise ValueError("element_size must be positive")

        self.buffer = buffer
        self.start = start
        self.end = end
        self.element_size = element_size
        self.arena = arena
        self.generation = generation

    @property
    def is_arena_owned(self) -> bool:
        return self.arena is not None

    @property
    def nbytes(self) -> int:
        """Size of the viewed range in bytes."""
        return (self.end - self.start) * self.element_size

    def check(self) -> None:
        """
        Ensure the view still refers to live memory.

        Raises:
            StaleViewError: If the owning arena was reset after the view was cut
        """
        if self.arena is not None and self.arena.generation != self.generation:
            raise StaleViewError(
                "View outlived its arena generation",
                context={"view_generation": self.generation,
                         "arena_generation": self.arena.generation},
            )

    def __len__(self) -> int:
        return self.end - self.start

    def __iter__(self) -> Iterator[T]:
        self.check()
        for index in range(self.start, self.end):
            yield self.buffer[index]

    def __getitem__(self, index):
        self.check()
        if isinstance(index, slice):
            start, stop, step = index.indices(len(self))
            if step != 1:
                return [self.buffer[self.start + i] for i in range(start, stop, step)]
            return View(self.buffer, self.start + start, self.start + max(start, stop),
                        self.element_size, self.arena, self.generation)

        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            raise IndexError("view index out of range")
        return self.buffer[self.start + index]

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, View):
            return len(self) == len(other) and all(a == b for a, b in zip(self, other))
        if isinstance(other, (list, tuple)):
            return self.tolist() == list(other)
        if isinstance(other, _BYTE_BUFFERS):
            return self.tobytes() == bytes(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        owner = "arena" if self.is_arena_owned else "borrowed"
        return f"View([{self.start}, {self.end}), element_size={self.element_size}, {owner})"

    def tobytes(self) -> bytes:
        """Copy the viewed bytes out of a byte buffer."""
        self.check()
        if not isinstance(self.buffer, _BYTE_BUFFERS):
            raise TypeError("tobytes() requires a byte buffer")
        return bytes(self.buffer[self.start:self.end])

    def tolist(self) -> List[T]:
        return list(self)


def view_of(array: "DynamicArray[T]") -> View[T]:
    """
    View the live contents of a dynamic array without copying.

    The view borrows the array's storage and is only meaningful until the
    array grows, is cleared or is freed.
    """
    if array.data is None:
        return View(b"", 0, 0, array.element_size)
    return View(array.data, 0, array.length, array.element_size)


def copy_to_arena(view: View[T], arena: Optional["TmpArena"] = None) -> View[T]:
    """
    Copy a view into the arena.

    Args:
        view: View to copy
        arena: Arena to allocate from, defaults to the thread's arena

    Returns:
        Arena-owned view over the copied elements

    Raises:
        TmpOverflowError: If the arena has no room for the copy
    """
    from .arena import resolve_arena

    return resolve_arena(arena).copy(view)


def drain_to_arena(array: "DynamicArray[T]", arena: Optional["TmpArena"] = None) -> View[T]:
    """
    Promote scratch output to arena-owned data.

    Copies the array's contents into the arena, then frees the array. The
    array is freed even when the copy fails.
    """
    try:
        region = copy_to_arena(view_of(array), arena)
    finally:
        array.free()

    logger.debug(f"Drained {len(region)} elements ({region.nbytes} bytes) into arena")
    return region
