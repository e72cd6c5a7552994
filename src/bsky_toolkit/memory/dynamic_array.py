"""Growable array used for scratch output."""

import logging
from typing import Any, Generic, Iterator, List, MutableSequence, Optional, Sequence, TypeVar

from ..types import TmpOverflowError

T = TypeVar("T")


class DynamicArray(Generic[T]):
    """
    Growable array with an explicit capacity.

    Capacity starts at zero and doubles on overflow, with a minimum of
    ``MIN_CAPACITY`` slots. Bulk appends grow to the doubled capacity plus
    the number of incoming elements. ``element_size`` is the number of bytes
    an element is charged when the array is copied into an arena.

    Use as a context manager to guarantee the storage is freed on every exit
    path::

        with DynamicArray() as scratch:
            scratch.push(item)
            return drain_to_arena(scratch, arena)
    """

    MIN_CAPACITY = 16

    def __init__(self, element_size: int = 1, max_capacity: Optional[int] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize an empty array.

        Args:
            element_size: Bytes charged per element when copied to an arena
            max_capacity: Optional upper bound on capacity
            logger: Optional logger instance
        """
        if element_size <= 0:
            raise ValueError("element_size must be positive")

        self.element_size = element_size
        self.max_capacity = max_capacity
        self.logger = logger or logging.getLogger(__name__)
        self.data: Optional[MutableSequence[Any]] = None
        self.length = 0
        self.capacity = 0

    def _allocate(self, capacity: int) -> MutableSequence[Any]:
        """Create storage for ``capacity`` elements."""
        return [None] * capacity

    def _grow(self, target: int, needed: int) -> None:
        """
        Move to storage of ``target`` slots, ``needed`` of which must fit.

        Raises:
            TmpOverflowError: If the storage cannot be grown; the array is
                left unchanged
        """
        if self.max_capacity is not None:
            if needed > self.max_capacity:
                self.logger.error(f"Dynamic array overflow: {needed} elements exceed "
                                  f"max capacity {self.max_capacity}")
                raise TmpOverflowError(
                    "dynamic array overflow",
                    context={"needed": needed, "max_capacity": self.max_capacity},
                )
            target = min(target, self.max_capacity)

        try:
            storage = self._allocate(target)
        except MemoryError as e:
            self.logger.error(f"Dynamic array overflow: cannot allocate {target} elements")
            raise TmpOverflowError("dynamic array overflow", context={"needed": needed}) from e

        if self.length:
            storage[:self.length] = self.data[:self.length]

        self.data = storage
        self.capacity = target

    def push(self, element: T) -> None:
        """Copy one element onto the end of the array."""
        if self.length >= self.capacity:
            self._grow(self.capacity * 2 if self.capacity else self.MIN_CAPACITY,
                       self.length + 1)

        self.data[self.length] = element
        self.length += 1

    def append(self, elements: Sequence[T], count: Optional[int] = None) -> None:
        """
        Copy ``count`` elements onto the end of the array.

        Args:
            elements: Source elements
            count: Number of leading elements to copy, defaults to all of them
        """
        if count is None:
            count = len(elements)
        if not 0 <= count <= len(elements):
            raise ValueError(f"count {count} out of range for {len(elements)} elements")
        if count == 0:
            return

        if self.length + count > self.capacity:
            self._grow((self.capacity * 2 if self.capacity else self.MIN_CAPACITY) + count,
                       self.length + count)

        self.data[self.length:self.length + count] = elements[:count]
        self.length += count

    def clear(self) -> None:
        """Forget the storage without releasing it; ownership moved elsewhere."""
        self.data = None
        self.length = 0
        self.capacity = 0

    def free(self) -> None:
        """Release the storage. Safe to call more than once."""
        if self.data is not None:
            self.logger.debug(f"Freed dynamic array of capacity {self.capacity}")
        self.clear()

    def tolist(self) -> List[T]:
        return list(self)

    def __enter__(self) -> 'DynamicArray[T]':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.free()

    def __len__(self) -> int:
        return self.length

    def __iter__(self) -> Iterator[T]:
        for index in range(self.length):
            yield self.data[index]

    def __getitem__(self, index: int) -> T:
        if index < 0:
            index += self.length
        if not 0 <= index < self.length:
            raise IndexError("dynamic array index out of range")
        return self.data[index]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(length={self.length}, capacity={self.capacity})"
