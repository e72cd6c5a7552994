"""Fixed-capacity bump allocator for temporary data."""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from ..config import DEFAULT_TMP_ARENA_CAPACITY, ToolkitConfig
from ..types import TmpOverflowError
from .view import View, _BYTE_BUFFERS


class TmpArena:
    """
    Bump allocator over a fixed-capacity buffer.

    Allocations are never freed one by one. ``reset()`` reclaims everything
    at once and bumps ``generation`` so regions handed out earlier become
    unreadable. The buffer itself is allocated on first use and kept across
    resets.
    """

    def __init__(self, capacity: int = DEFAULT_TMP_ARENA_CAPACITY,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the arena.

        Args:
            capacity: Size of the arena in bytes
            logger: Optional logger instance
        """
        if capacity <= 0:
            raise ValueError("capacity must be positive")

        self.capacity = capacity
        self.logger = logger or logging.getLogger(__name__)
        self.mark = 0
        self.generation = 0
        self._buffer: Optional[bytearray] = None

    @property
    def used(self) -> int:
        return self.mark

    @property
    def remaining(self) -> int:
        return self.capacity - self.mark

    def _ensure_buffer(self) -> bytearray:
        if self._buffer is None:
            self._buffer = bytearray(self.capacity)
            self.logger.debug(f"Allocated temporary arena of {self.capacity} bytes")
        return self._buffer

    def allocate(self, size: int) -> View[int]:
        """
        Allocate ``size`` bytes from the arena.

        Args:
            size: Number of bytes to allocate

        Returns:
            View over the new region

        Raises:
            TmpOverflowError: If fewer than ``size`` bytes remain; the mark
                and earlier regions are left untouched
            ValueError: If size is negative
        """
        if size < 0:
            raise ValueError("size must be non-negative")

        buffer = self._ensure_buffer()

        if self.mark + size > self.capacity:
            self.logger.error(f"Overflow of temporary arena: requested {size} bytes, "
                              f"{self.remaining} remaining")
            raise TmpOverflowError(
                "overflow of temporary arena",
                context={"requested": size, "remaining": self.remaining},
            )

        region = View(buffer, self.mark, self.mark + size, 1, self, self.generation)
        self.mark += size
        return region

    def copy(self, view: View) -> View:
        """
        Copy a view into a fresh arena region.

        Byte views land in the arena buffer itself. Views over other elements
        are charged ``len * element_size`` bytes of capacity and kept as an
        immutable snapshot that lives as long as the current generation.
        """
        view.check()
        region = self.allocate(view.nbytes)

        if view.element_size == 1 and isinstance(view.buffer, _BYTE_BUFFERS):
            region.buffer[region.start:region.end] = view.buffer[view.start:view.end]
            return region

        snapshot = tuple(view)
        return View(snapshot, 0, len(snapshot), view.element_size, self, self.generation)

    def reset(self) -> None:
        """Reclaim every allocation and invalidate outstanding regions."""
        self.logger.debug(f"Reset temporary arena after {self.mark} bytes "
                          f"(generation {self.generation})")
        self.mark = 0
        self.generation += 1

    @contextmanager
    def session(self) -> Iterator['TmpArena']:
        """Context manager that resets the arena when the block exits."""
        try:
            yield self
        finally:
            self.reset()

    def __repr__(self) -> str:
        return (f"TmpArena(capacity={self.capacity}, used={self.mark}, "
                f"generation={self.generation})")


_local = threading.local()


def default_arena() -> TmpArena:
    """
    Return the calling thread's default arena, creating it on first use.

    The capacity comes from ``ToolkitConfig.from_env()``.
    """
    arena = getattr(_local, "arena", None)
    if arena is None:
        arena = TmpArena(ToolkitConfig.from_env().arena_capacity)
        _local.arena = arena
    return arena


def reset_default_arena() -> None:
    """Reset the calling thread's default arena."""
    default_arena().reset()


def resolve_arena(arena: Optional[TmpArena] = None) -> TmpArena:
    """Return ``arena`` or fall back to the thread's default arena."""
    return arena if arena is not None else default_arena()
