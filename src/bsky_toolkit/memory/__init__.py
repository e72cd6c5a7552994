"""Memory primitives: temporary arena, dynamic array and views."""

from .view import View, view_of, copy_to_arena, drain_to_arena
from .arena import TmpArena, default_arena, reset_default_arena, resolve_arena
from .dynamic_array import DynamicArray

__all__ = [
    "View",
    "view_of",
    "copy_to_arena",
    "drain_to_arena",
    "TmpArena",
    "default_arena",
    "reset_default_arena",
    "resolve_arena",
    "DynamicArray",
]
