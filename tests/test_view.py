"""Tests for views and arena promotion."""

import pytest

from bsky_toolkit.memory import DynamicArray, TmpArena, View, copy_to_arena, drain_to_arena, view_of
from bsky_toolkit.types import StaleViewError, TmpOverflowError


class TestView:
    """Tests for View class."""

    def test_len_and_nbytes(self):
        """Test length counts elements and nbytes scales by element size."""
        view = View([1, 2, 3, 4], 1, 3, element_size=8)

        assert len(view) == 2
        assert view.nbytes == 16
        assert view.tolist() == [2, 3]
        assert not view.is_arena_owned

    def test_invalid_range(self):
        """Test ranges outside the buffer are rejected."""
        with pytest.raises(ValueError):
            View(b"abc", 2, 1)
        with pytest.raises(ValueError):
            View(b"abc", 0, 4)

    def test_indexing_and_slicing(self):
        """Test indexing is relative to start and slices share the buffer."""
        view = View(b"abcdef", 1, 5)

        assert view[0] == ord("b")
        assert view[-1] == ord("e")
        sub = view[1:3]
        assert sub.buffer is view.buffer
        assert sub.tobytes() == b"cd"

        with pytest.raises(IndexError):
            view[4]

    def test_equality(self):
        """Test views compare by content."""
        assert View(b"xabc", 1, 4) == b"abc"
        assert View([1, 2, 3], 0, 2) == [1, 2]
        assert View([1, 2], 0, 2) == View((0, 1, 2), 1, 3)

    def test_tobytes_requires_byte_buffer(self):
        """Test tobytes refuses object buffers."""
        with pytest.raises(TypeError):
            View([1, 2], 0, 2).tobytes()


class TestArenaPromotion:
    """Tests for view_of, copy_to_arena and drain_to_arena."""

    def setup_method(self):
        """Set up test fixtures."""
        self.arena = TmpArena(256)

    def test_view_of_borrows_storage(self):
        """Test view_of does not copy the array contents."""
        array = DynamicArray(element_size=4)
        array.append([1, 2, 3])

        view = view_of(array)

        assert view.buffer is array.data
        assert view.tolist() == [1, 2, 3]
        assert view.nbytes == 12

    def test_view_of_empty_array(self):
        """Test an empty array yields an empty view."""
        assert len(view_of(DynamicArray())) == 0

    def test_copy_to_arena(self):
        """Test copying a view produces an arena-owned copy."""
        source = bytearray(b"scratch")
        region = copy_to_arena(View(source, 0, 7), self.arena)
        source[0:1] = b"S"

        assert region.tobytes() == b"scratch"
        assert region.arena is self.arena

    def test_drain_to_arena_frees_source(self):
        """Test draining copies the elements and frees the array."""
        array = DynamicArray(element_size=24)
        array.append(["a", "b", "c"])

        region = drain_to_arena(array, self.arena)

        assert region.tolist() == ["a", "b", "c"]
        assert array.data is None
        assert array.capacity == 0
        assert self.arena.used == 72

    def test_drain_frees_source_on_overflow(self):
        """Test the source is freed even when the arena is full."""
        array = DynamicArray(element_size=8)
        array.append(list(range(40)))

        with pytest.raises(TmpOverflowError):
            drain_to_arena(array, self.arena)

        assert array.data is None
        assert self.arena.used == 0

    def test_drained_view_goes_stale(self):
        """Test drained data cannot be read after an arena reset."""
        array = DynamicArray()
        array.push("value")
        region = drain_to_arena(array, self.arena)

        self.arena.reset()

        with pytest.raises(StaleViewError):
            region.tolist()
