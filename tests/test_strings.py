"""Tests for strings and the string builder."""

import pytest

from bsky_toolkit.memory import TmpArena
from bsky_toolkit.strings import Str, StrBuilder, compare
from bsky_toolkit.types import StaleViewError, TmpOverflowError


def assert_terminated(builder: StrBuilder) -> None:
    """The last live byte is NUL and no earlier byte is."""
    assert builder.data[builder.length - 1] == 0
    assert 0 not in bytes(builder.data[:builder.length - 1])


class TestStr:
    """Tests for Str class."""

    def test_of_text(self):
        """Test building a Str from text."""
        s = Str.of("abc")

        assert len(s) == 3
        assert s.data[s.end] == 0
        assert str(s) == "abc"
        assert bytes(s) == b"abc"

    def test_of_rejects_embedded_nul(self):
        """Test text with a NUL byte is rejected."""
        with pytest.raises(ValueError, match="NUL"):
            Str.of("a\x00b")

    def test_requires_terminator(self):
        """Test the end index must point at a NUL byte."""
        with pytest.raises(ValueError, match="terminator"):
            Str(b"abc", 0, 2)

    def test_view_includes_terminator(self):
        """Test the view of a string covers the terminator too."""
        view = Str.of("hi").view()

        assert view.tobytes() == b"hi\x00"

    def test_trim_left_shares_data(self):
        """Test left trimming skips whitespace without copying."""
        s = Str.of(" \t\nhi ")
        trimmed = s.trim_left()

        assert trimmed == "hi "
        assert trimmed.data is s.data
        assert Str.of("   ").trim_left() == ""

    def test_starts_and_ends_with(self):
        """Test prefix and suffix checks."""
        s = Str.of("app.bsky.feed.post")

        assert s.starts_with("app.bsky")
        assert not s.starts_with("com.")
        assert s.ends_with(Str.of(".post"))
        assert not s.ends_with("app.bsky.feed.post.extra")

    def test_equality(self):
        """Test Str compares equal to Str, str and bytes with the same bytes."""
        assert Str.of("did") == Str.of("did")
        assert Str.of("did") == "did"
        assert Str.of("did") == b"did"
        assert Str.of("did") != "plc"

    @pytest.mark.parametrize("first, second, expected", [
        ("abc", "abc", 0),
        ("", "", 0),
        ("abd", "abc", 3),
        ("abc", "abd", -3),
        ("b", "a", 1),
        ("a", "b", -1),
        ("abc", "ab", 3),
        ("ab", "abc", -3),
        ("", "a", -1),
    ])
    def test_compare(self, first, second, expected):
        """Test compare returns the signed first differing index plus one."""
        assert compare(first, second) == expected
        assert Str.of(first).compare(second) == expected


class TestStrBuilder:
    """Tests for StrBuilder class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.arena = TmpArena(1024)
        self.builder = StrBuilder(arena=self.arena)

    def test_push_terminates(self):
        """Test every push keeps a trailing terminator."""
        self.builder.push("a")
        assert self.builder.length == 2
        assert_terminated(self.builder)

        self.builder.push(ord("b"))
        assert str(self.builder) == "ab"
        assert_terminated(self.builder)

    def test_push_rejects_nul_and_multibyte(self):
        """Test push accepts exactly one non-NUL byte."""
        with pytest.raises(ValueError):
            self.builder.push("\x00")
        with pytest.raises(ValueError):
            self.builder.push("ab")

        assert self.builder.length == 0

    def test_push_str(self):
        """Test appending strings trims and restores the terminator."""
        self.builder.push_str("app")
        self.builder.push_str(Str.of(".bsky"))
        self.builder.push_str(b"")

        assert str(self.builder) == "app.bsky"
        assert self.builder.text_length == 8
        assert_terminated(self.builder)

    def test_push_str_rejects_nul(self):
        """Test embedded NUL bytes cannot enter the builder."""
        self.builder.push_str("ok")

        with pytest.raises(ValueError):
            self.builder.push_str(b"a\x00b")

        assert str(self.builder) == "ok"
        assert_terminated(self.builder)

    def test_mixed_pushes_keep_invariant(self):
        """Test the terminator invariant across growth and mixed pushes."""
        for i in range(50):
            self.builder.push("x")
            self.builder.push_str(str(i))
            assert_terminated(self.builder)

        assert self.builder.capacity >= self.builder.length

    def test_push_fmt_renders_through_arena(self):
        """Test formatted text is measured in the arena and appended."""
        self.builder.push_fmt("{}-{:03d}", "post", 7)

        assert str(self.builder) == "post-007"
        assert self.arena.used == len("post-007") + 1
        assert_terminated(self.builder)

    def test_push_fmt_overflow(self):
        """Test arena exhaustion during push_fmt leaves the builder untouched."""
        builder = StrBuilder(arena=TmpArena(4))

        with pytest.raises(TmpOverflowError):
            builder.push_fmt("{}", "hello")

        assert builder.length == 0

    def test_build_borrows_buffer(self):
        """Test build returns a Str over the builder's buffer."""
        self.builder.push_str("feed")
        s = self.builder.build()

        assert s.data is self.builder.data
        assert s.data[s.end] == 0
        assert s == "feed"

    def test_build_empty(self):
        """Test building an empty builder yields an empty Str."""
        s = self.builder.build()

        assert len(s) == 0
        assert s.data[s.end] == 0

    def test_build_to_arena(self):
        """Test build_to_arena copies into the arena and frees the builder."""
        self.builder.push_str("did:plc:abc")
        s = self.builder.build_to_arena()

        assert s == "did:plc:abc"
        assert s.owner.arena is self.arena
        assert self.builder.data is None
        assert self.arena.used == 12

    def test_arena_string_goes_stale(self):
        """Test arena-owned strings cannot be read after a reset."""
        self.builder.push_str("temp")
        s = self.builder.build_to_arena()

        self.arena.reset()

        with pytest.raises(StaleViewError):
            str(s)

    def test_max_capacity(self):
        """Test builders respect their maximum capacity."""
        builder = StrBuilder(max_capacity=4, arena=self.arena)
        builder.push_str("abc")

        with pytest.raises(TmpOverflowError):
            builder.push("d")

        assert str(builder) == "abc"
        assert_terminated(builder)
