"""Integration tests for parsing and serialization together."""

import pytest

from bsky_toolkit import JSONParser, JSONSerializer, from_python
from bsky_toolkit.error_handler import ErrorHandler
from bsky_toolkit.json_value import JsonNumber
from bsky_toolkit.memory import TmpArena
from bsky_toolkit.types import TmpOverflowError


class TestRoundTrip:
    """Round-trip tests for the complete JSON pipeline."""

    def setup_method(self):
        """Set up test fixtures."""
        self.arena = TmpArena(64 * 1024)
        self.parser = JSONParser(self.arena)
        self.serializer = JSONSerializer(self.arena)

    @pytest.mark.parametrize("data", [
        None,
        True,
        [1, -2, 3.5, "x"],
        {"did": "did:plc:abc", "followers": 12, "tags": [], "meta": {}},
        {"thread": [{"depth": 0, "post": {"text": "hi", "score": 0.125}}]},
    ])
    def test_parse_of_dumps_is_identity(self, data):
        """Test values with exactly representable numbers survive a round trip."""
        value = from_python(data)

        assert self.parser.parse(self.serializer.dumps(value)) == value

    def test_round_trip_rounds_to_three_digits(self):
        """Test fractional numbers come back with three fraction digits."""
        value = from_python([3.0, 3.14159])

        text = self.serializer.dumps(value)
        parsed = self.parser.parse(text)

        assert str(text) == "[3,3.142]"
        assert list(parsed.items) == [JsonNumber(3.0), JsonNumber(3.142)]

    def test_compacts_formatted_document(self, sample_post_json, sample_post_compact):
        """Test a formatted document re-serializes in compact form."""
        value = self.parser.parse(sample_post_json)

        assert str(self.serializer.dumps(value)) == sample_post_compact

    def test_compact_text_is_a_fixed_point(self, sample_post_compact):
        """Test serializing a parsed compact document reproduces it."""
        value = self.parser.parse(sample_post_compact)

        assert str(self.serializer.dumps(value)) == sample_post_compact

    def test_to_python_after_parse(self):
        """Test parsed values convert to Python data."""
        value = self.parser.parse('{"a": [1, 2.5], "b": {"c": null}}')

        assert value.to_python() == {"a": [1.0, 2.5], "b": {"c": None}}

    def test_reset_and_retry_after_overflow(self):
        """Test recovering from exhaustion by resetting and retrying."""
        arena = TmpArena(128)
        parser = JSONParser(arena)
        arena.allocate(120)
        document = '{"text":"' + "a" * 40 + '"}'

        with pytest.raises(TmpOverflowError) as exc_info:
            parser.parse(document)

        response = ErrorHandler(arena).handle_error(exc_info.value)
        assert response.can_recover

        arena.reset()
        value = parser.parse(document)

        assert len(value.get("text").value) == 40
