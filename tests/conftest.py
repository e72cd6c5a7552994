"""Pytest configuration and fixtures."""

import pytest

from bsky_toolkit.memory import TmpArena


@pytest.fixture
def arena():
    """Arena large enough for every test document."""
    return TmpArena(64 * 1024)


@pytest.fixture
def small_arena():
    """Arena that overflows quickly."""
    return TmpArena(32)


@pytest.fixture
def sample_post_json():
    """Sample feed post JSON for testing."""
    return '''
    {
        "uri": "at://did:plc:abc123/app.bsky.feed.post/3k",
        "likeCount": 42,
        "langs": ["en", "ja"],
        "reply": null,
        "embed": {
            "type": "images",
            "alt": "a \\"quoted\\" cat"
        },
        "pinned": false
    }
    '''


@pytest.fixture
def sample_post_compact():
    """Compact serialization of sample_post_json."""
    return ('{"uri":"at://did:plc:abc123/app.bsky.feed.post/3k","likeCount":42,'
            '"langs":["en","ja"],"reply":null,'
            '"embed":{"type":"images","alt":"a \\"quoted\\" cat"},"pinned":false}')
