"""Pytest configuration for docknobs tests."""

import sys
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from docknobs.backends.memory import MemoryDocumentStore  # noqa: E402

LOCATION = "http://localhost:5984/testdb"


@pytest.fixture
def location():
    return LOCATION


@pytest.fixture
def store():
    """An empty in-memory store."""
    return MemoryDocumentStore()


@pytest.fixture
def populated_store(store):
    """Store holding a design document between two plain documents."""
    store.load(LOCATION, [
        {"_id": "a", "value": 1},
        {"_id": "_design/x", "views": {"by_value": {"map": "function (doc) {}"}}},
        {"_id": "b", "value": 2},
    ])
    return store


class RecordingStore:
    """Wraps a store and records every fetch and write it sees."""

    def __init__(self, inner):
        self.inner = inner
        self.fetches = []
        self.writes = []

    def fetch_page(self, location, after_id, limit):
        self.fetches.append((after_id, limit))
        return self.inner.fetch_page(location, after_id, limit)

    def put(self, location, document):
        self.writes.append(document["_id"])
        return self.inner.put(location, document)


@pytest.fixture
def recording_store(populated_store):
    return RecordingStore(populated_store)


@pytest.fixture
def wrap_recording():
    """Factory wrapping any store in a RecordingStore."""
    return RecordingStore
