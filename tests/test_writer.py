"""Tests for the document writer."""

from unittest.mock import Mock

import pytest

from docknobs.exceptions import WriteConflict, WriteError
from docknobs.mutation import DocumentWriter


class TestDocumentWriter:

    def test_write_updates_revision_and_notifies(self, populated_store, location):
        written = []
        writer = DocumentWriter(populated_store, location, on_write=written.append)
        doc = populated_store.get(location, "a")
        doc["tag"] = "done"

        rev = writer.write(doc)

        assert rev.startswith("2-")
        assert doc["_rev"] == rev
        assert written == [doc]
        assert populated_store.get(location, "a")["tag"] == "done"

    def test_conflict_propagates_unchanged(self, populated_store, location):
        written = []
        writer = DocumentWriter(populated_store, location, on_write=written.append)
        stale = populated_store.get(location, "a")
        populated_store.put(location, populated_store.get(location, "a"))

        with pytest.raises(WriteConflict) as exc_info:
            writer.write(stale)
        assert exc_info.value.document_id == "a"
        assert written == []

    def test_other_failures_are_wrapped(self, location):
        store = Mock()
        store.put.side_effect = OSError("disk full")
        writer = DocumentWriter(store, location)

        with pytest.raises(WriteError, match="Failed to write a: disk full") as exc_info:
            writer.write({"_id": "a", "_rev": "1-x"})
        assert isinstance(exc_info.value.__cause__, OSError)
        assert not isinstance(exc_info.value, WriteConflict)

    def test_writes_go_to_location(self, location):
        store = Mock()
        store.put.return_value = "2-y"
        doc = {"_id": "a", "_rev": "1-x"}

        DocumentWriter(store, location).write(doc)

        store.put.assert_called_once_with(location, doc)
