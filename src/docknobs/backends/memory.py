"""In-memory document store implementation."""

from __future__ import annotations

import bisect
import copy
import logging
import threading
import uuid
from typing import Any

from ..documents import ID_FIELD, REV_FIELD, Document
from ..exceptions import WriteConflict, WriteError
from ..store import Page

logger = logging.getLogger(__name__)


class MemoryDocumentStore:
    """Thread-safe in-memory document store.

    Collections are keyed by location and created on first write. Revisions
    follow the ``{generation}-{hex}`` shape and every update must name the
    current revision, as a remote store would require.
    """

    def __init__(self, config: dict[str, Any] | None = None):
        self.config = config or {}
        self._collections: dict[str, dict[str, Document]] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: dict) -> MemoryDocumentStore:
        """Create from config dictionary."""
        return cls(config)

    def fetch_page(self, location: str, after_id: str | None, limit: int) -> Page:
        with self._lock:
            collection = self._collections.get(location, {})
            ids = sorted(collection)
            start = 0 if after_id is None else bisect.bisect_right(ids, after_id)
            documents = [copy.deepcopy(collection[i]) for i in ids[start:start + limit]]
            return Page(documents=documents, total_count=len(collection))

    def put(self, location: str, document: Document) -> str:
        doc_id = document.get(ID_FIELD)
        if not doc_id:
            raise WriteError("<missing>", "Document has no id")

        with self._lock:
            collection = self._collections.setdefault(location, {})
            existing = collection.get(doc_id)
            current_rev = existing.get(REV_FIELD) if existing else None
            if document.get(REV_FIELD) != current_rev:
                raise WriteConflict(doc_id)

            generation = int(current_rev.split("-", 1)[0]) if current_rev else 0
            new_rev = f"{generation + 1}-{uuid.uuid4().hex}"
            stored = copy.deepcopy(document)
            stored[REV_FIELD] = new_rev
            collection[doc_id] = stored
            logger.debug(f"Stored {doc_id} at {new_rev} in {location}")
            return new_rev

    def get(self, location: str, doc_id: str) -> Document | None:
        """Read a copy of a single document, or None if it doesn't exist."""
        with self._lock:
            document = self._collections.get(location, {}).get(doc_id)
            return copy.deepcopy(document) if document is not None else None

    def count(self, location: str) -> int:
        """Number of documents stored at a location."""
        with self._lock:
            return len(self._collections.get(location, {}))

    def load(self, location: str, documents: list[Document]) -> list[str]:
        """Insert new documents, returning their revisions."""
        return [self.put(location, document) for document in documents]
