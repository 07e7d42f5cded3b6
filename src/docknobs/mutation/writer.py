"""Single-document writer feeding mutated documents back into the store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..documents import REV_FIELD, document_id
from ..exceptions import WriteError

if TYPE_CHECKING:
    from collections.abc import Callable
    from ..documents import Document
    from ..store import DocumentStore

logger = logging.getLogger(__name__)


class DocumentWriter:
    """Persists documents one at a time at their current revision.

    Writes are never retried. A stale revision surfaces as
    :class:`WriteConflict`; any other failure is raised as
    :class:`WriteError` naming the document.

    Args:
        store: Store to write to
        location: Collection address
        on_write: Called with each document after its write succeeded
    """

    def __init__(
        self,
        store: DocumentStore,
        location: str,
        on_write: Callable[[Document], None] | None = None,
    ) -> None:
        self.store = store
        self.location = location
        self.on_write = on_write

    def write(self, document: Document) -> str:
        """Write one document and return its new revision."""
        doc_id = document_id(document)
        try:
            rev = self.store.put(self.location, document)
        except WriteError:
            raise
        except Exception as e:
            raise WriteError(doc_id, str(e)) from e

        document[REV_FIELD] = rev
        logger.debug(f"Wrote {doc_id} at {rev}")
        if self.on_write is not None:
            self.on_write(document)
        return rev
