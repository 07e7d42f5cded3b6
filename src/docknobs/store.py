"""Document store interface consumed by the mutation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from .documents import Document


@dataclass
class Page:
    """One page of a paginated collection listing.

    Attributes:
        documents: Documents with full bodies, ordered by id
        total_count: Number of documents the store reports for the collection
    """

    documents: list[Document] = field(default_factory=list)
    total_count: int = 0

    def __len__(self) -> int:
        return len(self.documents)

    @property
    def is_empty(self) -> bool:
        return not self.documents


@runtime_checkable
class DocumentStore(Protocol):
    """Minimal document store capability.

    Implementations must list documents in a stable total order over their
    ids and must reject writes that target a stale revision.
    """

    def fetch_page(self, location: str, after_id: str | None, limit: int) -> Page:
        """List up to ``limit`` documents with ids strictly after ``after_id``.

        A page must hold exactly ``limit`` documents unless it reaches the end
        of the collection: callers treat a short page as the final one.

        Args:
            location: Collection address
            after_id: Id of the last document already seen, ``None`` to start
                at the beginning of the collection
            limit: Maximum number of documents to return

        Returns:
            The page of documents and the collection's reported size
        """
        ...

    def put(self, location: str, document: Document) -> str:
        """Create or update a document at its current revision.

        Returns:
            The new revision token

        Raises:
            WriteConflict: If the document's revision is stale
            WriteError: If the store rejects the write for any other reason
        """
        ...
