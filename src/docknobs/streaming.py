"""Pull-based streaming of documents out of a store."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .documents import document_id
from .exceptions import ConcurrencyError, FetchError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from .documents import Document
    from .store import DocumentStore, Page

logger = logging.getLogger(__name__)


@dataclass
class StreamConfig:
    """Configuration for streaming documents out of a store."""

    page_size: int = 10

    def __post_init__(self):
        """Validate configuration."""
        if self.page_size <= 0:
            raise ValueError("page_size must be positive")


class DocumentCursor:
    """Forward-only iterator over every document of a collection, in id order.

    Pages are fetched lazily: a new page is requested only when the consumer
    asks for a document and the previous page has been fully handed out, so
    at most one page is ever buffered. The cursor is not restartable; build a
    new one for every run.

    Args:
        store: Store to read from
        location: Collection address
        config: Streaming configuration (page size)
        on_total: Called once with the collection size reported by the first page
    """

    def __init__(
        self,
        store: DocumentStore,
        location: str,
        config: StreamConfig | None = None,
        on_total: Callable[[int], None] | None = None,
    ) -> None:
        self.store = store
        self.location = location
        self.config = config or StreamConfig()
        self.on_total = on_total
        self.position: str | None = None
        self.pages_fetched = 0
        self._buffer: deque[Document] = deque()
        self._fetching = False
        self._exhausted = False
        self._total_reported = False

    def __iter__(self) -> Iterator[Document]:
        return self

    def __next__(self) -> Document:
        if not self._buffer:
            if self._exhausted:
                raise StopIteration
            self._fill()
            if not self._buffer:
                raise StopIteration
        return self._buffer.popleft()

    @property
    def exhausted(self) -> bool:
        return self._exhausted and not self._buffer

    def _fill(self) -> None:
        if self._fetching:
            raise ConcurrencyError(
                f"A page fetch from {self.location} is already in flight",
                context={"location": self.location, "after_id": self.position},
            )

        self._fetching = True
        try:
            page = self._fetch()
        except BaseException:
            self._exhausted = True
            raise
        finally:
            self._fetching = False

        self.pages_fetched += 1
        if not self._total_reported:
            self._total_reported = True
            if self.on_total is not None:
                self.on_total(page.total_count)

        if page.is_empty:
            logger.debug(f"Reached end of {self.location} after {self.pages_fetched} pages")
            self._exhausted = True
            return

        self.position = document_id(page.documents[-1])
        self._buffer.extend(page.documents)
        logger.debug(
            f"Fetched {len(page)} documents from {self.location}, position {self.position!r}"
        )
        # A short page is the tail of the collection
        if len(page) < self.config.page_size:
            self._exhausted = True

    def _fetch(self) -> Page:
        after_id = self.position
        try:
            return self.store.fetch_page(self.location, after_id, self.config.page_size)
        except (FetchError, ConcurrencyError):
            raise
        except Exception as e:
            raise FetchError(self.location, after_id, str(e)) from e
