"""Whole-collection mutation: cursor, mutation stage and writer in one pull-based flow."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..backends import create_store
from ..documents import is_design_document
from ..exceptions import ConfigurationError
from ..streaming import DocumentCursor, StreamConfig
from ..transitions import COMPLETED, FAILED, IDLE, RUN_STATUS, STREAMING
from .progress import ProgressReporter, RunStatistics
from .stage import MutationStage
from .writer import DocumentWriter

if TYPE_CHECKING:
    from collections.abc import Callable
    from ..config import PipelineConfig
    from ..documents import Document, MutationOutcome
    from ..store import DocumentStore

logger = logging.getLogger(__name__)


class MutationPipeline:
    """Reads, mutates and rewrites every document of a collection exactly once.

    Documents are pulled from a :class:`DocumentCursor` one at a time, passed
    through a :class:`MutationStage` and, if kept, written by a
    :class:`DocumentWriter` before the next one is pulled. A page is fetched
    only once the previous one has been consumed, so at most one page and
    one write are outstanding.

    The first error from any stage stops the run and is re-raised. Documents
    written before the failure stay written.

    A pipeline runs once: ``idle -> streaming -> completed | failed``.

    Example:
        ```python
        def add_tag(doc):
            doc["tag"] = "done"

        pipeline = MutationPipeline(
            store, "http://localhost:5984/orders", add_tag,
            verify_idempotent=True, progress_sink=print, report_frequency=100,
        )
        stats = pipeline.run()
        ```
    """

    def __init__(
        self,
        store: DocumentStore,
        location: str,
        mutator: Callable[[Document], Document | None],
        validator: Callable[[Document], bool] | None = None,
        verify_idempotent: bool = False,
        progress_sink: Callable[[str], None] | None = None,
        report_frequency: int = 1,
        page_size: int = 10,
        is_reserved: Callable[[str], bool] = is_design_document,
    ) -> None:
        if store is None:
            raise ConfigurationError("store is required")
        if not location:
            raise ConfigurationError("location is required")
        if mutator is None:
            raise ConfigurationError("mutator is required")

        self.store = store
        self.location = location
        self.stats = RunStatistics()
        self.status = IDLE
        self.reporter = ProgressReporter(progress_sink, report_frequency)
        self.stream_config = StreamConfig(page_size=page_size)
        self.stage = MutationStage(
            mutator,
            validator=validator,
            verify_idempotent=verify_idempotent,
            is_reserved=is_reserved,
            on_skip=self._on_skip,
        )
        self.writer = DocumentWriter(store, location, on_write=self._on_write)

    @classmethod
    def from_config(
        cls,
        config: PipelineConfig,
        mutator: Callable[[Document], Document | None],
        validator: Callable[[Document], bool] | None = None,
        progress_sink: Callable[[str], None] | None = None,
        store: DocumentStore | None = None,
    ) -> MutationPipeline:
        """Build a pipeline from configuration.

        Args:
            config: Run settings
            mutator: Mutator function
            validator: Optional validation function
            progress_sink: Optional receiver of progress lines
            store: Store to use instead of the one described by ``config.store``
        """
        return cls(
            store if store is not None else create_store(config.store),
            config.location,
            mutator,
            validator=validator,
            verify_idempotent=config.verify_idempotent,
            progress_sink=progress_sink,
            report_frequency=config.report_frequency,
            page_size=config.page_size,
        )

    def run(self) -> RunStatistics:
        """Mutate every document of the collection.

        Returns:
            Final statistics of the run

        Raises:
            InvalidTransitionError: If the pipeline has already run
            PipelineError: The first failure raised by any stage
        """
        self._transition(STREAMING)
        self.stats.start()
        logger.info(f"Mutating all documents in {self.location}")

        cursor = DocumentCursor(
            self.store, self.location, self.stream_config, on_total=self._on_total
        )
        try:
            for document in cursor:
                outcome = self.stage.process(document)
                if outcome.is_written:
                    self.writer.write(outcome.document)
        except BaseException as e:
            self.stats.finish()
            self._transition(FAILED)
            logger.error(
                f"Mutation of {self.location} failed after {self.stats.processed} "
                f"documents: {e}"
            )
            raise

        self.stats.finish()
        self._transition(COMPLETED)
        logger.info(
            f"Mutation of {self.location} complete: {self.stats.format_progress()} "
            f"in {self.stats.duration:.2f}s"
        )
        return self.stats

    def _transition(self, target: str) -> None:
        RUN_STATUS.validate(self.status, target)
        self.status = target

    def _on_total(self, total: int) -> None:
        self.stats.total = total

    def _on_skip(self, outcome: MutationOutcome) -> None:
        self.stats.record_skip(outcome.reason)
        self.reporter.report(self.stats)

    def _on_write(self, document: Document) -> None:
        self.stats.record_write()
        self.reporter.report(self.stats)


def mutate_all_documents(
    store: DocumentStore,
    location: str,
    mutator: Callable[[Document], Document | None],
    validator: Callable[[Document], bool] | None = None,
    verify_idempotent: bool = False,
    progress_sink: Callable[[str], None] | None = None,
    report_frequency: int = 1,
    page_size: int = 10,
    is_reserved: Callable[[str], bool] = is_design_document,
) -> None:
    """Mutate all documents in a collection.

    Halts with an error if the validator rejects a mutated document, if
    ``verify_idempotent`` is set and the mutation is not idempotent, or if
    any read or write fails.

    Args:
        store: Document store client
        location: Collection address
        mutator: Mutator function, in place or returning a new document
        validator: Optional validation function
        verify_idempotent: Verify that mutations are idempotent
        progress_sink: Optional receiver of progress lines
        report_frequency: Progress report frequency, in number of documents
        page_size: Number of documents fetched per page
        is_reserved: Predicate on ids that are never mutated
    """
    MutationPipeline(
        store,
        location,
        mutator,
        validator=validator,
        verify_idempotent=verify_idempotent,
        progress_sink=progress_sink,
        report_frequency=report_frequency,
        page_size=page_size,
        is_reserved=is_reserved,
    ).run()
