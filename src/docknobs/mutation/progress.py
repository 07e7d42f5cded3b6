"""Run statistics and progress reporting, separate from the pipeline logic."""

from __future__ import annotations

import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable
    from ..documents import SkipReason

logger = logging.getLogger(__name__)


@dataclass
class RunStatistics:
    """Counters for one mutation run.

    ``written`` and ``ignored`` only ever grow; ``total`` is set once from
    the collection size the store reports and may be stale if the
    collection changes during the run.
    """

    total: int = 0
    written: int = 0
    ignored: int = 0
    skip_reasons: Counter[str] = field(default_factory=Counter)
    start_time: float | None = None
    end_time: float | None = None

    def start(self) -> RunStatistics:
        """Mark the run as started.

        Returns:
            Self for chaining
        """
        self.start_time = time.time()
        return self

    def finish(self) -> RunStatistics:
        """Mark the run as finished.

        Returns:
            Self for chaining
        """
        self.end_time = time.time()
        return self

    @property
    def processed(self) -> int:
        return self.written + self.ignored

    @property
    def duration(self) -> float:
        """Run duration in seconds, or 0 if not started."""
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time else time.time()
        return end - self.start_time

    @property
    def is_complete(self) -> bool:
        return self.processed == self.total

    def record_write(self) -> RunStatistics:
        self.written += 1
        return self

    def record_skip(self, reason: SkipReason) -> RunStatistics:
        self.ignored += 1
        self.skip_reasons[reason.value] += 1
        return self

    def format_progress(self) -> str:
        """Progress line in the ``processed/total, written, ignored`` format."""
        return ", ".join([
            f"{self.processed}/{self.total}",
            f"{self.written} written",
            f"{self.ignored} ignored",
        ])

    def to_dict(self) -> dict[str, Any]:
        """Convert statistics to a dictionary for serialization."""
        return {
            "total": self.total,
            "processed": self.processed,
            "written": self.written,
            "ignored": self.ignored,
            "skip_reasons": dict(self.skip_reasons),
            "duration": self.duration,
        }

    def __str__(self) -> str:
        return self.format_progress()


class ProgressReporter:
    """Emits progress lines to a sink at a fixed document cadence.

    A report goes out when the processed count is a multiple of
    ``report_frequency`` and always when it reaches the total.

    Args:
        sink: Receives each progress line; no reports are made without one
        report_frequency: Number of processed documents between reports
    """

    def __init__(
        self,
        sink: Callable[[str], None] | None = None,
        report_frequency: int = 1,
    ) -> None:
        if isinstance(report_frequency, bool) or not isinstance(report_frequency, int):
            raise ValueError("report_frequency must be an integer")
        if report_frequency <= 0:
            raise ValueError("report_frequency must be positive")
        self.sink = sink
        self.report_frequency = report_frequency
        self.reports_emitted = 0

    def should_report(self, stats: RunStatistics) -> bool:
        processed = stats.processed
        return processed == stats.total or processed % self.report_frequency == 0

    def report(self, stats: RunStatistics) -> None:
        if self.sink is None or not self.should_report(stats):
            return
        message = stats.format_progress()
        logger.debug(f"Progress: {message}")
        self.sink(message)
        self.reports_emitted += 1
