"""Bulk mutation of every document in a collection.

- Pull-based streaming: one page and one write outstanding at a time
- Change detection on canonical serializations
- Optional validation and idempotency verification, both fatal on failure
- Progress lines at a configurable document cadence
"""

from .pipeline import MutationPipeline, mutate_all_documents
from .progress import ProgressReporter, RunStatistics
from .stage import MutationStage
from .writer import DocumentWriter

__all__ = [
    "DocumentWriter",
    "MutationPipeline",
    "MutationStage",
    "ProgressReporter",
    "RunStatistics",
    "mutate_all_documents",
]
