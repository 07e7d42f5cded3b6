"""Document helpers shared by the stores and the mutation pipeline.

Documents are plain JSON-compatible dictionaries. The identifier and the
revision token use the CouchDB field names.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

Document = dict[str, Any]

ID_FIELD = "_id"
REV_FIELD = "_rev"
DESIGN_PREFIX = "_design/"


def document_id(document: Document) -> str:
    """Get the id of a document."""
    return document[ID_FIELD]


def document_rev(document: Document) -> str | None:
    """Get the current revision token of a document, if it has one."""
    return document.get(REV_FIELD)


def is_design_document(doc_id: str) -> bool:
    """Check whether an id belongs to the reserved design document namespace."""
    return doc_id.startswith(DESIGN_PREFIX)


def canonicalize(document: Any) -> str:
    """Serialize a document deterministically.

    Keys are sorted at every nesting level, so two documents that differ only
    in key insertion order produce the same string.

    Args:
        document: JSON-compatible value

    Returns:
        Canonical JSON string
    """
    return json.dumps(
        document,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


class OutcomeStatus(Enum):
    """What happened to a document in the mutation stage."""

    WRITTEN = "written"
    SKIPPED = "skipped"


class SkipReason(Enum):
    """Why a document was not written."""

    UNCHANGED = "unchanged"
    DESIGN_DOC = "design-doc"


@dataclass(frozen=True)
class MutationOutcome:
    """Keep-or-skip decision for one document.

    Attributes:
        document: The (possibly mutated) document
        status: Whether the document goes on to the writer
        reason: Skip reason, ``None`` for written documents
    """

    document: Document
    status: OutcomeStatus
    reason: SkipReason | None = None

    @classmethod
    def written(cls, document: Document) -> MutationOutcome:
        return cls(document, OutcomeStatus.WRITTEN)

    @classmethod
    def skipped(cls, document: Document, reason: SkipReason) -> MutationOutcome:
        return cls(document, OutcomeStatus.SKIPPED, reason)

    @property
    def document_id(self) -> str:
        return document_id(self.document)

    @property
    def is_written(self) -> bool:
        return self.status is OutcomeStatus.WRITTEN
