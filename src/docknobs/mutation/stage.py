"""Per-document mutation with change detection, validation and idempotency checks."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..documents import (
    MutationOutcome,
    SkipReason,
    canonicalize,
    document_id,
    is_design_document,
)
from ..exceptions import IdempotencyViolation, MutationError, ValidationFailed

if TYPE_CHECKING:
    from collections.abc import Callable
    from ..documents import Document

logger = logging.getLogger(__name__)


class MutationStage:
    """Applies a mutator to one document at a time and decides keep or skip.

    The mutator may change the document in place and return ``None``, or
    return a replacement document. A document is kept only when its
    canonical serialization changed.

    A validator that returns a falsy value, or raises, fails the document
    with :class:`ValidationFailed`, which stops the run.

    Args:
        mutator: Function applied to every non-reserved document
        validator: Optional check applied to changed documents
        verify_idempotent: Re-apply the mutator and require the same result
        is_reserved: Predicate on document ids that are never mutated
        on_skip: Called with every skipped outcome as soon as it is decided
    """

    def __init__(
        self,
        mutator: Callable[[Document], Document | None],
        validator: Callable[[Document], bool] | None = None,
        verify_idempotent: bool = False,
        is_reserved: Callable[[str], bool] = is_design_document,
        on_skip: Callable[[MutationOutcome], None] | None = None,
    ) -> None:
        self.mutator = mutator
        self.validator = validator
        self.verify_idempotent = verify_idempotent
        self.is_reserved = is_reserved
        self.on_skip = on_skip

    def process(self, document: Document) -> MutationOutcome:
        """Mutate a document and decide whether it should be written.

        Raises:
            MutationError: If the mutator raises or leaves an unserializable value
            ValidationFailed: If the validator rejects the mutated document
            IdempotencyViolation: If a second application changes the result
        """
        doc_id = document_id(document)
        if self.is_reserved(doc_id):
            return self._skip(document, SkipReason.DESIGN_DOC)

        before = self._canonicalize(doc_id, document)
        document = self._apply(doc_id, document)
        after = self._canonicalize(doc_id, document)

        if before == after:
            return self._skip(document, SkipReason.UNCHANGED)

        if self.validator is not None:
            self._validate(doc_id, document)

        if self.verify_idempotent:
            document = self._apply(doc_id, document)
            if self._canonicalize(doc_id, document) != after:
                raise IdempotencyViolation(doc_id)

        logger.debug(f"Mutated {doc_id}")
        return MutationOutcome.written(document)

    __call__ = process

    def _apply(self, doc_id: str, document: Document) -> Document:
        try:
            result = self.mutator(document)
        except Exception as e:
            raise MutationError(doc_id, f"{type(e).__name__}: {e}") from e
        return document if result is None else result

    def _canonicalize(self, doc_id: str, document: Document) -> str:
        try:
            return canonicalize(document)
        except (TypeError, ValueError) as e:
            raise MutationError(doc_id, str(e)) from e

    def _validate(self, doc_id: str, document: Document) -> None:
        try:
            valid = self.validator(document)
        except Exception as e:
            raise ValidationFailed(doc_id) from e
        if not valid:
            raise ValidationFailed(doc_id)

    def _skip(self, document: Document, reason: SkipReason) -> MutationOutcome:
        outcome = MutationOutcome.skipped(document, reason)
        logger.debug(f"Skipped {outcome.document_id}: {reason.value}")
        if self.on_skip is not None:
            self.on_skip(outcome)
        return outcome
