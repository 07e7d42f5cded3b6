"""Exception hierarchy for docknobs.

Every error raised by the package derives from :class:`DocknobsError`, which
carries an optional ``context`` dictionary with the ids and locations needed
to attribute a failure.

The pipeline errors (:class:`FetchError`, :class:`ValidationFailed`,
:class:`IdempotencyViolation`, :class:`WriteConflict`, :class:`WriteError`)
are fatal: the first one raised by any stage aborts the whole run and is
surfaced to the caller unchanged.

Example:
    ```python
    from docknobs.exceptions import PipelineError

    try:
        mutate_all_documents(store, "http://localhost:5984/db", mutator)
    except PipelineError as e:
        logger.error(f"Run failed on {e.document_id}: {e}")
    ```
"""

from __future__ import annotations

from typing import Any


class DocknobsError(Exception):
    """Base exception for docknobs.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context (ids, locations, etc.)
        details: Alternative to context (takes precedence if both are given)
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.context = details or context or {}
        self.details = self.context


class ConfigurationError(DocknobsError):
    """Raised when configuration is invalid or missing."""


class ValidationError(DocknobsError):
    """Raised when data fails validation checks."""


class OperationError(DocknobsError):
    """Raised when an operation against a store or server fails."""


class ConcurrencyError(DocknobsError):
    """Raised when an operation is started while another is still in flight."""


class PipelineError(OperationError):
    """Base for the fatal errors that abort a mutation run.

    Attributes:
        document_id: Id of the document that triggered the failure, if any
    """

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        self.document_id = document_id
        merged = {"document_id": document_id} if document_id is not None else {}
        merged.update(context or {})
        super().__init__(message, context=merged)


class FetchError(PipelineError):
    """Raised when a page of documents could not be fetched."""

    def __init__(self, location: str, after_id: str | None, reason: str):
        self.location = location
        self.after_id = after_id
        super().__init__(
            f"Failed to fetch documents from {location} after {after_id!r}: {reason}",
            context={"location": location, "after_id": after_id},
        )


class MutationError(PipelineError):
    """Raised when the mutator fails or leaves a document that cannot be serialized."""

    def __init__(self, document_id: str, reason: str):
        self.reason = reason
        super().__init__(
            f"Mutation failed for {document_id}: {reason}",
            document_id=document_id,
            context={"reason": reason},
        )


class ValidationFailed(PipelineError):
    """Raised when the validator rejects a mutated document."""

    def __init__(self, document_id: str):
        super().__init__(f"Validation failed for {document_id}", document_id=document_id)


class IdempotencyViolation(PipelineError):
    """Raised when re-applying the mutator changes an already mutated document."""

    def __init__(self, document_id: str):
        super().__init__(
            f"Idempotency check failed for {document_id}", document_id=document_id
        )


class WriteError(PipelineError):
    """Raised when the store rejects a document write."""

    def __init__(self, document_id: str, reason: str, status: int | None = None):
        self.reason = reason
        self.status = status
        super().__init__(
            f"Failed to write {document_id}: {reason}",
            document_id=document_id,
            context={"reason": reason, "status": status},
        )


class WriteConflict(WriteError):
    """Raised when a write targets a stale revision of a document."""

    def __init__(self, document_id: str, reason: str = "Document update conflict."):
        super().__init__(document_id, reason, status=409)


class RequestError(OperationError):
    """Raised when an HTTP request to the store server fails."""

    def __init__(self, url: str, status: int | None, reason: str | None = None):
        self.url = url
        self.status = status
        message = f"Request to {url} failed with status {status}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, context={"url": url, "status": status})


class ReplicationError(OperationError):
    """Raised when a replication cannot be started or ends in failure."""

    def __init__(self, message: str, replication_id: str | None = None):
        self.replication_id = replication_id
        super().__init__(message, context={"replication_id": replication_id})


class InvalidTransitionError(OperationError):
    """Raised when a status transition is not allowed.

    Attributes:
        entity: Name of the transition graph (e.g. ``"mutation_run"``)
        current_status: The status being transitioned from
        target_status: The rejected target status
        allowed: Valid targets from ``current_status``, or ``None`` if the
            current status itself is unknown
    """

    def __init__(
        self,
        entity: str,
        current_status: str,
        target_status: str,
        allowed: set[str] | None = None,
    ) -> None:
        self.entity = entity
        self.current_status = current_status
        self.target_status = target_status
        self.allowed = allowed

        if allowed is not None:
            allowed_str = ", ".join(sorted(allowed)) if allowed else "(none, terminal)"
            message = (
                f"{entity}: cannot transition from '{current_status}' to '{target_status}'. "
                f"Allowed targets: {allowed_str}"
            )
        else:
            message = f"{entity}: unknown current status '{current_status}'"

        super().__init__(
            message,
            context={
                "entity": entity,
                "current_status": current_status,
                "target_status": target_status,
                "allowed": sorted(allowed) if allowed else [],
            },
        )
