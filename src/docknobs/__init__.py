"""docknobs: bulk, rerunnable transformation of document-store collections."""

from .backends import CouchDBClient, MemoryDocumentStore, StoreFactory, create_store
from .config import PipelineConfig, VariableSubstitution, load_config
from .documents import (
    Document,
    MutationOutcome,
    OutcomeStatus,
    SkipReason,
    canonicalize,
    is_design_document,
)
from .exceptions import (
    ConcurrencyError,
    ConfigurationError,
    DocknobsError,
    FetchError,
    IdempotencyViolation,
    InvalidTransitionError,
    MutationError,
    OperationError,
    PipelineError,
    ReplicationError,
    RequestError,
    ValidationError,
    ValidationFailed,
    WriteConflict,
    WriteError,
)
from .mutation import (
    DocumentWriter,
    MutationPipeline,
    MutationStage,
    ProgressReporter,
    RunStatistics,
    mutate_all_documents,
)
from .replication import replicate_without_design_docs
from .store import DocumentStore, Page
from .streaming import DocumentCursor, StreamConfig
from .views import refresh_views

__version__ = "0.1.0"

__all__ = [
    # Stores
    "DocumentStore",
    "Page",
    "CouchDBClient",
    "MemoryDocumentStore",
    "StoreFactory",
    "create_store",
    # Configuration
    "PipelineConfig",
    "VariableSubstitution",
    "load_config",
    # Documents
    "Document",
    "MutationOutcome",
    "OutcomeStatus",
    "SkipReason",
    "canonicalize",
    "is_design_document",
    # Pipeline
    "DocumentCursor",
    "StreamConfig",
    "MutationStage",
    "DocumentWriter",
    "MutationPipeline",
    "ProgressReporter",
    "RunStatistics",
    "mutate_all_documents",
    # Server operations
    "replicate_without_design_docs",
    "refresh_views",
    # Exceptions
    "DocknobsError",
    "ConfigurationError",
    "ValidationError",
    "OperationError",
    "ConcurrencyError",
    "PipelineError",
    "FetchError",
    "ValidationFailed",
    "IdempotencyViolation",
    "MutationError",
    "WriteError",
    "WriteConflict",
    "RequestError",
    "ReplicationError",
    "InvalidTransitionError",
]
