"""Document store backends and the factory that builds them from config."""

from __future__ import annotations

import logging
from typing import Any

from ..exceptions import ConfigurationError
from ..store import DocumentStore
from .couchdb import CouchDBClient
from .memory import MemoryDocumentStore

logger = logging.getLogger(__name__)


class StoreFactory:
    """Factory for creating document store backends from configuration.

    Configuration Options:
        backend (str): Backend type (memory, couchdb)
        **kwargs: Backend-specific configuration options

    Example Configuration:
        store:
          backend: couchdb
          timeout: 60
    """

    backends: dict[str, type] = {
        "memory": MemoryDocumentStore,
        "couchdb": CouchDBClient,
    }

    def create(self, **config: Any) -> DocumentStore:
        """Create a store instance based on configuration.

        Args:
            **config: Configuration including 'backend' field and backend-specific options

        Returns:
            Instance of the requested backend

        Raises:
            ConfigurationError: If the backend type is not recognized
        """
        backend_type = str(config.pop("backend", "memory")).lower()

        logger.info(f"Creating document store with backend: {backend_type}")

        backend_class = self.backends.get(backend_type)
        if backend_class is None:
            raise ConfigurationError(
                f"Unknown backend type: {backend_type}. "
                f"Available backends: {', '.join(sorted(self.backends))}",
                context={"backend": backend_type},
            )
        return backend_class.from_config(config)


store_factory = StoreFactory()


def create_store(config: dict[str, Any] | None = None) -> DocumentStore:
    """Create a store from a configuration dictionary."""
    return store_factory.create(**dict(config or {}))


__all__ = [
    "CouchDBClient",
    "MemoryDocumentStore",
    "StoreFactory",
    "create_store",
    "store_factory",
]
