"""One-shot replication between CouchDB databases, leaving design documents behind."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from .exceptions import ConfigurationError, ReplicationError

if TYPE_CHECKING:
    from collections.abc import Callable
    from .backends.couchdb import CouchDBClient

logger = logging.getLogger(__name__)

FAILED_STATES = {"failed"}


def replicate_without_design_docs(
    client: CouchDBClient,
    source: str,
    target: str,
    progress_sink: Callable[[str], None] | None = None,
    poll_interval: float = 0.5,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Replicate ``source`` into ``target`` once, skipping design documents.

    The target database is created if needed. While the replication runs,
    ``"{n} replicated"`` progress lines are sent to ``progress_sink``.

    Args:
        client: CouchDB client
        source: Source database location
        target: Target database location
        progress_sink: Optional receiver of progress lines
        poll_interval: Seconds between status polls
        sleep: Sleep function used between polls

    Raises:
        ReplicationError: If the replication cannot be started or fails
    """
    if not source:
        raise ConfigurationError("source is required")
    if not target:
        raise ConfigurationError("target is required")

    replication_id = client.start_replication(source, target)

    while True:
        task = client.get_replication_task(target, replication_id)
        if task:
            if progress_sink is not None:
                progress_sink(f"{task.get('docs_written', 0)} replicated")
        else:
            doc = client.get_replication(target, replication_id)
            state = doc.get("state")
            info = doc.get("info") or {}
            if progress_sink is not None and info:
                progress_sink(f"{info.get('docs_written', 0)} replicated")
            if state == "completed":
                logger.info(f"Replication {replication_id} completed")
                return
            if state in FAILED_STATES:
                reason = info.get("error")
                raise ReplicationError(
                    f"Replication {replication_id} failed: {reason or state}",
                    replication_id,
                )
        sleep(poll_interval)
