"""Refreshing the view indexes of a CouchDB database."""

from __future__ import annotations

import concurrent.futures
import logging
import math
import time
from typing import TYPE_CHECKING

from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable
    from .backends.couchdb import CouchDBClient

logger = logging.getLogger(__name__)


def indexer_progress(tasks: list[dict]) -> int | None:
    """Average progress of the active indexer tasks, rounded half up.

    Returns:
        Percentage, or None if no indexer is running
    """
    indexers = [t for t in tasks if t.get("type") == "indexer"]
    if not indexers:
        return None
    average = sum(t.get("progress", 0) for t in indexers) / len(indexers)
    return math.floor(average + 0.5)


def refresh_views(
    client: CouchDBClient,
    location: str,
    progress_sink: Callable[[str], None] | None = None,
    poll_interval: float = 0.01,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Bring every view of every design document up to date.

    Each view is queried with ``limit=1``, which makes the server build its
    index. While a query is outstanding the server's indexer tasks are
    polled and ``"{percent}% {design_id}/{view}"`` lines are sent to
    ``progress_sink``.

    Args:
        client: CouchDB client
        location: Database location
        progress_sink: Optional receiver of progress lines
        poll_interval: Seconds between indexer polls
        sleep: Sleep function used between polls
    """
    if not location:
        raise ConfigurationError("location is required")

    design_docs = client.get_design_documents(location)
    logger.info(f"Refreshing views of {len(design_docs)} design documents in {location}")

    with concurrent.futures.ThreadPoolExecutor(max_workers=1) as executor:
        for doc in design_docs:
            for view_name in doc.get("views") or {}:
                query = executor.submit(
                    client.query_view, location, doc["_id"], view_name, 1
                )
                while not query.done():
                    percentage = indexer_progress(client.get_active_tasks(location))
                    if percentage is not None and progress_sink is not None:
                        progress_sink(f"{percentage}% {doc['_id']}/{view_name}")
                    sleep(poll_interval)

                query.result()
                logger.debug(f"Refreshed {doc['_id']}/{view_name}")
