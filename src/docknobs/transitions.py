"""Stateless transition validation for declarative status graphs.

The validator does not own any state: callers keep their current status and
ask whether a proposed move is allowed before making it.

Example:
    ```python
    from docknobs.transitions import RUN_STATUS

    RUN_STATUS.validate("idle", "streaming")      # ok
    RUN_STATUS.validate("completed", "streaming") # raises InvalidTransitionError
    ```
"""

from __future__ import annotations

import logging

from .exceptions import InvalidTransitionError

logger = logging.getLogger(__name__)


class TransitionValidator:
    """Validator for a declarative transition graph.

    Args:
        name: Human-readable name for this graph, used in error messages
        transitions: Mapping from each status to the set of statuses it may
            move to. Statuses that only appear as targets are terminal.
    """

    def __init__(self, name: str, transitions: dict[str, set[str]]) -> None:
        self._name = name
        self._transitions = {k: set(v) for k, v in transitions.items()}

    @property
    def name(self) -> str:
        """The name of this transition graph."""
        return self._name

    @property
    def statuses(self) -> set[str]:
        """Return all known statuses (sources and targets)."""
        all_statuses: set[str] = set(self._transitions.keys())
        for targets in self._transitions.values():
            all_statuses.update(targets)
        return all_statuses

    def is_terminal(self, status: str) -> bool:
        """Check whether a status has no outgoing transitions."""
        return not self._transitions.get(status)

    def validate(self, current_status: str | None, target_status: str) -> None:
        """Validate a proposed transition.

        Args:
            current_status: The current status. ``None`` skips validation.
            target_status: The desired target status.

        Raises:
            InvalidTransitionError: If the transition is not allowed.
        """
        if current_status is None:
            return

        if current_status not in self.statuses:
            raise InvalidTransitionError(
                entity=self._name,
                current_status=current_status,
                target_status=target_status,
                allowed=None,
            )

        allowed = self._transitions.get(current_status, set())
        if target_status not in allowed:
            logger.debug(
                f"{self._name}: rejected transition {current_status} -> {target_status}"
            )
            raise InvalidTransitionError(
                entity=self._name,
                current_status=current_status,
                target_status=target_status,
                allowed=allowed,
            )

    def __repr__(self) -> str:
        return f"TransitionValidator({self._name!r}, {len(self.statuses)} statuses)"


IDLE = "idle"
STREAMING = "streaming"
COMPLETED = "completed"
FAILED = "failed"

# A run streams once and then settles; a failed run is restarted with a new pipeline.
RUN_STATUS = TransitionValidator(
    "mutation_run",
    {
        IDLE: {STREAMING},
        STREAMING: {COMPLETED, FAILED},
        COMPLETED: set(),
        FAILED: set(),
    },
)
