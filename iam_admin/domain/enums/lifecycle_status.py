"""Lifecycle status shared by every scoped entity kind.

Transition table:

    INITIALIZING -> ACTIVE, INACTIVE
    ACTIVE       -> SUSPENDED, MAINTENANCE, INACTIVE
    MAINTENANCE  -> ACTIVE, SUSPENDED, INACTIVE
    SUSPENDED    -> ACTIVE, MAINTENANCE, INACTIVE
    INACTIVE     -> ACTIVE
    DELETED      -> (terminal)

DELETED is reached only through the delete operation, never through a
status change request.
"""

from enum import Enum


class LifecycleStatus(str, Enum):
    """Entity lifecycle status."""

    INITIALIZING = "INITIALIZING"
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    MAINTENANCE = "MAINTENANCE"
    INACTIVE = "INACTIVE"
    DELETED = "DELETED"

    @property
    def is_terminal(self) -> bool:
        return self is LifecycleStatus.DELETED

    def allowed_targets(self) -> frozenset["LifecycleStatus"]:
        """Statuses reachable from this one through a status change."""
        return ALLOWED_TRANSITIONS[self]

    def can_transition_to(self, target: "LifecycleStatus") -> bool:
        """Check the transition table (same-status requests are not transitions)."""
        return target in ALLOWED_TRANSITIONS[self]


ALLOWED_TRANSITIONS: dict[LifecycleStatus, frozenset[LifecycleStatus]] = {
    LifecycleStatus.INITIALIZING: frozenset(
        {LifecycleStatus.ACTIVE, LifecycleStatus.INACTIVE}
    ),
    LifecycleStatus.ACTIVE: frozenset(
        {
            LifecycleStatus.SUSPENDED,
            LifecycleStatus.MAINTENANCE,
            LifecycleStatus.INACTIVE,
        }
    ),
    LifecycleStatus.MAINTENANCE: frozenset(
        {LifecycleStatus.ACTIVE, LifecycleStatus.SUSPENDED, LifecycleStatus.INACTIVE}
    ),
    LifecycleStatus.SUSPENDED: frozenset(
        {LifecycleStatus.ACTIVE, LifecycleStatus.MAINTENANCE, LifecycleStatus.INACTIVE}
    ),
    LifecycleStatus.INACTIVE: frozenset({LifecycleStatus.ACTIVE}),
    LifecycleStatus.DELETED: frozenset(),
}
