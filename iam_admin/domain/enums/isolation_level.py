"""Hierarchical data isolation tiers.

Levels are ranked from broadest to narrowest:

    PLATFORM < TENANT < ORGANIZATION < DEPARTMENT < USER

An accessor may only reach records at its own level or narrower, never
broader (a department-level accessor cannot see tenant-level records).

Usage:
    from iam_admin.domain.enums import IsolationLevel

    if IsolationLevel.TENANT.rank <= target.isolation_level.rank:
        ...
"""

from enum import Enum


class IsolationLevel(str, Enum):
    """Tenancy tier an entity belongs to.

    Example:
        >>> IsolationLevel.ORGANIZATION.rank
        2
        >>> IsolationLevel.TENANT.is_broader_than(IsolationLevel.USER)
        True
    """

    PLATFORM = "PLATFORM"
    TENANT = "TENANT"
    ORGANIZATION = "ORGANIZATION"
    DEPARTMENT = "DEPARTMENT"
    USER = "USER"

    @property
    def rank(self) -> int:
        """Position in the hierarchy, 0 for PLATFORM."""
        return _RANKS[self]

    def is_broader_than(self, other: "IsolationLevel") -> bool:
        """True when this level sits strictly above ``other``."""
        return self.rank < other.rank


_RANKS: dict[IsolationLevel, int] = {
    level: index for index, level in enumerate(IsolationLevel)
}
