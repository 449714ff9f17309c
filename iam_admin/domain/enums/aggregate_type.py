"""Aggregate kinds managed by the system.

Values double as the ``aggregateType`` field of the event wire shape and as
the prefix of every ``eventType`` (``department.created``).
"""

from enum import Enum


class AggregateType(str, Enum):
    """Aggregate kind."""

    TENANT = "tenant"
    ORGANIZATION = "organization"
    DEPARTMENT = "department"
    USER = "user"
    NOTIFICATION_TEMPLATE = "notification_template"
