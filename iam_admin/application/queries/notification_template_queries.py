"""Notification template queries."""

from collections.abc import Mapping
from dataclasses import dataclass, field

from iam_admin.domain.entities import Scope


@dataclass(frozen=True, kw_only=True)
class RenderNotificationTemplate:
    """Render a template's subject and content with the given values.

    Read-only: nothing is persisted and no event is recorded.
    """

    template_id: str
    values: Mapping[str, object] = field(default_factory=dict)
    accessor: Scope | None = None
