"""Records owned by a user and removed with it.

Profiles and relationships are not aggregates of their own: they are
written through user use cases and hard-deleted when the user is deleted.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar

from iam_admin.domain.enums import RelationshipTargetType, RelationshipType


@dataclass(kw_only=True)
class UserProfile:
    """Optional personal details of a user (one per user)."""

    FIELDS: ClassVar[tuple[str, ...]] = (
        "first_name",
        "last_name",
        "avatar_url",
        "bio",
        "locale",
        "timezone",
    )

    user_id: str
    tenant_id: str
    updated_at: datetime
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    locale: str | None = None
    timezone: str | None = None


@dataclass(kw_only=True)
class UserRelationship:
    """Link between a user and another scoped record."""

    id: str
    user_id: str
    tenant_id: str
    target_id: str
    target_type: RelationshipTargetType
    relationship_type: RelationshipType
    created_by: str
    created_at: datetime
