"""Notification template commands (CQRS write operations)."""

from dataclasses import dataclass

from iam_admin.domain.enums import PrivacyLevel, TemplateChannel


@dataclass(frozen=True, kw_only=True)
class CreateNotificationTemplate:
    """Create a notification template.

    Every ``{{ placeholder }}`` in subject and content must be listed in
    ``variables``. A template owned by the platform tenant is PLATFORM level.
    """

    tenant_id: str
    name: str
    channel: TemplateChannel
    content: str
    actor: str
    subject: str | None = None
    variables: tuple[str, ...] = ()
    language: str = "en"
    description: str | None = None
    organization_id: str | None = None
    privacy_level: PrivacyLevel = PrivacyLevel.SHARED


@dataclass(frozen=True, kw_only=True)
class UpdateNotificationTemplate:
    template_id: str
    actor: str
    name: str | None = None
    subject: str | None = None
    content: str | None = None
    variables: tuple[str, ...] | None = None
    language: str | None = None
    description: str | None = None
    expected_version: int | None = None


@dataclass(frozen=True, kw_only=True)
class DeleteNotificationTemplate:
    template_id: str
    actor: str
    expected_version: int | None = None
