"""Notification template domain entity.

Templates hold ``{{ placeholder }}`` text for one delivery channel. Platform
templates live under the reserved platform tenant at PLATFORM level.
"""

from dataclasses import dataclass
from typing import ClassVar

from iam_admin.domain.entities.scoped_entity import ScopedEntity
from iam_admin.domain.enums import AggregateType, TemplateChannel
from iam_admin.domain.errors import EntityError


@dataclass(kw_only=True)
class NotificationTemplate(ScopedEntity):
    """Notification template.

    Attributes:
        name: Template name (unique within tenant).
        channel: Delivery channel.
        content: Body text with placeholders.
        subject: Subject line (required for EMAIL).
        variables: Declared placeholder names.
        language: Language tag.
        description: Optional free text.
    """

    AGGREGATE_TYPE: ClassVar[AggregateType] = AggregateType.NOTIFICATION_TEMPLATE
    UPDATABLE_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {"name", "subject", "content", "variables", "language", "description"}
    )
    NATURAL_KEYS: ClassVar[tuple[str, ...]] = ("name",)

    name: str
    channel: TemplateChannel
    content: str
    subject: str | None = None
    variables: tuple[str, ...] = ()
    language: str = "en"
    description: str | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if not self.name or not self.name.strip():
            raise ValueError(EntityError.MISSING_NAME)
        if not self.content or not self.content.strip():
            raise ValueError(EntityError.MISSING_CONTENT)
