"""Result of rendering a notification template."""

from dataclasses import dataclass

from iam_admin.domain.enums import TemplateChannel


@dataclass(frozen=True, kw_only=True)
class RenderedNotification:
    """Subject and content with every placeholder substituted.

    Attributes:
        template_id: Rendered template.
        channel: Delivery channel.
        language: Template language.
        subject: Rendered subject (None when the template has none).
        content: Rendered content.
    """

    template_id: str
    channel: TemplateChannel
    language: str
    content: str
    subject: str | None = None
