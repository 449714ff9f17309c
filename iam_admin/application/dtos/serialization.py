"""Conversion of handler values into JSON-compatible data."""

from dataclasses import asdict, is_dataclass
from typing import Any

from iam_admin.core.errors import DomainError
from iam_admin.domain.events.codec import to_primitive
from iam_admin.domain.value_objects import Page, ReadModelDocument


def to_data(value: Any) -> Any:
    """Entities, documents, pages and DTOs as plain dicts and lists."""
    if value is None:
        return None
    if isinstance(value, Page):
        return {
            "items": [to_data(item) for item in value.items],
            "total": value.total,
            "page": value.page,
            "size": value.size,
            "total_pages": value.total_pages,
        }
    if isinstance(value, ReadModelDocument):
        raw = value.to_dict()
        raw["id"] = raw.pop("_id")
        return to_primitive(raw)
    if is_dataclass(value) and not isinstance(value, type):
        return to_primitive(asdict(value))
    return to_primitive(value)


def error_to_data(error: DomainError) -> dict[str, Any]:
    """Error value as a dict: ``type``, ``code``, ``message`` and its fields."""
    data = to_primitive(asdict(error))
    data["type"] = type(error).__name__
    return data
