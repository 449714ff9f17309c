"""Event wire codec.

Wire shape::

    {
        "eventId": "0190...",
        "eventType": "department.created",
        "aggregateId": "0190...",
        "aggregateType": "department",
        "version": 1,
        "occurredOn": "2024-05-01T12:00:00+00:00",
        "payload": {"actor": "...", ...},
    }

Payload values are JSON-compatible: enums become their values, tuples become
lists, timestamps ISO 8601 strings, field changes ``{"old": ..., "new": ...}``.
Decoding uses the event class's field annotations to rebuild typed values.
"""

import types
from dataclasses import fields
from datetime import datetime
from enum import Enum
from typing import Any, Union, get_args, get_origin, get_type_hints
from uuid import UUID

from iam_admin.core.result import Failure, Result, Success
from iam_admin.domain.enums import AggregateType
from iam_admin.domain.events.base_event import (
    ENVELOPE_FIELDS,
    DomainEvent,
    UnrecognizedEvent,
)
from iam_admin.domain.events.registry import get_event_class
from iam_admin.domain.services.diffing import FieldChange


class EventCodecError:
    """Event decoding error constants."""

    UNKNOWN_EVENT_TYPE = "unknown_event_type"
    MALFORMED_EVENT = "malformed_event"
    AGGREGATE_TYPE_MISMATCH = "aggregate_type_mismatch"


def to_primitive(value: Any) -> Any:
    """Convert a payload value into its JSON-compatible form."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, FieldChange):
        return {"old": to_primitive(value.old), "new": to_primitive(value.new)}
    if isinstance(value, (tuple, list)):
        return [to_primitive(item) for item in value]
    if isinstance(value, dict):
        return {key: to_primitive(item) for key, item in value.items()}
    return value


def encode_event(event: DomainEvent) -> dict[str, Any]:
    """Serialize an event to the wire shape."""
    return {
        "eventId": str(event.event_id),
        "eventType": event.event_type,
        "aggregateId": event.aggregate_id,
        "aggregateType": event.aggregate_type.value,
        "version": event.version,
        "occurredOn": event.occurred_on.isoformat(),
        "payload": to_primitive(event.payload()),
    }


def _from_primitive(annotation: Any, value: Any) -> Any:
    if value is None:
        return None

    origin = get_origin(annotation)

    if origin in (Union, types.UnionType):
        inner = [arg for arg in get_args(annotation) if arg is not type(None)]
        return _from_primitive(inner[0], value) if len(inner) == 1 else value

    if origin is tuple:
        item_type = get_args(annotation)[0]
        return tuple(_from_primitive(item_type, item) for item in value)

    if origin is dict:
        _, value_type = get_args(annotation)
        return {key: _from_primitive(value_type, item) for key, item in value.items()}

    if annotation is FieldChange:
        return FieldChange(old=value.get("old"), new=value.get("new"))

    if isinstance(annotation, type):
        if issubclass(annotation, Enum):
            return annotation(value)
        if annotation is datetime:
            return datetime.fromisoformat(value)
        if annotation is UUID:
            return UUID(str(value))

    return value


def decode_event(wire: dict[str, Any]) -> Result[DomainEvent, str]:
    """Rebuild a typed event from the wire shape.

    Returns:
        Success(event), or Failure with an EventCodecError constant when the
        event type is unknown or the record is malformed.
    """
    event_class = get_event_class(str(wire.get("eventType", "")))
    if event_class is None:
        return Failure(error=EventCodecError.UNKNOWN_EVENT_TYPE)

    if wire.get("aggregateType") != event_class.aggregate_type.value:
        return Failure(error=EventCodecError.AGGREGATE_TYPE_MISMATCH)

    try:
        hints = get_type_hints(event_class)
        payload = wire["payload"]
        kwargs: dict[str, Any] = {
            "event_id": UUID(str(wire["eventId"])),
            "aggregate_id": str(wire["aggregateId"]),
            "version": int(wire["version"]),
            "occurred_on": datetime.fromisoformat(str(wire["occurredOn"])),
        }
        for f in fields(event_class):
            if f.name in ENVELOPE_FIELDS or f.name not in payload:
                continue
            kwargs[f.name] = _from_primitive(hints[f.name], payload[f.name])
        return Success(value=event_class(**kwargs))
    except (KeyError, TypeError, ValueError, AttributeError):
        return Failure(error=EventCodecError.MALFORMED_EVENT)


def decode_envelope(wire: dict[str, Any]) -> UnrecognizedEvent | None:
    """Rebuild only the envelope of an event whose type is not registered.

    Returns:
        The envelope as an UnrecognizedEvent, or None when the aggregate
        kind is unknown too or the envelope itself is malformed.
    """
    try:
        payload = wire.get("payload") or {}
        return UnrecognizedEvent(
            event_id=UUID(str(wire["eventId"])),
            aggregate_id=str(wire["aggregateId"]),
            version=int(wire["version"]),
            occurred_on=datetime.fromisoformat(str(wire["occurredOn"])),
            actor=str(payload.get("actor", "")),
            wire_type=str(wire["eventType"]),
            kind=AggregateType(wire["aggregateType"]),
        )
    except (KeyError, TypeError, ValueError, AttributeError):
        return None
