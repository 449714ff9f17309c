"""Field-level diffing for update operations."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldChange:
    """Old and new value of one changed field."""

    old: Any
    new: Any


def _normalize(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(value)
    return value


def diff_fields(
    current: Mapping[str, Any], proposed: Mapping[str, Any]
) -> dict[str, FieldChange]:
    """Compare proposed values against current ones.

    Only keys present in ``proposed`` are considered; a key whose value equals
    the current one is left out. Lists are compared as tuples.

    Returns:
        Mapping of changed field name to FieldChange, in ``proposed`` order.
    """
    changes: dict[str, FieldChange] = {}
    for name, value in proposed.items():
        old = _normalize(current.get(name))
        new = _normalize(value)
        if old != new:
            changes[name] = FieldChange(old=old, new=new)
    return changes
