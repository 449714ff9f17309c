"""Pure domain functions: access control, diffing, hierarchy, rendering."""

from iam_admin.domain.services.access_control import (
    assign_to_organization,
    can_access,
    passes_isolation,
    passes_privacy,
)
from iam_admin.domain.services.diffing import FieldChange, diff_fields

__all__ = [
    "FieldChange",
    "assign_to_organization",
    "can_access",
    "diff_fields",
    "passes_isolation",
    "passes_privacy",
]
