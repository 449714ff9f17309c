"""Domain error constants.

Constants are message strings used for construction-time ``ValueError``s
(programming errors) and as ``rule`` identifiers of BusinessRuleViolation.
"""

from iam_admin.domain.errors.duplicate_key import (
    CASE_INSENSITIVE_KEYS,
    UNIQUE_KEY_RULES,
    duplicate_key_violation,
    normalize_key,
)
from iam_admin.domain.errors.entity_error import EntityError
from iam_admin.domain.errors.rule import Rule

__all__ = [
    "CASE_INSENSITIVE_KEYS",
    "UNIQUE_KEY_RULES",
    "EntityError",
    "Rule",
    "duplicate_key_violation",
    "normalize_key",
]
