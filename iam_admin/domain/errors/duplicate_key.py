"""Natural-key uniqueness violations.

Raised as values both by the use case pre-check and by write stores whose
unique indexes reject a concurrent duplicate.
"""

from iam_admin.core.enums import ErrorCode
from iam_admin.core.errors import BusinessRuleViolation
from iam_admin.domain.errors.rule import Rule

UNIQUE_KEY_RULES: dict[str, tuple[ErrorCode, str]] = {
    "name": (ErrorCode.DUPLICATE_NAME, Rule.UNIQUE_NAME),
    "code": (ErrorCode.DUPLICATE_CODE, Rule.UNIQUE_CODE),
    "domain": (ErrorCode.DUPLICATE_DOMAIN, Rule.UNIQUE_DOMAIN),
    "email": (ErrorCode.DUPLICATE_EMAIL, Rule.UNIQUE_EMAIL),
    "username": (ErrorCode.DUPLICATE_USERNAME, Rule.UNIQUE_USERNAME),
}

CASE_INSENSITIVE_KEYS = frozenset({"email", "domain"})


def normalize_key(key: str, value: str) -> str:
    """Comparison form of a natural-key value."""
    return value.lower() if key in CASE_INSENSITIVE_KEYS else value


def duplicate_key_violation(resource_type: str, key: str, value: str) -> BusinessRuleViolation:
    code, rule = UNIQUE_KEY_RULES[key]
    return BusinessRuleViolation(
        code=code,
        message=f"{resource_type} {key} '{value}' already exists",
        rule=rule,
        field=key,
    )
