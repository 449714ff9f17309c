"""Validation helpers for input shape checks.

Every ``validate_*`` function returns a Result for a single field. Command
validators run all checks and pass the results to ``collect_violations``,
which reports every failure at once instead of stopping at the first.

Usage:
    from iam_admin.core.validation import (
        collect_violations,
        validate_max_length,
        validate_not_empty,
    )

    result = collect_violations(
        validate_not_empty(cmd.name, "name"),
        validate_max_length(cmd.name, 100, "name"),
    )
    if isinstance(result, Failure):
        return result
"""

import re
from enum import Enum
from typing import Any

from iam_admin.core.enums import ErrorCode
from iam_admin.core.errors import ValidationError, Violation
from iam_admin.core.result import Failure, Result, Success

CODE_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_.-]+$")
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{1,14}$")
DOMAIN_PATTERN = re.compile(
    r"^(?=.{1,255}$)[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(\.[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+$"
)
IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def _fail(field_name: str, code: ErrorCode, message: str) -> Failure[ValidationError]:
    return Failure(
        error=ValidationError(code=code, message=message, field=field_name)
    )


def validate_not_empty(value: Any, field_name: str) -> Result[Any, ValidationError]:
    """Validate that a value is present and not blank.

    Args:
        value: Value to validate.
        field_name: Name of the field being validated.

    Returns:
        Success with value if not empty, Failure with ValidationError otherwise.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return _fail(field_name, ErrorCode.FIELD_REQUIRED, f"{field_name} is required")
    return Success(value=value)


def validate_max_length(
    value: str | None, max_length: int, field_name: str
) -> Result[str | None, ValidationError]:
    """Validate maximum string length. ``None`` passes (optional field)."""
    if value is not None and len(value) > max_length:
        return _fail(
            field_name,
            ErrorCode.FIELD_TOO_LONG,
            f"{field_name} must be at most {max_length} characters",
        )
    return Success(value=value)


def validate_min_length(
    value: str | None, min_length: int, field_name: str
) -> Result[str | None, ValidationError]:
    """Validate minimum string length. ``None`` passes (optional field)."""
    if value is not None and len(value) < min_length:
        return _fail(
            field_name,
            ErrorCode.FIELD_TOO_SHORT,
            f"{field_name} must be at least {min_length} characters",
        )
    return Success(value=value)


def validate_pattern(
    value: str | None,
    pattern: re.Pattern[str],
    field_name: str,
    message: str | None = None,
) -> Result[str | None, ValidationError]:
    """Validate that a string matches a compiled pattern.

    Blank and ``None`` values pass; pair with ``validate_not_empty`` for
    required fields so a missing value is reported once.
    """
    if value is None or not value.strip():
        return Success(value=value)
    if not pattern.match(value):
        return _fail(
            field_name,
            ErrorCode.INVALID_FORMAT,
            message or f"{field_name} has an invalid format",
        )
    return Success(value=value)


def validate_email(
    email: str | None, field_name: str = "email"
) -> Result[str | None, ValidationError]:
    """Validate email format. ``None`` passes (optional field)."""
    if email is None or not email.strip():
        return Success(value=email)
    if not EMAIL_PATTERN.match(email):
        return _fail(field_name, ErrorCode.INVALID_EMAIL, "Invalid email format")
    return Success(value=email)


def validate_choice(
    value: Any, choices: type[Enum], field_name: str
) -> Result[Any, ValidationError]:
    """Validate that a value is a member (or member value) of an enum."""
    if value is None or isinstance(value, choices):
        return Success(value=value)
    allowed = {member.value for member in choices}
    if value not in allowed:
        return _fail(
            field_name,
            ErrorCode.INVALID_CHOICE,
            f"{field_name} must be one of: {', '.join(sorted(map(str, allowed)))}",
        )
    return Success(value=value)


def collect_violations(
    *results: Result[Any, ValidationError],
) -> Result[None, ValidationError]:
    """Fold single-field results into one outcome.

    Returns:
        Success(None) if every check passed, otherwise a Failure whose
        ValidationError lists every violation in check order.
    """
    violations = [
        Violation(
            field=result.error.field or "",
            code=result.error.code,
            message=result.error.message,
        )
        for result in results
        if isinstance(result, Failure)
    ]
    if violations:
        return Failure(error=ValidationError.from_violations(violations))
    return Success(value=None)
