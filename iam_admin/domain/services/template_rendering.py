"""Placeholder handling for notification templates.

Placeholders use ``{{ name }}`` syntax; whitespace inside the braces is
ignored. Every placeholder must be declared in the template's variables.
"""

import re
from collections.abc import Mapping

from iam_admin.core.enums import ErrorCode
from iam_admin.core.errors import BusinessRuleViolation
from iam_admin.core.result import Failure, Result, Success
from iam_admin.domain.errors import Rule

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([a-zA-Z_][a-zA-Z0-9_]*)\s*\}\}")


def placeholders(*texts: str | None) -> list[str]:
    """Placeholder names used in the given texts, first occurrence order."""
    found: dict[str, None] = {}
    for text in texts:
        if text:
            for name in PLACEHOLDER_PATTERN.findall(text):
                found.setdefault(name, None)
    return list(found)


def check_declared_variables(
    subject: str | None, content: str, variables: tuple[str, ...] | list[str]
) -> Result[None, BusinessRuleViolation]:
    """Reject templates using placeholders they do not declare."""
    undeclared = [name for name in placeholders(subject, content) if name not in variables]
    if undeclared:
        return Failure(
            error=BusinessRuleViolation(
                code=ErrorCode.UNDECLARED_TEMPLATE_VARIABLE,
                message=f"Undeclared template variables: {', '.join(undeclared)}",
                rule=Rule.DECLARED_VARIABLES,
                field="variables",
            )
        )
    return Success(value=None)


def check_values_provided(
    subject: str | None, content: str, values: Mapping[str, object]
) -> Result[None, BusinessRuleViolation]:
    """Reject a render request that lacks a value for any placeholder.

    Returns:
        Success(None), or Failure naming every missing value.
    """
    missing = [name for name in placeholders(subject, content) if name not in values]
    if missing:
        return Failure(
            error=BusinessRuleViolation(
                code=ErrorCode.MISSING_TEMPLATE_VALUE,
                message=f"Missing values for: {', '.join(missing)}",
                rule=Rule.VALUES_PROVIDED,
                field="values",
            )
        )
    return Success(value=None)


def render(text: str, values: Mapping[str, object]) -> str:
    """Substitute placeholder values into ``text``.

    Raises:
        KeyError: A placeholder has no value (run ``check_values_provided`` first).
    """
    return PLACEHOLDER_PATTERN.sub(lambda match: str(values[match.group(1)]), text)
