"""Base error value for railway-oriented programming.

DomainError is the base of every expected failure in the system. It does NOT
inherit from Exception: errors are returned inside ``Failure``, never raised.

Usage:
    @dataclass(frozen=True, slots=True, kw_only=True)
    class MyError(DomainError):
        extra: str  # inherits code, message, details
"""

from dataclasses import dataclass

from iam_admin.core.enums import ErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainError:
    """Base error value (not an Exception).

    Attributes:
        code: Machine-readable error code.
        message: Human-readable error message.
        details: Optional string context for debugging.
    """

    code: ErrorCode
    message: str
    details: dict[str, str] | None = None

    def __str__(self) -> str:
        """String representation of error."""
        return f"{self.code.value}: {self.message}"
