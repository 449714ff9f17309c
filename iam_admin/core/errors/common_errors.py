"""Error classes shared by every layer.

Error Types:
- ValidationError: malformed input, detected without I/O (all violations)
- BusinessRuleViolation: uniqueness, references, hierarchy, state transitions
- NotFoundError: entity or read document does not exist (or is deleted)
- ConcurrencyConflict: optimistic version check failed
- InfrastructureError: a store or the dispatcher is unavailable or timed out
- ProjectionError: a projector could not apply an event

Usage:
    from iam_admin.core.errors import BusinessRuleViolation
    from iam_admin.core.enums import ErrorCode
    from iam_admin.core.result import Failure

    return Failure(error=BusinessRuleViolation(
        code=ErrorCode.DUPLICATE_CODE,
        message="Department code already exists in tenant",
        rule="unique_code",
        field="code",
    ))
"""

from dataclasses import dataclass

from iam_admin.core.enums import ErrorCode
from iam_admin.core.errors.domain_error import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class Violation:
    """A single failed input check.

    Attributes:
        field: Input field name.
        code: Error code for this check.
        message: Human-readable message.
    """

    field: str
    code: ErrorCode
    message: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationError(DomainError):
    """Input validation failure carrying every violation found.

    Attributes:
        field: First offending field (convenience for single-field errors).
        violations: All violations, in check order.
    """

    field: str | None = None
    violations: tuple[Violation, ...] = ()

    @classmethod
    def from_violations(cls, violations: list[Violation]) -> "ValidationError":
        """Build a ValidationError summarizing the given violations."""
        fields = ", ".join(dict.fromkeys(v.field for v in violations))
        return cls(
            code=ErrorCode.VALIDATION_FAILED,
            message=f"Validation failed for: {fields}",
            field=violations[0].field if violations else None,
            violations=tuple(violations),
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class BusinessRuleViolation(DomainError):
    """A business rule rejected the operation.

    Attributes:
        rule: Short rule identifier (e.g. ``unique_code``, ``no_children``).
        field: Field the rule concerns, when there is one.
    """

    rule: str
    field: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NotFoundError(DomainError):
    """Resource not found.

    Attributes:
        resource_type: Aggregate type or document kind.
        resource_id: Identifier that was looked up.
    """

    resource_type: str
    resource_id: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ConcurrencyConflict(DomainError):
    """Another writer changed the entity first.

    Attributes:
        resource_type: Aggregate type.
        resource_id: Aggregate id.
        expected_version: Version the writer based its change on.
        actual_version: Version found in the store, when known.
    """

    resource_type: str
    resource_id: str
    expected_version: int
    actual_version: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class InfrastructureError(DomainError):
    """A store or the dispatcher failed.

    Attributes:
        operation: Operation that failed (e.g. ``department.save``).
        retryable: Whether retrying the same call may succeed.
    """

    operation: str
    retryable: bool = True


@dataclass(frozen=True, slots=True, kw_only=True)
class ProjectionError(DomainError):
    """A projector failed to apply an event.

    Attributes:
        event_id: Event that could not be applied.
        aggregate_id: Aggregate the event belongs to.
        projector: Name of the failing projector.
    """

    event_id: str
    aggregate_id: str
    projector: str
