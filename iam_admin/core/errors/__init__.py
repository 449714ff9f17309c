"""Core errors package.

Usage:
    from iam_admin.core.errors import DomainError, ValidationError, NotFoundError
"""

from iam_admin.core.errors.common_errors import (
    BusinessRuleViolation,
    ConcurrencyConflict,
    InfrastructureError,
    NotFoundError,
    ProjectionError,
    ValidationError,
    Violation,
)
from iam_admin.core.errors.domain_error import DomainError
from iam_admin.core.errors.faults import InfrastructureFault

__all__ = [
    "DomainError",
    "Violation",
    "ValidationError",
    "BusinessRuleViolation",
    "NotFoundError",
    "ConcurrencyConflict",
    "InfrastructureError",
    "ProjectionError",
    "InfrastructureFault",
]
