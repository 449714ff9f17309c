"""Machine-readable error codes.

Codes follow ENTITY_ACTION_REASON naming where an entity applies and are
grouped by the error class that normally carries them.
"""

from enum import Enum


class ErrorCode(Enum):
    """Machine-readable error codes shared by every layer."""

    # Validation errors (ValidationError)
    VALIDATION_FAILED = "validation_failed"
    FIELD_REQUIRED = "field_required"
    FIELD_TOO_SHORT = "field_too_short"
    FIELD_TOO_LONG = "field_too_long"
    INVALID_FORMAT = "invalid_format"
    INVALID_EMAIL = "invalid_email"
    INVALID_CHOICE = "invalid_choice"
    INVALID_PAGINATION = "invalid_pagination"

    # Business rule violations (BusinessRuleViolation)
    DUPLICATE_NAME = "duplicate_name"
    DUPLICATE_CODE = "duplicate_code"
    DUPLICATE_DOMAIN = "duplicate_domain"
    DUPLICATE_EMAIL = "duplicate_email"
    DUPLICATE_USERNAME = "duplicate_username"
    REFERENCE_NOT_FOUND = "reference_not_found"
    REFERENCE_SCOPE_MISMATCH = "reference_scope_mismatch"
    INVALID_HIERARCHY = "invalid_hierarchy"
    HIERARCHY_TOO_DEEP = "hierarchy_too_deep"
    INVALID_STATE_TRANSITION = "invalid_state_transition"
    HAS_CHILDREN = "has_children"
    UNDECLARED_TEMPLATE_VARIABLE = "undeclared_template_variable"
    MISSING_TEMPLATE_VALUE = "missing_template_value"

    # Resource errors (NotFoundError)
    RESOURCE_NOT_FOUND = "resource_not_found"

    # Concurrency (ConcurrencyConflict)
    CONCURRENCY_CONFLICT = "concurrency_conflict"

    # Infrastructure (InfrastructureError)
    STORE_TIMEOUT = "store_timeout"
    STORE_UNAVAILABLE = "store_unavailable"
    DISPATCH_FAILED = "dispatch_failed"

    # Projection (ProjectionError)
    PROJECTION_FAILED = "projection_failed"

    # Catch-all for unexpected failures
    INTERNAL_ERROR = "internal_error"
