"""Unit tests for Result types and error values.

Tests cover:
- Success / Failure construction and keyword pattern matching
- Immutability of result and error values
- DomainError string form and subclass fields
- InfrastructureFault wrapping an InfrastructureError

Architecture:
- Pure value objects, no mocking required
"""

from dataclasses import FrozenInstanceError

import pytest

from iam_admin.core.enums import ErrorCode
from iam_admin.core.errors import (
    BusinessRuleViolation,
    ConcurrencyConflict,
    DomainError,
    InfrastructureError,
    InfrastructureFault,
    NotFoundError,
)
from iam_admin.core.result import Failure, Success


@pytest.mark.unit
class TestResult:
    """Test Success and Failure."""

    def test_success_holds_value(self):
        """Test Success exposes its value."""
        assert Success(value=42).value == 42

    def test_failure_holds_error(self):
        """Test Failure exposes its error."""
        error = DomainError(code=ErrorCode.INTERNAL_ERROR, message="boom")

        assert Failure(error=error).error is error

    def test_results_are_immutable(self):
        """Test frozen dataclasses reject assignment."""
        result = Success(value=1)

        with pytest.raises(FrozenInstanceError):
            result.value = 2  # type: ignore[misc]

    def test_keyword_pattern_matching(self):
        """Test match statements destructure with keyword patterns."""
        matched = None
        match Failure(error="nope"):
            case Success(value=value):
                matched = ("ok", value)
            case Failure(error=error):
                matched = ("err", error)

        assert matched == ("err", "nope")

    def test_positional_construction_is_rejected(self):
        """Test kw_only forbids positional arguments."""
        with pytest.raises(TypeError):
            Success(1)  # type: ignore[misc]


@pytest.mark.unit
class TestDomainErrors:
    """Test error value classes."""

    def test_str_combines_code_and_message(self):
        """Test __str__ renders 'code: message'."""
        error = NotFoundError(
            code=ErrorCode.RESOURCE_NOT_FOUND,
            message="department not found",
            resource_type="department",
            resource_id="D1",
        )

        assert str(error) == "resource_not_found: department not found"

    def test_domain_error_is_not_an_exception(self):
        """Test errors are values, never raised."""
        assert not issubclass(DomainError, Exception)

    def test_business_rule_violation_fields(self):
        """Test rule and field are carried."""
        error = BusinessRuleViolation(
            code=ErrorCode.HAS_CHILDREN,
            message="Department has sub-departments",
            rule="no_children",
            field="id",
        )

        assert error.rule == "no_children"
        assert error.field == "id"
        assert error.details is None

    def test_concurrency_conflict_actual_version_optional(self):
        """Test actual_version defaults to None."""
        error = ConcurrencyConflict(
            code=ErrorCode.CONCURRENCY_CONFLICT,
            message="Version mismatch",
            resource_type="tenant",
            resource_id="T1",
            expected_version=3,
        )

        assert error.actual_version is None


@pytest.mark.unit
class TestInfrastructureFault:
    """Test InfrastructureFault exception."""

    def test_fault_wraps_error_value(self):
        """Test the fault carries its error and message."""
        error = InfrastructureError(
            code=ErrorCode.STORE_TIMEOUT,
            message="Write store timed out",
            operation="department.save",
        )

        fault = InfrastructureFault(error)

        assert fault.error is error
        assert fault.retryable is True
        assert str(fault) == "store_timeout: Write store timed out"

    def test_non_retryable_fault(self):
        """Test retryable mirrors the error value."""
        error = InfrastructureError(
            code=ErrorCode.STORE_UNAVAILABLE,
            message="Bad query",
            operation="user.find",
            retryable=False,
        )

        assert InfrastructureFault(error).retryable is False
