"""Infrastructure fault construction.

Adapters catch driver exceptions at their boundary and re-raise them as
``InfrastructureFault`` carrying an ``InfrastructureError`` value. Command and
query handlers convert the fault back into a ``Failure``.

Architecture:
- InfrastructureErrorCode tracks the failure internally (logged)
- The carried error uses domain ErrorCode (STORE_TIMEOUT, STORE_UNAVAILABLE,
  DISPATCH_FAILED) when flowing to the application layer
- Connection-level failures are retryable; data errors are not
"""

from enum import Enum

from pymongo import errors as mongo_errors
from sqlalchemy import exc as sa_exc

from iam_admin.core.enums import ErrorCode
from iam_admin.core.errors import InfrastructureError, InfrastructureFault


class InfrastructureErrorCode(Enum):
    """Internal codes for tracking infrastructure failures."""

    DATABASE_CONNECTION_FAILED = "database_connection_failed"
    DATABASE_TIMEOUT = "database_timeout"
    DATABASE_ERROR = "database_error"
    READ_STORE_CONNECTION_FAILED = "read_store_connection_failed"
    READ_STORE_TIMEOUT = "read_store_timeout"
    READ_STORE_ERROR = "read_store_error"
    OPERATION_TIMEOUT = "operation_timeout"


def make_fault(
    operation: str,
    code: ErrorCode,
    infrastructure_code: InfrastructureErrorCode,
    message: str,
    *,
    retryable: bool = True,
) -> InfrastructureFault:
    return InfrastructureFault(
        InfrastructureError(
            code=code,
            message=message,
            operation=operation,
            retryable=retryable,
            details={"infrastructure_code": infrastructure_code.value},
        )
    )


def database_fault(operation: str, exc: sa_exc.SQLAlchemyError) -> InfrastructureFault:
    """Map a SQLAlchemy exception to a fault.

    Args:
        operation: Operation name (e.g. ``department.save``).
        exc: Exception raised by the session or engine.
    """
    if isinstance(exc, sa_exc.TimeoutError):
        return make_fault(
            operation,
            ErrorCode.STORE_TIMEOUT,
            InfrastructureErrorCode.DATABASE_TIMEOUT,
            "Write store connection pool timed out",
        )
    if isinstance(exc, (sa_exc.OperationalError, sa_exc.InterfaceError)) or (
        isinstance(exc, sa_exc.DBAPIError) and exc.connection_invalidated
    ):
        return make_fault(
            operation,
            ErrorCode.STORE_UNAVAILABLE,
            InfrastructureErrorCode.DATABASE_CONNECTION_FAILED,
            "Write store is unavailable",
        )
    return make_fault(
        operation,
        ErrorCode.STORE_UNAVAILABLE,
        InfrastructureErrorCode.DATABASE_ERROR,
        f"Write store error: {type(exc).__name__}",
        retryable=False,
    )


def read_store_fault(operation: str, exc: mongo_errors.PyMongoError) -> InfrastructureFault:
    """Map a PyMongo exception to a fault."""
    if isinstance(exc, (mongo_errors.ExecutionTimeout, mongo_errors.NetworkTimeout)):
        return make_fault(
            operation,
            ErrorCode.STORE_TIMEOUT,
            InfrastructureErrorCode.READ_STORE_TIMEOUT,
            "Read store operation timed out",
        )
    if isinstance(exc, mongo_errors.ConnectionFailure):
        return make_fault(
            operation,
            ErrorCode.STORE_UNAVAILABLE,
            InfrastructureErrorCode.READ_STORE_CONNECTION_FAILED,
            "Read store is unavailable",
        )
    return make_fault(
        operation,
        ErrorCode.STORE_UNAVAILABLE,
        InfrastructureErrorCode.READ_STORE_ERROR,
        f"Read store error: {type(exc).__name__}",
        retryable=False,
    )
