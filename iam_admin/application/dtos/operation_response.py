"""Transport-neutral response envelope.

Handlers return ``Result[T, DomainError]``; transport layers (out of scope
here) normalize it with ``OperationResponse.from_result``.
"""

from dataclasses import dataclass
from typing import Any

from iam_admin.application.dtos.serialization import error_to_data, to_data
from iam_admin.core.errors import DomainError
from iam_admin.core.result import Failure, Result, Success


@dataclass(frozen=True, kw_only=True)
class OperationResponse:
    """Normalized outcome of a command or query.

    Attributes:
        success: Whether the operation succeeded.
        message: Human-readable summary.
        error: Error data on failure (type, code, message, details, ...).
        data: Result data on success.

    Example:
        >>> result = await handler.handle(command)
        >>> response = OperationResponse.from_result(result, message="Department created")
        >>> response.to_dict()
        {'success': True, 'message': 'Department created', 'error': None, 'data': {...}}
    """

    success: bool
    message: str
    error: dict[str, Any] | None = None
    data: Any = None

    @classmethod
    def from_result(
        cls, result: Result[Any, DomainError], *, message: str = "OK"
    ) -> "OperationResponse":
        match result:
            case Success(value=value):
                return cls(success=True, message=message, data=to_data(value))
            case Failure(error=error):
                return cls(success=False, message=error.message, error=error_to_data(error))
        raise TypeError(f"Not a Result: {type(result).__name__}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "error": self.error,
            "data": self.data,
        }
