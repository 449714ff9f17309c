"""Result types for railway-oriented programming.

Expected failures (validation, business rules, missing entities, version
conflicts) travel as ``Failure`` values instead of exceptions, so callers
handle them explicitly.

Usage:
    def find(tenant_id: str) -> Result[Tenant, NotFoundError]:
        ...

    result = await find("T1")
    match result:
        case Success(value=tenant):
            ...
        case Failure(error=error):
            ...

Note:
    Both classes are keyword-only, so pattern matching must use keyword
    patterns (``Success(value=v)``), not positional ones.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Successful outcome.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Failed outcome.

    Attributes:
        error: The error that occurred.
    """

    error: E


type Result[T, E] = Success[T] | Failure[E]
