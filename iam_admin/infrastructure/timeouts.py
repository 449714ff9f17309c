"""Bounded waits for store and dispatch calls."""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from iam_admin.core.enums import ErrorCode
from iam_admin.infrastructure.errors import InfrastructureErrorCode, make_fault

T = TypeVar("T")


async def with_timeout(awaitable: Awaitable[T], seconds: float, operation: str) -> T:
    """Await ``awaitable`` for at most ``seconds``.

    Raises:
        InfrastructureFault: STORE_TIMEOUT (retryable) when the bound is exceeded.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=seconds)
    except TimeoutError as exc:
        raise make_fault(
            operation,
            ErrorCode.STORE_TIMEOUT,
            InfrastructureErrorCode.OPERATION_TIMEOUT,
            f"{operation} exceeded {seconds}s",
        ) from exc
