"""Pagination request and page result."""

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

from iam_admin.core.enums import ErrorCode
from iam_admin.core.errors import ValidationError, Violation
from iam_admin.core.result import Failure, Result, Success

T = TypeVar("T")

MAX_PAGE_SIZE = 100
SORTABLE_FIELDS = frozenset({"created_at", "updated_at", "name", "code"})


@dataclass(frozen=True, slots=True, kw_only=True)
class PageRequest:
    """Requested page. Pages are 1-based; newest first by default."""

    page: int = 1
    size: int = 20
    sort_by: str = "created_at"
    descending: bool = True

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size

    def validate(self, max_size: int = MAX_PAGE_SIZE) -> Result["PageRequest", ValidationError]:
        """Check bounds: ``page >= 1``, ``1 <= size <= max_size``, known sort key."""
        violations: list[Violation] = []
        if self.page < 1:
            violations.append(
                Violation(
                    field="page",
                    code=ErrorCode.INVALID_PAGINATION,
                    message="page must be at least 1",
                )
            )
        if not 1 <= self.size <= max_size:
            violations.append(
                Violation(
                    field="size",
                    code=ErrorCode.INVALID_PAGINATION,
                    message=f"size must be between 1 and {max_size}",
                )
            )
        if self.sort_by not in SORTABLE_FIELDS:
            violations.append(
                Violation(
                    field="sort_by",
                    code=ErrorCode.INVALID_CHOICE,
                    message=f"sort_by must be one of: {', '.join(sorted(SORTABLE_FIELDS))}",
                )
            )
        if violations:
            return Failure(error=ValidationError.from_violations(violations))
        return Success(value=self)


@dataclass(frozen=True, slots=True, kw_only=True)
class Page(Generic[T]):
    """One page of results."""

    items: list[T]
    total: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.size) if self.size else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages
