"""
Generic paginated response schema.
Used by list endpoints to provide consistent pagination metadata.
"""
from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, computed_field

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """Items for one page plus total count, page number, page size and page count."""

    items: list[T]
    total: int
    page: int
    size: int

    @computed_field  # type: ignore[misc]
    @property
    def pages(self) -> int:
        if self.size == 0:
            return 0
        return math.ceil(self.total / self.size)

    @classmethod
    def build(
        cls, rows: Iterable[Any], *, total: int, page: int, size: int
    ) -> "PaginatedResponse[T]":
        """Validate ORM rows into the concrete item type of this response."""
        return cls.model_validate(
            {"items": list(rows), "total": total, "page": page, "size": size},
            from_attributes=True,
        )

    model_config = {"from_attributes": True}
