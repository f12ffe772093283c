"""Paging, filtering and page containers used by persistence queries."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from spine_mysql.config import ConfigParams, to_nullable_boolean, to_nullable_integer

T = TypeVar("T")


@dataclass
class PagingParams:
    """Skip/take paging request.

    ``total=True`` asks the persistence to also compute the total number
    of matching rows (an extra ``COUNT(*)`` query).
    """

    skip: int | None = None
    take: int | None = None
    total: bool = False

    def get_skip(self, min_skip: int) -> int:
        """Return ``skip`` or ``min_skip`` when unset or smaller."""
        if self.skip is None:
            return min_skip
        return max(self.skip, min_skip)

    def get_take(self, max_take: int) -> int:
        """Return ``take`` capped at ``max_take``; unset or negative means ``max_take``."""
        if self.take is None or self.take < 0:
            return max_take
        return min(self.take, max_take)

    def has_total(self) -> bool:
        return self.total

    @classmethod
    def from_value(cls, value: Any) -> PagingParams:
        if isinstance(value, PagingParams):
            return value
        if isinstance(value, Mapping):
            return cls(
                skip=to_nullable_integer(value.get("skip")),
                take=to_nullable_integer(value.get("take")),
                total=bool(to_nullable_boolean(value.get("total"))),
            )
        return cls()


@dataclass
class DataPage(Generic[T]):
    """One page of results.

    ``total`` is ``None`` when the caller did not request a count, which is
    distinct from ``0`` (no rows matched).
    """

    data: list[T] = field(default_factory=list)
    total: int | None = None

    @property
    def total_computed(self) -> bool:
        return self.total is not None

    def __len__(self) -> int:
        return len(self.data)


class FilterParams(ConfigParams):
    """Free-form filter criteria translated to SQL by concrete persistences."""

    @classmethod
    def from_value(cls, value: Mapping[str, Any] | None) -> FilterParams:
        return cls(value or {})


__all__ = [
    "PagingParams",
    "DataPage",
    "FilterParams",
]
