"""1-indexed pagination shared by every list operation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, TypeVar

from .exceptions import ValidationError

T = TypeVar("T")
U = TypeVar("U")

DEFAULT_MAX_PAGE_SIZE = 100


@dataclass(slots=True, frozen=True)
class PageRequest:
    page: int = 1
    page_size: int = 10

    @classmethod
    def build(cls, page: int, page_size: int, max_page_size: int = DEFAULT_MAX_PAGE_SIZE) -> "PageRequest":
        if page < 1:
            raise ValidationError("page must be >= 1")
        if page_size < 1 or page_size > max_page_size:
            raise ValidationError(f"page_size must be between 1 and {max_page_size}")
        return cls(page=page, page_size=page_size)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size

    def is_beyond(self, total: int) -> bool:
        """True when the page's lower bound falls outside ``total`` rows."""
        return total == 0 or self.offset >= total

    def empty(self, total: int = 0) -> "Page":
        return Page(data=[], total=total, page=self.page, page_size=self.page_size)


@dataclass(slots=True)
class Page(Generic[T]):
    data: list[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 10

    def map(self, func: Callable[[T], U]) -> "Page[U]":
        return Page(
            data=[func(item) for item in self.data],
            total=self.total,
            page=self.page,
            page_size=self.page_size,
        )
