"""Paging value objects shared by repositories and query services.

``PageRequest`` describes the window a caller wants (0-based page index,
page size, sort keys in Django ``order_by`` notation).  ``Page`` is the
window actually returned together with the total match count.

``paginate`` turns any ordered QuerySet into a ``Page`` using Django's
``Paginator``; a page index past the end yields an empty window rather
than an error.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, ClassVar, Generic, Optional, TypeVar

from django.core.paginator import EmptyPage, Paginator
from django.db import models
from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")
U = TypeVar("U")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class PageRequest(BaseModel):
    """Immutable paging request.

    Subclasses restrict ``sort`` keys by setting ``SORTABLE_FIELDS``.
    ``sort`` accepts a tuple/list or a comma-separated string
    (``"-price,name"``).
    """

    model_config = ConfigDict(frozen=True)

    SORTABLE_FIELDS: ClassVar[Optional[frozenset[str]]] = None
    DEFAULT_SORT: ClassVar[tuple[str, ...]] = ("-created_at",)

    page: int = Field(default=0, ge=0)
    size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    sort: tuple[str, ...] = ()

    @field_validator("sort", mode="before")
    @classmethod
    def split_sort(cls, v):
        if v is None:
            return ()
        if isinstance(v, str):
            return tuple(part.strip() for part in v.split(",") if part.strip())
        return tuple(v)

    @field_validator("sort")
    @classmethod
    def sort_fields_must_be_allowed(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if cls.SORTABLE_FIELDS is None:
            return v
        for key in v:
            name = key[1:] if key.startswith("-") else key
            if name not in cls.SORTABLE_FIELDS:
                raise ValueError(f"Cannot sort by '{name}'.")
        return v

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def ordering(self) -> tuple[str, ...]:
        """Sort keys with a primary-key tie-breaker for stable windows."""
        keys = self.sort or self.DEFAULT_SORT
        if any(k.lstrip("-") in ("id", "pk") for k in keys):
            return keys
        return (*keys, "-id")


@dataclass(frozen=True)
class Page(Generic[T]):
    """A bounded window of results plus total count and paging metadata."""

    content: list[T]
    page: int
    size: int
    total_elements: int
    sort: tuple[str, ...] = field(default_factory=tuple)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size) if self.size else 0

    @property
    def number_of_elements(self) -> int:
        return len(self.content)

    @property
    def has_next(self) -> bool:
        return self.page + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    @property
    def is_empty(self) -> bool:
        return not self.content

    def map(self, fn: Callable[[T], U]) -> Page[U]:
        """Return a page with the same metadata and transformed content."""
        return Page(
            content=[fn(item) for item in self.content],
            page=self.page,
            size=self.size,
            total_elements=self.total_elements,
            sort=self.sort,
        )


def paginate(queryset: models.QuerySet, page_request: PageRequest) -> Page:
    """Slice an (unordered) QuerySet into a ``Page`` per ``page_request``."""
    ordering = page_request.ordering
    paginator = Paginator(queryset.order_by(*ordering), page_request.size)
    try:
        content = list(paginator.page(page_request.page + 1).object_list)
    except EmptyPage:
        content = []
    return Page(
        content=content,
        page=page_request.page,
        size=page_request.size,
        total_elements=paginator.count,
        sort=page_request.sort or page_request.DEFAULT_SORT,
    )
