"""Generic repository interface.

``IRepository[T]`` is the contract every aggregate repository extends.
Services and selectors depend on it, never on the Django ORM directly.

Implementations follow the null-object convention: a missing row is
reported as ``None``, ``False`` or an empty list, and the calling
service decides whether that is an error.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base contract for an aggregate ``T`` keyed by a string id."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Return the entity, or ``None`` when absent or ``id`` is malformed."""

    @abstractmethod
    def get_by_ids(self, ids: Sequence[str]) -> List[T]:
        """Return the entities found among ``ids``, in request order."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Remove an entity; ``False`` when nothing was removed."""
