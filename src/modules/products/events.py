"""Domain events for the Products bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class ProductCreated(DomainEvent):
    """Raised when a product is created."""

    sku: str


@dataclass(frozen=True, kw_only=True)
class ProductUpdated(DomainEvent):
    """Raised when a product is replaced through a full update."""

    price_changed: bool = False
    quantity_changed: bool = False
    status_changed: bool = False


@dataclass(frozen=True)
class ProductDeleted(DomainEvent):
    """Raised when a product is hard-deleted."""


@dataclass(frozen=True, kw_only=True)
class ProductStatusChanged(DomainEvent):
    """Raised when a status is set directly."""

    status: str


@dataclass(frozen=True, kw_only=True)
class ProductQuantityAdjusted(DomainEvent):
    """Raised after a stock adjustment, carrying the resulting state."""

    delta: int
    quantity: int
    status: str
