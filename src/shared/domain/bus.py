"""Event bus contracts shared by every module.

Publishers depend on ``IEventBus`` only; concrete buses live in
``shared.infrastructure``.
"""

from __future__ import annotations

from typing import Generic, Protocol, Type, TypeVar

from shared.domain.events import DomainEvent

E = TypeVar("E", bound=DomainEvent, contravariant=True)


class IEventHandler(Protocol, Generic[E]):
    """Reacts to one kind of domain event."""

    def handle(self, event: E) -> None: ...


class IEventBus(Protocol):
    """Routes published events to the handlers subscribed for their class."""

    def publish(self, event: DomainEvent) -> None: ...

    def subscribe(self, event_class: Type[E], handler: IEventHandler[E]) -> None: ...

    def unsubscribe(self, event_class: Type[E], handler: IEventHandler[E]) -> bool: ...
