"""Product service layer (Use Cases).

Orchestrates the write side of the catalog, delegating persistence to
the injected ``IProductRepository``.  Every command is atomic: the
service defines the unit-of-work boundary.

Business rules enforced here:
- SKU must be unique (checked on create, backed by the unique index).
- Price / quantity / weight bounds (validated by the DTOs).
- Stock adjustments go through the entity so OUT_OF_STOCK / ACTIVE
  transitions always apply; the row is locked while it is adjusted.
- Status can be set to any value directly (no state machine).
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Optional
from uuid import UUID

import structlog
from django.db import IntegrityError, transaction

from modules.products.constants import ProductStatus
from modules.products.events import (
    ProductCreated,
    ProductDeleted,
    ProductQuantityAdjusted,
    ProductStatusChanged,
    ProductUpdated,
)
from modules.products.exceptions import (
    DuplicateSkuError,
    InsufficientQuantityError,
    InvalidStatusError,
    ProductNotFound,
)
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository
    from shared.domain.bus import IEventBus
    from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    When an ``IEventBus`` is given, each successful command publishes one
    domain event after the surrounding transaction commits.
    """

    def __init__(
        self,
        repository: IProductRepository,
        event_bus: Optional[IEventBus] = None,
    ) -> None:
        self._repo = repository
        self._event_bus = event_bus

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, dto: CreateProductDTO) -> Product:
        """Create a new product after enforcing SKU uniqueness.

        Raises:
            DuplicateSkuError: if the SKU is already taken.
        """
        log = logger.bind(sku=dto.sku)

        if self._repo.exists_by_sku(dto.sku):
            log.warning("product.duplicate_sku")
            raise DuplicateSkuError(f"SKU '{dto.sku}' already registered.")

        product = Product(
            sku=dto.sku,
            name=dto.name,
            description=dto.description,
            price=dto.price,
            quantity=dto.quantity,
            category_id=dto.category_id,
            image_urls=list(dto.image_urls),
            status=dto.status,
            brand=dto.brand,
            weight=dto.weight,
        )
        try:
            product = self._repo.save(product)
        except IntegrityError as exc:
            log.warning("product.duplicate_sku", race=True)
            raise DuplicateSkuError(f"SKU '{dto.sku}' already registered.") from exc
        if dto.tags:
            self._repo.replace_tags(product, dto.tags)

        log.info("product.created", product_id=str(product.id), status=product.status)
        self._publish(ProductCreated(aggregate_id=product.id, sku=product.sku))
        return product

    @transaction.atomic
    def update(self, id: str, dto: UpdateProductDTO) -> Product:
        """Replace every mutable attribute of a product.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_for_update(id)
        if product is None:
            raise ProductNotFound(f"Product {id} not found.")

        log = logger.bind(product_id=str(product.id), sku=product.sku)

        changes = dto.apply_to(product)
        product = self._repo.save(product)
        if changes.tags_changed:
            self._repo.replace_tags(product, dto.tags)

        if changes.price_changed:
            log.info("product.price_changed", price=str(product.price))
        if changes.quantity_changed:
            log.info("product.quantity_changed", quantity=product.quantity)
        if changes.status_changed:
            log.info("product.status_changed", status=product.status)
        log.info("product.updated")

        self._publish(
            ProductUpdated(
                aggregate_id=product.id,
                price_changed=changes.price_changed,
                quantity_changed=changes.quantity_changed,
                status_changed=changes.status_changed,
            )
        )
        return product

    @transaction.atomic
    def delete(self, id: str) -> None:
        """Hard-delete a product; its tags go with it.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        if not self._repo.delete(id):
            raise ProductNotFound(f"Product {id} not found.")
        logger.info("product.deleted", product_id=str(id))
        self._publish(ProductDeleted(aggregate_id=UUID(str(id))))

    @transaction.atomic
    def update_status(self, id: str, status: str) -> None:
        """Set the status of a product directly.

        Bypasses the entity's automatic transitions; any status may be
        set from any other.

        Raises:
            InvalidStatusError: if ``status`` is not a ``ProductStatus`` value.
            ProductNotFound: if no row was updated.
        """
        try:
            new_status = ProductStatus(status)
        except ValueError as exc:
            raise InvalidStatusError(f"Unknown product status '{status}'.") from exc

        if self._repo.update_status(id, new_status) == 0:
            raise ProductNotFound(f"Product {id} not found.")

        logger.info("product.status_updated", product_id=str(id), status=new_status.value)
        self._publish(ProductStatusChanged(aggregate_id=UUID(str(id)), status=new_status.value))

    @transaction.atomic
    def adjust_quantity(self, id: str, delta: int) -> Product:
        """Apply a signed stock delta under a row lock.

        A negative delta decreases stock (reaching zero forces
        OUT_OF_STOCK); a positive one restocks (OUT_OF_STOCK becomes
        ACTIVE).  Zero is a no-op that still refreshes ``updated_at``.

        Raises:
            ProductNotFound: if the product does not exist.
            InsufficientQuantityError: if the decrease exceeds the stock;
                nothing is written.
        """
        product = self._repo.get_for_update(id)
        if product is None:
            raise ProductNotFound(f"Product {id} not found.")

        log = logger.bind(product_id=str(product.id), sku=product.sku)
        previous_quantity = product.quantity

        try:
            product.apply_quantity_delta(delta)
        except InsufficientQuantityError:
            log.warning(
                "product.insufficient_quantity",
                requested=-delta,
                available=previous_quantity,
            )
            raise

        product = self._repo.save(product)
        log.info(
            "product.quantity_adjusted",
            delta=delta,
            previous_quantity=previous_quantity,
            quantity=product.quantity,
            status=product.status,
        )
        self._publish(
            ProductQuantityAdjusted(
                aggregate_id=product.id,
                delta=delta,
                quantity=product.quantity,
                status=str(product.status),
            )
        )
        return product

    def update_quantity(self, id: str, delta: int) -> Product:
        """Alias of :meth:`adjust_quantity`."""
        return self.adjust_quantity(id, delta)

    # ------------------------------------------------------------------
    # Domain events
    # ------------------------------------------------------------------

    def _publish(self, event: DomainEvent) -> None:
        if self._event_bus is None:
            return
        transaction.on_commit(partial(self._event_bus.publish, event), robust=True)
