"""Event handlers for Products domain events."""

from __future__ import annotations

import structlog

from modules.products.events import (
    ProductCreated,
    ProductDeleted,
    ProductQuantityAdjusted,
    ProductStatusChanged,
    ProductUpdated,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class ProductCreatedHandler(IEventHandler[ProductCreated]):
    def handle(self, event: ProductCreated) -> None:
        logger.info(
            "product.audit.created",
            product_id=str(event.aggregate_id),
            sku=event.sku,
        )


class ProductUpdatedHandler(IEventHandler[ProductUpdated]):
    def handle(self, event: ProductUpdated) -> None:
        logger.info(
            "product.audit.updated",
            product_id=str(event.aggregate_id),
            price_changed=event.price_changed,
            quantity_changed=event.quantity_changed,
            status_changed=event.status_changed,
        )


class ProductDeletedHandler(IEventHandler[ProductDeleted]):
    def handle(self, event: ProductDeleted) -> None:
        logger.info("product.audit.deleted", product_id=str(event.aggregate_id))


class ProductStatusChangedHandler(IEventHandler[ProductStatusChanged]):
    def handle(self, event: ProductStatusChanged) -> None:
        logger.info(
            "product.audit.status_changed",
            product_id=str(event.aggregate_id),
            status=event.status,
        )


class ProductQuantityAdjustedHandler(IEventHandler[ProductQuantityAdjusted]):
    def handle(self, event: ProductQuantityAdjusted) -> None:
        logger.info(
            "product.audit.quantity_adjusted",
            product_id=str(event.aggregate_id),
            delta=event.delta,
            quantity=event.quantity,
            status=event.status,
        )


product_created_handler = ProductCreatedHandler()
product_updated_handler = ProductUpdatedHandler()
product_deleted_handler = ProductDeletedHandler()
product_status_changed_handler = ProductStatusChangedHandler()
product_quantity_adjusted_handler = ProductQuantityAdjustedHandler()
