"""RPC-style facade over the catalog engines.

``ListingService`` exposes the listing surface as plain method calls
taking plain values (strings, numbers, lists), the shape a generated RPC
servicer would delegate to.  It is not bound to any network server.
Like the REST views, it only routes: it builds DTOs and page requests,
calls the selector or the service, and renders ``ProductOutputDTO``s.
"""

from __future__ import annotations

import time
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional, Sequence

import structlog

from modules.core.exceptions import InvalidInputError
from modules.core.pagination import Page
from modules.products.dtos import (
    CreateProductDTO,
    ProductOutputDTO,
    ProductPageRequest,
    UpdateProductDTO,
)
from modules.products.exceptions import ProductNotFound

if TYPE_CHECKING:
    from modules.products.selectors import ProductSelector
    from modules.products.services import ProductService

logger = structlog.get_logger(__name__)

SORT_DIRECTIONS = {"ASC": "", "DESC": "-"}


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class ListingService:
    """Plain-call listing API routed to ``ProductSelector`` / ``ProductService``."""

    def __init__(self, selector: ProductSelector, service: ProductService) -> None:
        self._selector = selector
        self._service = service

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_product(self, product_id: str) -> ProductOutputDTO:
        logger.info("rpc.get_product", product_id=str(product_id))
        started = time.perf_counter()
        try:
            product = self._selector.get_by_id_or_fail(product_id)
        except ProductNotFound:
            logger.warning(
                "rpc.get_product.not_found",
                product_id=str(product_id),
                duration_ms=_elapsed_ms(started),
            )
            raise
        logger.debug(
            "rpc.get_product.done",
            product_id=str(product.id),
            sku=product.sku,
            duration_ms=_elapsed_ms(started),
        )
        return ProductOutputDTO.from_entity(product)

    def get_product_by_sku(self, sku: str) -> ProductOutputDTO:
        logger.info("rpc.get_product_by_sku", sku=sku)
        product = self._selector.get_by_sku(sku)
        if product is None:
            raise ProductNotFound(f"Product not found with SKU: {sku}")
        return ProductOutputDTO.from_entity(product)

    def list_products(
        self,
        page: int = 0,
        size: int = 20,
        sort_by: str = "created_at",
        sort_direction: str = "DESC",
    ) -> Page[ProductOutputDTO]:
        """List every product sorted by one field.

        Raises:
            InvalidInputError: if ``sort_direction`` is not ASC or DESC.
        """
        logger.info("rpc.list_products", page=page, size=size)
        try:
            prefix = SORT_DIRECTIONS[sort_direction.upper()]
        except KeyError as exc:
            raise InvalidInputError(f"Invalid sort direction '{sort_direction}'.") from exc
        page_request = ProductPageRequest(page=page, size=size, sort=(f"{prefix}{sort_by}",))
        return self._selector.list_all(page_request).map(ProductOutputDTO.from_entity)

    def search_products(self, query: str, page: int = 0, size: int = 20) -> Page[ProductOutputDTO]:
        logger.info("rpc.search_products", query=query)
        page_request = ProductPageRequest(page=page, size=size)
        return self._selector.search(query, page_request).map(ProductOutputDTO.from_entity)

    def get_products_by_category(
        self, category_id: str, page: int = 0, size: int = 20
    ) -> Page[ProductOutputDTO]:
        logger.info("rpc.get_products_by_category", category_id=str(category_id))
        page_request = ProductPageRequest(page=page, size=size)
        return self._selector.list_by_category(category_id, page_request).map(
            ProductOutputDTO.from_entity
        )

    def get_available_products(self, page: int = 0, size: int = 20) -> Page[ProductOutputDTO]:
        logger.info("rpc.get_available_products")
        page_request = ProductPageRequest(page=page, size=size)
        return self._selector.list_available(page_request).map(ProductOutputDTO.from_entity)

    def get_products_by_price_range(
        self, min_price: Decimal, max_price: Decimal, page: int = 0, size: int = 20
    ) -> Page[ProductOutputDTO]:
        logger.info("rpc.get_products_by_price_range", min_price=str(min_price), max_price=str(max_price))
        page_request = ProductPageRequest(page=page, size=size)
        return self._selector.list_by_price_range(
            Decimal(min_price), Decimal(max_price), page_request
        ).map(ProductOutputDTO.from_entity)

    def get_products_by_ids(self, product_ids: Sequence[str]) -> List[ProductOutputDTO]:
        logger.info("rpc.get_products_by_ids", requested=len(product_ids))
        started = time.perf_counter()
        products = self._selector.get_by_ids(product_ids)
        logger.info(
            "rpc.get_products_by_ids.done",
            requested=len(product_ids),
            found=len(products),
            duration_ms=_elapsed_ms(started),
        )
        return [ProductOutputDTO.from_entity(p) for p in products]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_product(
        self,
        sku: str,
        name: str,
        price: Decimal,
        description: str = "",
        quantity: int = 0,
        category_id: Optional[str] = None,
        image_urls: Optional[List[str]] = None,
        brand: str = "",
        tags: Optional[List[str]] = None,
    ) -> ProductOutputDTO:
        """Create a product; RPC-created products always start as DRAFT."""
        logger.info("rpc.create_product", sku=sku)
        dto = CreateProductDTO(
            sku=sku,
            name=name,
            description=description,
            price=price,
            quantity=quantity,
            category_id=category_id,
            image_urls=image_urls,
            brand=brand,
            tags=tags,
        )
        return ProductOutputDTO.from_entity(self._service.create(dto))

    def update_product(
        self,
        product_id: str,
        name: str,
        price: Decimal,
        quantity: int,
        status: str,
        description: str = "",
        image_urls: Optional[List[str]] = None,
        brand: str = "",
        tags: Optional[List[str]] = None,
    ) -> ProductOutputDTO:
        """Replace the RPC-visible fields; category and weight are kept as stored."""
        logger.info("rpc.update_product", product_id=str(product_id))
        existing = self._selector.get_by_id_or_fail(product_id)
        dto = UpdateProductDTO(
            name=name,
            description=description,
            price=price,
            quantity=quantity,
            status=status,
            category_id=existing.category_id,
            image_urls=image_urls,
            brand=brand,
            weight=existing.weight,
            tags=tags,
        )
        return ProductOutputDTO.from_entity(self._service.update(product_id, dto))

    def delete_product(self, product_id: str) -> None:
        logger.info("rpc.delete_product", product_id=str(product_id))
        self._service.delete(product_id)

    def update_product_quantity(self, product_id: str, amount: int) -> ProductOutputDTO:
        logger.info("rpc.update_product_quantity", product_id=str(product_id), amount=amount)
        product = self._service.update_quantity(product_id, amount)
        return ProductOutputDTO.from_entity(product)

    def update_product_status(self, product_id: str, status: str) -> None:
        logger.info("rpc.update_product_status", product_id=str(product_id), status=status)
        self._service.update_status(product_id, status)
