"""Product selectors (read side).

Query-only use cases for the catalog.  Every method delegates to the
injected ``IProductRepository``; the selector adds argument checks,
defaults and the "or fail" variants, and never writes.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional, Sequence
from uuid import UUID

import structlog

from modules.products.constants import DEFAULT_LOW_STOCK_THRESHOLD, FEATURED_PAGE_SIZE
from modules.products.dtos import ProductPageRequest
from modules.products.exceptions import InvalidRangeError, ProductNotFound
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.core.pagination import Page, PageRequest
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


def _id_key(value) -> UUID | str:
    """Parsed UUID for comparison; malformed ids compare as their raw text."""
    try:
        return value if isinstance(value, UUID) else UUID(str(value))
    except ValueError:
        return str(value)


class ProductSelector:
    """Read-side service for Product queries.

    Receives an ``IProductRepository`` via constructor injection.
    Listing methods accept an optional page request; ``None`` means the
    first page with the default size and sort.
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Point look-ups
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Product]:
        return self._repo.get_by_id(id)

    def get_by_id_or_fail(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if product is None:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    def get_by_sku(self, sku: str) -> Optional[Product]:
        return self._repo.get_by_sku(sku)

    def get_by_ids(self, ids: Sequence[str]) -> List[Product]:
        """Return the products found among ``ids``, in request order.

        Unknown or malformed IDs are skipped; a partial miss is logged,
        never raised.
        """
        ids = list(ids)
        if not ids:
            return []
        products = self._repo.get_by_ids(ids)
        requested: dict[UUID | str, str] = {}
        for raw in ids:
            requested.setdefault(_id_key(raw), str(raw))
        if len(products) < len(requested):
            found = {p.id for p in products}
            logger.warning(
                "product.batch_partial_miss",
                requested=len(requested),
                found=len(products),
                missing=[raw for key, raw in requested.items() if key not in found],
            )
        return products

    def sku_exists(self, sku: str) -> bool:
        return self._repo.exists_by_sku(sku)

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    def list_all(self, page_request: Optional[PageRequest] = None) -> Page[Product]:
        return self._repo.find_all(page_request or ProductPageRequest())

    def list_by_category(
        self, category_id: str, page_request: Optional[PageRequest] = None
    ) -> Page[Product]:
        return self._repo.find_by_category(category_id, page_request or ProductPageRequest())

    def search(self, query: str, page_request: Optional[PageRequest] = None) -> Page[Product]:
        """Case-insensitive substring search; an empty query matches everything."""
        return self._repo.search(query or "", page_request or ProductPageRequest())

    def list_available(self, page_request: Optional[PageRequest] = None) -> Page[Product]:
        return self._repo.find_available(page_request or ProductPageRequest())

    def list_by_price_range(
        self,
        min_price: Decimal,
        max_price: Decimal,
        page_request: Optional[PageRequest] = None,
    ) -> Page[Product]:
        """Products priced within ``[min_price, max_price]``.

        Raises:
            InvalidRangeError: if ``min_price`` is greater than ``max_price``.
        """
        if min_price > max_price:
            raise InvalidRangeError(
                f"Minimum price {min_price} is greater than maximum price {max_price}."
            )
        return self._repo.find_by_price_range(
            min_price, max_price, page_request or ProductPageRequest()
        )

    def list_by_brand(self, brand: str, page_request: Optional[PageRequest] = None) -> Page[Product]:
        return self._repo.find_by_brand(brand, page_request or ProductPageRequest())

    def list_by_tag(self, tag: str, page_request: Optional[PageRequest] = None) -> Page[Product]:
        return self._repo.find_by_tag(tag, page_request or ProductPageRequest())

    def list_low_stock(self, threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> List[Product]:
        """All products with quantity strictly below ``threshold``, any status."""
        return self._repo.find_low_stock(threshold)

    def list_featured(self, page_request: Optional[PageRequest] = None) -> List[Product]:
        """Available products, most recently updated first."""
        return self._repo.find_featured(page_request or ProductPageRequest(size=FEATURED_PAGE_SIZE))

    # ------------------------------------------------------------------
    # Counts
    # ------------------------------------------------------------------

    def count_by_category(self, category_id: str) -> int:
        return self._repo.count_by_category(category_id)

    def count_by_status(self, status: str) -> int:
        return self._repo.count_by_status(status)
