"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups the catalog needs:
SKU lookup and existence (unique SKU rule), locked reads for
read-modify-write commands, predicate-filtered paginated scans, counts,
and the narrow ``update_status`` primitive.
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional, Sequence

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.core.pagination import Page, PageRequest
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    # ------------------------------------------------------------------
    # Point look-ups
    # ------------------------------------------------------------------

    @abstractmethod
    def get_by_sku(self, sku: str) -> Optional[Product]:
        """Retrieve a product by SKU."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Product]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        Must be called inside a transaction.  Returns ``None`` if the
        product does not exist.
        """

    @abstractmethod
    def exists_by_sku(self, sku: str) -> bool:
        """Check whether a product with ``sku`` exists."""

    # ------------------------------------------------------------------
    # Paginated scans
    # ------------------------------------------------------------------

    @abstractmethod
    def find_all(self, page_request: PageRequest) -> Page[Product]:
        """Page over every product."""

    @abstractmethod
    def find_by_category(self, category_id: str, page_request: PageRequest) -> Page[Product]:
        """Page over the products of one category."""

    @abstractmethod
    def search(self, query: str, page_request: PageRequest) -> Page[Product]:
        """Page over products whose text attributes contain ``query``."""

    @abstractmethod
    def find_available(self, page_request: PageRequest) -> Page[Product]:
        """Page over ACTIVE products with stock."""

    @abstractmethod
    def find_by_price_range(
        self, min_price: Decimal, max_price: Decimal, page_request: PageRequest
    ) -> Page[Product]:
        """Page over products priced within the inclusive bounds."""

    @abstractmethod
    def find_by_brand(self, brand: str, page_request: PageRequest) -> Page[Product]:
        """Page over products of ``brand`` (case-insensitive)."""

    @abstractmethod
    def find_by_tag(self, tag: str, page_request: PageRequest) -> Page[Product]:
        """Page over products carrying ``tag``."""

    @abstractmethod
    def find_featured(self, page_request: PageRequest) -> List[Product]:
        """Return one window of the featured selection."""

    @abstractmethod
    def find_low_stock(self, threshold: int) -> List[Product]:
        """Return every product with quantity strictly below ``threshold``."""

    # ------------------------------------------------------------------
    # Counts
    # ------------------------------------------------------------------

    @abstractmethod
    def count_by_category(self, category_id: str) -> int:
        """Count products referencing ``category_id``."""

    @abstractmethod
    def count_by_status(self, status: str) -> int:
        """Count products in ``status``."""

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @abstractmethod
    def replace_tags(self, product: Product, tags: Sequence[str]) -> None:
        """Make ``tags`` the exact tag set of ``product``."""

    @abstractmethod
    def update_status(self, id: str, status: str) -> int:
        """Set the status of one product directly; return rows affected."""
