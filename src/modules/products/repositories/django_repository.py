"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: methods return ``None``
(or an empty result) for missing rows and malformed identifiers instead
of raising. The service layer decides how to translate a missing entity.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, List, Optional, Sequence
from uuid import UUID

import structlog

from django.db import transaction
from django.utils import timezone

from modules.core.pagination import Page, PageRequest, paginate
from modules.products.models import Product, ProductQuerySet, ProductTag, normalize_sku
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

FEATURED_SORT = ("-updated_at",)


def _parse_uuid(value: Any) -> Optional[UUID]:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        return None


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def _queryset(self) -> ProductQuerySet:
        return Product.objects.prefetch_related("tags")

    # ------------------------------------------------------------------
    # Point look-ups
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        pk = _parse_uuid(id)
        if pk is None:
            return None
        return self._queryset().filter(id=pk).first()

    def get_for_update(self, id: str) -> Optional[Product]:
        pk = _parse_uuid(id)
        if pk is None:
            return None
        return Product.objects.select_for_update().filter(id=pk).first()

    def get_by_sku(self, sku: str) -> Optional[Product]:
        """Retrieve a product by SKU (case-insensitive via upper normalisation)."""
        return self._queryset().filter(sku=normalize_sku(sku)).first()

    def get_by_ids(self, ids: Sequence[str]) -> List[Product]:
        wanted = [pk for pk in (_parse_uuid(i) for i in ids) if pk is not None]
        found = {p.id: p for p in self._queryset().filter(id__in=wanted)}
        result: List[Product] = []
        for pk in dict.fromkeys(wanted):
            if pk in found:
                result.append(found[pk])
        return result

    def exists_by_sku(self, sku: str) -> bool:
        return Product.objects.filter(sku=normalize_sku(sku)).exists()

    # ------------------------------------------------------------------
    # Paginated scans
    # ------------------------------------------------------------------

    def find_all(self, page_request: PageRequest) -> Page[Product]:
        return paginate(self._queryset(), page_request)

    def find_by_category(self, category_id: str, page_request: PageRequest) -> Page[Product]:
        pk = _parse_uuid(category_id)
        queryset = self._queryset().filter(category_id=pk) if pk else Product.objects.none()
        return paginate(queryset, page_request)

    def search(self, query: str, page_request: PageRequest) -> Page[Product]:
        return paginate(self._queryset().search(query), page_request)

    def find_available(self, page_request: PageRequest) -> Page[Product]:
        return paginate(self._queryset().available(), page_request)

    def find_by_price_range(
        self, min_price: Decimal, max_price: Decimal, page_request: PageRequest
    ) -> Page[Product]:
        return paginate(self._queryset().in_price_range(min_price, max_price), page_request)

    def find_by_brand(self, brand: str, page_request: PageRequest) -> Page[Product]:
        return paginate(self._queryset().by_brand(brand), page_request)

    def find_by_tag(self, tag: str, page_request: PageRequest) -> Page[Product]:
        return paginate(self._queryset().by_tag(tag), page_request)

    def find_featured(self, page_request: PageRequest) -> List[Product]:
        """Available products, most recently updated first."""
        if not page_request.sort:
            page_request = page_request.model_copy(update={"sort": FEATURED_SORT})
        return paginate(self._queryset().available(), page_request).content

    def find_low_stock(self, threshold: int) -> List[Product]:
        return list(self._queryset().low_stock(threshold).order_by("quantity", "sku"))

    # ------------------------------------------------------------------
    # Counts
    # ------------------------------------------------------------------

    def count_by_category(self, category_id: str) -> int:
        pk = _parse_uuid(category_id)
        if pk is None:
            return 0
        return Product.objects.filter(category_id=pk).count()

    def count_by_status(self, status: str) -> int:
        return Product.objects.filter(status=status).count()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        logger.debug(
            "product.saved",
            product_id=str(entity.id),
            sku=entity.sku,
        )
        return entity

    @transaction.atomic
    def replace_tags(self, product: Product, tags: Sequence[str]) -> None:
        wanted = set(tags)
        current = set(product.tags.values_list("name", flat=True))
        stale = current - wanted
        if stale:
            product.tags.filter(name__in=stale).delete()
        ProductTag.objects.bulk_create(
            [ProductTag(product=product, name=name) for name in sorted(wanted - current)]
        )
        if hasattr(product, "_prefetched_objects_cache"):
            product._prefetched_objects_cache.pop("tags", None)

    @transaction.atomic
    def update_status(self, id: str, status: str) -> int:
        pk = _parse_uuid(id)
        if pk is None:
            return 0
        return Product.objects.filter(id=pk).update(status=status, updated_at=timezone.now())

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Hard-delete a product (tags cascade).

        Returns ``True`` if a product row was removed, ``False`` if no
        product exists with the given ID.
        """
        pk = _parse_uuid(id)
        if pk is None:
            return False
        _, per_model = Product.objects.filter(id=pk).delete()
        deleted = per_model.get(Product._meta.label, 0) > 0
        if deleted:
            logger.info("product.hard_deleted", product_id=str(id))
        return deleted
