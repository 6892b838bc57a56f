"""Product entity with stock quantity and lifecycle status.

Business rules implemented:
- SKU must be unique in the system (unique index, checked on create).
- Price must be greater than zero; weight, when set, too.
- Stock quantity cannot be negative.
- ``is_available`` holds iff status is ACTIVE and quantity > 0.
- Decreasing stock to zero forces OUT_OF_STOCK; restocking an
  OUT_OF_STOCK product promotes it back to ACTIVE.

The quantity methods only touch the in-memory instance; persisting the
result is the caller's job.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q

from modules.core.models import BaseModel
from modules.products.constants import (
    BRAND_MAX_LENGTH,
    NAME_MAX_LENGTH,
    SKU_MAX_LENGTH,
    TAG_MAX_LENGTH,
    ProductStatus,
)
from modules.products.exceptions import InsufficientQuantityError


def normalize_sku(sku: str) -> str:
    """Strip and upper-case a SKU so "sku-01" and "SKU-01" collide."""
    return sku.strip().upper()


class ProductQuerySet(models.QuerySet):
    """QuerySet with the catalog's reusable predicates."""

    def available(self) -> ProductQuerySet:
        """Products that can be sold right now (mirrors ``is_available``)."""
        return self.filter(status=ProductStatus.ACTIVE, quantity__gt=0)

    def low_stock(self, threshold: int) -> ProductQuerySet:
        return self.filter(quantity__lt=threshold)

    def search(self, query: str) -> ProductQuerySet:
        """Case-insensitive substring match over the textual attributes."""
        term = query.strip()
        return self.filter(
            Q(name__icontains=term)
            | Q(description__icontains=term)
            | Q(brand__icontains=term)
            | Q(tags__name__icontains=term)
        ).distinct()

    def by_brand(self, brand: str) -> ProductQuerySet:
        return self.filter(brand__iexact=brand.strip())

    def by_tag(self, tag: str) -> ProductQuerySet:
        return self.filter(tags__name=tag.strip())

    def in_price_range(self, min_price: Decimal, max_price: Decimal) -> ProductQuerySet:
        return self.filter(price__gte=min_price, price__lte=max_price)


class Product(BaseModel):
    """Product aggregate root.

    ``sku`` is normalised to uppercase on save to prevent visual duplicates.
    ``category_id`` is a weak reference to a category owned by another
    service, hence no foreign key.  Tags live in ``ProductTag`` rows so
    they can be matched in SQL.
    """

    sku = models.CharField(max_length=SKU_MAX_LENGTH, unique=True)
    name = models.CharField(max_length=NAME_MAX_LENGTH)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    quantity = models.PositiveIntegerField(default=0)
    category_id = models.UUIDField(null=True, blank=True, default=None, db_index=True)
    image_urls = models.JSONField(default=list, blank=True)
    status = models.CharField(
        max_length=20,
        choices=ProductStatus.choices,
        default=ProductStatus.DRAFT,
    )
    brand = models.CharField(max_length=BRAND_MAX_LENGTH, blank=True, default="")
    weight = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        default=None,
        validators=[MinValueValidator(Decimal("0.01"))],
    )

    objects = ProductQuerySet.as_manager()

    class Meta:
        db_table = "products"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status"], name="products_status_idx"),
            models.Index(fields=["brand"], name="products_brand_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="products_price_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(weight__isnull=True) | models.Q(weight__gt=0),
                name="products_weight_positive",
            ),
        ]

    # ------------------------------------------------------------------
    # Stock & availability
    # ------------------------------------------------------------------

    @property
    def is_available(self) -> bool:
        return self.status == ProductStatus.ACTIVE and self.quantity > 0

    def decrease_quantity(self, amount: int) -> None:
        """Remove ``amount`` units from stock.

        Reaching zero forces ``OUT_OF_STOCK`` whatever the previous status
        was, DISCONTINUED included.

        Raises:
            InsufficientQuantityError: ``amount`` exceeds the current
                quantity; the instance is left untouched.
        """
        if amount < 0:
            raise ValueError("Amount cannot be negative.")
        if amount > self.quantity:
            raise InsufficientQuantityError(
                f"Insufficient quantity for product {self.sku}: "
                f"requested {amount}, available {self.quantity}."
            )
        self.quantity -= amount
        if self.quantity == 0:
            self.status = ProductStatus.OUT_OF_STOCK

    def increase_quantity(self, amount: int) -> None:
        """Add ``amount`` units; an OUT_OF_STOCK product becomes ACTIVE again."""
        if amount < 0:
            raise ValueError("Amount cannot be negative.")
        self.quantity += amount
        if self.status == ProductStatus.OUT_OF_STOCK and self.quantity > 0:
            self.status = ProductStatus.ACTIVE

    def apply_quantity_delta(self, delta: int) -> None:
        """Route a signed stock delta through the invariant-preserving methods."""
        if delta < 0:
            self.decrease_quantity(-delta)
        elif delta > 0:
            self.increase_quantity(delta)

    @property
    def tag_names(self) -> list[str]:
        return sorted(tag.name for tag in self.tags.all())

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.sku:
            self.sku = normalize_sku(self.sku)
        if self.price is not None and self.price <= 0:
            raise ValidationError({"price": "Price must be greater than zero."})
        if self.quantity is not None and self.quantity < 0:
            raise ValidationError({"quantity": "Quantity cannot be negative."})
        if self.weight is not None and self.weight <= 0:
            raise ValidationError({"weight": "Weight must be greater than zero."})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        if self.sku:
            self.sku = normalize_sku(self.sku)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.sku} - {self.name}"


class ProductTag(models.Model):
    """A single tag attached to a product (set semantics per product)."""

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="tags",
    )
    name = models.CharField(max_length=TAG_MAX_LENGTH)

    class Meta:
        db_table = "product_tags"
        indexes = [
            models.Index(fields=["name"], name="product_tags_name_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["product", "name"],
                name="product_tags_unique_name",
            ),
        ]

    def __str__(self) -> str:
        return self.name
