"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the transport adapters (REST views,
RPC facade) and the query/mutation engines.  DTOs are immutable
(``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: full-replace payload for product updates, with
  ``apply_to`` as the single DTO-to-entity merge.
- ``UpdateStatusDTO`` / ``AdjustQuantityDTO`` / ``PriceRangeDTO``: narrow
  command and filter inputs.
- ``ProductPageRequest``: paging request restricted to sortable fields.
- ``ProductOutputDTO``: output with all product fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Annotated, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.core.pagination import PageRequest
from modules.products.constants import (
    BRAND_MAX_LENGTH,
    NAME_MAX_LENGTH,
    SKU_MAX_LENGTH,
    SORTABLE_FIELDS,
    TAG_MAX_LENGTH,
    ProductStatus,
)

if TYPE_CHECKING:
    from modules.products.models import Product

TagName = Annotated[str, Field(max_length=TAG_MAX_LENGTH)]


def _normalize_tags(tags: list[str]) -> list[str]:
    seen: dict[str, None] = {}
    for tag in tags:
        cleaned = tag.strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class _ProductFieldsDTO(BaseModel):
    """Mutable-field payload shared by create and update.

    Validates:
    - ``name`` is a non-empty string.
    - ``price`` is a Decimal greater than zero with at most 2 decimals.
    - ``quantity`` is non-negative.
    - ``weight``, when given, is greater than zero.
    - ``name``, ``brand`` and each tag fit their column lengths.
    - ``tags`` are stripped and de-duplicated (set semantics).
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(max_length=NAME_MAX_LENGTH)
    price: Decimal = Field(max_digits=10, decimal_places=2)
    description: str = ""
    quantity: int = 0
    category_id: Optional[UUID] = None
    image_urls: list[str] = Field(default_factory=list)
    brand: str = Field(default="", max_length=BRAND_MAX_LENGTH)
    weight: Optional[Decimal] = Field(default=None, max_digits=5, decimal_places=2)
    tags: list[TagName] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip()

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Price must be greater than zero.")
        return v

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Quantity cannot be negative.")
        return v

    @field_validator("weight")
    @classmethod
    def weight_must_be_positive(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and v <= 0:
            raise ValueError("Weight must be greater than zero.")
        return v

    @field_validator("brand", "description", mode="before")
    @classmethod
    def none_means_blank(cls, v):
        return "" if v is None else v

    @field_validator("image_urls", "tags", mode="before")
    @classmethod
    def none_means_empty(cls, v):
        return [] if v is None else v

    @field_validator("tags")
    @classmethod
    def tags_are_a_set(cls, v: list[str]) -> list[str]:
        return _normalize_tags(v)


class CreateProductDTO(_ProductFieldsDTO):
    """Immutable DTO for product creation requests.

    ``sku`` is normalised to upper case; ``status`` defaults to DRAFT.
    """

    sku: str = Field(max_length=SKU_MAX_LENGTH)
    status: ProductStatus = ProductStatus.DRAFT

    @field_validator("sku")
    @classmethod
    def sku_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("SKU must not be empty.")
        return v.strip().upper()


@dataclass(frozen=True)
class ProductChanges:
    """Which tracked attributes a full update actually changed."""

    price_changed: bool
    quantity_changed: bool
    status_changed: bool
    tags_changed: bool


class UpdateProductDTO(_ProductFieldsDTO):
    """Immutable full-replace payload for product updates.

    Every mutable attribute is replaced; omitted optional fields are
    reset to their empty value.  ``sku`` is not part of the payload.
    """

    quantity: int
    status: ProductStatus

    def apply_to(self, product: Product) -> ProductChanges:
        """Copy every mutable field onto ``product`` and report what changed.

        Tags are compared here but written by the repository, since they
        are stored as child rows.
        """
        changes = ProductChanges(
            price_changed=product.price != self.price,
            quantity_changed=product.quantity != self.quantity,
            status_changed=product.status != self.status,
            tags_changed=set(product.tag_names) != set(self.tags),
        )
        product.name = self.name
        product.description = self.description
        product.price = self.price
        product.quantity = self.quantity
        product.category_id = self.category_id
        product.image_urls = list(self.image_urls)
        product.status = self.status
        product.brand = self.brand
        product.weight = self.weight
        return changes


class UpdateStatusDTO(BaseModel):
    """Immutable DTO for direct status updates."""

    model_config = ConfigDict(frozen=True)

    status: ProductStatus


class AdjustQuantityDTO(BaseModel):
    """Immutable DTO for a signed stock adjustment."""

    model_config = ConfigDict(frozen=True)

    amount: int


class PriceRangeDTO(BaseModel):
    """Inclusive price bounds; ordering of the bounds is checked by the selector."""

    model_config = ConfigDict(frozen=True)

    min_price: Decimal
    max_price: Decimal


class ProductPageRequest(PageRequest):
    """Paging request for product listings."""

    SORTABLE_FIELDS = SORTABLE_FIELDS


# ---------------------------------------------------------------------------
# Output DTO
# ---------------------------------------------------------------------------


class ProductOutputDTO(BaseModel):
    """Immutable DTO for product responses."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    sku: str
    name: str
    description: str
    price: Decimal
    quantity: int
    category_id: Optional[UUID]
    image_urls: list[str]
    status: ProductStatus
    brand: str
    weight: Optional[Decimal]
    tags: list[str]
    is_available: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, product: Product) -> ProductOutputDTO:
        """Build an output DTO from a Product model instance."""
        return cls(
            id=product.id,
            sku=product.sku,
            name=product.name,
            description=product.description,
            price=product.price,
            quantity=product.quantity,
            category_id=product.category_id,
            image_urls=list(product.image_urls or []),
            status=product.status,
            brand=product.brand,
            weight=product.weight,
            tags=product.tag_names,
            is_available=product.is_available,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )
