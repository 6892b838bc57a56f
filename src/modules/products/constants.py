"""Product catalog constants.

Defines the lifecycle status choices and the tunables used by the
query engine (page sizes, low-stock threshold, sortable fields).
"""

from django.db import models


class ProductStatus(models.TextChoices):
    DRAFT = "DRAFT", "Draft"
    ACTIVE = "ACTIVE", "Active"
    INACTIVE = "INACTIVE", "Inactive"
    OUT_OF_STOCK = "OUT_OF_STOCK", "Out of stock"
    DISCONTINUED = "DISCONTINUED", "Discontinued"


FEATURED_PAGE_SIZE = 10
DEFAULT_LOW_STOCK_THRESHOLD = 10

SORTABLE_FIELDS: frozenset[str] = frozenset(
    {"created_at", "updated_at", "name", "price", "quantity", "sku", "brand"}
)

SKU_MAX_LENGTH = 50
NAME_MAX_LENGTH = 255
BRAND_MAX_LENGTH = 100
TAG_MAX_LENGTH = 50
