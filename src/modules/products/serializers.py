"""Product DRF serializers for API output.

The serializer operates at the Interface layer (API Views) and only
renders.  Input is parsed into Pydantic DTOs from ``dtos.py``, which is
what the engines receive.
"""

from __future__ import annotations

from typing import Any, Dict, Type

from rest_framework import serializers

from modules.core.pagination import Page
from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the Product resource."""

    tags = serializers.ListField(
        source="tag_names",
        child=serializers.CharField(),
        read_only=True,
    )
    is_available = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "sku",
            "name",
            "description",
            "price",
            "quantity",
            "category_id",
            "image_urls",
            "status",
            "brand",
            "weight",
            "tags",
            "is_available",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


def serialize_page(
    page: Page[Product],
    serializer_class: Type[serializers.Serializer] = ProductSerializer,
) -> Dict[str, Any]:
    """Render a ``Page`` as the listing envelope returned by every list route."""
    return {
        "content": serializer_class(page.content, many=True).data,
        "page": page.page,
        "size": page.size,
        "total_elements": page.total_elements,
        "total_pages": page.total_pages,
        "sort": ",".join(page.sort),
        "has_next": page.has_next,
        "has_previous": page.has_previous,
    }
