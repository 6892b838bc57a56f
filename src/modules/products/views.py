"""Product API views.

Exposes the catalog engines via HTTP using a DRF ViewSet.  Views only
route: request values become Pydantic DTOs / page requests, the selector
or the service does the work, and domain exceptions are translated to
status codes by ``modules.core.exceptions.api_exception_handler``.
"""

from __future__ import annotations

from typing import Any, Dict

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import DEFAULT_PAGE_SIZE
from modules.products.constants import (
    DEFAULT_LOW_STOCK_THRESHOLD,
    FEATURED_PAGE_SIZE,
    ProductStatus,
)
from modules.products.dtos import (
    AdjustQuantityDTO,
    CreateProductDTO,
    PriceRangeDTO,
    ProductPageRequest,
    UpdateProductDTO,
    UpdateStatusDTO,
)
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.selectors import ProductSelector
from modules.products.serializers import ProductSerializer, serialize_page
from modules.products.services import ProductService
from shared.infrastructure.bus import event_bus

WRITE_ACTIONS = frozenset({"create", "update", "destroy", "update_status", "adjust_quantity"})


def _payload(data: Any, fields) -> Dict[str, Any]:
    """Pick the DTO fields present in the request body."""
    if not isinstance(data, dict):
        raise ValidationError({"detail": "Expected a JSON object."})
    return {name: data.get(name) for name in fields if name in data}


class ProductViewSet(GenericViewSet):
    """ViewSet for the product catalog.

    Reads go through ``ProductSelector`` and writes through
    ``ProductService``, both over ``ProductDjangoRepository`` (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the selector/service/repository layers.
    """

    queryset = Product.objects.all()
    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        repository = ProductDjangoRepository()
        self._selector = ProductSelector(repository=repository)
        self._service = ProductService(repository=repository, event_bus=event_bus)

    def get_throttles(self) -> list[BaseThrottle]:
        """Writes share the ``catalog_writes`` scope; reads use the defaults."""
        self.throttle_scope = "catalog_writes" if self.action in WRITE_ACTIONS else None
        return super().get_throttles()

    def _page_request(self, request: Request, default_size: int = DEFAULT_PAGE_SIZE) -> ProductPageRequest:
        params = request.query_params
        return ProductPageRequest(
            page=params.get("page", 0),
            size=params.get("size", default_size),
            sort=params.get("sort"),
        )

    def _page_response(self, page) -> Response:
        return Response(serialize_page(page))

    def _list_response(self, products) -> Response:
        return Response(ProductSerializer(products, many=True).data)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/products/?page=&size=&sort="""
        return self._page_response(self._selector.list_all(self._page_request(request)))

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        product = self._selector.get_by_id_or_fail(pk)
        return Response(ProductSerializer(product).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        dto = CreateProductDTO(**_payload(request.data, CreateProductDTO.model_fields))
        product = self._service.create(dto)
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/products/{pk}/ (full replace)"""
        dto = UpdateProductDTO(**_payload(request.data, UpdateProductDTO.model_fields))
        product = self._service.update(pk, dto)
        return Response(ProductSerializer(product).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        self._service.delete(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @action(detail=True, methods=["patch"], url_path="status")
    def update_status(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/status/  ``{"status": "ACTIVE"}``"""
        dto = UpdateStatusDTO(**_payload(request.data, UpdateStatusDTO.model_fields))
        self._service.update_status(pk, dto.status)
        product = self._selector.get_by_id_or_fail(pk)
        return Response(ProductSerializer(product).data)

    @action(detail=True, methods=["patch"], url_path="quantity")
    def adjust_quantity(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/quantity/  ``{"amount": -3}``"""
        dto = AdjustQuantityDTO(**_payload(request.data, AdjustQuantityDTO.model_fields))
        product = self._service.adjust_quantity(pk, dto.amount)
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Look-ups
    # ------------------------------------------------------------------

    @action(detail=False, methods=["get"], url_path=r"sku/(?P<sku>[^/]+)")
    def by_sku(self, request: Request, sku: str) -> Response:
        """GET /api/v1/products/sku/{sku}/"""
        product = self._selector.get_by_sku(sku)
        if product is None:
            return Response(
                {"detail": f"Product not found with SKU: {sku}"},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(ProductSerializer(product).data)

    @action(detail=False, methods=["get"], url_path=r"sku/(?P<sku>[^/]+)/exists")
    def sku_exists(self, request: Request, sku: str) -> Response:
        """GET /api/v1/products/sku/{sku}/exists/"""
        return Response({"exists": self._selector.sku_exists(sku)})

    @action(detail=False, methods=["post"], url_path="batch")
    def batch(self, request: Request) -> Response:
        """POST /api/v1/products/batch/  ``["<id>", "<id>", ...]``"""
        ids = request.data
        if not isinstance(ids, list):
            raise ValidationError({"detail": "Expected a JSON list of product ids."})
        return self._list_response(self._selector.get_by_ids([str(i) for i in ids]))

    @action(detail=False, methods=["get"], url_path="count")
    def count(self, request: Request) -> Response:
        """GET /api/v1/products/count/?category_id= or ?status="""
        params = request.query_params
        if "category_id" in params:
            return Response({"count": self._selector.count_by_category(params["category_id"])})
        if "status" in params:
            if params["status"] not in ProductStatus.values:
                raise ValidationError({"status": f"Unknown product status '{params['status']}'."})
            return Response({"count": self._selector.count_by_status(params["status"])})
        raise ValidationError({"detail": "Provide either 'category_id' or 'status'."})

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    @action(detail=False, methods=["get"], url_path=r"category/(?P<category_id>[^/]+)")
    def by_category(self, request: Request, category_id: str) -> Response:
        """GET /api/v1/products/category/{category_id}/"""
        page = self._selector.list_by_category(category_id, self._page_request(request))
        return self._page_response(page)

    @action(detail=False, methods=["get"], url_path="search")
    def search(self, request: Request) -> Response:
        """GET /api/v1/products/search/?query="""
        query = request.query_params.get("query", "")
        return self._page_response(self._selector.search(query, self._page_request(request)))

    @action(detail=False, methods=["get"], url_path="available")
    def available(self, request: Request) -> Response:
        """GET /api/v1/products/available/"""
        return self._page_response(self._selector.list_available(self._page_request(request)))

    @action(detail=False, methods=["get"], url_path="price-range")
    def price_range(self, request: Request) -> Response:
        """GET /api/v1/products/price-range/?min_price=&max_price="""
        bounds = PriceRangeDTO(
            **_payload(request.query_params.dict(), PriceRangeDTO.model_fields)
        )
        page = self._selector.list_by_price_range(
            bounds.min_price, bounds.max_price, self._page_request(request)
        )
        return self._page_response(page)

    @action(detail=False, methods=["get"], url_path=r"brand/(?P<brand>[^/]+)")
    def by_brand(self, request: Request, brand: str) -> Response:
        """GET /api/v1/products/brand/{brand}/"""
        return self._page_response(self._selector.list_by_brand(brand, self._page_request(request)))

    @action(detail=False, methods=["get"], url_path=r"tag/(?P<tag>[^/]+)")
    def by_tag(self, request: Request, tag: str) -> Response:
        """GET /api/v1/products/tag/{tag}/"""
        return self._page_response(self._selector.list_by_tag(tag, self._page_request(request)))

    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request: Request) -> Response:
        """GET /api/v1/products/low-stock/?threshold=10"""
        raw = request.query_params.get("threshold", DEFAULT_LOW_STOCK_THRESHOLD)
        try:
            threshold = int(raw)
        except (TypeError, ValueError) as exc:
            raise ValidationError({"threshold": "Must be an integer."}) from exc
        return self._list_response(self._selector.list_low_stock(threshold))

    @action(detail=False, methods=["get"], url_path="featured")
    def featured(self, request: Request) -> Response:
        """GET /api/v1/products/featured/?page=&size=10"""
        page_request = self._page_request(request, default_size=FEATURED_PAGE_SIZE)
        return self._list_response(self._selector.list_featured(page_request))
