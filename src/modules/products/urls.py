"""Catalog routes.

The router emits list-level ``@action`` routes (``sku/<sku>/``,
``search/``, ``batch/``, ``count/`` ...) ahead of the ``<pk>/`` detail
route, so those literal segments never resolve as product ids.
"""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.products.views import ProductViewSet

app_name = "products"

router = SimpleRouter(trailing_slash=True)
router.register("products", ProductViewSet, basename="product")

urlpatterns = router.urls
