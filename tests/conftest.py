from decimal import Decimal

import pytest

from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Reset throttle counters between tests."""
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def auth_client():
    """APIClient with a force-authenticated Django user."""
    client = APIClient()
    user = get_user_model().objects.create_user(username="testuser", password="testpass123")
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def make_product():
    """Factory persisting a Product (plus optional tags) with sane defaults."""
    from modules.products.constants import ProductStatus
    from modules.products.models import Product, ProductTag

    def _make(tags=(), **overrides) -> Product:
        defaults = {
            "sku": "SKU-001",
            "name": "Widget",
            "price": Decimal("19.99"),
            "quantity": 10,
            "status": ProductStatus.ACTIVE,
        }
        defaults.update(overrides)
        product = Product(**defaults)
        product.save()
        ProductTag.objects.bulk_create([ProductTag(product=product, name=t) for t in tags])
        return product

    return _make
