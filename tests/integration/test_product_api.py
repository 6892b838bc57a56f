"""Integration tests for Product API endpoints.

Covers:
- CRUD operations via /api/v1/products/.
- Look-up, listing, count and batch routes.
- Status and quantity commands.
- Domain exception mapping (400, 404, 409).
"""

from __future__ import annotations

import uuid
from decimal import Decimal

import pytest

from modules.products.constants import ProductStatus
from modules.products.models import Product

pytestmark = pytest.mark.integration

URL = "/api/v1/products/"


def _detail(product) -> str:
    return f"{URL}{product.id}/"


# ===========================================================================
# CRUD
# ===========================================================================


class TestCreate:
    def test_create_returns_201(self, auth_client):
        payload = {
            "sku": "new-001",
            "name": "New Widget",
            "price": "9.99",
            "quantity": 5,
            "brand": "Acme",
            "tags": ["sale", "sale", "new"],
            "image_urls": ["https://img.example.com/1.jpg"],
        }
        response = auth_client.post(URL, payload, format="json")

        assert response.status_code == 201
        data = response.json()
        assert data["sku"] == "NEW-001"
        assert data["status"] == "DRAFT"
        assert data["price"] == "9.99"
        assert data["tags"] == ["new", "sale"]
        assert data["is_available"] is False
        assert Product.objects.filter(sku="NEW-001").exists()

    def test_duplicate_sku_returns_409(self, auth_client, make_product):
        make_product(sku="DUP-1")
        response = auth_client.post(
            URL, {"sku": "dup-1", "name": "Other", "price": "1.00"}, format="json"
        )
        assert response.status_code == 409
        assert "detail" in response.json()
        assert Product.objects.count() == 1

    @pytest.mark.parametrize(
        "payload",
        [
            {"name": "No SKU", "price": "1.00"},
            {"sku": "S", "name": "Zero", "price": "0"},
            {"sku": "S", "name": "Neg qty", "price": "1.00", "quantity": -1},
            {"sku": "S", "name": "", "price": "1.00"},
            {"sku": "S", "name": "Bad status", "price": "1.00", "status": "NOPE"},
            {"sku": "X" * 60, "name": "Long SKU", "price": "1.00"},
            {"sku": "S", "name": "N" * 300, "price": "1.00"},
            {"sku": "S", "name": "Long brand", "price": "1.00", "brand": "B" * 150},
            {"sku": "S", "name": "Long tag", "price": "1.00", "tags": ["t" * 80]},
        ],
    )
    def test_invalid_payload_returns_400(self, auth_client, payload):
        response = auth_client.post(URL, payload, format="json")
        assert response.status_code == 400
        assert "detail" in response.json()
        assert Product.objects.count() == 0

    def test_non_object_body_returns_400(self, auth_client):
        response = auth_client.post(URL, ["not", "an", "object"], format="json")
        assert response.status_code == 400


class TestRetrieve:
    def test_found(self, auth_client, make_product):
        product = make_product(tags=["t"])
        response = auth_client.get(_detail(product))
        assert response.status_code == 200
        assert response.json()["id"] == str(product.id)
        assert response.json()["tags"] == ["t"]

    def test_missing_returns_404(self, auth_client):
        response = auth_client.get(f"{URL}{uuid.uuid4()}/")
        assert response.status_code == 404

    def test_malformed_id_returns_404(self, auth_client):
        response = auth_client.get(f"{URL}not-a-uuid/")
        assert response.status_code == 404


class TestUpdate:
    def test_full_replace(self, auth_client, make_product):
        product = make_product(brand="Acme", tags=["old"])
        payload = {
            "name": "Replaced",
            "price": "30.00",
            "quantity": 7,
            "status": "INACTIVE",
            "tags": ["fresh"],
        }
        response = auth_client.put(_detail(product), payload, format="json")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Replaced"
        assert data["status"] == "INACTIVE"
        assert data["brand"] == ""
        assert data["tags"] == ["fresh"]
        assert data["sku"] == product.sku

    def test_sku_in_body_is_ignored(self, auth_client, make_product):
        product = make_product(sku="KEEP-1")
        payload = {"sku": "CHANGED", "name": "X", "price": "1.00", "quantity": 1, "status": "ACTIVE"}
        response = auth_client.put(_detail(product), payload, format="json")
        assert response.status_code == 200
        assert response.json()["sku"] == "KEEP-1"

    def test_missing_required_fields_returns_400(self, auth_client, make_product):
        product = make_product()
        response = auth_client.put(_detail(product), {"name": "Only name"}, format="json")
        assert response.status_code == 400

    def test_overlong_name_returns_400_and_keeps_row(self, auth_client, make_product):
        product = make_product(name="Original")
        payload = {"name": "N" * 300, "price": "1.00", "quantity": 1, "status": "ACTIVE"}
        response = auth_client.put(_detail(product), payload, format="json")
        assert response.status_code == 400
        product.refresh_from_db()
        assert product.name == "Original"

    def test_missing_product_returns_404(self, auth_client):
        payload = {"name": "X", "price": "1.00", "quantity": 1, "status": "ACTIVE"}
        response = auth_client.put(f"{URL}{uuid.uuid4()}/", payload, format="json")
        assert response.status_code == 404

    def test_partial_update_not_allowed(self, auth_client, make_product):
        product = make_product()
        response = auth_client.patch(_detail(product), {"name": "X"}, format="json")
        assert response.status_code == 405


class TestDelete:
    def test_delete_returns_204_then_404(self, auth_client, make_product):
        product = make_product()
        assert auth_client.delete(_detail(product)).status_code == 204
        assert auth_client.get(_detail(product)).status_code == 404
        assert auth_client.delete(_detail(product)).status_code == 404


# ===========================================================================
# Commands
# ===========================================================================


class TestStatusCommand:
    def test_sets_status(self, auth_client, make_product):
        product = make_product()
        response = auth_client.patch(f"{_detail(product)}status/", {"status": "DISCONTINUED"}, format="json")
        assert response.status_code == 200
        assert response.json()["status"] == "DISCONTINUED"

    def test_unknown_status_returns_400(self, auth_client, make_product):
        product = make_product()
        response = auth_client.patch(f"{_detail(product)}status/", {"status": "GONE"}, format="json")
        assert response.status_code == 400

    def test_missing_product_returns_404(self, auth_client):
        response = auth_client.patch(f"{URL}{uuid.uuid4()}/status/", {"status": "ACTIVE"}, format="json")
        assert response.status_code == 404


class TestQuantityCommand:
    def test_decrease_to_zero(self, auth_client, make_product):
        product = make_product(quantity=3)
        response = auth_client.patch(f"{_detail(product)}quantity/", {"amount": -3}, format="json")
        assert response.status_code == 200
        data = response.json()
        assert data["quantity"] == 0
        assert data["status"] == "OUT_OF_STOCK"
        assert data["is_available"] is False

    def test_insufficient_returns_409(self, auth_client, make_product):
        product = make_product(quantity=2)
        response = auth_client.patch(f"{_detail(product)}quantity/", {"amount": -3}, format="json")
        assert response.status_code == 409
        product.refresh_from_db()
        assert product.quantity == 2

    def test_restock(self, auth_client, make_product):
        product = make_product(quantity=0, status=ProductStatus.OUT_OF_STOCK)
        response = auth_client.patch(f"{_detail(product)}quantity/", {"amount": 4}, format="json")
        assert response.json()["status"] == "ACTIVE"

    def test_missing_amount_returns_400(self, auth_client, make_product):
        product = make_product()
        response = auth_client.patch(f"{_detail(product)}quantity/", {}, format="json")
        assert response.status_code == 400


# ===========================================================================
# Look-ups
# ===========================================================================


class TestSkuRoutes:
    def test_by_sku(self, auth_client, make_product):
        make_product(sku="FIND-ME")
        response = auth_client.get(f"{URL}sku/find-me/")
        assert response.status_code == 200
        assert response.json()["sku"] == "FIND-ME"

    def test_by_sku_missing(self, auth_client):
        assert auth_client.get(f"{URL}sku/NOPE/").status_code == 404

    def test_exists(self, auth_client, make_product):
        make_product(sku="HERE")
        assert auth_client.get(f"{URL}sku/HERE/exists/").json() == {"exists": True}
        assert auth_client.get(f"{URL}sku/GONE/exists/").json() == {"exists": False}


class TestBatch:
    def test_returns_found_in_order(self, auth_client, make_product):
        a = make_product(sku="A")
        b = make_product(sku="B")
        response = auth_client.post(
            f"{URL}batch/", [str(b.id), str(uuid.uuid4()), str(a.id)], format="json"
        )
        assert response.status_code == 200
        assert [p["sku"] for p in response.json()] == ["B", "A"]

    def test_non_list_returns_400(self, auth_client):
        response = auth_client.post(f"{URL}batch/", {"ids": []}, format="json")
        assert response.status_code == 400


class TestCount:
    def test_by_category(self, auth_client, make_product):
        category = uuid.uuid4()
        make_product(sku="A", category_id=category)
        make_product(sku="B")
        response = auth_client.get(f"{URL}count/", {"category_id": str(category)})
        assert response.json() == {"count": 1}

    def test_by_status(self, auth_client, make_product):
        make_product(sku="A", status=ProductStatus.DRAFT)
        make_product(sku="B", status=ProductStatus.DRAFT)
        response = auth_client.get(f"{URL}count/", {"status": "DRAFT"})
        assert response.json() == {"count": 2}

    def test_unknown_status_returns_400(self, auth_client):
        assert auth_client.get(f"{URL}count/", {"status": "NOPE"}).status_code == 400

    def test_without_filter_returns_400(self, auth_client):
        assert auth_client.get(f"{URL}count/").status_code == 400


# ===========================================================================
# Listings
# ===========================================================================


class TestListings:
    def test_list_envelope(self, auth_client, make_product):
        make_product()
        data = auth_client.get(URL).json()
        assert set(data) == {
            "content",
            "page",
            "size",
            "total_elements",
            "total_pages",
            "sort",
            "has_next",
            "has_previous",
        }
        assert data["total_elements"] == 1
        assert data["size"] == 20
        assert data["sort"] == "-created_at"

    def test_by_category(self, auth_client, make_product):
        category = uuid.uuid4()
        make_product(sku="IN", category_id=category)
        make_product(sku="OUT")
        data = auth_client.get(f"{URL}category/{category}/").json()
        assert [p["sku"] for p in data["content"]] == ["IN"]

    def test_search(self, auth_client, make_product):
        make_product(sku="A", name="Walnut Desk")
        make_product(sku="B", name="Chair", tags=["walnut"])
        make_product(sku="C", name="Lamp")
        data = auth_client.get(f"{URL}search/", {"query": "WALNUT", "sort": "sku"}).json()
        assert [p["sku"] for p in data["content"]] == ["A", "B"]

    def test_available(self, auth_client, make_product):
        make_product(sku="YES")
        make_product(sku="NO", quantity=0)
        data = auth_client.get(f"{URL}available/").json()
        assert [p["sku"] for p in data["content"]] == ["YES"]

    def test_price_range(self, auth_client, make_product):
        make_product(sku="CHEAP", price=Decimal("5.00"))
        make_product(sku="PRICEY", price=Decimal("50.00"))
        data = auth_client.get(f"{URL}price-range/", {"min_price": "1", "max_price": "10"}).json()
        assert [p["sku"] for p in data["content"]] == ["CHEAP"]

    def test_price_range_inverted_returns_400(self, auth_client):
        response = auth_client.get(f"{URL}price-range/", {"min_price": "10", "max_price": "5"})
        assert response.status_code == 400

    def test_price_range_missing_bound_returns_400(self, auth_client):
        assert auth_client.get(f"{URL}price-range/", {"min_price": "1"}).status_code == 400

    def test_by_brand(self, auth_client, make_product):
        make_product(sku="A", brand="Acme")
        make_product(sku="B", brand="Other")
        data = auth_client.get(f"{URL}brand/acme/").json()
        assert [p["sku"] for p in data["content"]] == ["A"]

    def test_by_tag(self, auth_client, make_product):
        make_product(sku="A", tags=["eco"])
        make_product(sku="B", tags=["ecology"])
        data = auth_client.get(f"{URL}tag/eco/").json()
        assert [p["sku"] for p in data["content"]] == ["A"]

    def test_low_stock(self, auth_client, make_product):
        make_product(sku="LOW", quantity=2)
        make_product(sku="OK", quantity=50)
        response = auth_client.get(f"{URL}low-stock/")
        assert [p["sku"] for p in response.json()] == ["LOW"]
        response = auth_client.get(f"{URL}low-stock/", {"threshold": 100})
        assert [p["sku"] for p in response.json()] == ["LOW", "OK"]

    def test_low_stock_bad_threshold_returns_400(self, auth_client):
        assert auth_client.get(f"{URL}low-stock/", {"threshold": "many"}).status_code == 400

    def test_featured_is_a_plain_list(self, auth_client, make_product):
        for i in range(12):
            make_product(sku=f"F-{i:02d}")
        make_product(sku="DRAFT", status=ProductStatus.DRAFT)
        response = auth_client.get(f"{URL}featured/")
        data = response.json()
        assert isinstance(data, list)
        assert len(data) == 10
        assert "DRAFT" not in {p["sku"] for p in data}
