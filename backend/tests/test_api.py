"""
HTTP API tests.

Exercises the product, cart, checkout, sales and dashboard routes through the
Flask test client.
"""

import csv
import io

import pytest

from finantech.services.errors import PersistenceError
from finantech.services.snapshot_service import PRODUCTS_KEY, SALES_KEY, SnapshotStore


PRODUCT_FORM = {
    "name": "Gula Pasir 1kg",
    "category": "Sembako",
    "price": 16000,
    "cost_price": 14000,
    "stock": 30,
    "min_stock": 5,
}


class TestProducts:

    def test_create_product(self, client, state):
        resp = client.post("/api/products", json=PRODUCT_FORM)

        assert resp.status_code == 201
        data = resp.get_json()
        assert data["id"].startswith("PROD-")
        assert data["price"] == 16000
        assert data["low_stock"] is False
        assert state.catalog.get(data["id"]) is not None

    def test_create_persists_snapshot(self, client, state):
        client.post("/api/products", json=PRODUCT_FORM)
        saved = state.snapshots.load(PRODUCTS_KEY)
        assert [p["name"] for p in saved] == ["Gula Pasir 1kg"]

    def test_create_missing_fields(self, client):
        resp = client.post("/api/products", json={"name": "Only name"})
        assert resp.status_code == 400
        assert "Missing required fields" in resp.get_json()["error"]

    def test_create_blank_name(self, client):
        resp = client.post("/api/products", json={**PRODUCT_FORM, "name": "   "})
        assert resp.status_code == 400

    def test_unknown_field_rejected(self, client):
        resp = client.post("/api/products", json={**PRODUCT_FORM, "id": "HACK"})
        assert resp.status_code == 400
        assert "not allowed" in resp.get_json()["error"]

    def test_invalid_numbers_fall_back_to_zero(self, client):
        resp = client.post("/api/products", json={**PRODUCT_FORM, "stock": "abc", "cost_price": ""})
        assert resp.status_code == 201
        data = resp.get_json()
        assert data["stock"] == 0
        assert data["cost_price"] == 0

    def test_fractional_stock_truncated(self, client):
        resp = client.post("/api/products", json={**PRODUCT_FORM, "stock": "12.5", "min_stock": 7.0})
        assert resp.status_code == 201
        data = resp.get_json()
        assert data["stock"] == 12
        assert data["min_stock"] == 7

    def test_negative_price_rejected(self, client):
        resp = client.post("/api/products", json={**PRODUCT_FORM, "price": -1})
        assert resp.status_code == 400

    def test_list_and_search(self, client, kopi, minyak):
        resp = client.get("/api/products")
        assert [p["id"] for p in resp.get_json()["items"]] == [kopi.id, minyak.id]

        resp = client.get("/api/products?search=sembako")
        assert [p["id"] for p in resp.get_json()["items"]] == [minyak.id]

    def test_low_stock_listing(self, client, kopi, minyak):
        resp = client.get("/api/products/low-stock")
        assert [p["id"] for p in resp.get_json()["items"]] == [minyak.id]

    def test_update_partial(self, client, kopi, minyak):
        resp = client.put(f"/api/products/{kopi.id}", json={"stock": 3})

        assert resp.status_code == 200
        data = resp.get_json()
        assert data["stock"] == 3
        assert data["low_stock"] is True
        assert data["name"] == kopi.name
        order = [p["id"] for p in client.get("/api/products").get_json()["items"]]
        assert order == [kopi.id, minyak.id]

    def test_update_missing(self, client):
        resp = client.put("/api/products/nope", json={"stock": 1})
        assert resp.status_code == 404

    def test_get_product(self, client, kopi):
        assert client.get(f"/api/products/{kopi.id}").get_json()["name"] == kopi.name
        assert client.get("/api/products/nope").status_code == 404

    def test_delete(self, client, kopi):
        assert client.delete(f"/api/products/{kopi.id}").status_code == 200
        assert client.delete(f"/api/products/{kopi.id}").status_code == 404
        assert client.get("/api/products").get_json()["count"] == 0


class TestCartAndCheckout:

    def test_add_and_view_cart(self, client, kopi):
        resp = client.post("/api/cart/items", json={"product_id": kopi.id})
        assert resp.status_code == 200
        assert resp.get_json()["cart"]["total"] == 15000

        cart = client.get("/api/cart").get_json()
        assert cart["count"] == 1
        assert cart["items"][0]["quantity"] == 1

    def test_add_requires_product_id(self, client):
        assert client.post("/api/cart/items", json={}).status_code == 400

    def test_add_unknown_product(self, client):
        assert client.post("/api/cart/items", json={"product_id": "nope"}).status_code == 404

    def test_add_beyond_stock_refused(self, client, minyak):
        for _ in range(minyak.stock):
            assert client.post("/api/cart/items", json={"product_id": minyak.id}).status_code == 200

        resp = client.post("/api/cart/items", json={"product_id": minyak.id})

        assert resp.status_code == 409
        assert client.get("/api/cart").get_json()["items"][0]["quantity"] == minyak.stock

    def test_change_quantity(self, client, minyak):
        client.post("/api/cart/items", json={"product_id": minyak.id})

        resp = client.patch(f"/api/cart/items/{minyak.id}", json={"delta": 3})
        assert resp.get_json()["line"]["quantity"] == 4

        resp = client.patch(f"/api/cart/items/{minyak.id}", json={"delta": 5})
        assert resp.status_code == 409

        resp = client.patch(f"/api/cart/items/{minyak.id}", json={"delta": -10})
        assert resp.get_json()["line"]["quantity"] == 1

    def test_change_quantity_requires_delta(self, client, kopi):
        client.post("/api/cart/items", json={"product_id": kopi.id})
        assert client.patch(f"/api/cart/items/{kopi.id}", json={}).status_code == 400

    def test_remove_and_clear(self, client, kopi, minyak):
        client.post("/api/cart/items", json={"product_id": kopi.id})
        client.post("/api/cart/items", json={"product_id": minyak.id})

        assert client.delete(f"/api/cart/items/{kopi.id}").status_code == 200
        assert client.delete(f"/api/cart/items/{kopi.id}").status_code == 404
        assert client.delete("/api/cart").get_json()["cart"]["count"] == 0

    def test_checkout(self, client, state, kopi):
        client.post("/api/cart/items", json={"product_id": kopi.id})
        client.patch(f"/api/cart/items/{kopi.id}", json={"delta": 1})

        resp = client.post("/api/checkout")

        assert resp.status_code == 201
        sale = resp.get_json()["sale"]
        assert sale["total"] == 30000
        assert sale["profit"] == 6000
        assert sale["items"][0]["subtotal"] == 30000
        assert state.catalog.get(kopi.id).stock == kopi.stock - 2
        assert client.get("/api/cart").get_json()["count"] == 0
        assert client.get("/api/sales").get_json()["items"][0]["id"] == sale["id"]
        assert state.snapshots.load(SALES_KEY)[0]["id"] == sale["id"]

    def test_checkout_empty_cart(self, client, state, kopi):
        resp = client.post("/api/checkout")

        assert resp.status_code == 400
        assert state.catalog.get(kopi.id).stock == kopi.stock
        assert len(state.ledger) == 0

    def test_checkout_after_product_deleted(self, client, state, kopi):
        client.post("/api/cart/items", json={"product_id": kopi.id})
        client.delete(f"/api/products/{kopi.id}")

        sale = client.post("/api/checkout").get_json()["sale"]

        assert sale["profit"] == 3000
        assert sale["items"][0]["name"] == kopi.name


class TestSalesHistory:

    @pytest.fixture
    def two_sales(self, client, kopi, minyak):
        client.post("/api/cart/items", json={"product_id": kopi.id})
        first = client.post("/api/checkout").get_json()["sale"]
        client.post("/api/cart/items", json={"product_id": minyak.id})
        second = client.post("/api/checkout").get_json()["sale"]
        return first, second

    def test_most_recent_first(self, client, two_sales):
        first, second = two_sales
        ids = [s["id"] for s in client.get("/api/sales").get_json()["items"]]
        assert ids == [second["id"], first["id"]]

    def test_search(self, client, two_sales):
        items = client.get("/api/sales?search=minyak").get_json()["items"]
        assert [s["id"] for s in items] == [two_sales[1]["id"]]

    def test_get_sale(self, client, two_sales):
        sale_id = two_sales[0]["id"]
        assert client.get(f"/api/sales/{sale_id}").get_json()["sale"]["id"] == sale_id
        assert client.get("/api/sales/TRX-0").status_code == 404

    def test_history_survives_product_delete(self, client, kopi, two_sales):
        client.delete(f"/api/products/{kopi.id}")
        sale = client.get(f"/api/sales/{two_sales[0]['id']}").get_json()["sale"]
        assert sale["items"][0] == {
            "product_id": kopi.id,
            "name": kopi.name,
            "price": 15000,
            "quantity": 1,
            "subtotal": 15000,
        }

    def test_export_csv(self, client, two_sales):
        resp = client.get("/api/sales/export?search=kopi")

        assert resp.status_code == 200
        assert resp.mimetype == "text/csv"
        assert "attachment; filename=sales_report_" in resp.headers["Content-Disposition"]
        rows = list(csv.reader(io.StringIO(resp.get_data(as_text=True))))
        assert rows[0][0] == "Transaction ID"
        assert len(rows) == 2
        assert rows[1][4] == "Kopi Kapal Api 165g (1x)"


class TestDashboardAndHealth:

    def test_dashboard(self, client, kopi, minyak):
        client.post("/api/cart/items", json={"product_id": kopi.id})
        client.post("/api/checkout")

        data = client.get("/api/dashboard").get_json()

        assert data["total_revenue"] == 15000
        assert data["total_profit"] == 3000
        assert data["total_stock"] == (kopi.stock - 1) + minyak.stock
        assert data["low_stock_count"] == 1
        assert len(data["recent_activity"]) == 1

    def test_dashboard_recent_param(self, client):
        assert client.get("/api/dashboard?recent=-1").status_code == 400
        assert client.get("/api/dashboard?recent=0").get_json()["recent_activity"] == []

    def test_health(self, client, kopi):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["status"] == "healthy"
        assert data["state"]["products"] == 1


class TestSnapshotWriteFailure:
    """A failed snapshot write never turns a committed change into an error."""

    @pytest.fixture
    def failing_snapshots(self, monkeypatch):
        def _fail(self, **payloads):
            raise PersistenceError("Could not save snapshots", details={"keys": sorted(payloads)})

        monkeypatch.setattr(SnapshotStore, "save", _fail)

    def test_checkout_still_succeeds(self, client, state, kopi, failing_snapshots):
        client.post("/api/cart/items", json={"product_id": kopi.id})

        resp = client.post("/api/checkout")

        assert resp.status_code == 201
        assert len(state.ledger) == 1
        assert state.ledger.list()[0].id == resp.get_json()["sale"]["id"]
        assert state.catalog.get(kopi.id).stock == kopi.stock - 1
        assert state.cart.is_empty

    def test_product_writes_still_succeed(self, client, state, kopi, failing_snapshots):
        resp = client.post("/api/products", json=PRODUCT_FORM)
        assert resp.status_code == 201
        assert resp.get_json()["id"] in state.catalog

        assert client.put(f"/api/products/{kopi.id}", json={"stock": 9}).status_code == 200
        assert client.delete(f"/api/products/{kopi.id}").status_code == 200
        assert kopi.id not in state.catalog


class CountingLock:
    def __init__(self, inner):
        self.inner = inner
        self.entered = 0

    def __enter__(self):
        self.entered += 1
        return self.inner.__enter__()

    def __exit__(self, *exc):
        return self.inner.__exit__(*exc)


class TestReadsTakeStateLock:

    def test_get_product_and_sale(self, client, state, kopi):
        state.cart.add(kopi)
        sale = state.checkout()
        lock = state.lock = CountingLock(state.lock)

        assert client.get(f"/api/products/{kopi.id}").status_code == 200
        assert lock.entered == 1
        assert client.get(f"/api/sales/{sale.id}").status_code == 200
        assert lock.entered == 2
