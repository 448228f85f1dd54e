"""HTTP surface: status codes and bodies for cart and order routes."""

from unittest import mock

import pytest
import redis

from storefront.api.deps import get_lock_service, get_payment_gateway
from storefront.services.lock_service import LockService
from storefront.services.payment_gateway import DecliningGateway


@pytest.fixture()
def alice(customer, auth_headers):
    return auth_headers(customer)


@pytest.fixture()
def bob(other_customer, auth_headers):
    return auth_headers(other_customer)


@pytest.fixture()
def root(admin, auth_headers):
    return auth_headers(admin)


def _fill_cart(client, headers, variants):
    v1, v2 = variants
    client.post("/cart/items", json={"variant_id": v1.id, "quantity": 2}, headers=headers)
    client.post("/cart/items", json={"variant_id": v2.id, "quantity": 1}, headers=headers)


class TestAuthEndpoints:
    def test_register_then_login(self, client):
        resp = client.post(
            "/auth/register",
            json={"email": "new@example.com", "password": "secret123", "name": "New"},
        )
        assert resp.status_code == 201
        assert resp.json()["user"]["role"] == "CUSTOMER"

        login = client.post("/auth/login", json={"email": "new@example.com", "password": "secret123"})
        assert login.status_code == 200
        token = login.json()["access_token"]

        me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.json()["email"] == "new@example.com"

    def test_bad_login(self, client, customer):
        resp = client.post("/auth/login", json={"email": "alice@example.com", "password": "wrong"})
        assert resp.status_code == 401
        assert resp.json()["code"] == "invalid_credentials"

    def test_missing_token(self, client):
        resp = client.get("/cart")
        assert resp.status_code == 401
        assert resp.json()["code"] == "not_authenticated"

    def test_invalid_token(self, client):
        resp = client.get("/cart", headers={"Authorization": "Bearer broken"})
        assert resp.status_code == 401


class TestCartEndpoints:
    def test_get_cart_creates_it(self, client, alice):
        resp = client.get("/cart", headers=alice)
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ACTIVE"
        assert body["items"] == []
        assert client.get("/cart", headers=alice).json()["id"] == body["id"]

    def test_add_item_created_then_merged(self, client, alice, variants):
        v1, _ = variants
        first = client.post("/cart/items", json={"variant_id": v1.id, "quantity": 1}, headers=alice)
        second = client.post("/cart/items", json={"variant_id": v1.id, "quantity": 2}, headers=alice)

        assert first.status_code == 201
        assert second.status_code == 200
        assert second.json()["quantity"] == 3
        assert len(client.get("/cart", headers=alice).json()["items"]) == 1

    def test_add_item_invalid_quantity(self, client, alice, variants):
        resp = client.post("/cart/items", json={"variant_id": variants[0].id, "quantity": 0}, headers=alice)
        assert resp.status_code == 400
        assert resp.json()["code"] == "invalid_quantity"

    def test_add_item_malformed_body(self, client, alice):
        resp = client.post("/cart/items", json={"quantity": 1}, headers=alice)
        assert resp.status_code == 400
        assert resp.json()["code"] == "invalid_request"

    def test_add_unknown_variant(self, client, alice, variants):
        resp = client.post("/cart/items", json={"variant_id": 99999, "quantity": 1}, headers=alice)
        assert resp.status_code == 404

    def test_update_and_delete_item(self, client, alice, variants):
        item = client.post("/cart/items", json={"variant_id": variants[0].id, "quantity": 1}, headers=alice).json()

        updated = client.put(f"/cart/items/{item['id']}", json={"quantity": 4}, headers=alice)
        assert updated.status_code == 200
        assert updated.json()["quantity"] == 4

        assert client.put(f"/cart/items/{item['id']}", json={"quantity": -2}, headers=alice).status_code == 400

        assert client.delete(f"/cart/items/{item['id']}", headers=alice).status_code == 204
        assert client.delete(f"/cart/items/{item['id']}", headers=alice).status_code == 404

    def test_cart_items_carry_variant_details(self, client, alice, variants):
        v1, _ = variants
        added = client.post("/cart/items", json={"variant_id": v1.id, "quantity": 2}, headers=alice).json()
        assert added["variant"]["name"] == "Small"

        item = client.get("/cart", headers=alice).json()["items"][0]
        assert item["variant"]["id"] == v1.id
        assert item["variant"]["sku"] == "TSHIRT-S"
        assert item["variant"]["price"] == 1999
        assert item["variant"]["product"]["title"] == "Premium T-Shirt"

    def test_cannot_touch_someone_elses_item(self, client, alice, bob, variants):
        item = client.post("/cart/items", json={"variant_id": variants[0].id, "quantity": 1}, headers=bob).json()

        assert client.put(f"/cart/items/{item['id']}", json={"quantity": 4}, headers=alice).status_code == 404
        assert client.delete(f"/cart/items/{item['id']}", headers=alice).status_code == 404


class TestOrderEndpoints:
    def test_create_order(self, client, alice, variants, gateway):
        _fill_cart(client, alice, variants)

        resp = client.post("/orders", headers=alice)
        assert resp.status_code == 201
        body = resp.json()
        assert body["total_amount"] == 13997
        assert body["currency"] == "USD"
        assert body["status"] == "PROCESSING"
        assert body["payment_status"] == "PAID"
        assert len(body["items"]) == 2
        assert len(gateway.calls) == 1

        # nowy, pusty koszyk po zamowieniu
        cart = client.get("/cart", headers=alice).json()
        assert cart["id"] != body["cart_id"]
        assert cart["items"] == []

    def test_empty_cart(self, client, alice):
        resp = client.post("/orders", headers=alice)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Cart is empty", "code": "empty_cart"}

    def test_payment_declined(self, app, client, alice, variants):
        app.dependency_overrides[get_payment_gateway] = lambda: DecliningGateway()
        _fill_cart(client, alice, variants)

        resp = client.post("/orders", headers=alice)
        assert resp.status_code == 402
        assert resp.json()["code"] == "payment_declined"
        assert client.get("/orders/mine", headers=alice).json() == []
        assert len(client.get("/cart", headers=alice).json()["items"]) == 2

    def test_lock_store_outage_is_503(self, app, client, alice, variants, gateway):
        _fill_cart(client, alice, variants)
        redis_client = mock.Mock()
        redis_client.set.side_effect = redis.ConnectionError("connection refused")
        app.dependency_overrides[get_lock_service] = lambda: LockService(client=redis_client)

        resp = client.post("/orders", headers=alice)
        assert resp.status_code == 503
        assert resp.json()["code"] == "lock_unavailable"
        assert gateway.calls == []

    def test_my_orders_are_private(self, client, alice, bob, variants):
        _fill_cart(client, alice, variants)
        order = client.post("/orders", headers=alice).json()

        assert [o["id"] for o in client.get("/orders/mine", headers=alice).json()] == [order["id"]]
        assert client.get("/orders/mine", headers=bob).json() == []
        assert client.get(f"/orders/{order['id']}", headers=bob).status_code == 403
        assert client.get(f"/orders/{order['id']}", headers=alice).status_code == 200

    def test_list_all_orders_requires_admin(self, client, alice, root, variants):
        _fill_cart(client, alice, variants)
        client.post("/orders", headers=alice)

        assert client.get("/orders", headers=alice).status_code == 403
        resp = client.get("/orders", headers=root)
        assert resp.status_code == 200
        assert len(resp.json()) == 1

    def test_update_status(self, client, alice, root, variants):
        _fill_cart(client, alice, variants)
        order = client.post("/orders", headers=alice).json()
        url = f"/orders/{order['id']}/status"

        assert client.patch(url, json={"status": "COMPLETED"}, headers=alice).status_code == 403
        assert client.patch(url, json={}, headers=root).json()["code"] == "missing_field"
        assert client.patch(url, json={"status": "SHIPPED"}, headers=root).status_code == 400
        assert client.patch("/orders/999/status", json={"status": "COMPLETED"}, headers=root).status_code == 404

        completed = client.patch(url, json={"status": "COMPLETED"}, headers=root)
        assert completed.status_code == 200
        assert completed.json()["status"] == "COMPLETED"

        # permissive: terminal status can still be overwritten
        cancelled = client.patch(url, json={"status": "CANCELLED"}, headers=root)
        assert cancelled.status_code == 200
        assert cancelled.json()["status"] == "CANCELLED"
        assert cancelled.json()["payment_status"] == "PAID"

    def test_stats(self, client, alice, root, variants):
        _fill_cart(client, alice, variants)
        client.post("/orders", headers=alice)

        assert client.get("/orders/stats", headers=alice).status_code == 403
        stats = client.get("/orders/stats", headers=root).json()
        assert stats["total_orders"] == 1
        assert stats["paid_revenue"] == 13997


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert "X-Request-ID" in resp.headers
