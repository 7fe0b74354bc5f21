"""
Tests for the orders service.

Calls to the users and products services are replaced with mocks on
the client methods, so these tests exercise how the orders service
reacts to each remote outcome.
"""
import sqlite3
from unittest.mock import call, patch

import pytest

from shop_services.clients import ProductsClient, UsersClient
from shop_services.core import db


PRICES = {1: 10.0, 2: 2.5}


def fake_reserve(product_id, quantity):
    if product_id not in PRICES:
        return None, {"status_code": 404, "message": "Product not found"}
    if quantity > 100:
        return None, {"status_code": 409, "message": "Insufficient stock"}
    return {"id": product_id, "price": PRICES[product_id], "stock": 100 - quantity}, None


@pytest.fixture
def remote():
    """Users service knows user 1 and 2; products service knows products 1 and 2."""
    def fake_get_user(user_id):
        if user_id in (1, 2):
            return {"id": user_id, "email": f"user{user_id}@example.com"}, None
        return None, {"status_code": 404, "message": "User not found"}

    with patch.object(UsersClient, "get_user", side_effect=fake_get_user) as get_user, \
            patch.object(ProductsClient, "reserve", side_effect=fake_reserve) as reserve, \
            patch.object(ProductsClient, "release", return_value=({}, None)) as release:
        yield {"get_user": get_user, "reserve": reserve, "release": release}


def place(client, headers, items, user_id=None):
    body = {"items": items}
    if user_id is not None:
        body["user_id"] = user_id
    return client.post("/api/v1/orders/", json=body, headers=headers)


class TestCreateOrder:

    def test_creates_pending_order_with_total(self, orders_api, make_headers, remote):
        response = place(orders_api, make_headers(user_id=1), [
            {"product_id": 1, "quantity": 2},
            {"product_id": 2, "quantity": 4},
        ])
        assert response.status_code == 201
        order = response.json()
        assert order["user_id"] == 1
        assert order["status"] == "pending"
        assert order["total"] == 30.0
        assert [i["unit_price"] for i in order["items"]] == [10.0, 2.5]
        remote["get_user"].assert_called_once_with(1)

    def test_unknown_user_is_not_found(self, orders_api, make_headers, remote):
        response = place(orders_api, make_headers(role="admin", user_id=1), [{"product_id": 1, "quantity": 1}], user_id=7)
        assert response.status_code == 404
        assert response.json()["detail"] == "User 7 not found"
        remote["reserve"].assert_not_called()

    def test_users_service_unreachable(self, orders_api, make_headers):
        with patch.object(UsersClient, "get_user", return_value=(None, {"status_code": None, "message": "refused"})):
            response = place(orders_api, make_headers(), [{"product_id": 1, "quantity": 1}])
        assert response.status_code == 503

    def test_users_service_error(self, orders_api, make_headers):
        with patch.object(UsersClient, "get_user", return_value=(None, {"status_code": 500, "message": "boom"})):
            response = place(orders_api, make_headers(), [{"product_id": 1, "quantity": 1}])
        assert response.status_code == 502

    def test_unknown_product_releases_earlier_reservations(self, orders_api, make_headers, remote):
        response = place(orders_api, make_headers(), [
            {"product_id": 1, "quantity": 3},
            {"product_id": 99, "quantity": 1},
        ])
        assert response.status_code == 404
        assert response.json()["detail"] == "Product 99 not found"
        remote["release"].assert_called_once_with(1, 3)

    def test_insufficient_stock_conflicts(self, orders_api, make_headers, remote):
        response = place(orders_api, make_headers(), [{"product_id": 2, "quantity": 500}])
        assert response.status_code == 409
        assert orders_api.get("/api/v1/orders/", headers=make_headers()).json() == []

    def test_insufficient_stock_releases_earlier_reservations(self, orders_api, make_headers, remote):
        response = place(orders_api, make_headers(), [
            {"product_id": 1, "quantity": 3},
            {"product_id": 2, "quantity": 500},
        ])
        assert response.status_code == 409
        assert response.json()["detail"] == "Insufficient stock for product 2"
        remote["release"].assert_called_once_with(1, 3)

    def test_products_service_error_releases_earlier_reservations(self, orders_api, make_headers, remote):
        def reserve(product_id, quantity):
            if product_id == 2:
                return None, {"status_code": 500, "message": "boom"}
            return fake_reserve(product_id, quantity)

        remote["reserve"].side_effect = reserve
        response = place(orders_api, make_headers(), [
            {"product_id": 1, "quantity": 3},
            {"product_id": 2, "quantity": 1},
        ])
        assert response.status_code == 502
        remote["release"].assert_called_once_with(1, 3)

    def test_storage_failure_releases_all_reservations(self, orders_api, make_headers, remote):
        def broken_connection(service):
            conn = db.get_connection(service)
            conn.execute("DROP TABLE order_items")
            return conn

        with patch("shop_services.services.order_service.get_connection", side_effect=broken_connection):
            with pytest.raises(sqlite3.OperationalError):
                place(orders_api, make_headers(), [
                    {"product_id": 1, "quantity": 2},
                    {"product_id": 2, "quantity": 4},
                ])
        assert remote["release"].call_args_list == [call(1, 2), call(2, 4)]

    def test_user_cannot_order_for_someone_else(self, orders_api, make_headers, remote):
        response = place(orders_api, make_headers(user_id=1), [{"product_id": 1, "quantity": 1}], user_id=2)
        assert response.status_code == 403

    def test_admin_can_order_for_someone_else(self, orders_api, make_headers, remote):
        response = place(orders_api, make_headers(role="admin", user_id=1), [{"product_id": 1, "quantity": 1}], user_id=2)
        assert response.status_code == 201
        assert response.json()["user_id"] == 2

    def test_empty_order_rejected(self, orders_api, make_headers, remote):
        assert place(orders_api, make_headers(), []).status_code == 422

    def test_requires_authentication(self, orders_api):
        response = orders_api.post("/api/v1/orders/", json={"items": [{"product_id": 1, "quantity": 1}]})
        assert response.status_code == 401


class TestReadOrders:

    @pytest.fixture
    def order(self, orders_api, make_headers, remote):
        return place(orders_api, make_headers(user_id=1), [{"product_id": 1, "quantity": 1}]).json()

    def test_owner_can_read(self, orders_api, make_headers, order):
        response = orders_api.get(f"/api/v1/orders/{order['id']}", headers=make_headers(user_id=1))
        assert response.status_code == 200
        assert response.json()["id"] == order["id"]

    def test_other_user_is_forbidden(self, orders_api, make_headers, order):
        response = orders_api.get(f"/api/v1/orders/{order['id']}", headers=make_headers(user_id=2))
        assert response.status_code == 403

    def test_service_can_read(self, orders_api, make_headers, order):
        response = orders_api.get(f"/api/v1/orders/{order['id']}", headers=make_headers(role="service"))
        assert response.status_code == 200

    def test_missing_order(self, orders_api, make_headers):
        assert orders_api.get("/api/v1/orders/5", headers=make_headers()).status_code == 404

    def test_listing_is_scoped_to_user(self, orders_api, make_headers, order):
        assert len(orders_api.get("/api/v1/orders/", headers=make_headers(user_id=1)).json()) == 1
        assert orders_api.get("/api/v1/orders/", headers=make_headers(user_id=2)).json() == []
        assert len(orders_api.get("/api/v1/orders/", headers=make_headers(role="admin", user_id=9)).json()) == 1


class TestOrderStatus:

    @pytest.fixture
    def order(self, orders_api, make_headers, remote):
        return place(orders_api, make_headers(user_id=1), [{"product_id": 1, "quantity": 1}]).json()

    def test_pending_to_paid(self, orders_api, make_headers, order):
        response = orders_api.patch(
            f"/api/v1/orders/{order['id']}/status", json={"status": "paid"}, headers=make_headers(role="service")
        )
        assert response.status_code == 200
        assert response.json()["status"] == "paid"

    def test_cancel_releases_stock(self, orders_api, make_headers, order, remote):
        response = orders_api.patch(
            f"/api/v1/orders/{order['id']}/status", json={"status": "cancelled"}, headers=make_headers(role="admin")
        )
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        remote["release"].assert_called_once_with(1, 1)

    def test_paying_does_not_release_stock(self, orders_api, make_headers, order, remote):
        orders_api.patch(
            f"/api/v1/orders/{order['id']}/status", json={"status": "paid"}, headers=make_headers(role="service")
        )
        remote["release"].assert_not_called()

    def test_paid_order_cannot_be_cancelled(self, orders_api, make_headers, order):
        headers = make_headers(role="service")
        orders_api.patch(f"/api/v1/orders/{order['id']}/status", json={"status": "paid"}, headers=headers)
        response = orders_api.patch(
            f"/api/v1/orders/{order['id']}/status", json={"status": "cancelled"}, headers=headers
        )
        assert response.status_code == 409

    def test_users_cannot_change_status(self, orders_api, make_headers, order):
        response = orders_api.patch(
            f"/api/v1/orders/{order['id']}/status", json={"status": "paid"}, headers=make_headers(user_id=1)
        )
        assert response.status_code == 403

    def test_unknown_status_value(self, orders_api, make_headers, order):
        response = orders_api.patch(
            f"/api/v1/orders/{order['id']}/status", json={"status": "shipped"}, headers=make_headers(role="admin")
        )
        assert response.status_code == 422
