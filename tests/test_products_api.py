"""
Tests for the products service: catalogue and stock reservation.
"""
import pytest


@pytest.fixture
def product(products_api, make_headers):
    response = products_api.post(
        "/api/v1/products/",
        json={"name": "Keyboard", "price": 50.0, "stock": 5},
        headers=make_headers(role="admin"),
    )
    assert response.status_code == 201
    return response.json()


class TestCatalogue:

    def test_create_requires_admin(self, products_api, make_headers):
        payload = {"name": "Mouse", "price": 10.0, "stock": 1}
        assert products_api.post("/api/v1/products/", json=payload).status_code == 401
        assert products_api.post("/api/v1/products/", json=payload, headers=make_headers()).status_code == 403

    def test_rejects_non_positive_price(self, products_api, make_headers):
        response = products_api.post(
            "/api/v1/products/",
            json={"name": "Free thing", "price": 0, "stock": 1},
            headers=make_headers(role="admin"),
        )
        assert response.status_code == 422

    def test_listing_is_public(self, products_api, product):
        response = products_api.get("/api/v1/products/")
        assert response.status_code == 200
        assert [p["name"] for p in response.json()] == ["Keyboard"]

    def test_listing_pagination(self, products_api, make_headers):
        for i in range(3):
            products_api.post(
                "/api/v1/products/",
                json={"name": f"P{i}", "price": 1.0, "stock": 1},
                headers=make_headers(role="admin"),
            )
        response = products_api.get("/api/v1/products/", params={"limit": 2, "offset": 1})
        assert [p["name"] for p in response.json()] == ["P1", "P2"]

    def test_get_unknown_product(self, products_api):
        assert products_api.get("/api/v1/products/42").status_code == 404


class TestReservation:

    def test_reserve_decrements_stock(self, products_api, product, make_headers):
        response = products_api.post(
            f"/api/v1/products/{product['id']}/reserve",
            json={"quantity": 2},
            headers=make_headers(role="service"),
        )
        assert response.status_code == 200
        assert response.json()["stock"] == 3

    def test_insufficient_stock_leaves_stock_unchanged(self, products_api, product, make_headers):
        response = products_api.post(
            f"/api/v1/products/{product['id']}/reserve",
            json={"quantity": 6},
            headers=make_headers(role="service"),
        )
        assert response.status_code == 409
        assert products_api.get(f"/api/v1/products/{product['id']}").json()["stock"] == 5

    def test_reserve_unknown_product(self, products_api, make_headers):
        response = products_api.post(
            "/api/v1/products/42/reserve", json={"quantity": 1}, headers=make_headers(role="service")
        )
        assert response.status_code == 404

    def test_users_cannot_reserve(self, products_api, product, make_headers):
        response = products_api.post(
            f"/api/v1/products/{product['id']}/reserve", json={"quantity": 1}, headers=make_headers()
        )
        assert response.status_code == 403

    def test_release_restores_stock(self, products_api, product, make_headers):
        headers = make_headers(role="service")
        products_api.post(f"/api/v1/products/{product['id']}/reserve", json={"quantity": 4}, headers=headers)
        response = products_api.post(
            f"/api/v1/products/{product['id']}/release", json={"quantity": 4}, headers=headers
        )
        assert response.json()["stock"] == 5
