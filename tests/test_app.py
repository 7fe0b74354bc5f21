import pytest

from run import parse_args
from shop_services.main import create_app


class TestCreateApp:

    def test_unknown_service(self):
        with pytest.raises(ValueError):
            create_app("inventory")

    @pytest.mark.parametrize("service", ["users", "products", "orders", "payments"])
    def test_health(self, service):
        from fastapi.testclient import TestClient

        with TestClient(create_app(service)) as client:
            response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["service"] == service

    def test_service_only_serves_its_own_routes(self, users_api):
        assert users_api.get("/api/v1/products/").status_code == 404


class TestRunArgs:

    def test_defaults_to_all_services(self):
        assert parse_args([]).services == ["users", "products", "orders", "payments"]

    def test_subset(self):
        assert parse_args(["users", "orders"]).services == ["users", "orders"]

    def test_rejects_unknown_service(self):
        with pytest.raises(SystemExit):
            parse_args(["inventory"])
