"""
conftest.py - Shared fixtures for all tests.

Every test gets fresh SQLite files for all four services and a known
secret key and service token.  Service apps are wrapped in
``TestClient`` context managers so their start-up hooks (migrations)
run.
"""
import pytest
from fastapi.testclient import TestClient

from shop_services.core.config import settings
from shop_services.core.security import create_access_token
from shop_services.main import create_app


SERVICE_TOKEN = "test-service-token"


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point every service at its own temporary database."""
    for service in ("users", "products", "orders", "payments"):
        monkeypatch.setattr(settings, f"{service}_database_url", str(tmp_path / f"{service}.db"))
    monkeypatch.setattr(settings, "secret_key", "test-secret")
    monkeypatch.setattr(settings, "service_tokens", SERVICE_TOKEN)
    monkeypatch.setattr(settings, "service_token", "")
    return settings


def _client(service):
    with TestClient(create_app(service)) as client:
        yield client


@pytest.fixture
def users_api():
    yield from _client("users")


@pytest.fixture
def products_api():
    yield from _client("products")


@pytest.fixture
def orders_api():
    yield from _client("orders")


@pytest.fixture
def payments_api():
    yield from _client("payments")


@pytest.fixture
def make_headers():
    """Factory fixture - Authorization headers for a user, admin or service."""
    def _make_headers(user_id=1, role="user", email=None):
        if role == "service":
            token = SERVICE_TOKEN
        else:
            token = create_access_token(
                {"sub": email or f"user{user_id}@example.com", "user_id": user_id, "role": role}
            )
        return {"Authorization": f"Bearer {token}"}
    return _make_headers
