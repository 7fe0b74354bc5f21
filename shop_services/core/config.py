"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from environment
variables.  Defaults are provided for all fields so that the services
can be started locally without any configuration.  Every service reads
the same settings object; per-service values (port, database file, base
URL) are looked up by service name.
"""

import os
from dataclasses import dataclass


SERVICES = ("users", "products", "orders", "payments")


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Shop Services")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    algorithm: str = os.getenv("ALGORITHM", "HS256")

    # Comma-separated list of static tokens accepted from other services.
    # A request presenting one of them is authenticated with the
    # ``service`` role and no user id.
    service_tokens: str = os.getenv("SERVICE_TOKENS", "")

    # Token this process presents when calling another service.  Falls
    # back to the first entry of ``service_tokens``.
    service_token: str = os.getenv("SERVICE_TOKEN", "")

    service_host: str = os.getenv("SERVICE_HOST", "0.0.0.0")
    users_port: int = int(os.getenv("USERS_PORT", "8001"))
    products_port: int = int(os.getenv("PRODUCTS_PORT", "8002"))
    orders_port: int = int(os.getenv("ORDERS_PORT", "8003"))
    payments_port: int = int(os.getenv("PAYMENTS_PORT", "8004"))

    # SQLite files, one per service.  Relative paths are resolved against
    # the project root by the ``db`` module.
    users_database_url: str = os.getenv("USERS_DATABASE_URL", "users.db")
    products_database_url: str = os.getenv("PRODUCTS_DATABASE_URL", "products.db")
    orders_database_url: str = os.getenv("ORDERS_DATABASE_URL", "orders.db")
    payments_database_url: str = os.getenv("PAYMENTS_DATABASE_URL", "payments.db")

    users_service_url: str = os.getenv("USERS_SERVICE_URL", "http://localhost:8001")
    products_service_url: str = os.getenv("PRODUCTS_SERVICE_URL", "http://localhost:8002")
    orders_service_url: str = os.getenv("ORDERS_SERVICE_URL", "http://localhost:8003")
    payments_service_url: str = os.getenv("PAYMENTS_SERVICE_URL", "http://localhost:8004")

    http_timeout: float = float(os.getenv("HTTP_TIMEOUT", "15"))

    def _lookup(self, service: str, suffix: str):
        if service not in SERVICES:
            raise ValueError(f"Unknown service: {service}")
        return getattr(self, f"{service}_{suffix}")

    def port(self, service: str) -> int:
        return self._lookup(service, "port")

    def database_url(self, service: str) -> str:
        return self._lookup(service, "database_url")

    def service_url(self, service: str) -> str:
        return self._lookup(service, "service_url")

    def accepted_service_tokens(self) -> list[str]:
        return _split(self.service_tokens)

    def outgoing_service_token(self) -> str:
        """Token used for calls made on behalf of this service itself."""
        if self.service_token:
            return self.service_token
        tokens = self.accepted_service_tokens()
        return tokens[0] if tokens else ""


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before this module is imported.
settings = Settings()
