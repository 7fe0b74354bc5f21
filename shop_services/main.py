"""
Application factory for the shop services.

``create_app(service)`` assembles the FastAPI application of one
service: logging tagged with the service name, the service's versioned
router and a ``/health`` route.  The database of the service is
migrated on start-up.  One application instance per service is created
at import time so each can be served on its own, e.g.::

    uvicorn shop_services.main:users_app --port 8001
    uvicorn shop_services.main:orders_app --port 8003
"""

from fastapi import FastAPI, Request

from .api.v1.router import build_router
from .core.config import SERVICES, settings
from .core.db import init_db
from .core.logging_config import current_service, setup_logging


def create_app(service: str) -> FastAPI:
    """Create and configure the FastAPI application for ``service``.

    Parameters
    ----------
    service : str
        One of ``users``, ``products``, ``orders`` or ``payments``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.

    Raises
    ------
    ValueError
        If ``service`` is not a known service name.
    """
    if service not in SERVICES:
        raise ValueError(f"Unknown service: {service}")

    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(
        title=f"{settings.project_name}: {service}",
        version=settings.api_version,
    )
    app.state.service = service

    @app.middleware("http")
    async def tag_service_logs(request: Request, call_next):
        token = current_service.set(service)
        try:
            return await call_next(request)
        finally:
            current_service.reset(token)

    app.include_router(build_router(service), prefix="/api/v1")

    @app.get("/health", tags=["health"])
    async def health() -> dict:
        return {"status": "ok", "service": service, "version": settings.api_version}

    @app.on_event("startup")
    async def startup_event() -> None:
        init_db(service)

    return app


users_app = create_app("users")
products_app = create_app("products")
orders_app = create_app("orders")
payments_app = create_app("payments")
