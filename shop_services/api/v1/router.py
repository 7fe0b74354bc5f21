"""
Per-service routers for version 1 of the API.

Unlike a monolith, which would mount every domain on one application,
each service mounts only its own router.  ``build_router`` returns the
router for one service, ready to be included under ``/api/v1``.
"""

from fastapi import APIRouter

from .endpoints import orders, payments, products, users


# service name -> (router, prefix)
SERVICE_ROUTERS = {
    "users": (users.router, "/users"),
    "products": (products.router, "/products"),
    "orders": (orders.router, "/orders"),
    "payments": (payments.router, "/payments"),
}


def build_router(service: str) -> APIRouter:
    if service not in SERVICE_ROUTERS:
        raise ValueError(f"Unknown service: {service}")
    endpoint_router, prefix = SERVICE_ROUTERS[service]
    router = APIRouter()
    router.include_router(endpoint_router, prefix=prefix, tags=[service])
    return router
