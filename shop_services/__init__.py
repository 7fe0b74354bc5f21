"""
Top-level package for the shop microservices.

The repository hosts four independently deployable services (users,
products, orders and payments) that share a small amount of
infrastructure code in ``core``.  Each service is assembled by
``shop_services.main.create_app`` and owns its own database file, so a
service can be deployed, scaled or replaced without touching the
others.
"""

__all__ = []
