"""
Service layer.

Each service class encapsulates the business logic of one deployable
service and talks only to its own database and, through
``shop_services.clients``, to other services.  Methods raise the
exceptions from ``shop_services.core.errors``; endpoints map them to
HTTP responses.
"""
