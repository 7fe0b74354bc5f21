"""
HTTP clients used by one service to call another.

Each client wraps a ``requests.Session`` and exposes a handful of
high-level methods.  Methods never raise on HTTP or network failures;
they return a ``(data, error)`` tuple where ``error`` is ``None`` on
success or a dictionary with ``status_code`` and ``message``.
"""

from .base import ServiceClient
from .orders import OrdersClient
from .products import ProductsClient
from .users import UsersClient

__all__ = ["ServiceClient", "UsersClient", "ProductsClient", "OrdersClient"]
