"""Client for the products service."""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from .base import Error, ServiceClient


class ProductsClient(ServiceClient):
    service_name = "products"

    def get_product(self, product_id: int) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", f"/api/v1/products/{product_id}")

    def reserve(self, product_id: int, quantity: int) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Take ``quantity`` units of a product out of stock.

        Returns the updated product.  Insufficient stock is reported as a
        409 error.
        """
        return self._request(
            "POST", f"/api/v1/products/{product_id}/reserve", json_body={"quantity": quantity}
        )

    def release(self, product_id: int, quantity: int) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Return previously reserved units to stock."""
        return self._request(
            "POST", f"/api/v1/products/{product_id}/release", json_body={"quantity": quantity}
        )
