"""Client for the orders service."""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from .base import Error, ServiceClient


class OrdersClient(ServiceClient):
    service_name = "orders"

    def get_order(self, order_id: int) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", f"/api/v1/orders/{order_id}")

    def set_status(self, order_id: int, status: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request(
            "PATCH", f"/api/v1/orders/{order_id}/status", json_body={"status": status}
        )
