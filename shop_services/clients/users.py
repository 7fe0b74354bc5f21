"""Client for the users service."""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from .base import Error, ServiceClient


class UsersClient(ServiceClient):
    service_name = "users"

    def get_user(self, user_id: int) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Look up a user by id.

        A user that does not exist yields ``(None, {"status_code": 404, ...})``.
        """
        return self._request("GET", f"/api/v1/users/{user_id}")

    def login(self, email: str, password: str) -> Tuple[Optional[str], Optional[Error]]:
        """Exchange credentials for an access token."""
        data, error = self._request(
            "POST", "/api/v1/users/login", json_body={"email": email, "password": password}
        )
        if error:
            return None, error
        return (data or {}).get("access_token"), None
