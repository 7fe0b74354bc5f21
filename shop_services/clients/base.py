"""
Base HTTP client for inter-service calls.

``ServiceClient`` knows the base URL of one service, an optional bearer
token and a timeout.  ``_request`` performs the call and normalises
every outcome into ``(data, error)``:

* success: ``(parsed JSON or None, None)``
* HTTP error: ``(None, {"status_code": 404, "message": "..."})``
* network error: ``(None, {"status_code": None, "message": "..."})``
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import requests

from shop_services.core.config import settings


logger = logging.getLogger(__name__)

Error = Dict[str, Any]


class ServiceClient:
    """Client for one remote service.

    Subclasses set ``service_name``; the base URL defaults to the
    configured URL of that service.
    """

    service_name: str = ""

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialise the client.

        Args:
            base_url: Base URL of the service, e.g. ``http://localhost:8001``.
                Defaults to the configured URL for ``service_name``.
            token: Optional bearer token sent in the ``Authorization``
                header.  Pass the caller's token to act on their behalf
                or a service token for system calls.
            session: Optional requests session.  When omitted the client
                creates its own and closes it in :meth:`close`; a session
                passed in is left open for its owner.
            timeout: Request timeout in seconds.
        """
        if base_url is None:
            base_url = settings.service_url(self.service_name)
        self.base_url = base_url.rstrip("/")
        self.token = token
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else settings.http_timeout

    def close(self) -> None:
        """Release the connection pool of a session created by this client."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "ServiceClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Dict[str, Any] | None = None,
        json_body: Any | None = None,
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request against the service.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PATCH``, ...).
            path: Path relative to :attr:`base_url`, e.g. ``/api/v1/users/1``.
            params: Query parameters.
            json_body: JSON body for POST/PATCH requests.
        Returns:
            A tuple ``(data, error)``.
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        response = None
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                except ValueError:
                    message = exc.response.text
                else:
                    if isinstance(err_json, dict):
                        message = str(err_json.get("detail") or err_json.get("message") or err_json)
                    else:
                        message = str(err_json)
            if not message:
                message = str(exc)
            logger.error("%s service request %s %s failed (%s): %s", self.service_name, method, path, status, message)
            return None, {"status_code": status, "message": message}
        except requests.JSONDecodeError as exc:
            # Successful status but a body that is not JSON.
            logger.error("%s service returned an invalid body for %s %s: %s", self.service_name, method, path, exc)
            status = response.status_code if response is not None else None
            return None, {"status_code": status, "message": "Invalid response body"}
        except requests.RequestException as exc:
            logger.error("%s service request %s %s failed: %s", self.service_name, method, path, exc)
            return None, {"status_code": None, "message": str(exc)}
