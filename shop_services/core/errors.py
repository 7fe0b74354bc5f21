"""
Domain exceptions raised by the service layer.

Services never raise ``HTTPException`` themselves; endpoints translate
these exceptions into HTTP status codes so that business logic stays
independent of the web framework.
"""

from typing import Optional


class ServiceError(Exception):
    """Base class for errors raised by the service layer."""


class NotFoundError(ServiceError):
    """The requested object does not exist."""


class ConflictError(ServiceError):
    """The request conflicts with the current state of an object."""


class PermissionDeniedError(ServiceError):
    """The caller may not act on the requested object."""


class RemoteServiceError(ServiceError):
    """A call to another service failed or the service is unreachable.

    ``status_code`` holds the HTTP status returned by the remote service,
    or ``None`` when no response was received at all.
    """

    def __init__(self, service: str, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(f"{service} service error: {message}")
        self.service = service
        self.message = message
        self.status_code = status_code
