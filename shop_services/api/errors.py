"""
Translation of service-layer exceptions into HTTP errors.
"""

from fastapi import HTTPException, status

from shop_services.core.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    RemoteServiceError,
    ServiceError,
)


def to_http_exception(exc: Exception) -> HTTPException:
    """Map a service exception onto an ``HTTPException``.

    ``RemoteServiceError`` becomes 503 when the remote service could not
    be reached and 502 when it answered with an unexpected error.
    ``ValueError`` is treated as a client error (400).
    """
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, PermissionDeniedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    if isinstance(exc, RemoteServiceError):
        if exc.status_code is None:
            return HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"{exc.service} service unavailable",
            )
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    if isinstance(exc, (ValueError, ServiceError)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    raise TypeError(f"Unhandled exception type: {type(exc).__name__}")
