"""
Security helpers for password hashing and JWT authentication.

Tokens are issued by the users service and verified by every service.
They are HMAC-SHA256 signed JSON Web Tokens built with the standard
library; all services share ``SECRET_KEY``.  The payload carries the
subject (``sub``), the numeric ``user_id`` and the ``role``, so a
service can authorise a request without asking the users service who
the caller is.

Calls between services use static tokens listed in ``SERVICE_TOKENS``;
they authenticate as the ``service`` role.

Passwords are hashed with PBKDF2-HMAC-SHA256 and a random salt.
"""

import base64
import hashlib
import hmac
import json
import os
import time
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings


ROLE_ADMIN = "admin"
ROLE_USER = "user"
ROLE_SERVICE = "service"

PBKDF2_ITERATIONS = 100_000


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64-url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(data: Dict[str, Any], expires_delta: Optional[int] = None) -> str:
    """Create a signed JWT token with the given payload.

    The payload is extended with an ``exp`` field holding the expiration
    time as a UNIX timestamp.  Clients send the token in the
    ``Authorization`` header as ``Bearer <token>``.

    Parameters
    ----------
    data : dict
        Claims to embed in the token, e.g.
        ``{"sub": "user@example.com", "user_id": 1, "role": "user"}``.
    expires_delta : Optional[int]
        Lifetime of the token in seconds.  Defaults to
        ``settings.access_token_expire_minutes * 60``.

    Returns
    -------
    str
        A signed JWT token.
    """
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = settings.access_token_expire_minutes * 60
    exp_seconds = expires_delta
    to_encode["exp"] = int(time.time()) + exp_seconds
    header = {"alg": settings.algorithm, "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, settings.secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify and decode a JWT token.

    Returns the payload dictionary if the signature is valid and the
    token has not expired, otherwise ``None``.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    expected_sig = _sign(signing_input, settings.secret_key)
    try:
        actual_sig = _b64_url_decode(signature_b64)
    except (ValueError, TypeError):
        return None
    if not hmac.compare_digest(expected_sig, actual_sig):
        return None
    try:
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    try:
        exp = int(data["exp"])
    except (KeyError, TypeError, ValueError):
        return None
    if exp < int(time.time()):
        return None
    return data


security = HTTPBearer(auto_error=False)


def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> Dict[str, Any]:
    """Dependency that retrieves the current authenticated caller.

    Raises HTTP 401 when the ``Authorization`` header is missing or the
    token is invalid or expired.  Returns a dictionary with at least
    ``sub``, ``user_id`` and ``role``.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    token = credentials.credentials

    if token in settings.accepted_service_tokens():
        return {"sub": ROLE_SERVICE, "user_id": None, "role": ROLE_SERVICE}

    payload = decode_access_token(token)
    if not payload or payload.get("role") not in (ROLE_ADMIN, ROLE_USER):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    # Keep the raw token so it can be forwarded to other services on
    # behalf of the caller.
    payload["token"] = token
    return payload


def require_roles(*roles: str) -> Callable[..., Dict[str, Any]]:
    """Dependency factory enforcing that the caller has one of ``roles``.

    Use as ``Depends(require_roles(ROLE_ADMIN, ROLE_SERVICE))``.  Raises
    HTTP 403 for authenticated callers with any other role.
    """

    def _role_dependency(current_user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        if current_user.get("role") not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user

    return _role_dependency


def is_privileged(current_user: Dict[str, Any]) -> bool:
    """Admins and other services may act on any user's records."""
    return current_user.get("role") in (ROLE_ADMIN, ROLE_SERVICE)


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2-HMAC with SHA-256.

    A 16-byte random salt is generated for each password.  The result
    is ``"<salt hex>$<hash hex>"``.
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a plain password against a stored salt+hash string.

    Returns ``False`` for a missing or malformed stored value.
    """
    if not hashed_password or "$" not in hashed_password:
        return False
    salt_hex, hash_hex = hashed_password.split("$", 1)
    try:
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)


def forwarding_token(current_user: Dict[str, Any]) -> str:
    """Token to present to another service when acting for ``current_user``.

    User requests forward the user's own token; requests made by a
    service fall back to this process's service token.
    """
    return current_user.get("token") or settings.outgoing_service_token()
