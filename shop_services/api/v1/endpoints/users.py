"""
User endpoints for API v1.

Registration, login and lookup.  ``GET /users/{id}`` is what other
services call to check that a user exists.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from shop_services.api.errors import to_http_exception
from shop_services.core.errors import ServiceError
from shop_services.core.security import ROLE_ADMIN, ROLE_SERVICE, create_access_token, get_current_user, require_roles
from shop_services.schemas.user import Token, UserCreate, UserLogin, UserRead
from shop_services.services.user_service import UserService


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register_user(user: UserCreate) -> UserRead:
    """Register a new user.

    The first account becomes the administrator.  A duplicate email
    yields 409.
    """
    try:
        return await UserService.create_user(user)
    except ServiceError as e:
        raise to_http_exception(e)


@router.post("/login", response_model=Token)
async def login_user(credentials: UserLogin) -> Token:
    """Authenticate a user and return a bearer token.

    Unknown email, wrong password and disabled accounts all produce the
    same 401 response.
    """
    user = await UserService.authenticate(credentials.email, credentials.password)
    if not user:
        logger.warning("Failed login for %s", credentials.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    token = create_access_token({"sub": user.email, "user_id": user.id, "role": user.role})
    return Token(access_token=token)


@router.get("/", response_model=List[UserRead])
async def list_users(current_user: dict = Depends(require_roles(ROLE_ADMIN, ROLE_SERVICE))) -> List[UserRead]:
    """List all users (administrators and services only)."""
    return await UserService.list_users()


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: int, current_user: dict = Depends(get_current_user)) -> UserRead:
    try:
        return await UserService.get_user(user_id)
    except ServiceError as e:
        raise to_http_exception(e)
