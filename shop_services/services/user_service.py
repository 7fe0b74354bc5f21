"""
Business logic for users.

The first account ever registered becomes the administrator; every
later account is a regular user.
"""

import logging
import sqlite3
from typing import List, Optional

from shop_services.core.db import get_connection
from shop_services.core.errors import ConflictError, NotFoundError
from shop_services.core.security import ROLE_ADMIN, ROLE_USER, hash_password, verify_password
from shop_services.schemas.user import UserCreate, UserRead


logger = logging.getLogger(__name__)

SERVICE = "users"


def _to_user(row: sqlite3.Row) -> UserRead:
    return UserRead(
        id=row["id"],
        email=row["email"],
        full_name=row["full_name"],
        role=row["role"],
        disabled=bool(row["disabled"]),
    )


class UserService:
    """Registration, authentication and lookup of user accounts."""

    @classmethod
    async def create_user(cls, data: UserCreate) -> UserRead:
        """Create a new user and return it.

        Raises ``ConflictError`` if the email is already registered.
        """
        logger.info("Registering user %s", data.email)
        conn = get_connection(SERVICE)
        try:
            cursor = conn.cursor()
            row = cursor.execute("SELECT COUNT(*) AS count FROM users").fetchone()
            role = ROLE_ADMIN if row["count"] == 0 else ROLE_USER
            try:
                cursor.execute(
                    "INSERT INTO users (email, full_name, password, role) VALUES (?, ?, ?, ?)",
                    (data.email, data.full_name, hash_password(data.password), role),
                )
            except sqlite3.IntegrityError:
                conn.rollback()
                raise ConflictError(f"User with email {data.email} already exists")
            user_id = cursor.lastrowid
            conn.commit()
            return UserRead(id=user_id, email=data.email, full_name=data.full_name, role=role, disabled=False)
        finally:
            conn.close()

    @classmethod
    async def authenticate(cls, email: str, password: str) -> Optional[UserRead]:
        """Return the user if the credentials match an active account, else ``None``."""
        conn = get_connection(SERVICE)
        try:
            row = conn.execute(
                "SELECT id, email, full_name, password, role, disabled FROM users WHERE email = ?",
                (email.strip().lower(),),
            ).fetchone()
        finally:
            conn.close()
        if not row or row["disabled"]:
            return None
        if not verify_password(password, row["password"]):
            return None
        return _to_user(row)

    @classmethod
    async def get_user(cls, user_id: int) -> UserRead:
        """Retrieve a user by ID or raise ``NotFoundError``."""
        conn = get_connection(SERVICE)
        try:
            row = conn.execute(
                "SELECT id, email, full_name, role, disabled FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError("User not found")
        return _to_user(row)

    @classmethod
    async def list_users(cls) -> List[UserRead]:
        conn = get_connection(SERVICE)
        try:
            rows = conn.execute(
                "SELECT id, email, full_name, role, disabled FROM users ORDER BY id"
            ).fetchall()
        finally:
            conn.close()
        return [_to_user(row) for row in rows]

    @classmethod
    async def set_password(cls, email: str, password: str) -> None:
        """Replace the password of the account with ``email``."""
        conn = get_connection(SERVICE)
        try:
            cursor = conn.execute(
                "UPDATE users SET password = ?, updated_at = CURRENT_TIMESTAMP WHERE email = ?",
                (hash_password(password), email.strip().lower()),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(f"No user found with email: {email}")
            conn.commit()
        finally:
            conn.close()
