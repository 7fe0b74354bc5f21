"""
Pydantic models for user data.

Passwords are accepted on registration and login only; ``UserRead``
never carries the password hash.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class UserBase(BaseModel):
    email: str = Field(..., min_length=3, max_length=254, examples=["user@example.com"])
    full_name: Optional[str] = Field(None, max_length=200, examples=["Jane Doe"])

    @field_validator("email")
    @classmethod
    def normalise_email(cls, value: str) -> str:
        value = value.strip().lower()
        if "@" not in value:
            raise ValueError("email must contain '@'")
        return value


class UserCreate(UserBase):
    """Schema for registering a user."""

    password: str = Field(..., min_length=8, examples=["strongpassword"])


class UserLogin(BaseModel):
    """Credentials posted to ``/users/login``."""

    email: str = Field(..., examples=["user@example.com"])
    password: str = Field(..., examples=["strongpassword"])


class UserRead(UserBase):
    """Schema for reading a user from the API."""

    id: int
    role: str = Field("user", examples=["user"])
    disabled: bool = False

    model_config = {
        "from_attributes": True,
    }


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
