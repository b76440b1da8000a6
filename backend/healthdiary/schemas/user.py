"""
Health Diary Backend — User & Auth Schemas
===========================================

What:  Request/response contracts for /api/users and /api/auth.
Why:   The password hash must never leave the service layer; these models
       control exactly which user fields are exposed.

Validation rules (shared by create and update):
    username: trimmed, 3-20 alphanumeric characters
    password: trimmed, 8 characters up to 72 bytes (the bcrypt input limit)
    email:    trimmed, must look like an address
"""

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

# bcrypt refuses longer secrets
MAX_PASSWORD_BYTES = 72

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9]{3,20}$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _check_username(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not USERNAME_PATTERN.match(value):
        raise ValueError("Username must be 3-20 alphanumeric characters")
    return value


def _check_password(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if len(value) < 8 or len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError("Password must be 8-72 characters")
    return value


def _check_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email address")
    return value


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class UserCreate(BaseModel):
    """Body of POST /api/users (registration)."""
    username: str
    password: str
    email: str

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: Optional[str]) -> Optional[str]:
        return _check_username(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: Optional[str]) -> Optional[str]:
        return _check_password(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        return _check_email(v)


class UserUpdate(UserCreate):
    """Body of PUT /api/users/{id}; every field optional, same rules as UserCreate."""
    username: Optional[str] = None
    password: Optional[str] = None
    email: Optional[str] = None


class LoginRequest(BaseModel):
    """
    Body of POST /api/auth/login.

    Both fields are optional at the schema level so that a missing value
    produces the service's "Username and password are required." message
    rather than a generic field error.
    """
    username: Optional[str] = None
    password: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class TokenUser(BaseModel):
    """The public user fields; also the JWT claim set."""
    user_id: int
    username: str
    email: str
    user_level: str = "regular"

    model_config = {"from_attributes": True}


class UserResponse(TokenUser):
    created_at: Optional[datetime] = None


class LoginResponse(BaseModel):
    message: str = Field(default="Login successful")
    user: TokenUser
    token: str


class UserCreatedResponse(BaseModel):
    message: str = Field(default="User added.")
    user_id: int
