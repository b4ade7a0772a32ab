"""
SalesDesk Backend — User & Auth Schemas
========================================

What:  Request bodies for /auth/* and the user-facing response shapes.

Security Note:
    No response model here has a password field. UserOut is built from the
    ORM row with from_attributes, so password_hash is dropped at the schema
    boundary even if a caller passes the full row.
"""

from datetime import datetime
from typing import ClassVar, Dict, Optional

from pydantic import Field

from salesdesk.schemas.common import EmailAddress, RequestSchema, ResponseSchema

NAME_MESSAGES = {
    "required": "Name is required",
    "empty": "Name cannot be empty",
    "min": "Name must be at least 2 characters long",
    "max": "Name must not exceed 100 characters",
}

EMAIL_MESSAGES = {
    "required": "Email is required",
    "empty": "Email cannot be empty",
    "email": "Please provide a valid email address",
}


class RegisterRequest(RequestSchema):
    name: str = Field(min_length=2, max_length=100)
    email: EmailAddress
    password: str = Field(min_length=6, max_length=128)

    messages: ClassVar[Dict[str, Dict[str, str]]] = {
        "name": NAME_MESSAGES,
        "email": EMAIL_MESSAGES,
        "password": {
            "required": "Password is required",
            "empty": "Password cannot be empty",
            "min": "Password must be at least 6 characters long",
            "max": "Password must not exceed 128 characters",
        },
    }


class LoginRequest(RequestSchema):
    email: EmailAddress
    password: str = Field(min_length=1)

    messages: ClassVar[Dict[str, Dict[str, str]]] = {
        "email": EMAIL_MESSAGES,
        "password": {
            "required": "Password is required",
            "empty": "Password cannot be empty",
        },
    }


class ProfileUpdate(RequestSchema):
    name: str = Field(min_length=2, max_length=100)

    messages: ClassVar[Dict[str, Dict[str, str]]] = {"name": NAME_MESSAGES}


class ChangePasswordRequest(RequestSchema):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6, max_length=128)

    messages: ClassVar[Dict[str, Dict[str, str]]] = {
        "currentPassword": {
            "required": "Current password is required",
            "empty": "Current password cannot be empty",
        },
        "newPassword": {
            "required": "New password is required",
            "empty": "New password cannot be empty",
            "min": "New password must be at least 6 characters long",
            "max": "New password must not exceed 128 characters",
        },
    }


class UserOut(ResponseSchema):
    id: str
    name: str
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserData(ResponseSchema):
    """`data` of register / profile responses: {"user": {...}}."""

    user: UserOut


class LoginData(ResponseSchema):
    user: UserOut
    token: str
