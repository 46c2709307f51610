"""Request bodies for account and settings endpoints."""

from typing import Any

from pydantic import EmailStr, Field

from .api import RequestSchema


class RegisterRequest(RequestSchema):
    email: EmailStr
    password: str = Field(min_length=1)
    name: str = ""


class LoginRequest(RequestSchema):
    email: EmailStr
    password: str = Field(min_length=1)


class RoleUpdateRequest(RequestSchema):
    role: str


class SettingUpdateRequest(RequestSchema):
    value: Any


class ProfileUpdateRequest(RequestSchema):
    name: str = Field(min_length=1, max_length=300)


class PasswordChangeRequest(RequestSchema):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=1)
