"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from core.schemas import CamelModel


class RegisterRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=320)
    registration_number: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=6, max_length=128)
    phone: str | None = Field(default=None, max_length=32)
    university: str | None = Field(default=None, max_length=200)
    course: str | None = Field(default=None, max_length=200)
    year: str | None = Field(default=None, max_length=16)


class LoginRequest(CamelModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=128)


class UpdateProfileRequest(CamelModel):
    name: str | None = Field(default=None, max_length=200)
    phone: str | None = Field(default=None, max_length=32)
    university: str | None = Field(default=None, max_length=200)
    course: str | None = Field(default=None, max_length=200)
    year: str | None = Field(default=None, max_length=16)


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(default="", max_length=128)
    new_password: str = Field(default="", max_length=128)


class UserResponse(CamelModel):
    id: int
    name: str
    email: str
    registration_number: str
    phone: str | None = None
    university: str | None = None
    course: str | None = None
    year: str | None = None
    created_at: datetime | None = None


class AuthResponse(CamelModel):
    user: UserResponse
    access_token: str
    token_type: str = "bearer"
