"""
Auth business logic.
"""

from __future__ import annotations

import logging

from core.errors import AuthenticationError, NotFoundError, ValidationError

from . import repository, schemas, security

MIN_PASSWORD_LENGTH = 6

logger = logging.getLogger(__name__)


def to_user_response(user_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=int(user_row["id"]),
        name=str(user_row["name"]),
        email=str(user_row["email"]),
        registration_number=str(user_row["registration_number"]),
        phone=user_row.get("phone"),
        university=user_row.get("university"),
        course=user_row.get("course"),
        year=user_row.get("year"),
        created_at=user_row.get("created_at"),
    )


def _auth_response(user_row: dict) -> schemas.AuthResponse:
    token = security.build_access_token(user_id=int(user_row["id"]), email=str(user_row["email"]))
    return schemas.AuthResponse(user=to_user_response(user_row), access_token=token)


def check_new_password(current_password: str, new_password: str) -> None:
    if not current_password or not new_password:
        raise ValidationError("Current password and new password are required.")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"New password must be at least {MIN_PASSWORD_LENGTH} characters long."
        )


async def register(payload: schemas.RegisterRequest) -> schemas.AuthResponse:
    # Unique constraints on email/registration number raise ConflictError.
    user_row = await repository.create_user(
        name=payload.name,
        email=payload.email,
        registration_number=payload.registration_number,
        password_hash=security.hash_password(payload.password),
        phone=payload.phone,
        university=payload.university,
        course=payload.course,
        year=payload.year,
    )
    logger.info("user_registered user_id=%s", user_row["id"])
    return _auth_response(user_row)


async def login(payload: schemas.LoginRequest) -> schemas.AuthResponse:
    user_row = await repository.get_user_by_email(payload.email)
    if user_row is None:
        raise AuthenticationError("Invalid email or password.")

    if not security.verify_password(payload.password, str(user_row.get("password_hash") or "")):
        raise AuthenticationError("Invalid email or password.")

    return _auth_response(user_row)


async def get_user_from_access_token(access_token: str) -> dict:
    try:
        payload = security.decode_token(access_token, expected_type=security.ACCESS_TOKEN_TYPE)
        user_id = security.token_subject(payload)
    except security.AuthSecurityError as exc:
        raise AuthenticationError(str(exc)) from exc

    user_row = await repository.get_user_by_id(user_id)
    if user_row is None:
        raise AuthenticationError("User not found.")
    return user_row


async def update_profile(user_id: int, payload: schemas.UpdateProfileRequest) -> schemas.UserResponse:
    # Blank values mean "leave unchanged".
    fields = {k: v for (k, v) in payload.model_dump().items() if v}
    user_row = await repository.update_user_profile(user_id, fields)
    if user_row is None:
        raise NotFoundError("User not found.")
    return to_user_response(user_row)


async def change_password(user_id: int, payload: schemas.ChangePasswordRequest) -> dict[str, bool]:
    check_new_password(payload.current_password, payload.new_password)

    user_row = await repository.get_user_by_id(user_id)
    if user_row is None:
        raise NotFoundError("User not found.")
    if not security.verify_password(payload.current_password, str(user_row.get("password_hash") or "")):
        raise ValidationError("Current password is incorrect.")

    await repository.update_user_password(user_id, security.hash_password(payload.new_password))
    logger.info("user_password_changed user_id=%s", user_id)
    return {"ok": True}
