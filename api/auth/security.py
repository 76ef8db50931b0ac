"""
Auth security helpers.

Shared by user auth and the admin package: bcrypt hashing and HS256 tokens.
"""

from __future__ import annotations

import time
from typing import Any

import bcrypt
import jwt

from core import settings

ACCESS_TOKEN_TYPE = "access"
ADMIN_TOKEN_TYPE = "admin"


class AuthSecurityError(RuntimeError):
    pass


def now_epoch_s() -> int:
    return int(time.time())


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def _encode(payload: dict[str, Any], *, expire_minutes: int) -> str:
    issued_at = now_epoch_s()
    claims = {**payload, "iat": issued_at, "exp": issued_at + (expire_minutes * 60)}
    return jwt.encode(claims, settings.jwt_secret(), algorithm=settings.jwt_algorithm())


def build_access_token(*, user_id: int, email: str) -> str:
    return _encode(
        {"sub": str(user_id), "email": email, "type": ACCESS_TOKEN_TYPE},
        expire_minutes=settings.access_token_expire_minutes(),
    )


def build_admin_token(*, admin_id: int, username: str, role: str) -> str:
    return _encode(
        {"sub": str(admin_id), "username": username, "role": role, "type": ADMIN_TOKEN_TYPE},
        expire_minutes=settings.admin_token_expire_minutes(),
    )


def decode_token(token: str, *, expected_type: str) -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Token is empty.")

    try:
        payload = jwt.decode(raw, settings.jwt_secret(), algorithms=[settings.jwt_algorithm()])
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Token is not valid.") from exc

    token_type = str(payload.get("type") or "").strip().lower()
    if token_type != expected_type:
        raise AuthSecurityError(f"Token is not an {expected_type} token.")

    return payload


def token_subject(payload: dict[str, Any]) -> int:
    subject = str(payload.get("sub") or "").strip()
    if not subject.isdigit():
        raise AuthSecurityError("Invalid token subject.")
    return int(subject)
