"""
Environment-driven settings.

Every value is read lazily so tests can monkeypatch the environment.
"""

from __future__ import annotations

import os

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB, before compression


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def jwt_secret() -> str:
    # Local default keeps development simple.
    # In production, set JWT_SECRET in environment.
    return _env_str("JWT_SECRET", "dev-change-this-secret")


def jwt_algorithm() -> str:
    return _env_str("JWT_ALG", "HS256")


def access_token_expire_minutes() -> int:
    return _env_int("ACCESS_TOKEN_EXPIRE_MIN", 24 * 60)


def admin_token_expire_minutes() -> int:
    return _env_int("ADMIN_TOKEN_EXPIRE_MIN", 24 * 60)


def cloudinary_cloud_name() -> str:
    return _env_str("CLOUDINARY_CLOUD_NAME")


def cloudinary_api_key() -> str:
    return _env_str("CLOUDINARY_API_KEY")


def cloudinary_api_secret() -> str:
    return _env_str("CLOUDINARY_API_SECRET")


def cloudinary_timeout_s() -> float:
    return _env_float("CLOUDINARY_TIMEOUT_S", 60.0)


def max_upload_bytes() -> int:
    value = _env_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)
    return value if value > 0 else DEFAULT_MAX_UPLOAD_BYTES


def cors_origins() -> list[str]:
    raw = _env_str("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()
