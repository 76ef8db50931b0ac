"""
User persistence helpers.
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db
from core.errors import ConflictError

_USER_COLUMNS = """
    id, name, email, registration_number, password_hash,
    phone, university, course, year, created_at, updated_at
"""

# Columns a user may change on their own profile.
PROFILE_FIELDS = ("name", "phone", "university", "course", "year")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def create_user(
    *,
    name: str,
    email: str,
    registration_number: str,
    password_hash: str,
    phone: str | None = None,
    university: str | None = None,
    course: str | None = None,
    year: str | None = None,
) -> dict[str, Any]:
    try:
        row = await db.fetch_one(
            f"""
            INSERT INTO users (name, email, registration_number, password_hash,
                               phone, university, course, year)
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            RETURNING {_USER_COLUMNS}
            """,
            name.strip(),
            normalize_email(email),
            registration_number.strip(),
            password_hash,
            phone,
            university,
            course,
            year,
        )
    except asyncpg.UniqueViolationError as exc:
        if db.violated_constraint(exc) == "users_registration_number_key":
            raise ConflictError("Registration number is already registered.") from exc
        raise ConflictError("Email is already registered.") from exc
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row


async def get_user_by_email(email: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {_USER_COLUMNS}
        FROM users
        WHERE lower(email) = lower($1)
        """,
        normalize_email(email),
    )


async def get_user_by_id(user_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {_USER_COLUMNS}
        FROM users
        WHERE id = $1
        """,
        user_id,
    )


async def update_user_profile(user_id: int, fields: dict[str, Any]) -> dict[str, Any] | None:
    """
    Update only the whitelisted profile columns present in `fields`.
    """
    updates = [(k, v) for (k, v) in fields.items() if k in PROFILE_FIELDS]
    if not updates:
        return await get_user_by_id(user_id)

    assignments = ", ".join(f"{column} = ${i}" for i, (column, _) in enumerate(updates, start=2))
    return await db.fetch_one(
        f"""
        UPDATE users
        SET {assignments},
            updated_at = now()
        WHERE id = $1
        RETURNING {_USER_COLUMNS}
        """,
        user_id,
        *[value for (_, value) in updates],
    )


async def update_user_password(user_id: int, password_hash: str) -> None:
    await db.execute(
        """
        UPDATE users
        SET password_hash = $2,
            updated_at = now()
        WHERE id = $1
        """,
        user_id,
        password_hash,
    )


async def count_users() -> int:
    row = await db.fetch_one("SELECT count(*) AS n FROM users")
    return int((row or {}).get("n", 0))
