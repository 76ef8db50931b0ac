"""
Admin persistence helpers.
"""

from __future__ import annotations

from typing import Any

from core import db

_ADMIN_COLUMNS = "id, username, password_hash, role, last_login, created_at"


async def get_admin_by_username(username: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {_ADMIN_COLUMNS}
        FROM admins
        WHERE username = $1
        """,
        (username or "").strip(),
    )


async def get_admin_by_id(admin_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {_ADMIN_COLUMNS}
        FROM admins
        WHERE id = $1
        """,
        admin_id,
    )


async def create_admin(*, username: str, password_hash: str, role: str = "admin") -> dict[str, Any]:
    row = await db.fetch_one(
        f"""
        INSERT INTO admins (username, password_hash, role)
        VALUES ($1, $2, $3)
        RETURNING {_ADMIN_COLUMNS}
        """,
        username,
        password_hash,
        role,
    )
    if row is None:
        raise RuntimeError("Failed to create admin.")
    return row


async def touch_last_login(admin_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        UPDATE admins
        SET last_login = now()
        WHERE id = $1
        RETURNING {_ADMIN_COLUMNS}
        """,
        admin_id,
    )


async def update_admin_password(admin_id: int, password_hash: str) -> None:
    await db.execute(
        """
        UPDATE admins
        SET password_hash = $2
        WHERE id = $1
        """,
        admin_id,
        password_hash,
    )
