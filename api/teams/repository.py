"""
Team persistence.

Uniqueness lives in the schema (see `db/schema.sql`):
- teams_team_name_key, teams_registration_number_key
- team_memberships_pkey (user_id): a user belongs to at most one team
Violations are translated into ConflictError here.
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db
from core.errors import ConflictError

_TEAM_COLUMNS = """
    t.id, t.team_name, t.leader_id, t.problem_statement, t.team_size,
    t.status, t.registration_number, t.payment_screenshot,
    t.payment_screenshot_storage_id, t.payment_status, t.created_at, t.updated_at
"""

_CONFLICT_MESSAGES = {
    "teams_team_name_key": "Team name already exists. Please choose a different name.",
    "teams_registration_number_key": "Registration number collision. Please try again.",
    "team_memberships_pkey": "One or more members are already in a team.",
}


def _conflict_from(exc: asyncpg.UniqueViolationError) -> ConflictError:
    message = _CONFLICT_MESSAGES.get(db.violated_constraint(exc), "Team name already exists.")
    return ConflictError(message)


async def get_team_by_id(team_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {_TEAM_COLUMNS}
        FROM teams t
        WHERE t.id = $1
        """,
        team_id,
    )


async def team_name_exists(team_name: str) -> bool:
    row = await db.fetch_one(
        """
        SELECT 1 AS ok
        FROM teams
        WHERE team_name = $1
        LIMIT 1
        """,
        team_name,
    )
    return row is not None


async def find_team_for_user(user_id: int) -> dict[str, Any] | None:
    """
    Team where the user is leader or member, if any.
    """
    return await db.fetch_one(
        f"""
        SELECT {_TEAM_COLUMNS}
        FROM teams t
        JOIN team_memberships m ON m.team_id = t.id
        WHERE m.user_id = $1
        LIMIT 1
        """,
        user_id,
    )


async def find_users_by_identifiers(identifiers: list[tuple[str, str]]) -> list[dict[str, Any]]:
    """
    Resolve (email, registration_number) pairs to distinct users.

    Both parts of a pair must match the same user.
    """
    if not identifiers:
        return []
    emails = [email.strip().lower() for (email, _) in identifiers]
    numbers = [number.strip() for (_, number) in identifiers]
    return await db.fetch_all(
        """
        SELECT DISTINCT u.id, u.name, u.email, u.registration_number
        FROM users u
        JOIN unnest($1::text[], $2::text[]) AS wanted(email, registration_number)
          ON lower(u.email) = wanted.email
         AND u.registration_number = wanted.registration_number
        ORDER BY u.id
        """,
        emails,
        numbers,
    )


async def users_already_in_teams(user_ids: list[int]) -> list[int]:
    if not user_ids:
        return []
    rows = await db.fetch_all(
        """
        SELECT user_id
        FROM team_memberships
        WHERE user_id = ANY($1::bigint[])
        """,
        user_ids,
    )
    return [int(r["user_id"]) for r in rows]


async def next_registration_sequence() -> int:
    """
    Atomic increment-and-read; concurrent callers never share a value.

    nextval is not rolled back, so a registration that fails after this call
    leaves a gap in the TEAMnnnn numbers.
    """
    value = await db.fetch_value("SELECT nextval('team_registration_seq')")
    return int(value)


async def create_team(
    *,
    team_name: str,
    leader_id: int,
    member_ids: list[int],
    problem_statement: str,
    team_size: str,
    registration_number: str,
) -> dict[str, Any]:
    """
    Insert a team and all its memberships in a single transaction.
    """
    try:
        async with db.transaction() as conn:
            record = await conn.fetchrow(
                """
                INSERT INTO teams (team_name, leader_id, problem_statement,
                                   team_size, registration_number)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING id
                """,
                team_name,
                leader_id,
                problem_statement,
                team_size,
                registration_number,
            )
            if record is None:
                raise RuntimeError("Failed to create team.")
            team_id = int(record["id"])

            memberships = [(team_id, leader_id, "leader", 0)]
            memberships += [
                (team_id, user_id, "member", position)
                for position, user_id in enumerate(member_ids, start=1)
            ]
            await conn.executemany(
                """
                INSERT INTO team_memberships (team_id, user_id, role, position)
                VALUES ($1, $2, $3, $4)
                """,
                memberships,
            )
    except asyncpg.UniqueViolationError as exc:
        raise _conflict_from(exc) from exc

    row = await get_team_by_id(team_id)
    if row is None:
        raise RuntimeError("Created team vanished.")
    return row


async def list_teams(*, status: str | None = None) -> list[dict[str, Any]]:
    """
    All teams (optionally filtered by approval status), newest first.
    """
    return await db.fetch_all(
        f"""
        SELECT {_TEAM_COLUMNS}
        FROM teams t
        WHERE ($1::text IS NULL OR t.status = $1)
        ORDER BY t.created_at DESC, t.id DESC
        """,
        status,
    )


async def list_team_members(team_ids: list[int]) -> list[dict[str, Any]]:
    """
    Display identities for leaders and members of the given teams.
    """
    if not team_ids:
        return []
    return await db.fetch_all(
        """
        SELECT m.team_id, m.role, m.position,
               u.id AS user_id, u.name, u.email, u.registration_number
        FROM team_memberships m
        JOIN users u ON u.id = m.user_id
        WHERE m.team_id = ANY($1::bigint[])
        ORDER BY m.team_id, m.position
        """,
        team_ids,
    )


async def set_payment_proof(team_id: int, *, url: str, storage_id: str) -> dict[str, Any] | None:
    """
    Attach a proof and reset payment status in one statement.
    """
    return await db.fetch_one(
        f"""
        UPDATE teams t
        SET payment_screenshot = $2,
            payment_screenshot_storage_id = $3,
            payment_status = 'pending',
            updated_at = now()
        WHERE t.id = $1
        RETURNING {_TEAM_COLUMNS}
        """,
        team_id,
        url,
        storage_id,
    )


async def set_payment_status(team_id: int, payment_status: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        UPDATE teams t
        SET payment_status = $2,
            updated_at = now()
        WHERE t.id = $1
        RETURNING {_TEAM_COLUMNS}
        """,
        team_id,
        payment_status,
    )


async def set_approval_status(team_id: int, approval_status: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        UPDATE teams t
        SET status = $2,
            updated_at = now()
        WHERE t.id = $1
        RETURNING {_TEAM_COLUMNS}
        """,
        team_id,
        approval_status,
    )


async def count_teams() -> int:
    row = await db.fetch_one("SELECT count(*) AS n FROM teams")
    return int((row or {}).get("n", 0))


async def count_teams_by_payment_status() -> dict[str, int]:
    rows = await db.fetch_all(
        """
        SELECT payment_status, count(*) AS n
        FROM teams
        GROUP BY payment_status
        """
    )
    return {str(r["payment_status"]): int(r["n"]) for r in rows}
