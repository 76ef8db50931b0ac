"""
Team Registry business logic.

Scope:
- team-composition rules (size class vs. member count)
- one team per user, unique team names and registration numbers
- team projections with leader/members resolved to display identity
"""

from __future__ import annotations

import logging
from collections import defaultdict

from core.errors import ConflictError, NotFoundError, ValidationError

from . import catalog, repository, schemas

REGISTRATION_PREFIX = "TEAM"

# Extra members allowed on top of the leader, inclusive.
SIZE_BOUNDS: dict[schemas.TeamSize, tuple[int, int]] = {
    schemas.TeamSize.SOLO: (0, 0),
    schemas.TeamSize.DUO: (1, 1),
    schemas.TeamSize.TEAM: (2, 4),
}

_SIZE_MESSAGES = {
    schemas.TeamSize.SOLO: "Solo teams cannot have additional members.",
    schemas.TeamSize.DUO: "Duo teams must have exactly 1 additional member.",
    schemas.TeamSize.TEAM: "Teams must have 2-4 additional members.",
}

logger = logging.getLogger(__name__)


def format_registration_number(sequence: int) -> str:
    return f"{REGISTRATION_PREFIX}{sequence:04d}"


def check_member_count(team_size: schemas.TeamSize, member_count: int) -> None:
    low, high = SIZE_BOUNDS[team_size]
    if not low <= member_count <= high:
        raise ValidationError(_SIZE_MESSAGES[team_size])


def _member_response(row: dict) -> schemas.MemberResponse:
    return schemas.MemberResponse(
        id=int(row["user_id"]),
        name=str(row["name"]),
        email=str(row["email"]),
        registration_number=str(row["registration_number"]),
    )


async def hydrate_teams(rows: list[dict]) -> list[schemas.TeamResponse]:
    """
    Attach leader/member display identities to team rows (one extra query).
    """
    member_rows = await repository.list_team_members([int(r["id"]) for r in rows])
    by_team: dict[int, list[dict]] = defaultdict(list)
    for member in member_rows:
        by_team[int(member["team_id"])].append(member)

    teams: list[schemas.TeamResponse] = []
    for row in rows:
        people = sorted(by_team.get(int(row["id"]), []), key=lambda m: int(m["position"]))
        leader = next((m for m in people if m["role"] == "leader"), None)
        teams.append(
            schemas.TeamResponse(
                id=int(row["id"]),
                team_name=str(row["team_name"]),
                leader=_member_response(leader) if leader is not None else None,
                members=[_member_response(m) for m in people if m["role"] == "member"],
                problem_statement=str(row["problem_statement"]),
                team_size=row["team_size"],
                status=row["status"],
                registration_number=str(row["registration_number"]),
                payment_screenshot=row.get("payment_screenshot"),
                payment_status=row["payment_status"],
                created_at=row.get("created_at"),
                updated_at=row.get("updated_at"),
            )
        )
    return teams


async def hydrate_team(row: dict) -> schemas.TeamResponse:
    return (await hydrate_teams([row]))[0]


async def _resolve_members(
    requester_id: int,
    members: list[schemas.MemberIdentifier],
) -> list[int]:
    if not members:
        return []

    identifiers = [(m.email, m.registration_number) for m in members]
    users = await repository.find_users_by_identifiers(identifiers)
    if len(users) != len(members):
        raise ValidationError(
            "One or more members not found. "
            "Please ensure all members are registered on the platform."
        )

    user_ids = [int(u["id"]) for u in users]
    if requester_id in user_ids:
        raise ValidationError("The team leader cannot also be listed as a member.")

    if await repository.users_already_in_teams(user_ids):
        raise ConflictError("One or more members are already in a team.")
    return user_ids


async def register_team(
    requester_id: int,
    payload: schemas.RegisterTeamRequest,
) -> schemas.TeamResponse:
    team_name = payload.team_name.strip()
    if not team_name:
        raise ValidationError("Team name is required.")

    if await repository.team_name_exists(team_name):
        raise ConflictError("Team name already exists. Please choose a different name.")

    if await repository.find_team_for_user(requester_id) is not None:
        raise ConflictError("You are already registered in a team.")

    check_member_count(payload.team_size, len(payload.members))

    # Every read/check finishes before the single write below.
    member_ids = await _resolve_members(requester_id, payload.members)

    registration_number = format_registration_number(
        await repository.next_registration_sequence()
    )
    row = await repository.create_team(
        team_name=team_name,
        leader_id=requester_id,
        member_ids=member_ids,
        problem_statement=payload.problem_statement.strip(),
        team_size=payload.team_size.value,
        registration_number=registration_number,
    )
    logger.info(
        "team_registered team_id=%s registration_number=%s leader_id=%s members=%s",
        row["id"],
        registration_number,
        requester_id,
        len(member_ids),
    )
    return await hydrate_team(row)


async def list_approved_teams() -> list[schemas.TeamResponse]:
    rows = await repository.list_teams(status=schemas.ApprovalStatus.APPROVED.value)
    return await hydrate_teams(rows)


async def find_team_for_user(user_id: int) -> schemas.TeamResponse:
    row = await repository.find_team_for_user(user_id)
    if row is None:
        raise NotFoundError("No team found.")
    return await hydrate_team(row)


def list_problem_statements() -> list[str]:
    return list(catalog.PROBLEM_STATEMENTS)
