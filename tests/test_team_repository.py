"""
Team persistence: unique-constraint violations surface as ConflictError.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

import asyncpg
import pytest

from core import db
from core.errors import ConflictError
from teams import repository


def _violation(constraint: str | None) -> asyncpg.UniqueViolationError:
    exc = asyncpg.UniqueViolationError("duplicate key value violates unique constraint")
    exc.constraint_name = constraint
    return exc


@pytest.mark.parametrize(
    "constraint, message",
    [
        ("teams_team_name_key", "Team name already exists. Please choose a different name."),
        ("teams_registration_number_key", "Registration number collision. Please try again."),
        ("team_memberships_pkey", "One or more members are already in a team."),
        ("some_other_key", "Team name already exists."),
        (None, "Team name already exists."),
    ],
)
def test_conflict_from_constraint(constraint, message):
    error = repository._conflict_from(_violation(constraint))

    assert isinstance(error, ConflictError)
    assert error.message == message
    assert error.status_code == 409


class _RacingConnection:
    def __init__(self, fail_on: str, constraint: str) -> None:
        self.fail_on = fail_on
        self.constraint = constraint

    async def fetchrow(self, query: str, *args):
        if self.fail_on == "team":
            raise _violation(self.constraint)
        return {"id": 7}

    async def executemany(self, query: str, args) -> None:
        if self.fail_on == "membership":
            raise _violation(self.constraint)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "fail_on, constraint, message",
    [
        ("team", "teams_team_name_key", "Team name already exists"),
        ("team", "teams_registration_number_key", "Registration number collision"),
        ("membership", "team_memberships_pkey", "already in a team"),
    ],
)
async def test_create_team_race_becomes_conflict(monkeypatch, fail_on, constraint, message):
    @asynccontextmanager
    async def fake_transaction():
        yield _RacingConnection(fail_on, constraint)

    monkeypatch.setattr(db, "transaction", fake_transaction)

    with pytest.raises(ConflictError, match=message):
        await repository.create_team(
            team_name="Falcons",
            leader_id=1,
            member_ids=[2],
            problem_statement="Smart Campus Navigation App",
            team_size="Duo",
            registration_number="TEAM0001",
        )
