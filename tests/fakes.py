"""
In-memory stand-ins for the Postgres repositories and Cloudinary.

FakeStore mirrors the repository function signatures and enforces the same
unique constraints as `db/schema.sql`, so services run unchanged on top of it.
"""

from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone
from typing import Any

from core import cloudinary
from core.errors import ConflictError

_EPOCH = datetime(2026, 1, 1, tzinfo=timezone.utc)


class FakeStore:
    def __init__(self) -> None:
        self.users: dict[int, dict[str, Any]] = {}
        self.teams: dict[int, dict[str, Any]] = {}
        self.memberships: dict[int, dict[str, Any]] = {}  # keyed by user_id
        self.admins: dict[int, dict[str, Any]] = {}
        self.sequence = 0
        self.writes = 0
        self._user_ids = itertools.count(1)
        self._team_ids = itertools.count(1)
        self._admin_ids = itertools.count(1)
        self._ticks = itertools.count(1)

    def _now(self) -> datetime:
        return _EPOCH + timedelta(seconds=next(self._ticks))

    # -- users ---------------------------------------------------------------

    async def create_user(
        self,
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
        email = email.strip().lower()
        for user in self.users.values():
            if user["email"] == email:
                raise ConflictError("Email is already registered.")
            if user["registration_number"] == registration_number:
                raise ConflictError("Registration number is already registered.")
        now = self._now()
        row = {
            "id": next(self._user_ids),
            "name": name,
            "email": email,
            "registration_number": registration_number,
            "password_hash": password_hash,
            "phone": phone,
            "university": university,
            "course": course,
            "year": year,
            "created_at": now,
            "updated_at": now,
        }
        self.users[row["id"]] = row
        return dict(row)

    async def get_user_by_email(self, email: str) -> dict[str, Any] | None:
        email = (email or "").strip().lower()
        for user in self.users.values():
            if user["email"] == email:
                return dict(user)
        return None

    async def get_user_by_id(self, user_id: int) -> dict[str, Any] | None:
        user = self.users.get(user_id)
        return dict(user) if user is not None else None

    async def update_user_profile(self, user_id: int, fields: dict[str, Any]) -> dict[str, Any] | None:
        user = self.users.get(user_id)
        if user is None:
            return None
        user.update({k: v for (k, v) in fields.items() if k in ("name", "phone", "university", "course", "year")})
        return dict(user)

    async def update_user_password(self, user_id: int, password_hash: str) -> None:
        self.users[user_id]["password_hash"] = password_hash

    async def count_users(self) -> int:
        return len(self.users)

    # -- teams ---------------------------------------------------------------

    async def get_team_by_id(self, team_id: int) -> dict[str, Any] | None:
        team = self.teams.get(team_id)
        return dict(team) if team is not None else None

    async def team_name_exists(self, team_name: str) -> bool:
        return any(t["team_name"] == team_name for t in self.teams.values())

    async def find_team_for_user(self, user_id: int) -> dict[str, Any] | None:
        membership = self.memberships.get(user_id)
        if membership is None:
            return None
        return dict(self.teams[membership["team_id"]])

    async def find_users_by_identifiers(self, identifiers: list[tuple[str, str]]) -> list[dict[str, Any]]:
        wanted = {(email.strip().lower(), number.strip()) for (email, number) in identifiers}
        found = [
            {k: u[k] for k in ("id", "name", "email", "registration_number")}
            for u in self.users.values()
            if (u["email"], u["registration_number"]) in wanted
        ]
        return sorted(found, key=lambda u: u["id"])

    async def users_already_in_teams(self, user_ids: list[int]) -> list[int]:
        return [uid for uid in user_ids if uid in self.memberships]

    async def next_registration_sequence(self) -> int:
        self.sequence += 1
        return self.sequence

    async def create_team(
        self,
        *,
        team_name: str,
        leader_id: int,
        member_ids: list[int],
        problem_statement: str,
        team_size: str,
        registration_number: str,
    ) -> dict[str, Any]:
        if await self.team_name_exists(team_name):
            raise ConflictError("Team name already exists. Please choose a different name.")
        if any(t["registration_number"] == registration_number for t in self.teams.values()):
            raise ConflictError("Registration number collision. Please try again.")
        if any(uid in self.memberships for uid in [leader_id, *member_ids]):
            raise ConflictError("One or more members are already in a team.")

        now = self._now()
        row = {
            "id": next(self._team_ids),
            "team_name": team_name,
            "leader_id": leader_id,
            "problem_statement": problem_statement,
            "team_size": team_size,
            "status": "pending",
            "registration_number": registration_number,
            "payment_screenshot": None,
            "payment_screenshot_storage_id": None,
            "payment_status": "pending",
            "created_at": now,
            "updated_at": now,
        }
        self.teams[row["id"]] = row
        self.memberships[leader_id] = {"team_id": row["id"], "role": "leader", "position": 0}
        for position, user_id in enumerate(member_ids, start=1):
            self.memberships[user_id] = {"team_id": row["id"], "role": "member", "position": position}
        self.writes += 1
        return dict(row)

    async def list_teams(self, *, status: str | None = None) -> list[dict[str, Any]]:
        rows = [dict(t) for t in self.teams.values() if status is None or t["status"] == status]
        return sorted(rows, key=lambda t: (t["created_at"], t["id"]), reverse=True)

    async def list_team_members(self, team_ids: list[int]) -> list[dict[str, Any]]:
        rows = []
        for user_id, membership in self.memberships.items():
            if membership["team_id"] not in team_ids:
                continue
            user = self.users[user_id]
            rows.append(
                {
                    "team_id": membership["team_id"],
                    "role": membership["role"],
                    "position": membership["position"],
                    "user_id": user_id,
                    "name": user["name"],
                    "email": user["email"],
                    "registration_number": user["registration_number"],
                }
            )
        return sorted(rows, key=lambda r: (r["team_id"], r["position"]))

    def _update_team(self, team_id: int, **fields: Any) -> dict[str, Any] | None:
        team = self.teams.get(team_id)
        if team is None:
            return None
        team.update(fields, updated_at=self._now())
        self.writes += 1
        return dict(team)

    async def set_payment_proof(self, team_id: int, *, url: str, storage_id: str) -> dict[str, Any] | None:
        return self._update_team(
            team_id,
            payment_screenshot=url,
            payment_screenshot_storage_id=storage_id,
            payment_status="pending",
        )

    async def set_payment_status(self, team_id: int, payment_status: str) -> dict[str, Any] | None:
        return self._update_team(team_id, payment_status=payment_status)

    async def set_approval_status(self, team_id: int, approval_status: str) -> dict[str, Any] | None:
        return self._update_team(team_id, status=approval_status)

    async def count_teams(self) -> int:
        return len(self.teams)

    async def count_teams_by_payment_status(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for team in self.teams.values():
            counts[team["payment_status"]] = counts.get(team["payment_status"], 0) + 1
        return counts

    # -- admins --------------------------------------------------------------

    async def get_admin_by_username(self, username: str) -> dict[str, Any] | None:
        for admin in self.admins.values():
            if admin["username"] == (username or "").strip():
                return dict(admin)
        return None

    async def get_admin_by_id(self, admin_id: int) -> dict[str, Any] | None:
        admin = self.admins.get(admin_id)
        return dict(admin) if admin is not None else None

    async def create_admin(self, *, username: str, password_hash: str, role: str = "admin") -> dict[str, Any]:
        row = {
            "id": next(self._admin_ids),
            "username": username,
            "password_hash": password_hash,
            "role": role,
            "last_login": None,
            "created_at": self._now(),
        }
        self.admins[row["id"]] = row
        return dict(row)

    async def touch_last_login(self, admin_id: int) -> dict[str, Any] | None:
        admin = self.admins.get(admin_id)
        if admin is None:
            return None
        admin["last_login"] = self._now()
        return dict(admin)

    async def update_admin_password(self, admin_id: int, password_hash: str) -> None:
        self.admins[admin_id]["password_hash"] = password_hash


AUTH_REPOSITORY_FUNCTIONS = (
    "create_user",
    "get_user_by_email",
    "get_user_by_id",
    "update_user_profile",
    "update_user_password",
    "count_users",
)

TEAMS_REPOSITORY_FUNCTIONS = (
    "get_team_by_id",
    "team_name_exists",
    "find_team_for_user",
    "find_users_by_identifiers",
    "users_already_in_teams",
    "next_registration_sequence",
    "create_team",
    "list_teams",
    "list_team_members",
    "set_payment_proof",
    "set_payment_status",
    "set_approval_status",
    "count_teams",
    "count_teams_by_payment_status",
)

ADMIN_REPOSITORY_FUNCTIONS = (
    "get_admin_by_username",
    "get_admin_by_id",
    "create_admin",
    "touch_last_login",
    "update_admin_password",
)


class FakeStorage:
    """
    Records Cloudinary uploads/destroys instead of calling the network.
    """

    def __init__(self) -> None:
        self.uploads: list[dict[str, Any]] = []
        self.destroyed: list[str] = []
        self.fail_upload = False
        self.fail_destroy = False
        self.stored_bytes: int | None = None

    async def upload_image(
        self,
        *,
        credentials: cloudinary.Credentials,
        data: bytes,
        public_id: str,
        content_type: str = "image/webp",
        tags: list[str] | None = None,
        context: dict[str, str] | None = None,
        timeout_s: float = 60.0,
    ) -> cloudinary.StoredAsset:
        if self.fail_upload:
            raise cloudinary.CloudinaryError("Cloudinary upload failed: 500 boom")
        self.uploads.append(
            {
                "public_id": public_id,
                "data": data,
                "content_type": content_type,
                "tags": tags,
                "context": context,
            }
        )
        size = self.stored_bytes if self.stored_bytes is not None else len(data)
        return cloudinary.StoredAsset(
            url=f"https://res.cloudinary.com/demo/image/upload/{public_id}.webp",
            public_id=public_id,
            bytes=size,
        )

    async def destroy_image(
        self,
        *,
        credentials: cloudinary.Credentials,
        public_id: str,
        timeout_s: float = 60.0,
    ) -> bool:
        if self.fail_destroy:
            raise cloudinary.CloudinaryError("Cloudinary destroy request failed: timeout")
        self.destroyed.append(public_id)
        return True
