"""
Admin Oversight Interface.

Scope:
- admin login / password change
- full team listing and statistics
- payment and approval status transitions (no prior-state restriction)
"""

from __future__ import annotations

import logging

from auth import repository as auth_repository
from auth import security
from auth import service as auth_service
from core.errors import AuthenticationError, NotFoundError, ValidationError
from teams import repository as teams_repository
from teams import schemas as teams_schemas
from teams import service as teams_service

from . import repository, schemas

PAYMENT_STATUSES = frozenset(s.value for s in teams_schemas.PaymentStatus)
APPROVAL_STATUSES = frozenset(s.value for s in teams_schemas.ApprovalStatus)

logger = logging.getLogger(__name__)


def to_admin_response(admin_row: dict) -> schemas.AdminResponse:
    return schemas.AdminResponse(
        id=int(admin_row["id"]),
        username=str(admin_row["username"]),
        role=str(admin_row["role"]),
        last_login=admin_row.get("last_login"),
    )


async def login(payload: schemas.AdminLoginRequest) -> schemas.AdminLoginResponse:
    admin_row = await repository.get_admin_by_username(payload.username)
    if admin_row is None:
        raise AuthenticationError("Invalid credentials.")
    if not security.verify_password(payload.password, str(admin_row.get("password_hash") or "")):
        raise AuthenticationError("Invalid credentials.")

    admin_row = await repository.touch_last_login(int(admin_row["id"])) or admin_row
    token = security.build_admin_token(
        admin_id=int(admin_row["id"]),
        username=str(admin_row["username"]),
        role=str(admin_row["role"]),
    )
    logger.info("admin_login admin_id=%s", admin_row["id"])
    return schemas.AdminLoginResponse(token=token, admin=to_admin_response(admin_row))


async def get_admin_from_token(token: str) -> dict:
    try:
        payload = security.decode_token(token, expected_type=security.ADMIN_TOKEN_TYPE)
        admin_id = security.token_subject(payload)
    except security.AuthSecurityError as exc:
        raise AuthenticationError("Token is not valid.") from exc

    admin_row = await repository.get_admin_by_id(admin_id)
    if admin_row is None:
        raise AuthenticationError("Token is not valid.")
    return admin_row


async def change_password(admin_id: int, current_password: str, new_password: str) -> dict[str, bool]:
    auth_service.check_new_password(current_password, new_password)

    admin_row = await repository.get_admin_by_id(admin_id)
    if admin_row is None:
        raise NotFoundError("Admin not found.")
    if not security.verify_password(current_password, str(admin_row.get("password_hash") or "")):
        raise ValidationError("Current password is incorrect.")

    await repository.update_admin_password(admin_id, security.hash_password(new_password))
    logger.info("admin_password_changed admin_id=%s", admin_id)
    return {"ok": True}


async def list_teams() -> list[teams_schemas.TeamResponse]:
    return await teams_service.hydrate_teams(await teams_repository.list_teams())


async def set_payment_status(team_id: int, new_status: str) -> teams_schemas.TeamResponse:
    new_status = (new_status or "").strip()
    if new_status not in PAYMENT_STATUSES:
        raise ValidationError("Invalid payment status.")

    row = await teams_repository.set_payment_status(team_id, new_status)
    if row is None:
        raise NotFoundError("Team not found.")
    logger.info("payment_status_set team_id=%s status=%s", team_id, new_status)
    return await teams_service.hydrate_team(row)


async def set_approval_status(team_id: int, new_status: str) -> teams_schemas.TeamResponse:
    new_status = (new_status or "").strip()
    if new_status not in APPROVAL_STATUSES:
        raise ValidationError("Invalid team status.")

    row = await teams_repository.set_approval_status(team_id, new_status)
    if row is None:
        raise NotFoundError("Team not found.")
    logger.info("approval_status_set team_id=%s status=%s", team_id, new_status)
    return await teams_service.hydrate_team(row)


def verification_rate(verified: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round(verified / total * 100, 1)


async def compute_stats() -> schemas.AdminStats:
    total_teams = await teams_repository.count_teams()
    by_status = await teams_repository.count_teams_by_payment_status()
    verified = by_status.get(teams_schemas.PaymentStatus.VERIFIED.value, 0)
    return schemas.AdminStats(
        total_teams=total_teams,
        verified_payments=verified,
        pending_payments=by_status.get(teams_schemas.PaymentStatus.PENDING.value, 0),
        rejected_payments=by_status.get(teams_schemas.PaymentStatus.REJECTED.value, 0),
        total_users=await auth_repository.count_users(),
        payment_verification_rate=verification_rate(verified, total_teams),
    )
