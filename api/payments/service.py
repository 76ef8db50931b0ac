"""
Payment Workflow: attach a payment proof to a team.

Only an upload forces payment status back to "pending"; every other
transition is an admin action (see `admin/service.py`).
"""

from __future__ import annotations

import logging

from core import settings
from core.errors import AuthorizationError, NotFoundError, ValidationError
from teams import repository as teams_repository
from teams import schemas as teams_schemas
from teams import service as teams_service

from . import proofs

logger = logging.getLogger(__name__)


async def _is_team_participant(team_id: int, user_id: int) -> bool:
    row = await teams_repository.find_team_for_user(user_id)
    return row is not None and int(row["id"]) == team_id


def validate_upload(raw: bytes | None, *, content_type: str | None = None) -> bytes:
    if not raw:
        raise ValidationError("No file uploaded.")
    if content_type is not None and not content_type.lower().startswith("image/"):
        raise ValidationError("Only image files are allowed.")
    limit = settings.max_upload_bytes()
    if len(raw) > limit:
        raise ValidationError(f"File is too large. Maximum size is {limit // (1024 * 1024)} MB.")
    return raw


async def attach_payment_proof(
    team_id: int,
    requester_id: int,
    raw: bytes | None,
    original_size: int,
    *,
    filename: str | None = None,
    content_type: str | None = None,
) -> tuple[teams_schemas.TeamResponse, proofs.ProofUpload]:
    raw = validate_upload(raw, content_type=content_type)

    team = await teams_repository.get_team_by_id(team_id)
    if team is None:
        raise NotFoundError("Team not found.")
    if not await _is_team_participant(team_id, requester_id):
        raise AuthorizationError("You are not authorized to upload payment for this team.")

    # An unreadable image must fail before the current proof is touched.
    compressed = await proofs.compress_proof(raw)

    # The old proof is superseded once the new reference is written;
    # its physical deletion is best effort and never awaited here.
    previous_handle = team.get("payment_screenshot_storage_id")
    if previous_handle:
        proofs.schedule_proof_deletion(str(previous_handle))

    upload = await proofs.upload_payment_proof(compressed, original_size, team_id, filename=filename)

    row = await teams_repository.set_payment_proof(team_id, url=upload.url, storage_id=upload.handle)
    if row is None:
        # Team disappeared between read and write; drop the orphaned upload.
        proofs.schedule_proof_deletion(upload.handle)
        raise NotFoundError("Team not found.")

    logger.info(
        "payment_proof_attached team_id=%s user_id=%s replaced=%s",
        team_id,
        requester_id,
        bool(previous_handle),
    )
    return await teams_service.hydrate_team(row), upload
