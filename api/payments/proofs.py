"""
Payment-proof storage: compress, upload, and best-effort deletion.

Uploads are all-or-nothing; deletions never raise.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import time
from dataclasses import dataclass

from fastapi.concurrency import run_in_threadpool

from core import cloudinary, settings
from core.errors import DependencyError

from . import imaging

PROOF_FOLDER = "hackathon/payment-proofs"
PROOF_TAG = "payment-proof"

logger = logging.getLogger(__name__)

# Strong references so scheduled deletions are not garbage-collected mid-flight.
_pending_deletions: set[asyncio.Task] = set()


@dataclass(frozen=True)
class ProofUpload:
    url: str
    handle: str
    original_size: int
    compressed_size: int
    compression_ratio: float


def compression_ratio(original_size: int, compressed_size: int) -> float:
    """
    Percentage of bytes saved, rounded to 2 decimals.
    """
    if original_size <= 0:
        return 0.0
    return round((original_size - compressed_size) / original_size * 100, 2)


def proof_key(team_id: int, *, now_ms: int | None = None, suffix: str | None = None) -> str:
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    # Random suffix keeps same-millisecond uploads from one team apart.
    rand = suffix or secrets.token_hex(6)
    return f"{PROOF_FOLDER}/team-{team_id}-{stamp}-{rand}"


def storage_credentials() -> cloudinary.Credentials:
    return cloudinary.Credentials(
        cloud_name=settings.cloudinary_cloud_name(),
        api_key=settings.cloudinary_api_key(),
        api_secret=settings.cloudinary_api_secret(),
    )


async def compress_proof(raw: bytes) -> bytes:
    """
    Decode and re-encode off the event loop; a bad image raises ValidationError.
    """
    return await run_in_threadpool(imaging.compress_image, raw)


async def process_payment_proof(
    raw: bytes,
    original_size: int,
    team_id: int,
    *,
    filename: str | None = None,
) -> ProofUpload:
    compressed = await compress_proof(raw)
    return await upload_payment_proof(compressed, original_size, team_id, filename=filename)


async def upload_payment_proof(
    compressed: bytes,
    original_size: int,
    team_id: int,
    *,
    filename: str | None = None,
) -> ProofUpload:
    now_ms = int(time.time() * 1000)
    key = proof_key(team_id, now_ms=now_ms)
    try:
        asset = await cloudinary.upload_image(
            credentials=storage_credentials(),
            data=compressed,
            public_id=key,
            content_type=imaging.OUTPUT_CONTENT_TYPE,
            tags=[PROOF_TAG, f"team-{team_id}"],
            context={
                "team_id": str(team_id),
                "original_name": filename or "",
                "upload_timestamp": str(now_ms),
            },
            timeout_s=settings.cloudinary_timeout_s(),
        )
    except cloudinary.CloudinaryError as exc:
        logger.error("proof_upload_failed team_id=%s error=%s", team_id, exc)
        raise DependencyError("Failed to process and upload image.") from exc

    upload = ProofUpload(
        url=asset.url,
        handle=asset.public_id,
        original_size=original_size,
        compressed_size=asset.bytes,
        compression_ratio=compression_ratio(original_size, asset.bytes),
    )
    logger.info(
        "proof_uploaded team_id=%s handle=%s original=%s compressed=%s ratio=%s",
        team_id,
        upload.handle,
        upload.original_size,
        upload.compressed_size,
        upload.compression_ratio,
    )
    return upload


async def delete_proof(handle: str) -> bool:
    try:
        deleted = await cloudinary.destroy_image(
            credentials=storage_credentials(),
            public_id=handle,
            timeout_s=settings.cloudinary_timeout_s(),
        )
    except Exception:
        logger.exception("proof_delete_failed handle=%s", handle)
        return False

    if not deleted:
        logger.warning("proof_delete_not_ok handle=%s", handle)
    return deleted


def schedule_proof_deletion(handle: str) -> asyncio.Task:
    """
    Fire-and-forget deletion; the caller does not wait for the result.
    """
    task = asyncio.get_running_loop().create_task(delete_proof(handle))
    _pending_deletions.add(task)
    task.add_done_callback(_pending_deletions.discard)
    return task


async def drain_pending_deletions() -> None:
    if _pending_deletions:
        await asyncio.gather(*list(_pending_deletions), return_exceptions=True)
