"""
Payment-proof upload endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, UploadFile

from auth import dependencies as auth_dependencies
from core import settings
from core.errors import ValidationError

from . import schemas, service

router = APIRouter()


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    """
    Read the upload into memory, enforcing a maximum size.
    """
    chunk_size = 1024 * 1024  # 1 MiB
    buf = bytearray()

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise ValidationError(f"File is too large. Maximum size is {max_bytes // (1024 * 1024)} MB.")

    return bytes(buf)


@router.post("/teams/upload-payment", response_model=schemas.PaymentUploadResponse)
async def upload_payment(
    team_id: int = Form(..., alias="teamId"),
    payment_screenshot: UploadFile | None = File(default=None, alias="paymentScreenshot"),
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.PaymentUploadResponse:
    raw: bytes | None = None
    filename: str | None = None
    content_type: str | None = None
    if payment_screenshot is not None:
        raw = await read_upload_bytes(payment_screenshot, settings.max_upload_bytes())
        filename = payment_screenshot.filename
        content_type = payment_screenshot.content_type

    team, upload = await service.attach_payment_proof(
        team_id,
        int(current_user["id"]),
        raw,
        len(raw or b""),
        filename=filename,
        content_type=content_type,
    )
    return schemas.PaymentUploadResponse(
        message="Payment screenshot uploaded and compressed successfully",
        payment_screenshot=upload.url,
        payment_status=team.payment_status,
        compression_info=schemas.CompressionInfo(
            original_size=upload.original_size,
            compressed_size=upload.compressed_size,
            compression_ratio=f"{upload.compression_ratio:.2f}%",
        ),
        team=team,
    )
