"""
Pydantic schemas for payment-proof endpoints.
"""

from __future__ import annotations

from core.schemas import CamelModel
from teams.schemas import PaymentStatus, TeamResponse


class CompressionInfo(CamelModel):
    original_size: int
    compressed_size: int
    compression_ratio: str


class PaymentUploadResponse(CamelModel):
    message: str
    payment_screenshot: str
    payment_status: PaymentStatus
    compression_info: CompressionInfo
    team: TeamResponse
