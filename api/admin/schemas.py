"""
Pydantic schemas for admin endpoints.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from core.schemas import CamelModel


class AdminLoginRequest(CamelModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=128)


class AdminResponse(CamelModel):
    id: int
    username: str
    role: str
    last_login: datetime | None = None


class AdminLoginResponse(CamelModel):
    message: str = "Admin login successful"
    token: str
    admin: AdminResponse


# Plain str fields so unknown values reach the service and fail as ValidationError.
class PaymentStatusRequest(CamelModel):
    payment_status: str = ""


class ApprovalStatusRequest(CamelModel):
    status: str = ""


class AdminStats(CamelModel):
    total_teams: int
    verified_payments: int
    pending_payments: int
    rejected_payments: int
    total_users: int
    payment_verification_rate: float
