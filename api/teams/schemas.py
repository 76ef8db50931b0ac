"""
Pydantic schemas for team endpoints.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field

from core.schemas import CamelModel


class TeamSize(str, Enum):
    SOLO = "Solo"
    DUO = "Duo"
    TEAM = "Team"


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class MemberIdentifier(CamelModel):
    email: str = Field(..., min_length=3, max_length=320)
    registration_number: str = Field(..., min_length=1, max_length=64)


class RegisterTeamRequest(CamelModel):
    team_name: str = Field(..., min_length=1, max_length=200)
    members: list[MemberIdentifier] = Field(default_factory=list)
    problem_statement: str = Field(..., min_length=1, max_length=500)
    team_size: TeamSize


class MemberResponse(CamelModel):
    id: int
    name: str
    email: str
    registration_number: str


class TeamResponse(CamelModel):
    id: int
    team_name: str
    leader: MemberResponse | None
    members: list[MemberResponse]
    problem_statement: str
    team_size: TeamSize
    status: ApprovalStatus
    registration_number: str
    payment_screenshot: str | None = None
    payment_status: PaymentStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TeamEnvelope(CamelModel):
    message: str | None = None
    team: TeamResponse


class TeamListResponse(CamelModel):
    teams: list[TeamResponse]
