"""
Admin endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth import schemas as auth_schemas
from teams import schemas as teams_schemas

from . import dependencies, schemas, service

router = APIRouter(prefix="/admin")


@router.post("/login", response_model=schemas.AdminLoginResponse)
async def login(request: schemas.AdminLoginRequest) -> schemas.AdminLoginResponse:
    return await service.login(request)


@router.get("/teams", response_model=teams_schemas.TeamListResponse)
async def list_teams(
    _: dict = Depends(dependencies.get_current_admin),
) -> teams_schemas.TeamListResponse:
    return teams_schemas.TeamListResponse(teams=await service.list_teams())


@router.put("/teams/{team_id}/payment-status", response_model=teams_schemas.TeamEnvelope)
async def set_payment_status(
    team_id: int,
    request: schemas.PaymentStatusRequest,
    _: dict = Depends(dependencies.get_current_admin),
) -> teams_schemas.TeamEnvelope:
    team = await service.set_payment_status(team_id, request.payment_status)
    return teams_schemas.TeamEnvelope(message="Payment status updated successfully", team=team)


@router.put("/teams/{team_id}/status", response_model=teams_schemas.TeamEnvelope)
async def set_approval_status(
    team_id: int,
    request: schemas.ApprovalStatusRequest,
    _: dict = Depends(dependencies.get_current_admin),
) -> teams_schemas.TeamEnvelope:
    team = await service.set_approval_status(team_id, request.status)
    return teams_schemas.TeamEnvelope(message="Team status updated successfully", team=team)


@router.put("/change-password")
async def change_password(
    request: auth_schemas.ChangePasswordRequest,
    current_admin: dict = Depends(dependencies.get_current_admin),
) -> dict:
    await service.change_password(
        int(current_admin["id"]),
        request.current_password,
        request.new_password,
    )
    return {"message": "Password changed successfully"}


@router.get("/stats")
async def get_stats(
    _: dict = Depends(dependencies.get_current_admin),
) -> dict:
    stats = await service.compute_stats()
    return {"stats": stats.model_dump(by_alias=True)}
