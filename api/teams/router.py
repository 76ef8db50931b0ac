"""
Team registry endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter()


@router.post(
    "/teams/register",
    response_model=schemas.TeamEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def register_team(
    request: schemas.RegisterTeamRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.TeamEnvelope:
    team = await service.register_team(int(current_user["id"]), request)
    return schemas.TeamEnvelope(message="Team registered successfully", team=team)


@router.get("/teams", response_model=schemas.TeamListResponse)
async def list_approved_teams() -> schemas.TeamListResponse:
    return schemas.TeamListResponse(teams=await service.list_approved_teams())


@router.get("/teams/my-team", response_model=schemas.TeamEnvelope)
async def get_my_team(
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.TeamEnvelope:
    team = await service.find_team_for_user(int(current_user["id"]))
    return schemas.TeamEnvelope(team=team)


@router.get("/teams/problem-statements")
def list_problem_statements() -> dict:
    return {"problemStatements": service.list_problem_statements()}
