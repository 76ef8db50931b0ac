"""
User auth and profile endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from . import dependencies, schemas, service

router = APIRouter()


@router.post(
    "/auth/register",
    response_model=schemas.AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(request: schemas.RegisterRequest) -> schemas.AuthResponse:
    return await service.register(request)


@router.post("/auth/login", response_model=schemas.AuthResponse)
async def login(request: schemas.LoginRequest) -> schemas.AuthResponse:
    return await service.login(request)


@router.get("/users/profile")
async def get_profile(
    current_user: dict = Depends(dependencies.get_current_user),
) -> dict:
    user = service.to_user_response(current_user)
    return {"user": user.model_dump(by_alias=True)}


@router.put("/users/profile")
async def update_profile(
    request: schemas.UpdateProfileRequest,
    current_user: dict = Depends(dependencies.get_current_user),
) -> dict:
    user = await service.update_profile(int(current_user["id"]), request)
    return {
        "message": "Profile updated successfully",
        "user": user.model_dump(by_alias=True),
    }


@router.put("/users/change-password")
async def change_password(
    request: schemas.ChangePasswordRequest,
    current_user: dict = Depends(dependencies.get_current_user),
) -> dict:
    await service.change_password(int(current_user["id"]), request)
    return {"message": "Password changed successfully"}
