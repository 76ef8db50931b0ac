"""
Admin auth dependency: a Bearer token of type "admin".
"""

from __future__ import annotations

from fastapi import Depends

from auth.dependencies import get_bearer_token

from . import service


async def get_current_admin(token: str = Depends(get_bearer_token)) -> dict:
    return await service.get_admin_from_token(token)
