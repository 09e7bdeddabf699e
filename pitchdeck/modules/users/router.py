"""Users API router: profile and preferences of the caller."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pitchdeck.auth.dependencies import get_db_user
from pitchdeck.auth.service import to_profile_response
from pitchdeck.core.database import get_db
from pitchdeck.models.core import User
from pitchdeck.modules.users.schemas import PreferencesUpdateRequest, ProfileUpdateRequest
from pitchdeck.schemas.auth import UserProfileResponse

logger = structlog.get_logger()

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/profile", response_model=UserProfileResponse)
async def get_profile(user: User = Depends(get_db_user)):
    return to_profile_response(user)


@router.put("/profile", response_model=UserProfileResponse)
async def update_profile(
    body: ProfileUpdateRequest,
    user: User = Depends(get_db_user),
    db: AsyncSession = Depends(get_db),
):
    """Overwrite the supplied profile fields. Empty strings leave a field unchanged."""
    if body.first_name:
        user.first_name = body.first_name
    if body.last_name:
        user.last_name = body.last_name
    if body.company_name:
        user.company_name = body.company_name
    if body.role is not None:
        user.role = body.role
    await db.flush()
    await db.commit()
    logger.info("user_profile_updated", user_id=str(user.id))
    return to_profile_response(user)


@router.get("/preferences", response_model=dict[str, Any])
async def get_preferences(user: User = Depends(get_db_user)):
    return user.preferences or {}


@router.put("/preferences", response_model=dict[str, Any])
async def update_preferences(
    body: PreferencesUpdateRequest,
    user: User = Depends(get_db_user),
    db: AsyncSession = Depends(get_db),
):
    """Shallow merge: each top-level key in the body replaces the stored value."""
    user.preferences = {**(user.preferences or {}), **body.model_dump()}
    await db.flush()
    await db.commit()
    logger.info("user_preferences_updated", user_id=str(user.id))
    return user.preferences
