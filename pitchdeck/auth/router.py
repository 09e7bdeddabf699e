"""Auth API router: register, login, current user."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from pitchdeck.auth import service
from pitchdeck.auth.dependencies import get_db_user
from pitchdeck.core.database import get_db
from pitchdeck.core.security import create_access_token
from pitchdeck.models.core import User
from pitchdeck.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserProfileResponse,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Create an account and return an access token for it."""
    try:
        user = await service.register_user(db, body)
        await db.commit()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return TokenResponse(
        token=create_access_token(user.id),
        user=service.to_profile_response(user),
    )


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Exchange email + password for an access token."""
    user = await service.authenticate(db, str(body.email), body.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    await db.commit()
    return TokenResponse(
        token=create_access_token(user.id),
        user=service.to_profile_response(user),
    )


@router.get("/me", response_model=UserProfileResponse)
async def me(user: User = Depends(get_db_user)):
    return service.to_profile_response(user)
