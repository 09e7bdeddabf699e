"""Account registration and password login."""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pitchdeck.core.security import hash_password, verify_password
from pitchdeck.models.base import utcnow
from pitchdeck.models.core import User
from pitchdeck.schemas.auth import (
    RegisterRequest,
    SubscriptionResponse,
    UserProfileResponse,
)

logger = structlog.get_logger()


def to_profile_response(user: User) -> UserProfileResponse:
    return UserProfileResponse(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        company_name=user.company_name,
        role=user.role,
        avatar=user.avatar,
        subscription=SubscriptionResponse(
            plan=user.subscription_plan,
            start_date=user.subscription_start,
            end_date=user.subscription_end,
        ),
        preferences=user.preferences or {},
        last_login=user.last_login,
        created_at=user.created_at,
    )


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email.strip().lower()))
    return result.scalar_one_or_none()


async def register_user(db: AsyncSession, body: RegisterRequest) -> User:
    """Create a user account. Raises ValueError if the email is taken."""
    email = str(body.email).strip().lower()
    if await get_user_by_email(db, email) is not None:
        raise ValueError("User already exists")

    user = User(
        first_name=body.first_name,
        last_name=body.last_name,
        email=email,
        password_hash=hash_password(body.password),
        company_name=body.company_name,
        role=body.role,
    )
    db.add(user)
    await db.flush()
    logger.info("user_registered", user_id=str(user.id))
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User | None:
    user = await get_user_by_email(db, email)
    if user is None or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        logger.info("login_failed", user_id=str(user.id))
        return None
    user.last_login = utcnow()
    await db.flush()
    return user
