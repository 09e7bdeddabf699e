"""Auth schemas: CurrentUser, registration, login, public profile."""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_validator

from pitchdeck.models.enums import SubscriptionPlan, UserRole
from pitchdeck.schemas.common import CamelModel


class CurrentUser(BaseModel):
    """Lightweight user context extracted from the JWT + DB lookup."""

    user_id: uuid.UUID
    email: str
    role: UserRole


class RegisterRequest(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    company_name: str = Field(..., min_length=1, max_length=200)
    role: UserRole

    @field_validator("first_name", "last_name", "company_name")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class SubscriptionResponse(CamelModel):
    plan: SubscriptionPlan
    start_date: datetime
    end_date: datetime | None = None


class UserProfileResponse(CamelModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    company_name: str
    role: UserRole
    avatar: str
    subscription: SubscriptionResponse
    preferences: dict[str, Any]
    last_login: datetime
    created_at: datetime


class TokenResponse(CamelModel):
    token: str
    user: UserProfileResponse
