"""Core models: User."""

from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from pitchdeck.models.base import BaseModel, JSONDocument, utcnow
from pitchdeck.models.enums import SubscriptionPlan, UserRole


def default_preferences() -> dict[str, Any]:
    return {"theme": "light", "notifications": {"email": True, "push": True}}


class User(BaseModel):
    __tablename__ = "users"
    __table_args__ = (
        Index("ix_users_email", "email", unique=True),
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(200), nullable=False)
    company_name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[UserRole] = mapped_column(nullable=False)
    avatar: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    subscription_plan: Mapped[SubscriptionPlan] = mapped_column(
        nullable=False, default=SubscriptionPlan.FREE
    )
    subscription_start: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    subscription_end: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    preferences: Mapped[dict[str, Any]] = mapped_column(
        JSONDocument, nullable=False, default=default_preferences
    )
    last_login: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def has_active_subscription(self) -> bool:
        if self.subscription_plan == SubscriptionPlan.FREE:
            return True
        if self.subscription_end is None:
            return False
        end = self.subscription_end
        if end.tzinfo is None:
            return end > utcnow().replace(tzinfo=None)
        return end > utcnow()

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
