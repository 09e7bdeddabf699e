"""Investor profile model: CRM record and matching target."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from pitchdeck.models.base import BaseModel, JSONDocument
from pitchdeck.models.enums import InvestorStatus, InvestorType, PitchFormat, PitchLength


class InvestorProfile(BaseModel):
    __tablename__ = "investor_profiles"
    __table_args__ = (
        Index("ix_investor_profiles_user_id_type", "user_id", "type"),
        Index("ix_investor_profiles_status", "status"),
        Index("ix_investor_profiles_investment_range", "min_investment", "max_investment"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    firm: Mapped[str | None] = mapped_column(String(200), nullable=True)
    title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    type: Mapped[InvestorType] = mapped_column(nullable=False)

    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    linkedin: Mapped[str | None] = mapped_column(String(500), nullable=True)
    website: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # {"country", "city", "timezone"}
    location: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False, default=dict)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Investment criteria. The range is kept in columns so it can be filtered in SQL.
    min_investment: Mapped[Decimal | None] = mapped_column(Numeric(19, 2), nullable=True)
    max_investment: Mapped[Decimal | None] = mapped_column(Numeric(19, 2), nullable=True)
    preferred_stages: Mapped[list[Any]] = mapped_column(JSONDocument, nullable=False, default=list)
    preferred_sectors: Mapped[list[Any]] = mapped_column(JSONDocument, nullable=False, default=list)
    preferred_geographies: Mapped[list[Any]] = mapped_column(
        JSONDocument, nullable=False, default=list
    )
    investment_thesis: Mapped[str | None] = mapped_column(Text, nullable=True)
    portfolio_companies: Mapped[list[Any]] = mapped_column(
        JSONDocument, nullable=False, default=list
    )
    exit_preferences: Mapped[list[Any]] = mapped_column(JSONDocument, nullable=False, default=list)

    # Communication preferences
    preferred_format: Mapped[PitchFormat] = mapped_column(
        nullable=False, default=PitchFormat.PITCH_DECK
    )
    preferred_length: Mapped[PitchLength] = mapped_column(
        nullable=False, default=PitchLength.STANDARD
    )
    key_focus_areas: Mapped[list[Any]] = mapped_column(JSONDocument, nullable=False, default=list)
    deal_breakers: Mapped[list[Any]] = mapped_column(JSONDocument, nullable=False, default=list)
    questions_to_prepare: Mapped[list[Any]] = mapped_column(
        JSONDocument, nullable=False, default=list
    )

    tags: Mapped[list[Any]] = mapped_column(JSONDocument, nullable=False, default=list)
    status: Mapped[InvestorStatus] = mapped_column(nullable=False, default=InvestorStatus.ACTIVE)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_contact: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    next_follow_up: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    @property
    def full_name(self) -> str:
        return f"{self.name} ({self.firm})" if self.firm else self.name

    def __repr__(self) -> str:
        return f"<InvestorProfile(id={self.id}, name={self.name!r}, type={self.type.value})>"
