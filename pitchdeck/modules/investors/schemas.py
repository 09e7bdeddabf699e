"""Investor profile API schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Literal

from pydantic import EmailStr, Field, field_validator, model_validator

from pitchdeck.models.enums import (
    FundingStage,
    InvestorStatus,
    InvestorType,
    PitchFormat,
    PitchLength,
)
from pitchdeck.schemas.common import CamelModel


class Location(CamelModel):
    country: str | None = None
    city: str | None = None
    timezone: str | None = None


class InvestmentCriteria(CamelModel):
    min_investment: float | None = Field(default=None, ge=0)
    max_investment: float | None = Field(default=None, ge=0)
    preferred_stages: list[FundingStage] = Field(default_factory=list)
    preferred_sectors: list[str] = Field(default_factory=list)
    preferred_geographies: list[str] = Field(default_factory=list)
    investment_thesis: str | None = None
    portfolio_companies: list[str] = Field(default_factory=list)
    # IPO, M&A, ...
    exit_preferences: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_range(self) -> InvestmentCriteria:
        if (
            self.min_investment is not None
            and self.max_investment is not None
            and self.min_investment > self.max_investment
        ):
            raise ValueError("minInvestment must not exceed maxInvestment")
        return self


class CommunicationPreferences(CamelModel):
    preferred_format: PitchFormat = PitchFormat.PITCH_DECK
    preferred_length: PitchLength = PitchLength.STANDARD
    key_focus_areas: list[str] = Field(default_factory=list)
    deal_breakers: list[str] = Field(default_factory=list)
    questions_to_prepare: list[str] = Field(default_factory=list)


def _strip_optional(v: str | None) -> str | None:
    return v.strip() if isinstance(v, str) else v


class InvestorCreateRequest(CamelModel):
    name: str = Field(max_length=200)
    firm: str | None = Field(default=None, max_length=200)
    title: str | None = Field(default=None, max_length=200)
    type: InvestorType
    email: EmailStr | None = None
    linkedin: str | None = Field(default=None, max_length=500)
    website: str | None = Field(default=None, max_length=500)
    location: Location | None = None
    bio: str | None = None
    investment_criteria: InvestmentCriteria | None = None
    communication_preferences: CommunicationPreferences | None = None
    tags: list[str] = Field(default_factory=list)
    notes: str | None = None

    @field_validator("name")
    @classmethod
    def _name_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("firm", "title", "bio", "notes")
    @classmethod
    def _strip(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class InvestorUpdateRequest(CamelModel):
    name: str | None = Field(default=None, max_length=200)
    firm: str | None = Field(default=None, max_length=200)
    title: str | None = Field(default=None, max_length=200)
    type: InvestorType | None = None
    email: EmailStr | None = None
    linkedin: str | None = Field(default=None, max_length=500)
    website: str | None = Field(default=None, max_length=500)
    location: Location | None = None
    bio: str | None = None
    investment_criteria: InvestmentCriteria | None = None
    communication_preferences: CommunicationPreferences | None = None
    tags: list[str] | None = None
    status: InvestorStatus | None = None
    notes: str | None = None
    last_contact: datetime | None = None
    next_follow_up: datetime | None = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v

    @field_validator("firm", "title", "bio", "notes")
    @classmethod
    def _strip(cls, v: str | None) -> str | None:
        return _strip_optional(v)


# ── Responses ──────────────────────────────────────────────────────────────────


class InvestorResponse(CamelModel):
    id: uuid.UUID
    name: str
    full_name: str
    firm: str | None = None
    title: str | None = None
    type: InvestorType
    email: str | None = None
    linkedin: str | None = None
    website: str | None = None
    location: dict[str, Any]
    bio: str | None = None
    investment_criteria: InvestmentCriteria
    communication_preferences: CommunicationPreferences
    tags: list[str]
    status: InvestorStatus
    notes: str | None = None
    last_contact: datetime | None = None
    next_follow_up: datetime | None = None
    created_at: datetime
    updated_at: datetime


class PublicInvestmentCriteria(CamelModel):
    preferred_stages: list[str]
    preferred_sectors: list[str]
    preferred_geographies: list[str]
    investment_thesis: str | None = None


class PublicCommunicationPreferences(CamelModel):
    preferred_format: PitchFormat
    preferred_length: PitchLength
    key_focus_areas: list[str]


class InvestorPublicProfile(CamelModel):
    """Profile fields safe to show outside the owner's CRM."""

    id: uuid.UUID
    name: str
    firm: str | None = None
    title: str | None = None
    type: InvestorType
    location: dict[str, Any]
    bio: str | None = None
    investment_criteria: PublicInvestmentCriteria
    communication_preferences: PublicCommunicationPreferences
    tags: list[str]


class InvestorMatch(InvestorPublicProfile):
    match_score: int


class MatchRequest(CamelModel):
    stage: FundingStage | None = None
    sector: str | None = Field(default=None, max_length=200)
    geography: str | None = Field(default=None, max_length=200)
    funding_amount: float | None = Field(default=None, ge=0)
    investor_type: InvestorType | None = None

    @field_validator("sector", "geography")
    @classmethod
    def _strip(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class InvestorTemplate(CamelModel):
    id: str
    name: str
    type: InvestorType
    description: str
    investment_criteria: dict[str, Any]
    communication_preferences: dict[str, Any]


class CommunicationStyle(CamelModel):
    preferred_format: PitchFormat
    preferred_length: PitchLength


class InvestorInsightsResponse(CamelModel):
    key_focus_areas: list[str]
    deal_breakers: list[str]
    questions_to_prepare: list[str]
    investment_thesis: str | None = None
    portfolio_companies: list[str]
    communication_style: CommunicationStyle
    match_score: int = 0
    recommendations: list[str]


class CustomizeForInvestorRequest(CamelModel):
    deck_id: uuid.UUID
    customization_type: Literal["tone", "content", "focus_areas", "full"]


class CustomizeForInvestorResponse(CamelModel):
    investor: InvestorPublicProfile
    customized_content: Any
    customization_type: str
