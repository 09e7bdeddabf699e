"""Analytics API schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from pitchdeck.models.enums import (
    DeckStatus,
    InteractionStatus,
    InteractionType,
    InterestLevel,
    InvestorType,
    ViewerType,
)
from pitchdeck.schemas.common import CamelModel

# ── View tracking ──────────────────────────────────────────────────────────────


class SlideInteractionIn(CamelModel):
    type: str = Field(min_length=1, max_length=100)
    timestamp: datetime | None = None
    element: str | None = Field(default=None, max_length=200)


class SlideViewIn(CamelModel):
    slide_index: int = Field(ge=0)
    time_spent: float = Field(default=0, ge=0)
    interactions: list[SlideInteractionIn] = Field(default_factory=list)


class TrackViewRequest(CamelModel):
    deck_id: uuid.UUID
    session_id: str = Field(min_length=1, max_length=200)
    viewer_id: str | None = Field(default=None, max_length=200)
    viewer_type: ViewerType | None = None
    slide_views: list[SlideViewIn] = Field(default_factory=list)
    duration: float | None = Field(default=None, ge=0)
    user_agent: str | None = Field(default=None, max_length=500)
    ip_address: str | None = Field(default=None, max_length=64)
    referrer: str | None = Field(default=None, max_length=1000)


# ── Per-deck analytics ─────────────────────────────────────────────────────────


class SlideEngagementResponse(CamelModel):
    slide_index: int
    views: int
    avg_time_spent: float
    drop_off_rate: float
    interactions: int


class DeckAnalyticsResponse(CamelModel):
    total_views: int
    unique_views: int
    # seconds
    total_view_time: float
    # minutes, 2 decimals
    avg_view_time: float
    slide_engagement: list[SlideEngagementResponse]
    viewer_demographics: dict[str, Any]
    engagement_metrics: dict[str, Any]
    first_viewed: datetime | None = None
    last_viewed: datetime | None = None


class DeckSummary(CamelModel):
    id: uuid.UUID
    title: str
    status: DeckStatus


class InteractionSummaryResponse(CamelModel):
    id: uuid.UUID
    investor_id: str
    investor_name: str | None = None
    investor_type: InvestorType
    interest_level: InterestLevel
    status: InteractionStatus
    notes: str | None = None
    follow_up_date: datetime | None = None
    last_interaction: datetime | None = None
    total_interactions: int


class DeckAnalyticsReportResponse(CamelModel):
    deck: DeckSummary
    analytics: DeckAnalyticsResponse
    investor_interactions: list[InteractionSummaryResponse]


class SlideAnalyticsItem(CamelModel):
    slide_index: int
    title: str | None = None
    type: str | None = None
    views: int = 0
    avg_time_spent: float = 0
    drop_off_rate: float = 0
    interactions: int = 0


# ── Overview ───────────────────────────────────────────────────────────────────


class TopDeckItem(CamelModel):
    deck_id: uuid.UUID
    title: str
    views: int
    unique_views: int
    avg_view_time: float


class RecentActivityItem(CamelModel):
    deck_id: uuid.UUID
    title: str
    last_viewed: datetime
    views: int


class AnalyticsOverviewResponse(CamelModel):
    total_views: int
    total_unique_views: int
    total_decks: int
    avg_view_time: float
    top_decks: list[TopDeckItem]
    recent_activity: list[RecentActivityItem]


# ── Investor interactions ──────────────────────────────────────────────────────


class InvestorInteractionRequest(CamelModel):
    deck_id: uuid.UUID
    investor_id: str = Field(min_length=1, max_length=200)
    investor_name: str | None = Field(default=None, max_length=200)
    investor_type: InvestorType
    interaction_type: InteractionType
    interest_level: InterestLevel | None = None
    notes: str | None = None
    metadata: dict[str, Any] | None = None

    @field_validator("investor_id")
    @classmethod
    def strip_investor_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("investorId must not be blank")
        return v

    @field_validator("notes")
    @classmethod
    def strip_notes(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else None


class InteractionStatusUpdateRequest(CamelModel):
    status: InteractionStatus
    interest_level: InterestLevel | None = None
    notes: str | None = None
    follow_up_date: datetime | None = None

    @field_validator("notes")
    @classmethod
    def strip_notes(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else None


class InteractionResult(CamelModel):
    id: uuid.UUID
    investor_name: str | None = None
    investor_type: InvestorType
    interest_level: InterestLevel
    status: InteractionStatus
    follow_up_date: datetime | None = None
    total_interactions: int


class InteractionMutationResponse(CamelModel):
    success: bool = True
    interaction: InteractionResult
