"""Deck analytics models: ViewEvent, DeckAnalytics, InvestorInteraction.

None of these reference decks.id: events are accepted for any deck id, and
interaction records survive deletion of the investor profile they describe.
"""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Float, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from pitchdeck.models.base import BaseModel, JSONDocument, TimestampedModel, utcnow
from pitchdeck.models.enums import (
    InteractionStatus,
    InterestLevel,
    InvestorType,
    ViewerType,
)


def empty_demographics() -> dict[str, list[Any]]:
    return {"countries": [], "devices": [], "browsers": []}


def empty_engagement_metrics() -> dict[str, Any]:
    return {
        "bounceRate": None,
        "avgSessionDuration": None,
        "pagesPerSession": None,
        "returnVisitors": None,
    }


class ViewEvent(TimestampedModel):
    """One recorded viewing session of a deck. Immutable once written."""

    __tablename__ = "view_events"
    __table_args__ = (
        Index("ix_view_events_deck_id_timestamp", "deck_id", "timestamp"),
        Index("ix_view_events_session_id", "session_id"),
        Index("ix_view_events_viewer_id", "viewer_id"),
    )

    deck_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    viewer_id: Mapped[str] = mapped_column(String(200), nullable=False, default="anonymous")
    viewer_type: Mapped[ViewerType] = mapped_column(nullable=False, default=ViewerType.ANONYMOUS)
    session_id: Mapped[str] = mapped_column(String(200), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    duration: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    # [{"slideIndex": 0, "timeSpent": 12.5,
    #   "interactions": [{"type": "click", "timestamp": "...", "element": "cta"}]}, ...]
    slide_views: Mapped[list[Any]] = mapped_column(JSONDocument, nullable=False, default=list)

    user_agent: Mapped[str | None] = mapped_column(String(500), nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    referrer: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    # {"country", "city", "timezone"}; nothing populates this yet
    location: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument, nullable=True)

    def __repr__(self) -> str:
        return f"<ViewEvent(id={self.id}, deck_id={self.deck_id}, viewer_id={self.viewer_id})>"


class DeckAnalytics(BaseModel):
    """Derived per-deck summary, recomputed from view_events on every read."""

    __tablename__ = "deck_analytics"
    __table_args__ = (
        Index("ix_deck_analytics_deck_id", "deck_id", unique=True),
        Index("ix_deck_analytics_total_views", "total_views"),
    )

    deck_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    total_views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    unique_views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_view_time: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    avg_view_time: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    # [{"slideIndex", "views", "avgTimeSpent", "dropOffRate", "interactions"}, ...]
    slide_engagement: Mapped[list[Any]] = mapped_column(
        JSONDocument, nullable=False, default=list
    )
    viewer_demographics: Mapped[dict[str, Any]] = mapped_column(
        JSONDocument, nullable=False, default=empty_demographics
    )
    engagement_metrics: Mapped[dict[str, Any]] = mapped_column(
        JSONDocument, nullable=False, default=empty_engagement_metrics
    )

    first_viewed: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_viewed: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<DeckAnalytics(deck_id={self.deck_id}, total_views={self.total_views})>"


class InvestorInteraction(BaseModel):
    """CRM-style engagement history of one investor with one deck."""

    __tablename__ = "investor_interactions"
    __table_args__ = (
        Index("ix_investor_interactions_deck_investor", "deck_id", "investor_id"),
        Index("ix_investor_interactions_status", "status"),
    )

    deck_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    # Caller-supplied identifier (email, external id); not a key into investor_profiles
    investor_id: Mapped[str] = mapped_column(String(200), nullable=False)
    investor_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    investor_type: Mapped[InvestorType] = mapped_column(nullable=False)

    # [{"type": "view", "timestamp": "...", "metadata": {...}}, ...] append-only
    interactions: Mapped[list[Any]] = mapped_column(JSONDocument, nullable=False, default=list)

    interest_level: Mapped[InterestLevel] = mapped_column(
        nullable=False, default=InterestLevel.UNKNOWN
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    follow_up_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[InteractionStatus] = mapped_column(
        nullable=False, default=InteractionStatus.PENDING
    )

    def __repr__(self) -> str:
        return (
            f"<InvestorInteraction(id={self.id}, deck_id={self.deck_id}, "
            f"investor_id={self.investor_id!r})>"
        )
