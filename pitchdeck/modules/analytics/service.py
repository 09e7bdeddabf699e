"""Deck view recording and analytics reporting."""

from __future__ import annotations

import uuid
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pitchdeck.models.analytics import (
    DeckAnalytics,
    InvestorInteraction,
    ViewEvent,
    empty_demographics,
    empty_engagement_metrics,
)
from pitchdeck.models.decks import Deck
from pitchdeck.models.enums import ViewerType
from pitchdeck.modules.analytics.aggregator import (
    compute_deck_metrics,
    merge_slide_views,
    seconds_to_minutes,
)
from pitchdeck.modules.analytics.schemas import TrackViewRequest
from pitchdeck.modules.decks.service import get_owned_deck

logger = structlog.get_logger()

TOP_DECKS_LIMIT = 5
RECENT_ACTIVITY_LIMIT = 10


class AnalyticsService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ── Recording ──────────────────────────────────────────────────────────────

    async def record_view(
        self, body: TrackViewRequest, client_ip: str | None = None
    ) -> ViewEvent:
        """Persist one viewing session and refresh the deck's analytics row.

        The deck id is not checked for existence.
        """
        slide_views = merge_slide_views(
            sv.model_dump(mode="json", by_alias=True) for sv in body.slide_views
        )
        event = ViewEvent(
            deck_id=body.deck_id,
            viewer_id=body.viewer_id or "anonymous",
            viewer_type=body.viewer_type or ViewerType.ANONYMOUS,
            session_id=body.session_id,
            duration=body.duration or 0,
            slide_views=slide_views,
            user_agent=body.user_agent,
            ip_address=body.ip_address or client_ip,
            referrer=body.referrer,
        )
        self.db.add(event)
        await self.db.flush()
        await self.get_or_compute(body.deck_id)
        logger.info(
            "deck_view_recorded",
            deck_id=str(body.deck_id),
            session_id=body.session_id,
            slides=len(slide_views),
        )
        return event

    # ── Aggregation ────────────────────────────────────────────────────────────

    async def get_or_compute(self, deck_id: uuid.UUID) -> DeckAnalytics:
        """Load the analytics row for a deck (creating it if absent) and
        recompute every derived field from the full event set."""
        result = await self.db.execute(
            select(DeckAnalytics).where(DeckAnalytics.deck_id == deck_id)
        )
        analytics = result.scalar_one_or_none()
        if analytics is None:
            analytics = DeckAnalytics(
                deck_id=deck_id,
                total_views=0,
                unique_views=0,
                total_view_time=0,
                avg_view_time=0,
                slide_engagement=[],
                viewer_demographics=empty_demographics(),
                engagement_metrics=empty_engagement_metrics(),
            )
            self.db.add(analytics)

        # populate_existing: events flushed by this session are read back as stored
        events_result = await self.db.execute(
            select(ViewEvent)
            .where(ViewEvent.deck_id == deck_id)
            .order_by(ViewEvent.timestamp)
            .execution_options(populate_existing=True)
        )
        metrics = compute_deck_metrics(events_result.scalars().all())

        analytics.total_views = metrics.total_views
        analytics.unique_views = metrics.unique_views
        analytics.total_view_time = metrics.total_view_time
        analytics.avg_view_time = metrics.avg_view_time
        analytics.slide_engagement = metrics.slide_engagement
        analytics.first_viewed = metrics.first_viewed
        analytics.last_viewed = metrics.last_viewed

        await self.db.flush()
        return analytics

    # ── Reports ────────────────────────────────────────────────────────────────

    async def deck_report(self, deck_id: uuid.UUID, user_id: uuid.UUID) -> dict[str, Any]:
        """Analytics plus investor interactions for a deck the caller owns.

        Raises LookupError if the deck does not exist or belongs to someone else.
        """
        deck = await get_owned_deck(self.db, deck_id, user_id)
        analytics = await self.get_or_compute(deck.id)

        result = await self.db.execute(
            select(InvestorInteraction)
            .where(InvestorInteraction.deck_id == deck.id)
            .order_by(InvestorInteraction.created_at)
        )
        interactions = result.scalars().all()

        return {
            "deck": {"id": deck.id, "title": deck.title, "status": deck.status},
            "analytics": analytics_to_dict(analytics),
            "investor_interactions": [
                {
                    "id": i.id,
                    "investor_id": i.investor_id,
                    "investor_name": i.investor_name,
                    "investor_type": i.investor_type,
                    "interest_level": i.interest_level,
                    "status": i.status,
                    "notes": i.notes,
                    "follow_up_date": i.follow_up_date,
                    "last_interaction": (
                        i.interactions[-1]["timestamp"] if i.interactions else None
                    ),
                    "total_interactions": len(i.interactions or []),
                }
                for i in interactions
            ],
        }

    async def overview(self, user_id: uuid.UUID) -> dict[str, Any]:
        """Totals across all of the caller's decks, plus top and recent lists."""
        result = await self.db.execute(
            select(Deck).where(Deck.user_id == user_id).order_by(Deck.created_at)
        )
        decks = result.scalars().all()

        # One session cannot run statements concurrently, so decks are computed in turn
        rows: list[tuple[Deck, DeckAnalytics]] = []
        for deck in decks:
            rows.append((deck, await self.get_or_compute(deck.id)))

        total_views = sum(a.total_views for _, a in rows)
        total_view_time = sum(a.total_view_time for _, a in rows)

        # sorted() is stable: ties keep deck creation order
        by_views = sorted(rows, key=lambda r: r[1].total_views, reverse=True)
        top_decks = [
            {
                "deck_id": deck.id,
                "title": deck.title,
                "views": a.total_views,
                "unique_views": a.unique_views,
                "avg_view_time": seconds_to_minutes(a.avg_view_time),
            }
            for deck, a in by_views[:TOP_DECKS_LIMIT]
        ]

        viewed = [r for r in rows if r[1].last_viewed is not None]
        viewed.sort(key=lambda r: r[1].last_viewed, reverse=True)
        recent_activity = [
            {
                "deck_id": deck.id,
                "title": deck.title,
                "last_viewed": a.last_viewed,
                "views": a.total_views,
            }
            for deck, a in viewed[:RECENT_ACTIVITY_LIMIT]
        ]

        return {
            "total_views": total_views,
            "total_unique_views": sum(a.unique_views for _, a in rows),
            "total_decks": len(decks),
            "avg_view_time": seconds_to_minutes(total_view_time / total_views)
            if total_views
            else 0,
            "top_decks": top_decks,
            "recent_activity": recent_activity,
        }

    async def slide_report(self, deck_id: uuid.UUID, user_id: uuid.UUID) -> list[dict[str, Any]]:
        """Per-slide engagement aligned with the deck's current slide list."""
        deck = await get_owned_deck(self.db, deck_id, user_id)
        analytics = await self.get_or_compute(deck.id)
        by_index = {s["slideIndex"]: s for s in analytics.slide_engagement or []}

        report = []
        for index, slide in enumerate(deck.slides or []):
            engagement = by_index.get(index, {})
            report.append(
                {
                    "slide_index": index,
                    "title": slide.get("title"),
                    "type": slide.get("type"),
                    "views": engagement.get("views", 0),
                    "avg_time_spent": engagement.get("avgTimeSpent", 0),
                    "drop_off_rate": engagement.get("dropOffRate", 0),
                    "interactions": engagement.get("interactions", 0),
                }
            )
        return report


def analytics_to_dict(analytics: DeckAnalytics) -> dict[str, Any]:
    return {
        "total_views": analytics.total_views,
        "unique_views": analytics.unique_views,
        "total_view_time": analytics.total_view_time,
        "avg_view_time": seconds_to_minutes(analytics.avg_view_time),
        "slide_engagement": [
            {
                "slide_index": s["slideIndex"],
                "views": s["views"],
                "avg_time_spent": s["avgTimeSpent"],
                "drop_off_rate": s["dropOffRate"],
                "interactions": s["interactions"],
            }
            for s in analytics.slide_engagement or []
        ],
        "viewer_demographics": analytics.viewer_demographics or empty_demographics(),
        "engagement_metrics": analytics.engagement_metrics or empty_engagement_metrics(),
        "first_viewed": analytics.first_viewed,
        "last_viewed": analytics.last_viewed,
    }
