"""Deck analytics API router."""

from __future__ import annotations

import uuid

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from pitchdeck.auth.dependencies import get_current_user
from pitchdeck.core.database import get_db
from pitchdeck.modules.analytics.interactions import (
    InvestorInteractionService,
    to_interaction_result,
)
from pitchdeck.modules.analytics.schemas import (
    AnalyticsOverviewResponse,
    DeckAnalyticsReportResponse,
    InteractionMutationResponse,
    InteractionStatusUpdateRequest,
    InvestorInteractionRequest,
    SlideAnalyticsItem,
    TrackViewRequest,
)
from pitchdeck.modules.analytics.service import AnalyticsService
from pitchdeck.schemas.auth import CurrentUser
from pitchdeck.schemas.common import SuccessResponse

logger = structlog.get_logger()

router = APIRouter(prefix="/analytics", tags=["analytics"])


# ── Public tracking ────────────────────────────────────────────────────────────


@router.post("/track", response_model=SuccessResponse)
async def track_view(
    body: TrackViewRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """Record a deck viewing session. Unauthenticated; embedded viewers call this."""
    client_ip = request.client.host if request.client else None
    await AnalyticsService(db).record_view(body, client_ip=client_ip)
    await db.commit()
    return SuccessResponse()


# ── Owner reports ──────────────────────────────────────────────────────────────


@router.get("/overview", response_model=AnalyticsOverviewResponse)
async def analytics_overview(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    overview = await AnalyticsService(db).overview(current_user.user_id)
    await db.commit()
    return overview


@router.get("/deck/{deck_id}", response_model=DeckAnalyticsReportResponse)
async def deck_analytics(
    deck_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Recomputed analytics for one deck along with its investor interactions."""
    try:
        report = await AnalyticsService(db).deck_report(deck_id, current_user.user_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    await db.commit()
    return report


@router.get("/deck/{deck_id}/slides", response_model=list[SlideAnalyticsItem])
async def slide_analytics(
    deck_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        slides = await AnalyticsService(db).slide_report(deck_id, current_user.user_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    await db.commit()
    return slides


# ── Investor interactions ──────────────────────────────────────────────────────


@router.post("/investor-interaction", response_model=InteractionMutationResponse)
async def record_investor_interaction(
    body: InvestorInteractionRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    svc = InvestorInteractionService(db, current_user.user_id)
    try:
        record = await svc.record_interaction(body)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    await db.commit()
    return {"success": True, "interaction": to_interaction_result(record)}


@router.put(
    "/investor-interaction/{interaction_id}",
    response_model=InteractionMutationResponse,
)
async def update_interaction_status(
    interaction_id: uuid.UUID,
    body: InteractionStatusUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    svc = InvestorInteractionService(db, current_user.user_id)
    try:
        record = await svc.update_status(
            interaction_id,
            body.status,
            interest_level=body.interest_level,
            notes=body.notes,
            follow_up_date=body.follow_up_date,
        )
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except PermissionError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    await db.commit()
    return {"success": True, "interaction": to_interaction_result(record)}
