"""Investor profiles API router: CRUD, templates, matching, insights."""

from __future__ import annotations

import uuid

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from pitchdeck.auth.dependencies import get_current_user
from pitchdeck.core.database import get_db
from pitchdeck.modules.investors.algorithm import MatchCriteria
from pitchdeck.modules.investors.schemas import (
    CustomizeForInvestorRequest,
    CustomizeForInvestorResponse,
    InvestorCreateRequest,
    InvestorInsightsResponse,
    InvestorMatch,
    InvestorResponse,
    InvestorTemplate,
    InvestorUpdateRequest,
    MatchRequest,
)
from pitchdeck.modules.investors.service import (
    InvestorProfileService,
    to_investor_response,
    to_public_profile,
)
from pitchdeck.modules.investors.templates import INVESTOR_TEMPLATES
from pitchdeck.schemas.auth import CurrentUser
from pitchdeck.schemas.common import MessageResponse
from pitchdeck.services.deck_ai import DeckAIAssistant, get_deck_assistant

logger = structlog.get_logger()

router = APIRouter(prefix="/investors", tags=["investors"])


def _not_found(exc: LookupError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


# ── Static routes (registered before /{investor_id}) ───────────────────────────


@router.get("/templates", response_model=list[InvestorTemplate])
async def list_investor_templates(
    current_user: CurrentUser = Depends(get_current_user),
):
    return INVESTOR_TEMPLATES


@router.post("/match", response_model=list[InvestorMatch])
async def match_investors(
    body: MatchRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Active investor profiles that satisfy every supplied criterion, best first."""
    criteria = MatchCriteria(
        stage=body.stage.value if body.stage else None,
        sector=body.sector,
        geography=body.geography,
        funding_amount=int(body.funding_amount) if body.funding_amount else None,
        investor_type=body.investor_type,
    )
    svc = InvestorProfileService(db, current_user.user_id)
    ranked = await svc.find_matches(criteria)
    return [{**to_public_profile(p), "match_score": score} for p, score in ranked]


# ── CRUD ───────────────────────────────────────────────────────────────────────


@router.get("", response_model=list[InvestorResponse])
async def list_investors(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    profiles = await InvestorProfileService(db, current_user.user_id).list_profiles()
    return [to_investor_response(p) for p in profiles]


@router.post("", response_model=InvestorResponse, status_code=status.HTTP_201_CREATED)
async def create_investor(
    body: InvestorCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    profile = await InvestorProfileService(db, current_user.user_id).create_profile(body)
    await db.commit()
    return to_investor_response(profile)


@router.get("/{investor_id}", response_model=InvestorResponse)
async def get_investor(
    investor_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        profile = await InvestorProfileService(db, current_user.user_id).get_profile(investor_id)
    except LookupError as exc:
        raise _not_found(exc)
    return to_investor_response(profile)


@router.put("/{investor_id}", response_model=InvestorResponse)
async def update_investor(
    investor_id: uuid.UUID,
    body: InvestorUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    svc = InvestorProfileService(db, current_user.user_id)
    try:
        profile = await svc.update_profile(investor_id, body)
    except LookupError as exc:
        raise _not_found(exc)
    await db.commit()
    return to_investor_response(profile)


@router.delete("/{investor_id}", response_model=MessageResponse)
async def delete_investor(
    investor_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        await InvestorProfileService(db, current_user.user_id).delete_profile(investor_id)
    except LookupError as exc:
        raise _not_found(exc)
    await db.commit()
    return MessageResponse(message="Investor deleted successfully")


# ── Insights and customisation ─────────────────────────────────────────────────


@router.get("/{investor_id}/insights", response_model=InvestorInsightsResponse)
async def investor_insights(
    investor_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await InvestorProfileService(db, current_user.user_id).insights(investor_id)
    except LookupError as exc:
        raise _not_found(exc)


@router.post("/{investor_id}/customize-deck", response_model=CustomizeForInvestorResponse)
async def customize_deck_for_investor(
    investor_id: uuid.UUID,
    body: CustomizeForInvestorRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    assistant: DeckAIAssistant = Depends(get_deck_assistant),
):
    svc = InvestorProfileService(db, current_user.user_id)
    try:
        profile, content = await svc.customize_deck(investor_id, body.deck_id, assistant)
    except LookupError as exc:
        raise _not_found(exc)
    return {
        "investor": to_public_profile(profile),
        "customized_content": content,
        "customization_type": body.customization_type,
    }
