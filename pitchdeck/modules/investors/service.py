"""Investor profile CRUD, matching, and persona insights."""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pitchdeck.models.enums import InvestorStatus
from pitchdeck.models.investors import InvestorProfile
from pitchdeck.modules.decks.schemas import CustomizationTarget
from pitchdeck.modules.decks.service import get_owned_deck
from pitchdeck.modules.investors.algorithm import InvestorMatcher, MatchCriteria
from pitchdeck.modules.investors.schemas import (
    CommunicationPreferences,
    InvestmentCriteria,
    InvestorCreateRequest,
    InvestorUpdateRequest,
)
from pitchdeck.services.deck_ai import DeckAIAssistant

logger = structlog.get_logger()


def _decimal(value: float | None) -> Decimal | None:
    return Decimal(str(value)) if value is not None else None


def _float(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None


class InvestorProfileService:
    def __init__(self, db: AsyncSession, user_id: uuid.UUID) -> None:
        self.db = db
        self.user_id = user_id

    # ── CRUD ───────────────────────────────────────────────────────────────────

    async def list_profiles(self) -> list[InvestorProfile]:
        result = await self.db.execute(
            select(InvestorProfile)
            .where(InvestorProfile.user_id == self.user_id)
            .order_by(InvestorProfile.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_profile(self, investor_id: uuid.UUID) -> InvestorProfile:
        result = await self.db.execute(
            select(InvestorProfile).where(
                InvestorProfile.id == investor_id,
                InvestorProfile.user_id == self.user_id,
            )
        )
        profile = result.scalar_one_or_none()
        if profile is None:
            raise LookupError("Investor not found")
        return profile

    async def create_profile(self, body: InvestorCreateRequest) -> InvestorProfile:
        profile = InvestorProfile(
            user_id=self.user_id,
            name=body.name,
            firm=body.firm,
            title=body.title,
            type=body.type,
            email=str(body.email).lower() if body.email else None,
            linkedin=body.linkedin,
            website=body.website,
            location=body.location.model_dump(exclude_none=True) if body.location else {},
            bio=body.bio,
            tags=list(body.tags),
            notes=body.notes,
            status=InvestorStatus.ACTIVE,
        )
        _apply_criteria(profile, body.investment_criteria or InvestmentCriteria())
        _apply_preferences(profile, body.communication_preferences or CommunicationPreferences())
        self.db.add(profile)
        await self.db.flush()
        logger.info("investor_profile_created", investor_id=str(profile.id), type=body.type.value)
        return profile

    async def update_profile(
        self, investor_id: uuid.UUID, body: InvestorUpdateRequest
    ) -> InvestorProfile:
        profile = await self.get_profile(investor_id)
        fields = body.model_fields_set

        for name in (
            "name", "firm", "title", "type", "linkedin", "website", "bio",
            "status", "notes", "last_contact", "next_follow_up",
        ):
            if name in fields:
                value = getattr(body, name)
                if value is None and name in ("name", "type", "status"):
                    continue
                setattr(profile, name, value)
        if "email" in fields:
            profile.email = str(body.email).lower() if body.email else None
        if "location" in fields:
            profile.location = body.location.model_dump(exclude_none=True) if body.location else {}
        if "tags" in fields and body.tags is not None:
            profile.tags = list(body.tags)
        if "investment_criteria" in fields and body.investment_criteria is not None:
            _apply_criteria(profile, body.investment_criteria)
        if "communication_preferences" in fields and body.communication_preferences is not None:
            _apply_preferences(profile, body.communication_preferences)

        await self.db.flush()
        logger.info("investor_profile_updated", investor_id=str(investor_id))
        return profile

    async def delete_profile(self, investor_id: uuid.UUID) -> None:
        """Hard delete. Interaction records naming this investor are kept."""
        profile = await self.get_profile(investor_id)
        await self.db.delete(profile)
        await self.db.flush()
        logger.info("investor_profile_deleted", investor_id=str(investor_id))

    # ── Matching ───────────────────────────────────────────────────────────────

    async def find_matches(self, criteria: MatchCriteria) -> list[tuple[InvestorProfile, int]]:
        """Rank active profiles against the criteria.

        Type, status and the investment range are filtered in SQL; list
        containment is checked in Python by InvestorMatcher. Profiles of all
        users are candidates.
        """
        stmt = select(InvestorProfile).where(InvestorProfile.status == InvestorStatus.ACTIVE)
        if criteria.investor_type is not None:
            stmt = stmt.where(InvestorProfile.type == criteria.investor_type)
        if criteria.funding_amount is not None:
            stmt = stmt.where(
                InvestorProfile.min_investment <= criteria.funding_amount,
                InvestorProfile.max_investment >= criteria.funding_amount,
            )
        result = await self.db.execute(stmt.order_by(InvestorProfile.created_at))
        ranked = InvestorMatcher(criteria).rank(list(result.scalars().all()))
        logger.info(
            "investor_match_completed",
            candidates=len(ranked),
            stage=criteria.stage,
            sector=criteria.sector,
        )
        return ranked

    # ── Insights and customisation ─────────────────────────────────────────────

    async def insights(self, investor_id: uuid.UUID) -> dict[str, Any]:
        profile = await self.get_profile(investor_id)
        focus = profile.key_focus_areas or []
        sectors = profile.preferred_sectors or []
        return {
            "key_focus_areas": focus,
            "deal_breakers": profile.deal_breakers or [],
            "questions_to_prepare": profile.questions_to_prepare or [],
            "investment_thesis": profile.investment_thesis,
            "portfolio_companies": profile.portfolio_companies or [],
            "communication_style": {
                "preferred_format": profile.preferred_format,
                "preferred_length": profile.preferred_length,
            },
            # needs a startup to score against
            "match_score": 0,
            "recommendations": [
                f"Focus on {', '.join(focus) if focus else 'traction and team'}",
                f"Prepare for {profile.preferred_length.value} format",
                f"Highlight {', '.join(sectors) if sectors else 'market opportunity'}",
            ],
        }

    async def customize_deck(
        self,
        investor_id: uuid.UUID,
        deck_id: uuid.UUID,
        assistant: DeckAIAssistant,
    ) -> tuple[InvestorProfile, Any]:
        """Ask the model to tailor a whole deck to one investor. Nothing is stored."""
        profile = await self.get_profile(investor_id)
        deck = await get_owned_deck(self.db, deck_id, self.user_id)

        target = CustomizationTarget(
            type=profile.type,
            focus=list(profile.preferred_sectors or []),
            stage=list(profile.preferred_stages or []),
            location=(profile.location or {}).get("country"),
        )
        content = {"slides": deck.slides or [], "startupInfo": deck.startup_info or {}}
        return profile, await assistant.customize_for_investor(content, target)


def _apply_criteria(profile: InvestorProfile, criteria: InvestmentCriteria) -> None:
    data = criteria.model_dump(mode="json")
    profile.min_investment = _decimal(criteria.min_investment)
    profile.max_investment = _decimal(criteria.max_investment)
    profile.preferred_stages = data["preferred_stages"]
    profile.preferred_sectors = data["preferred_sectors"]
    profile.preferred_geographies = data["preferred_geographies"]
    profile.investment_thesis = criteria.investment_thesis
    profile.portfolio_companies = data["portfolio_companies"]
    profile.exit_preferences = data["exit_preferences"]


def _apply_preferences(profile: InvestorProfile, prefs: CommunicationPreferences) -> None:
    profile.preferred_format = prefs.preferred_format
    profile.preferred_length = prefs.preferred_length
    profile.key_focus_areas = list(prefs.key_focus_areas)
    profile.deal_breakers = list(prefs.deal_breakers)
    profile.questions_to_prepare = list(prefs.questions_to_prepare)


def to_investor_response(profile: InvestorProfile) -> dict[str, Any]:
    return {
        "id": profile.id,
        "name": profile.name,
        "full_name": profile.full_name,
        "firm": profile.firm,
        "title": profile.title,
        "type": profile.type,
        "email": profile.email,
        "linkedin": profile.linkedin,
        "website": profile.website,
        "location": profile.location or {},
        "bio": profile.bio,
        "investment_criteria": {
            "min_investment": _float(profile.min_investment),
            "max_investment": _float(profile.max_investment),
            "preferred_stages": profile.preferred_stages or [],
            "preferred_sectors": profile.preferred_sectors or [],
            "preferred_geographies": profile.preferred_geographies or [],
            "investment_thesis": profile.investment_thesis,
            "portfolio_companies": profile.portfolio_companies or [],
            "exit_preferences": profile.exit_preferences or [],
        },
        "communication_preferences": {
            "preferred_format": profile.preferred_format,
            "preferred_length": profile.preferred_length,
            "key_focus_areas": profile.key_focus_areas or [],
            "deal_breakers": profile.deal_breakers or [],
            "questions_to_prepare": profile.questions_to_prepare or [],
        },
        "tags": profile.tags or [],
        "status": profile.status,
        "notes": profile.notes,
        "last_contact": profile.last_contact,
        "next_follow_up": profile.next_follow_up,
        "created_at": profile.created_at,
        "updated_at": profile.updated_at,
    }


def to_public_profile(profile: InvestorProfile) -> dict[str, Any]:
    return {
        "id": profile.id,
        "name": profile.name,
        "firm": profile.firm,
        "title": profile.title,
        "type": profile.type,
        "location": profile.location or {},
        "bio": profile.bio,
        "investment_criteria": {
            "preferred_stages": profile.preferred_stages or [],
            "preferred_sectors": profile.preferred_sectors or [],
            "preferred_geographies": profile.preferred_geographies or [],
            "investment_thesis": profile.investment_thesis,
        },
        "communication_preferences": {
            "preferred_format": profile.preferred_format,
            "preferred_length": profile.preferred_length,
            "key_focus_areas": profile.key_focus_areas or [],
        },
        "tags": profile.tags or [],
    }
