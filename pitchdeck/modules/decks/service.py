"""Deck CRUD, sharing, and AI-assisted editing."""

from __future__ import annotations

import secrets
import uuid
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pitchdeck.core.config import settings
from pitchdeck.models.base import utcnow
from pitchdeck.models.decks import Deck, default_theme
from pitchdeck.models.enums import DeckStatus
from pitchdeck.modules.decks.schemas import (
    CustomizationTarget,
    DeckCreateRequest,
    DeckUpdateRequest,
    GenerateDeckRequest,
    TargetInvestor,
    slide_to_document,
)
from pitchdeck.services.deck_ai import DeckAIAssistant

logger = structlog.get_logger()


def _dump(model: Any) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


async def get_owned_deck(db: AsyncSession, deck_id: uuid.UUID, user_id: uuid.UUID) -> Deck:
    """Load a deck that belongs to user_id. Raises LookupError otherwise."""
    result = await db.execute(select(Deck).where(Deck.id == deck_id, Deck.user_id == user_id))
    deck = result.scalar_one_or_none()
    if deck is None:
        raise LookupError("Deck not found")
    return deck


async def list_decks(db: AsyncSession, user_id: uuid.UUID) -> list[Deck]:
    result = await db.execute(
        select(Deck).where(Deck.user_id == user_id).order_by(Deck.updated_at.desc())
    )
    return list(result.scalars().all())


async def create_deck(db: AsyncSession, user_id: uuid.UUID, body: DeckCreateRequest) -> Deck:
    deck = Deck(
        user_id=user_id,
        title=body.title,
        description=body.description.strip() if body.description else body.description,
        startup_info=_dump(body.startup_info) if body.startup_info else {},
        slides=[],
        template=body.template or "default",
        theme=default_theme(),
        status=DeckStatus.DRAFT,
        target_investors=[_dump(t) for t in body.target_investors],
        tags=list(body.tags),
    )
    db.add(deck)
    await db.flush()
    logger.info("deck_created", deck_id=str(deck.id), user_id=str(user_id))
    return deck


async def update_deck(db: AsyncSession, deck: Deck, body: DeckUpdateRequest) -> Deck:
    """Overwrite the fields present in the request; absent fields are untouched."""
    fields = body.model_fields_set
    if "title" in fields and body.title is not None:
        deck.title = body.title
    if "description" in fields:
        deck.description = body.description.strip() if body.description else body.description
    if "startup_info" in fields and body.startup_info is not None:
        deck.startup_info = _dump(body.startup_info)
    if "slides" in fields and body.slides is not None:
        deck.slides = [slide_to_document(s) for s in body.slides]
    if "theme" in fields and body.theme is not None:
        deck.theme = _dump(body.theme)
    if "status" in fields and body.status is not None:
        deck.status = body.status
    if "target_investors" in fields and body.target_investors is not None:
        deck.target_investors = [_dump(t) for t in body.target_investors]
    if "tags" in fields and body.tags is not None:
        deck.tags = list(body.tags)

    await db.flush()
    logger.info("deck_updated", deck_id=str(deck.id), fields=sorted(fields))
    return deck


async def delete_deck(db: AsyncSession, deck: Deck) -> None:
    """Hard delete. Analytics rows keyed by this deck id are left in place."""
    await db.delete(deck)
    await db.flush()
    logger.info("deck_deleted", deck_id=str(deck.id))


async def duplicate_deck(db: AsyncSession, deck: Deck) -> Deck:
    copy = Deck(
        user_id=deck.user_id,
        title=f"{deck.title} (Copy)",
        description=deck.description,
        startup_info=dict(deck.startup_info or {}),
        slides=[dict(s) for s in deck.slides or []],
        template=deck.template,
        theme=dict(deck.theme or default_theme()),
        status=DeckStatus.DRAFT,
        target_investors=list(deck.target_investors or []),
        tags=list(deck.tags or []),
    )
    db.add(copy)
    await db.flush()
    logger.info("deck_duplicated", source_deck_id=str(deck.id), deck_id=str(copy.id))
    return copy


# ── Sharing ────────────────────────────────────────────────────────────────────


def share_url(token: str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/deck/{token}"


async def share_deck(db: AsyncSession, deck: Deck) -> str:
    """Issue a fresh share token and make the deck public."""
    deck.share_token = secrets.token_hex(32)
    deck.is_public = True
    await db.flush()
    logger.info("deck_shared", deck_id=str(deck.id))
    return deck.share_token


async def open_shared_deck(db: AsyncSession, token: str) -> Deck:
    """Resolve a public share token and bump the link's view counter.

    Raises LookupError if the token is unknown or the deck is no longer public.
    """
    result = await db.execute(
        select(Deck).where(Deck.share_token == token, Deck.is_public.is_(True))
    )
    deck = result.scalar_one_or_none()
    if deck is None:
        raise LookupError("Deck not found or not shared")
    deck.view_count = (deck.view_count or 0) + 1
    deck.last_viewed_at = utcnow()
    await db.flush()
    return deck


# ── AI-assisted editing ────────────────────────────────────────────────────────


def _slide_at(deck: Deck, index: int) -> dict[str, Any]:
    slides = deck.slides or []
    if index < 0 or index >= len(slides):
        raise ValueError("Invalid slide index")
    return slides[index]


async def generate_deck(
    db: AsyncSession, deck: Deck, body: GenerateDeckRequest, assistant: DeckAIAssistant
) -> Deck:
    """Replace the deck's slides with generated ones.

    ContentGenerationError from the assistant propagates to the caller.
    """
    slides = await assistant.generate_pitch_deck(body.startup_info, body.target_investors)

    deck.startup_info = _dump(body.startup_info)
    deck.slides = slides
    deck.target_investors = [_dump(t) for t in body.target_investors]
    deck.ai_generated = True
    deck.ai_prompt = (
        f"Generated deck for {body.startup_info.name or 'startup'} "
        f"in {body.startup_info.industry or 'unspecified industry'}"
    )
    await db.flush()
    logger.info("deck_generated", deck_id=str(deck.id), slides=len(slides))
    return deck


async def analyze_slide(
    db: AsyncSession, deck: Deck, index: int, assistant: DeckAIAssistant
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Store fresh AI feedback on one slide. Raises ValueError on a bad index."""
    slide = _slide_at(deck, index)
    feedback = await assistant.analyze_slide(slide.get("content") or {}, slide.get("type"))

    slides = [dict(s) for s in deck.slides]
    slides[index]["aiFeedback"] = feedback
    deck.slides = slides
    await db.flush()
    return feedback, slides[index]


async def slide_suggestions(
    deck: Deck, index: int, target: TargetInvestor | None, assistant: DeckAIAssistant
) -> str:
    slide = _slide_at(deck, index)
    return await assistant.suggest_improvements(
        slide.get("content") or {}, slide.get("type"), target
    )


async def customize_deck(
    db: AsyncSession, deck: Deck, investor: CustomizationTarget, assistant: DeckAIAssistant
) -> Deck:
    """Store investor-tailored content on every slide under the investor's type.

    The slides' own content is left as authored.
    """
    key = investor.type.value
    slides = []
    for slide in deck.slides or []:
        tailored = await assistant.customize_for_investor(slide.get("content") or {}, investor)
        updated = dict(slide)
        updated["customizations"] = {**(slide.get("customizations") or {}), key: tailored}
        slides.append(updated)

    deck.slides = slides
    deck.target_investors = [_dump(investor)]
    await db.flush()
    logger.info("deck_customized", deck_id=str(deck.id), investor_type=key)
    return deck
