"""Decks API router: CRUD, sharing, and AI-assisted editing."""

from __future__ import annotations

import uuid

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from pitchdeck.auth.dependencies import get_current_user
from pitchdeck.core.database import get_db
from pitchdeck.models.decks import Deck
from pitchdeck.modules.decks import service
from pitchdeck.modules.decks.schemas import (
    CustomizeDeckRequest,
    DeckCreateRequest,
    DeckListItem,
    DeckMessageResponse,
    DeckResponse,
    DeckUpdateRequest,
    GenerateDeckRequest,
    PublicDeckResponse,
    ShareDeckResponse,
    SlideAnalysisResponse,
    SlideSuggestionsRequest,
    SlideSuggestionsResponse,
)
from pitchdeck.schemas.auth import CurrentUser
from pitchdeck.schemas.common import MessageResponse
from pitchdeck.services.content_generator import ContentGenerationError
from pitchdeck.services.deck_ai import DeckAIAssistant, get_deck_assistant

logger = structlog.get_logger()

router = APIRouter(prefix="/decks", tags=["decks"])


async def _owned_deck(db: AsyncSession, deck_id: uuid.UUID, user: CurrentUser) -> Deck:
    try:
        return await service.get_owned_deck(db, deck_id, user.user_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


# ── Public share link ──────────────────────────────────────────────────────────


@router.get("/shared/{token}", response_model=PublicDeckResponse)
async def get_shared_deck(token: str, db: AsyncSession = Depends(get_db)):
    """Public view of a shared deck. No authentication."""
    try:
        deck = await service.open_shared_deck(db, token)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    await db.commit()
    info = deck.startup_info or {}
    return PublicDeckResponse(
        id=deck.id,
        title=deck.title,
        description=deck.description,
        startup_info={
            "name": info.get("name"),
            "industry": info.get("industry"),
            "stage": info.get("stage"),
        },
        slide_count=deck.slide_count,
        theme=deck.theme,
        view_count=deck.view_count,
        last_viewed_at=deck.last_viewed_at,
        created_at=deck.created_at,
        updated_at=deck.updated_at,
    )


# ── CRUD ───────────────────────────────────────────────────────────────────────


@router.get("", response_model=list[DeckListItem])
async def list_decks(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await service.list_decks(db, current_user.user_id)


@router.post("", response_model=DeckResponse, status_code=status.HTTP_201_CREATED)
async def create_deck(
    body: DeckCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    deck = await service.create_deck(db, current_user.user_id, body)
    await db.commit()
    return deck


@router.get("/{deck_id}", response_model=DeckResponse)
async def get_deck(
    deck_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _owned_deck(db, deck_id, current_user)


@router.put("/{deck_id}", response_model=DeckResponse)
async def update_deck(
    deck_id: uuid.UUID,
    body: DeckUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    deck = await _owned_deck(db, deck_id, current_user)
    deck = await service.update_deck(db, deck, body)
    await db.commit()
    return deck


@router.delete("/{deck_id}", response_model=MessageResponse)
async def delete_deck(
    deck_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    deck = await _owned_deck(db, deck_id, current_user)
    await service.delete_deck(db, deck)
    await db.commit()
    return MessageResponse(message="Deck deleted successfully")


@router.post(
    "/{deck_id}/duplicate",
    response_model=DeckResponse,
    status_code=status.HTTP_201_CREATED,
)
async def duplicate_deck(
    deck_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    deck = await _owned_deck(db, deck_id, current_user)
    copy = await service.duplicate_deck(db, deck)
    await db.commit()
    return copy


@router.post("/{deck_id}/share", response_model=ShareDeckResponse)
async def share_deck(
    deck_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    deck = await _owned_deck(db, deck_id, current_user)
    token = await service.share_deck(db, deck)
    await db.commit()
    return ShareDeckResponse(share_token=token, share_url=service.share_url(token))


# ── AI-assisted editing ────────────────────────────────────────────────────────


@router.post("/{deck_id}/generate", response_model=DeckMessageResponse)
async def generate_deck(
    deck_id: uuid.UUID,
    body: GenerateDeckRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    assistant: DeckAIAssistant = Depends(get_deck_assistant),
):
    """Replace the deck's slides with model-generated content."""
    deck = await _owned_deck(db, deck_id, current_user)
    try:
        deck = await service.generate_deck(db, deck, body, assistant)
    except ContentGenerationError as exc:
        logger.error("deck_generation_failed", deck_id=str(deck_id), error=str(exc))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate deck content",
        )
    await db.commit()
    return {"message": "Deck generated successfully", "deck": deck}


@router.post("/{deck_id}/slides/{slide_index}/analyze", response_model=SlideAnalysisResponse)
async def analyze_slide(
    deck_id: uuid.UUID,
    slide_index: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    assistant: DeckAIAssistant = Depends(get_deck_assistant),
):
    deck = await _owned_deck(db, deck_id, current_user)
    try:
        feedback, slide = await service.analyze_slide(db, deck, slide_index, assistant)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    await db.commit()
    return {"slide_index": slide_index, "feedback": feedback, "slide": slide}


@router.post(
    "/{deck_id}/slides/{slide_index}/suggestions",
    response_model=SlideSuggestionsResponse,
)
async def slide_suggestions(
    deck_id: uuid.UUID,
    slide_index: int,
    body: SlideSuggestionsRequest | None = None,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    assistant: DeckAIAssistant = Depends(get_deck_assistant),
):
    deck = await _owned_deck(db, deck_id, current_user)
    target = body.target_investor if body else None
    try:
        suggestions = await service.slide_suggestions(deck, slide_index, target, assistant)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return {"slide_index": slide_index, "suggestions": suggestions}


@router.post("/{deck_id}/customize", response_model=DeckMessageResponse)
async def customize_deck(
    deck_id: uuid.UUID,
    body: CustomizeDeckRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    assistant: DeckAIAssistant = Depends(get_deck_assistant),
):
    deck = await _owned_deck(db, deck_id, current_user)
    deck = await service.customize_deck(db, deck, body.investor_profile, assistant)
    await db.commit()
    return {"message": "Deck customized successfully", "deck": deck}
