"""Deck templates API router. The catalogue is fixed."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from pitchdeck.auth.dependencies import get_current_user
from pitchdeck.schemas.auth import CurrentUser
from pitchdeck.schemas.common import CamelModel

router = APIRouter(prefix="/templates", tags=["templates"])


class DeckTemplate(CamelModel):
    id: str
    name: str
    description: str
    category: str
    # slide types in presentation order
    slides: list[str]


DECK_TEMPLATES: list[DeckTemplate] = [
    DeckTemplate(
        id="default",
        name="Default Template",
        description="Standard pitch deck template",
        category="general",
        slides=["problem", "solution", "market", "traction", "team", "financials", "ask"],
    ),
    DeckTemplate(
        id="saas",
        name="SaaS Template",
        description="Optimized for SaaS companies",
        category="saas",
        slides=[
            "problem", "solution", "market", "traction",
            "business-model", "team", "financials", "ask",
        ],
    ),
    DeckTemplate(
        id="fintech",
        name="Fintech Template",
        description="Designed for fintech startups",
        category="fintech",
        slides=[
            "problem", "solution", "market", "traction",
            "business-model", "team", "financials", "ask",
        ],
    ),
]


@router.get("", response_model=list[DeckTemplate])
async def list_templates(current_user: CurrentUser = Depends(get_current_user)):
    return DECK_TEMPLATES


@router.get("/{template_id}", response_model=DeckTemplate)
async def get_template(
    template_id: str,
    current_user: CurrentUser = Depends(get_current_user),
):
    for template in DECK_TEMPLATES:
        if template.id == template_id:
            return template
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")
