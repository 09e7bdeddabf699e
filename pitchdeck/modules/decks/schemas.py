"""Deck API schemas, including the embedded slide document."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Annotated, Any

from pydantic import AfterValidator, Field, model_validator

from pitchdeck.models.enums import DeckStatus, FundingStage, InvestorType, SlideType
from pitchdeck.schemas.common import CamelModel

# ── Embedded slide documents ───────────────────────────────────────────────────


class AIFeedback(CamelModel):
    clarity: int | None = Field(default=None, ge=1, le=10)
    persuasiveness: int | None = Field(default=None, ge=1, le=10)
    suggestions: list[str] = Field(default_factory=list)
    tone: str | None = None


class SlideContent(CamelModel):
    """Known slide content fields. Anything else lands in ``extensions``."""

    headline: str | None = None
    key_points: list[str] = Field(default_factory=list)
    visual_description: str | None = None
    call_to_action: str | None = None
    body: str | None = None
    extensions: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_extensions(cls, data: Any) -> Any:
        if data is None:
            return {}
        if isinstance(data, str):
            return {"body": data}
        if not isinstance(data, dict):
            return data

        known: set[str] = set()
        for name, info in cls.model_fields.items():
            known.add(name)
            if info.alias:
                known.add(info.alias)

        data = dict(data)
        extensions = dict(data.pop("extensions", None) or {})
        for key in [k for k in data if k not in known]:
            extensions[key] = data.pop(key)
        data["extensions"] = extensions
        return data


class Slide(CamelModel):
    type: SlideType
    title: str = Field(min_length=1, max_length=300)
    content: SlideContent = Field(default_factory=SlideContent)
    order: int = Field(ge=0)
    ai_feedback: AIFeedback | None = None
    # investor type -> tailored content
    customizations: dict[str, Any] = Field(default_factory=dict)


def slide_to_document(slide: Slide) -> dict[str, Any]:
    """Storage form of a slide: camelCase keys, JSON-safe values."""
    return slide.model_dump(mode="json", by_alias=True, exclude_none=True)


# ── Startup info and targeting ─────────────────────────────────────────────────


class Financials(CamelModel):
    revenue: float | None = None
    growth: float | None = None
    burn_rate: float | None = None
    runway: float | None = None


class StartupInfo(CamelModel):
    name: str | None = Field(default=None, max_length=200)
    industry: str | None = Field(default=None, max_length=200)
    stage: FundingStage | None = None
    funding_goal: float | None = Field(default=None, ge=0)
    current_funding: float | None = Field(default=None, ge=0)
    team_size: int | None = Field(default=None, ge=0)
    founded_year: int | None = None
    problem: str | None = None
    solution: str | None = None
    market_size: str | None = None
    traction: str | None = None
    competitors: list[str] = Field(default_factory=list)
    business_model: str | None = None
    financials: Financials | None = None


class TargetInvestor(CamelModel):
    type: InvestorType | None = None
    focus: list[str] = Field(default_factory=list)
    stage: list[str] = Field(default_factory=list)
    location: str | None = None


class Theme(CamelModel):
    primary_color: str = "#3B82F6"
    secondary_color: str = "#1F2937"
    font_family: str = "Inter"


def _strip_title(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Title is required")
    return v


DeckTitle = Annotated[str, Field(max_length=300), AfterValidator(_strip_title)]


# ── Requests ───────────────────────────────────────────────────────────────────


class DeckCreateRequest(CamelModel):
    title: DeckTitle
    description: str | None = None
    startup_info: StartupInfo | None = None
    template: str | None = Field(default=None, max_length=100)
    target_investors: list[TargetInvestor] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class DeckUpdateRequest(CamelModel):
    title: DeckTitle | None = None
    description: str | None = None
    startup_info: StartupInfo | None = None
    slides: list[Slide] | None = None
    theme: Theme | None = None
    status: DeckStatus | None = None
    target_investors: list[TargetInvestor] | None = None
    tags: list[str] | None = None


class GenerateDeckRequest(CamelModel):
    startup_info: StartupInfo
    target_investors: list[TargetInvestor] = Field(default_factory=list)


class SlideSuggestionsRequest(CamelModel):
    target_investor: TargetInvestor | None = None


class CustomizationTarget(CamelModel):
    type: InvestorType
    focus: list[str] = Field(default_factory=list)
    stage: list[str] = Field(default_factory=list)
    location: str | None = None


class CustomizeDeckRequest(CamelModel):
    investor_profile: CustomizationTarget


# ── Responses ──────────────────────────────────────────────────────────────────


class DeckListItem(CamelModel):
    id: uuid.UUID
    title: str
    description: str | None = None
    status: DeckStatus
    slide_count: int
    view_count: int
    created_at: datetime
    updated_at: datetime


class DeckResponse(CamelModel):
    id: uuid.UUID
    title: str
    description: str | None = None
    startup_info: dict[str, Any]
    slides: list[Slide]
    template: str
    theme: dict[str, Any]
    status: DeckStatus
    is_public: bool
    target_investors: list[dict[str, Any]]
    tags: list[str]
    ai_generated: bool
    ai_prompt: str | None = None
    created_at: datetime
    updated_at: datetime


class PublicStartupInfo(CamelModel):
    name: str | None = None
    industry: str | None = None
    stage: str | None = None


class PublicDeckResponse(CamelModel):
    id: uuid.UUID
    title: str
    description: str | None = None
    startup_info: PublicStartupInfo
    slide_count: int
    theme: dict[str, Any]
    view_count: int
    last_viewed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class ShareDeckResponse(CamelModel):
    share_token: str
    share_url: str


class DeckMessageResponse(CamelModel):
    message: str
    deck: DeckResponse


class SlideAnalysisResponse(CamelModel):
    slide_index: int
    feedback: AIFeedback
    slide: Slide


class SlideSuggestionsResponse(CamelModel):
    slide_index: int
    suggestions: str
