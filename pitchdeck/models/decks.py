"""Deck model. Slides are embedded documents stored in a JSON column."""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from pitchdeck.models.base import BaseModel, JSONDocument
from pitchdeck.models.enums import DeckStatus


def default_theme() -> dict[str, str]:
    return {"primaryColor": "#3B82F6", "secondaryColor": "#1F2937", "fontFamily": "Inter"}


class Deck(BaseModel):
    __tablename__ = "decks"
    __table_args__ = (
        Index("ix_decks_user_id_created_at", "user_id", "created_at"),
        Index("ix_decks_status", "status"),
        Index("ix_decks_share_token", "share_token", unique=True),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # {"name", "industry", "stage", "fundingGoal", ..., "financials": {...}}
    startup_info: Mapped[dict[str, Any]] = mapped_column(
        JSONDocument, nullable=False, default=dict
    )
    # [{"type", "title", "content", "order", "aiFeedback", "customizations"}, ...]
    slides: Mapped[list[Any]] = mapped_column(JSONDocument, nullable=False, default=list)

    template: Mapped[str] = mapped_column(String(100), nullable=False, default="default")
    theme: Mapped[dict[str, Any]] = mapped_column(
        JSONDocument, nullable=False, default=default_theme
    )
    status: Mapped[DeckStatus] = mapped_column(nullable=False, default=DeckStatus.DRAFT)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    share_token: Mapped[str | None] = mapped_column(String(64), nullable=True)

    # Counters bumped by the public share link; the full analytics live in deck_analytics
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_viewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    ai_generated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    ai_prompt: Mapped[str | None] = mapped_column(Text, nullable=True)
    target_investors: Mapped[list[Any]] = mapped_column(
        JSONDocument, nullable=False, default=list
    )
    tags: Mapped[list[Any]] = mapped_column(JSONDocument, nullable=False, default=list)

    @property
    def slide_count(self) -> int:
        return len(self.slides or [])

    def __repr__(self) -> str:
        return f"<Deck(id={self.id}, title={self.title!r})>"
