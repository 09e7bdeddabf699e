"""Investor interaction tracking: an append-only event log per (deck, investor)."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pitchdeck.models.analytics import InvestorInteraction
from pitchdeck.models.base import utcnow
from pitchdeck.models.decks import Deck
from pitchdeck.models.enums import InteractionStatus, InterestLevel
from pitchdeck.modules.analytics.schemas import InvestorInteractionRequest
from pitchdeck.modules.decks.service import get_owned_deck

logger = structlog.get_logger()


class InvestorInteractionService:
    def __init__(self, db: AsyncSession, user_id: uuid.UUID) -> None:
        self.db = db
        self.user_id = user_id

    async def record_interaction(self, body: InvestorInteractionRequest) -> InvestorInteraction:
        """Append one interaction event, creating the record on first contact.

        Interest level and notes overwrite the stored values only when given.
        When duplicate records exist for the pair, the oldest one is updated.
        Raises LookupError if the deck is not the caller's.
        """
        await get_owned_deck(self.db, body.deck_id, self.user_id)

        # Concurrent first contacts can leave more than one row; the oldest wins
        result = await self.db.execute(
            select(InvestorInteraction)
            .where(
                InvestorInteraction.deck_id == body.deck_id,
                InvestorInteraction.investor_id == body.investor_id,
            )
            .order_by(InvestorInteraction.created_at, InvestorInteraction.id)
            .limit(1)
        )
        record = result.scalars().first()
        if record is None:
            record = InvestorInteraction(
                deck_id=body.deck_id,
                investor_id=body.investor_id,
                investor_name=body.investor_name,
                investor_type=body.investor_type,
                interactions=[],
                interest_level=InterestLevel.UNKNOWN,
                status=InteractionStatus.PENDING,
            )
            self.db.add(record)
            created = True
        else:
            created = False

        entry: dict[str, Any] = {
            "type": body.interaction_type.value,
            "timestamp": utcnow().isoformat(),
            "metadata": body.metadata or {},
        }
        # Reassign so the JSON column is flagged dirty
        record.interactions = [*(record.interactions or []), entry]

        if body.interest_level is not None:
            record.interest_level = body.interest_level
        if body.notes:
            record.notes = body.notes

        await self.db.flush()
        logger.info(
            "investor_interaction_recorded",
            interaction_id=str(record.id),
            deck_id=str(body.deck_id),
            interaction_type=body.interaction_type.value,
            created=created,
        )
        return record

    async def update_status(
        self,
        interaction_id: uuid.UUID,
        status: InteractionStatus,
        interest_level: InterestLevel | None = None,
        notes: str | None = None,
        follow_up_date: datetime | None = None,
    ) -> InvestorInteraction:
        """Set the pipeline status; optional fields overwrite only when given.

        Raises LookupError for an unknown interaction and PermissionError when
        its deck belongs to another user.
        """
        record = await self.db.get(InvestorInteraction, interaction_id)
        if record is None:
            raise LookupError(f"Interaction {interaction_id} not found")

        deck = await self.db.get(Deck, record.deck_id)
        if deck is None or deck.user_id != self.user_id:
            raise PermissionError("Not authorized")

        record.status = status
        if interest_level is not None:
            record.interest_level = interest_level
        if notes:
            record.notes = notes
        if follow_up_date is not None:
            record.follow_up_date = follow_up_date

        await self.db.flush()
        logger.info(
            "investor_interaction_status_updated",
            interaction_id=str(interaction_id),
            status=status.value,
        )
        return record


def to_interaction_result(record: InvestorInteraction) -> dict[str, Any]:
    return {
        "id": record.id,
        "investor_name": record.investor_name,
        "investor_type": record.investor_type,
        "interest_level": record.interest_level,
        "status": record.status,
        "follow_up_date": record.follow_up_date,
        "total_interactions": len(record.interactions or []),
    }
