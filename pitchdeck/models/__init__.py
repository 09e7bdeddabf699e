"""SQLAlchemy models package. Importing it registers every model on Base.metadata."""

from pitchdeck.models.analytics import DeckAnalytics, InvestorInteraction, ViewEvent
from pitchdeck.models.base import BaseModel, ModelMixin, TimestampedModel
from pitchdeck.models.core import User
from pitchdeck.models.decks import Deck
from pitchdeck.models.investors import InvestorProfile

__all__ = [
    "BaseModel",
    "Deck",
    "DeckAnalytics",
    "InvestorInteraction",
    "InvestorProfile",
    "ModelMixin",
    "TimestampedModel",
    "User",
    "ViewEvent",
]
