"""Enumerations shared by models, schemas and services."""

import enum


# ── Users ────────────────────────────────────────────────────────────────────


class UserRole(str, enum.Enum):
    FOUNDER = "founder"
    CO_FOUNDER = "co-founder"
    CEO = "ceo"
    CTO = "cto"
    CONSULTANT = "consultant"
    INVESTOR = "investor"
    OTHER = "other"


class SubscriptionPlan(str, enum.Enum):
    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"


# ── Decks ────────────────────────────────────────────────────────────────────


class DeckStatus(str, enum.Enum):
    DRAFT = "draft"
    REVIEW = "review"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class SlideType(str, enum.Enum):
    PROBLEM = "problem"
    SOLUTION = "solution"
    MARKET = "market"
    TRACTION = "traction"
    TEAM = "team"
    FINANCIALS = "financials"
    ASK = "ask"
    CUSTOM = "custom"


class FundingStage(str, enum.Enum):
    IDEA = "idea"
    PRE_SEED = "pre-seed"
    SEED = "seed"
    SERIES_A = "series-a"
    SERIES_B = "series-b"
    SERIES_C = "series-c"


# ── Investors ────────────────────────────────────────────────────────────────


class InvestorType(str, enum.Enum):
    VC = "vc"
    ANGEL = "angel"
    ACCELERATOR = "accelerator"
    CORPORATE = "corporate"
    FAMILY_OFFICE = "family_office"


class InvestorStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"


class PitchFormat(str, enum.Enum):
    PITCH_DECK = "pitch_deck"
    EXECUTIVE_SUMMARY = "executive_summary"
    VIDEO_PITCH = "video_pitch"
    LIVE_DEMO = "live_demo"


class PitchLength(str, enum.Enum):
    BRIEF = "brief"
    STANDARD = "standard"
    DETAILED = "detailed"


# ── Analytics ────────────────────────────────────────────────────────────────


class ViewerType(str, enum.Enum):
    ANONYMOUS = "anonymous"
    USER = "user"
    INVESTOR = "investor"


class InteractionType(str, enum.Enum):
    VIEW = "view"
    DOWNLOAD = "download"
    SHARE = "share"
    CONTACT = "contact"
    FOLLOW_UP = "follow_up"


class InterestLevel(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNKNOWN = "unknown"


class InteractionStatus(str, enum.Enum):
    PENDING = "pending"
    CONTACTED = "contacted"
    MEETING_SCHEDULED = "meeting_scheduled"
    PASSED = "passed"
    INVESTED = "invested"
