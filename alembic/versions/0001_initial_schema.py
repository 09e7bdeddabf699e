"""initial_schema: users, decks, investor profiles, deck analytics

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-12 09:30:00.000000

"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

from pitchdeck.models.enums import (
    DeckStatus,
    InteractionStatus,
    InterestLevel,
    InvestorStatus,
    InvestorType,
    PitchFormat,
    PitchLength,
    SubscriptionPlan,
    UserRole,
    ViewerType,
)

revision: str = "0001_initial_schema"
down_revision: str | None = None
branch_labels = None
depends_on = None

_ENUMS = {
    "userrole": UserRole,
    "subscriptionplan": SubscriptionPlan,
    "deckstatus": DeckStatus,
    "investortype": InvestorType,
    "investorstatus": InvestorStatus,
    "pitchformat": PitchFormat,
    "pitchlength": PitchLength,
    "viewertype": ViewerType,
    "interestlevel": InterestLevel,
    "interactionstatus": InteractionStatus,
}


def _enum(name: str) -> sa.Enum:
    # Values are stored by member name, matching the ORM mapping
    return sa.Enum(*[m.name for m in _ENUMS[name]], name=name)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _json(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(name, postgresql.JSONB(), nullable=nullable)


def upgrade() -> None:
    # ── users ─────────────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.String(200), nullable=False),
        sa.Column("company_name", sa.String(200), nullable=False),
        sa.Column("role", _enum("userrole"), nullable=False),
        sa.Column("avatar", sa.String(500), nullable=False, server_default=""),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("subscription_plan", _enum("subscriptionplan"), nullable=False),
        sa.Column("subscription_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("subscription_end", sa.DateTime(timezone=True), nullable=True),
        _json("preferences"),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # ── decks ─────────────────────────────────────────────────────────────────
    op.create_table(
        "decks",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _json("startup_info"),
        _json("slides"),
        sa.Column("template", sa.String(100), nullable=False, server_default="default"),
        _json("theme"),
        sa.Column("status", _enum("deckstatus"), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("share_token", sa.String(64), nullable=True),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_viewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ai_generated", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("ai_prompt", sa.Text(), nullable=True),
        _json("target_investors"),
        _json("tags"),
        *_timestamps(),
    )
    op.create_index("ix_decks_user_id_created_at", "decks", ["user_id", "created_at"])
    op.create_index("ix_decks_status", "decks", ["status"])
    op.create_index("ix_decks_share_token", "decks", ["share_token"], unique=True)

    # ── investor_profiles ─────────────────────────────────────────────────────
    op.create_table(
        "investor_profiles",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("firm", sa.String(200), nullable=True),
        sa.Column("title", sa.String(200), nullable=True),
        sa.Column("type", _enum("investortype"), nullable=False),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("linkedin", sa.String(500), nullable=True),
        sa.Column("website", sa.String(500), nullable=True),
        _json("location"),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("min_investment", sa.Numeric(19, 2), nullable=True),
        sa.Column("max_investment", sa.Numeric(19, 2), nullable=True),
        _json("preferred_stages"),
        _json("preferred_sectors"),
        _json("preferred_geographies"),
        sa.Column("investment_thesis", sa.Text(), nullable=True),
        _json("portfolio_companies"),
        _json("exit_preferences"),
        sa.Column("preferred_format", _enum("pitchformat"), nullable=False),
        sa.Column("preferred_length", _enum("pitchlength"), nullable=False),
        _json("key_focus_areas"),
        _json("deal_breakers"),
        _json("questions_to_prepare"),
        _json("tags"),
        sa.Column("status", _enum("investorstatus"), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("last_contact", sa.DateTime(timezone=True), nullable=True),
        sa.Column("next_follow_up", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index(
        "ix_investor_profiles_user_id_type", "investor_profiles", ["user_id", "type"]
    )
    op.create_index("ix_investor_profiles_status", "investor_profiles", ["status"])
    op.create_index(
        "ix_investor_profiles_investment_range",
        "investor_profiles",
        ["min_investment", "max_investment"],
    )

    # ── view_events (append-only, deck_id is not a foreign key) ───────────────
    op.create_table(
        "view_events",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("deck_id", sa.Uuid(), nullable=False),
        sa.Column("viewer_id", sa.String(200), nullable=False, server_default="anonymous"),
        sa.Column("viewer_type", _enum("viewertype"), nullable=False),
        sa.Column("session_id", sa.String(200), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("duration", sa.Float(), nullable=False, server_default="0"),
        _json("slide_views"),
        sa.Column("user_agent", sa.String(500), nullable=True),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.Column("referrer", sa.String(1000), nullable=True),
        _json("location", nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_view_events_deck_id_timestamp", "view_events", ["deck_id", "timestamp"])
    op.create_index("ix_view_events_session_id", "view_events", ["session_id"])
    op.create_index("ix_view_events_viewer_id", "view_events", ["viewer_id"])

    # ── deck_analytics ────────────────────────────────────────────────────────
    op.create_table(
        "deck_analytics",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("deck_id", sa.Uuid(), nullable=False),
        sa.Column("total_views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("unique_views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_view_time", sa.Float(), nullable=False, server_default="0"),
        sa.Column("avg_view_time", sa.Float(), nullable=False, server_default="0"),
        _json("slide_engagement"),
        _json("viewer_demographics"),
        _json("engagement_metrics"),
        sa.Column("first_viewed", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_viewed", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_deck_analytics_deck_id", "deck_analytics", ["deck_id"], unique=True)
    op.create_index("ix_deck_analytics_total_views", "deck_analytics", ["total_views"])

    # ── investor_interactions ─────────────────────────────────────────────────
    op.create_table(
        "investor_interactions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("deck_id", sa.Uuid(), nullable=False),
        sa.Column("investor_id", sa.String(200), nullable=False),
        sa.Column("investor_name", sa.String(200), nullable=True),
        sa.Column("investor_type", _enum("investortype"), nullable=False),
        _json("interactions"),
        sa.Column("interest_level", _enum("interestlevel"), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("follow_up_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", _enum("interactionstatus"), nullable=False),
        *_timestamps(),
    )
    op.create_index(
        "ix_investor_interactions_deck_investor",
        "investor_interactions",
        ["deck_id", "investor_id"],
    )
    op.create_index("ix_investor_interactions_status", "investor_interactions", ["status"])


def downgrade() -> None:
    op.drop_table("investor_interactions")
    op.drop_table("deck_analytics")
    op.drop_table("view_events")
    op.drop_table("investor_profiles")
    op.drop_table("decks")
    op.drop_table("users")
    for name in _ENUMS:
        sa.Enum(name=name).drop(op.get_bind(), checkfirst=True)
