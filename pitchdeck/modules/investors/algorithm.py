"""Investor matching: a hard filter followed by a fixed additive score.

Weights: stage 30, sector 25, geography 20, funding amount 25 (max 100).
Every supplied criterion is also a filter, so among returned profiles the
score only separates them by which criteria were supplied.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Protocol

from pitchdeck.models.enums import InvestorStatus, InvestorType

STAGE_WEIGHT = 30
SECTOR_WEIGHT = 25
GEOGRAPHY_WEIGHT = 20
FUNDING_WEIGHT = 25


class MatchableProfile(Protocol):
    type: InvestorType
    status: InvestorStatus
    preferred_stages: list[Any]
    preferred_sectors: list[Any]
    preferred_geographies: list[Any]
    min_investment: Decimal | None
    max_investment: Decimal | None


@dataclass(frozen=True)
class MatchCriteria:
    stage: str | None = None
    sector: str | None = None
    geography: str | None = None
    # 0 and None both mean "not supplied"
    funding_amount: int | None = None
    investor_type: InvestorType | None = None

    def __post_init__(self) -> None:
        if not self.funding_amount:
            object.__setattr__(self, "funding_amount", None)
        for name in ("stage", "sector", "geography"):
            if getattr(self, name) == "":
                object.__setattr__(self, name, None)


def _in_range(amount: int, low: Decimal | None, high: Decimal | None) -> bool:
    return low is not None and high is not None and low <= amount <= high


class InvestorMatcher:
    """Deterministic filter and score over investor profiles. No I/O."""

    def __init__(self, criteria: MatchCriteria) -> None:
        self.criteria = criteria

    def passes_filters(self, profile: MatchableProfile) -> bool:
        c = self.criteria
        if profile.status != InvestorStatus.ACTIVE:
            return False
        if c.investor_type is not None and profile.type != c.investor_type:
            return False
        if c.stage is not None and c.stage not in (profile.preferred_stages or []):
            return False
        if c.sector is not None and c.sector not in (profile.preferred_sectors or []):
            return False
        if c.geography is not None and c.geography not in (profile.preferred_geographies or []):
            return False
        if c.funding_amount is not None and not _in_range(
            c.funding_amount, profile.min_investment, profile.max_investment
        ):
            return False
        return True

    def score(self, profile: MatchableProfile) -> int:
        c = self.criteria
        score = 0
        if c.stage is not None and c.stage in (profile.preferred_stages or []):
            score += STAGE_WEIGHT
        if c.sector is not None and c.sector in (profile.preferred_sectors or []):
            score += SECTOR_WEIGHT
        if c.geography is not None and c.geography in (profile.preferred_geographies or []):
            score += GEOGRAPHY_WEIGHT
        # Both bounds must be set and non-zero to earn the amount credit
        if (
            c.funding_amount is not None
            and profile.min_investment
            and profile.max_investment
            and profile.min_investment <= c.funding_amount <= profile.max_investment
        ):
            score += FUNDING_WEIGHT
        return score

    def rank(self, profiles: list[Any]) -> list[tuple[Any, int]]:
        """Filter, score and sort by descending score.

        The sort is stable, so equal scores keep the input order.
        """
        scored = [(p, self.score(p)) for p in profiles if self.passes_filters(p)]
        scored.sort(key=lambda pair: pair[1], reverse=True)
        return scored
