"""Deck analytics aggregation: a pure recompute from raw view events.

Every call scans the complete event set for one deck, O(events + slide views).
Nothing is maintained incrementally.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol


class ViewEventLike(Protocol):
    viewer_id: str
    duration: float
    timestamp: datetime
    slide_views: list[Any]


@dataclass
class _SlideAccumulator:
    views: int = 0
    total_time: float = 0.0
    interactions: int = 0


@dataclass
class DeckMetrics:
    total_views: int = 0
    unique_views: int = 0
    total_view_time: float = 0.0
    avg_view_time: float = 0.0
    slide_engagement: list[dict[str, Any]] = field(default_factory=list)
    first_viewed: datetime | None = None
    last_viewed: datetime | None = None


def compute_deck_metrics(events: Iterable[ViewEventLike]) -> DeckMetrics:
    """Summarise a deck's view events.

    Slide sub-records are grouped by slide index across all events. Drop-off
    rate is reported as 0 for every slide.
    """
    events = list(events)
    metrics = DeckMetrics()
    if not events:
        return metrics

    metrics.total_views = len(events)
    metrics.unique_views = len({e.viewer_id for e in events})
    metrics.total_view_time = float(sum(e.duration or 0 for e in events))
    metrics.avg_view_time = metrics.total_view_time / metrics.total_views

    slides: dict[int, _SlideAccumulator] = {}
    for event in events:
        for entry in event.slide_views or []:
            index = entry.get("slideIndex")
            if index is None:
                continue
            acc = slides.setdefault(int(index), _SlideAccumulator())
            acc.views += 1
            acc.total_time += float(entry.get("timeSpent") or 0)
            acc.interactions += len(entry.get("interactions") or [])

    metrics.slide_engagement = [
        {
            "slideIndex": index,
            "views": acc.views,
            "avgTimeSpent": acc.total_time / acc.views if acc.views else 0,
            "dropOffRate": 0,
            "interactions": acc.interactions,
        }
        for index, acc in sorted(slides.items())
    ]

    timestamps = [e.timestamp for e in events if e.timestamp is not None]
    if timestamps:
        metrics.first_viewed = min(timestamps)
        metrics.last_viewed = max(timestamps)

    return metrics


def merge_slide_views(slide_views: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Collapse repeated entries for one slide index into a single sub-record.

    Time spent is summed and interaction lists are concatenated, keeping
    first-seen order of indices.
    """
    merged: dict[int, dict[str, Any]] = {}
    for entry in slide_views:
        index = int(entry["slideIndex"])
        existing = merged.get(index)
        if existing is None:
            merged[index] = {
                "slideIndex": index,
                "timeSpent": float(entry.get("timeSpent") or 0),
                "interactions": list(entry.get("interactions") or []),
            }
        else:
            existing["timeSpent"] += float(entry.get("timeSpent") or 0)
            existing["interactions"].extend(entry.get("interactions") or [])
    return list(merged.values())


def seconds_to_minutes(seconds: float) -> float:
    return round(seconds / 60, 2)
