"""Tests for the pure deck analytics aggregation functions."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from pitchdeck.modules.analytics.aggregator import (
    compute_deck_metrics,
    merge_slide_views,
    seconds_to_minutes,
)

T0 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


def _event(viewer_id="anonymous", duration=0.0, slide_views=None, offset_minutes=0):
    return SimpleNamespace(
        viewer_id=viewer_id,
        duration=duration,
        timestamp=T0 + timedelta(minutes=offset_minutes),
        slide_views=slide_views or [],
    )


class TestComputeDeckMetrics:
    def test_no_events_yields_zeroed_metrics(self):
        metrics = compute_deck_metrics([])
        assert metrics.total_views == 0
        assert metrics.unique_views == 0
        assert metrics.total_view_time == 0
        assert metrics.avg_view_time == 0
        assert metrics.slide_engagement == []
        assert metrics.first_viewed is None
        assert metrics.last_viewed is None

    def test_slide_engagement_grouped_by_index(self):
        events = [
            _event(
                viewer_id="v1",
                duration=15,
                slide_views=[
                    {"slideIndex": 0, "timeSpent": 10, "interactions": []},
                    {"slideIndex": 1, "timeSpent": 5, "interactions": [{"type": "click"}]},
                ],
            ),
            _event(
                viewer_id="v2",
                duration=20,
                slide_views=[{"slideIndex": 0, "timeSpent": 20, "interactions": []}],
                offset_minutes=5,
            ),
        ]
        metrics = compute_deck_metrics(events)

        assert metrics.slide_engagement == [
            {
                "slideIndex": 0,
                "views": 2,
                "avgTimeSpent": 15,
                "dropOffRate": 0,
                "interactions": 0,
            },
            {
                "slideIndex": 1,
                "views": 1,
                "avgTimeSpent": 5,
                "dropOffRate": 0,
                "interactions": 1,
            },
        ]

    def test_totals_and_view_window(self):
        events = [
            _event("v1", 30, offset_minutes=10),
            _event("v1", 60, offset_minutes=0),
            _event("v2", 90, offset_minutes=20),
        ]
        metrics = compute_deck_metrics(events)

        assert metrics.total_views == 3
        assert metrics.unique_views == 2
        assert metrics.total_view_time == 180
        assert metrics.avg_view_time == 60
        assert metrics.first_viewed == T0
        assert metrics.last_viewed == T0 + timedelta(minutes=20)

    def test_slide_entries_without_index_are_ignored(self):
        events = [_event(slide_views=[{"timeSpent": 4}, {"slideIndex": 2, "timeSpent": 6}])]
        metrics = compute_deck_metrics(events)
        assert [s["slideIndex"] for s in metrics.slide_engagement] == [2]

    def test_missing_duration_counts_as_zero(self):
        metrics = compute_deck_metrics([_event(duration=None), _event(duration=12)])
        assert metrics.total_view_time == 12
        assert metrics.avg_view_time == 6

    def test_average_and_uniqueness_hold_for_random_event_sets(self):
        rng = random.Random(42)
        for _ in range(50):
            events = [
                _event(
                    viewer_id=f"viewer-{rng.randint(0, 5)}",
                    duration=rng.uniform(0, 600),
                    offset_minutes=rng.randint(0, 1000),
                )
                for _ in range(rng.randint(1, 25))
            ]
            metrics = compute_deck_metrics(events)
            assert metrics.unique_views <= metrics.total_views
            assert abs(
                metrics.avg_view_time - metrics.total_view_time / metrics.total_views
            ) < 1e-9


class TestMergeSlideViews:
    def test_repeated_index_is_collapsed(self):
        merged = merge_slide_views(
            [
                {"slideIndex": 1, "timeSpent": 3, "interactions": [{"type": "click"}]},
                {"slideIndex": 0, "timeSpent": 2, "interactions": []},
                {"slideIndex": 1, "timeSpent": 4, "interactions": [{"type": "hover"}]},
            ]
        )
        assert merged == [
            {
                "slideIndex": 1,
                "timeSpent": 7.0,
                "interactions": [{"type": "click"}, {"type": "hover"}],
            },
            {"slideIndex": 0, "timeSpent": 2.0, "interactions": []},
        ]

    def test_empty_input(self):
        assert merge_slide_views([]) == []


def test_seconds_to_minutes_rounds_to_two_places():
    assert seconds_to_minutes(90) == 1.5
    assert seconds_to_minutes(100) == 1.67
    assert seconds_to_minutes(0) == 0
