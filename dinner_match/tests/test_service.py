from __future__ import annotations

import threading
import time
from datetime import datetime, timezone
from unittest.mock import patch

import pandas as pd

from dinner_match.recommendations import data_store
from dinner_match.recommendations.cache import clear_cache
from dinner_match.recommendations.models import (
    CandidateEvent,
    MatchReasonType,
    MatchTier,
    PastEvent,
    ScoreRequest,
    UserProfile,
)
from dinner_match.recommendations.service import get_user_matches, score_payload

NOW = datetime(2026, 10, 19, tzinfo=timezone.utc)


def _fresh():
    data_store.reset_store()
    clear_cache()


def test_user_matches_for_seeded_user():
    _fresh()
    response = get_user_matches("u1", now=NOW)
    assert response.scores == {"d5": 13, "d4": 95, "d6": 5}
    assert response.total_candidates == 3
    assert [m.event_id for m in response.matches] == ["d4", "d5", "d6"]
    assert [m.tier for m in response.matches] == [MatchTier.excellent, MatchTier.fair, MatchTier.fair]
    assert [r.type for r in response.reasons["d4"]] == [
        MatchReasonType.food,
        MatchReasonType.location,
        MatchReasonType.personality,
    ]


def test_half_points_round_up_for_seeded_user():
    _fresh()
    response = get_user_matches("u2", now=NOW)
    assert response.scores == {"d5": 68, "d4": 37, "d6": 0}
    assert response.matches[-1].tier is None
    assert response.reasons["d6"] == []
    assert [(r.type, r.label) for r in response.reasons["d4"]] == [
        (MatchReasonType.history, "川菜"),
        (MatchReasonType.location, "北京市"),
    ]


def test_user_without_profile_gets_no_scores():
    _fresh()
    response = get_user_matches("u3", now=NOW)
    assert response.scores == {}
    assert response.matches == []
    assert response.total_candidates == 3


def test_anonymous_user_short_circuits():
    _fresh()
    with patch("dinner_match.recommendations.data_store.get_open_dinners") as mock_open:
        response = get_user_matches(None, now=NOW)
    assert response.scores == {}
    assert response.total_candidates == 0
    mock_open.assert_not_called()


def test_new_participation_refreshes_history():
    _fresh()
    assert get_user_matches("u1", now=NOW).scores["d5"] == 13
    data_store.add_participation("u1", "d3")
    # 日料 now appears once in history against a top frequency of 2
    assert get_user_matches("u1", now=NOW).scores["d5"] == 26


@patch(
    "dinner_match.recommendations.data_store.get_profile",
    side_effect=RuntimeError("profile store unavailable"),
)
def test_profile_failure_degrades_to_empty(mock_profile):
    _fresh()
    response = get_user_matches("u1", now=NOW)
    assert response.scores == {}


@patch(
    "dinner_match.recommendations.data_store.get_participated_dinners",
    side_effect=RuntimeError("history store unavailable"),
)
def test_history_failure_scores_without_history(mock_history):
    _fresh()
    response = get_user_matches("u1", now=NOW)
    # food 35 + proximity 8 + personality 10 + permissive dietary 5
    assert response.scores["d4"] == 58


def test_score_payload_builds_history_from_past_events():
    request = ScoreRequest(
        profile=UserProfile(food_preferences=["川菜", "火锅"]),
        past_events=[PastEvent(food_preferences=["川菜"]) for _ in range(3)],
        candidates=[CandidateEvent(id="c1", food_preferences=["川菜"], location="")],
    )
    response = score_payload(request)
    assert response.scores == {"c1": 65}
    assert response.matches[0].tier == MatchTier.good


def test_score_payload_ties_keep_listing_order():
    request = ScoreRequest(
        profile=UserProfile(),
        candidates=[CandidateEvent(id="b"), CandidateEvent(id="a"), CandidateEvent(id="c")],
    )
    response = score_payload(request)
    assert [m.event_id for m in response.matches] == ["b", "a", "c"]


def test_reset_store_drops_cached_histories():
    _fresh()
    data_store.add_participation("u1", "d3")
    assert get_user_matches("u1", now=NOW).scores["d5"] == 26

    # Versions restart at 0 after a reset, so version 1 must not reuse the old history
    data_store.reset_store()
    data_store.add_participation("u1", "d6")
    assert get_user_matches("u1", now=NOW).scores["d5"] == 13


def test_concurrent_participations_are_all_recorded():
    _fresh()
    real_concat = pd.concat

    def slow_concat(*args, **kwargs):
        time.sleep(0.05)
        return real_concat(*args, **kwargs)

    data_store.get_participated_dinners("u1")  # load frames before racing
    with patch("dinner_match.recommendations.data_store.pd.concat", side_effect=slow_concat):
        threads = [
            threading.Thread(target=data_store.add_participation, args=("u1", dinner_id))
            for dinner_id in ("d3", "d5")
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

    assert data_store.get_history_version("u1") == 2
    assert len(data_store.get_participated_dinners("u1")) == 4


@patch(
    "dinner_match.recommendations.data_store.get_open_dinners",
    side_effect=RuntimeError("listing store unavailable"),
)
def test_listing_failure_returns_empty_response(mock_open):
    _fresh()
    response = get_user_matches("u1", now=NOW)
    assert response.scores == {}
    assert response.matches == []
    assert response.total_candidates == 0
