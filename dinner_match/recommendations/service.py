from __future__ import annotations

import logging
import time
from datetime import datetime

from ..analytics.store import record_event
from ..config import DEFAULT_SERVICE_CONFIG, ServiceConfig
from . import data_store
from .cache import cache_get, cache_set
from .history import build_history
from .locality import locality_key
from .models import (
    CandidateEvent,
    EventMatch,
    MatchResponse,
    ParticipationHistory,
    ScoreRequest,
    UserProfile,
)
from .scorer import score_with_reasons
from .tiers import match_tier

logger = logging.getLogger(__name__)


def _load_profile(user_id: str) -> UserProfile | None:
    try:
        return data_store.get_profile(user_id)
    except Exception:
        logger.exception("Failed to load profile for user %s", user_id)
        return None


def _load_history(user_id: str, config: ServiceConfig) -> ParticipationHistory:
    version = data_store.get_history_version(user_id)
    cached = cache_get(user_id, version, ttl=config.history_cache_ttl)
    if cached is not None:
        return cached
    try:
        history = build_history(data_store.get_participated_dinners(user_id))
    except Exception:
        logger.exception("Failed to load participation history for user %s", user_id)
        return ParticipationHistory()
    cache_set(user_id, version, history)
    return history


def _build_response(
    profile: UserProfile | None,
    history: ParticipationHistory,
    candidates: list[CandidateEvent],
) -> MatchResponse:
    scores, reasons = score_with_reasons(profile, history, candidates)

    matches = [
        EventMatch(
            event_id=c.id,
            score=scores[c.id],
            tier=match_tier(scores[c.id]),
            reasons=reasons[c.id],
        )
        for c in candidates
        if c.id in scores
    ]
    # sorted() is stable: equal scores keep the source listing order
    matches = sorted(matches, key=lambda m: m.score, reverse=True)

    return MatchResponse(
        scores=scores,
        reasons=reasons,
        matches=matches,
        total_candidates=len(candidates),
    )


def _record_run(
    user_id: str | None,
    candidates: list[CandidateEvent],
    response: MatchResponse,
    start_time: float,
) -> None:
    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    record_event("score", {
        "user_id": user_id,
        "total_candidates": len(candidates),
        "scored": len(response.scores),
        "tiers": [m.tier.value if m.tier else None for m in response.matches],
        "localities": [locality_key(c.location) for c in candidates if c.location],
        "response_time_ms": elapsed_ms,
    })
    logger.debug(
        "Scored %d/%d dinners for user %s in %.1f ms",
        len(response.scores), len(candidates), user_id, elapsed_ms,
    )


def get_user_matches(
    user_id: str | None,
    now: datetime | None = None,
    config: ServiceConfig = DEFAULT_SERVICE_CONFIG,
) -> MatchResponse:
    """
    Score the open dinner listing for one user.

    Profile and history are loaded first; a failing source is logged and
    treated as not loaded. Anonymous users (``user_id is None``) get an
    empty response without touching the store.
    """
    start_time = time.time()

    if user_id is None:
        return MatchResponse()

    profile = _load_profile(user_id)
    history = _load_history(user_id, config)
    try:
        candidates = data_store.get_open_dinners(now)
    except Exception:
        logger.exception("Failed to load open dinners for user %s", user_id)
        return MatchResponse()

    response = _build_response(profile, history, candidates)
    _record_run(user_id, candidates, response, start_time)
    return response


def score_payload(request: ScoreRequest) -> MatchResponse:
    """Score a fully supplied profile, history and candidate list."""
    start_time = time.time()
    history = build_history(request.past_events)
    response = _build_response(request.profile, history, request.candidates)
    _record_run(None, request.candidates, response, start_time)
    return response
