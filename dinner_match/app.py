from __future__ import annotations

from fastapi import FastAPI, HTTPException

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .recommendations import data_store
from .recommendations.cache import get_cache_stats
from .recommendations.models import (
    MatchResponse,
    ParticipationRequest,
    ParticipationResponse,
    ScoreRequest,
)
from .recommendations.service import get_user_matches, score_payload

app = FastAPI(title="Dinner Match API", version="1.0.0")


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/match-scores", response_model=MatchResponse)
def match_scores(body: ScoreRequest) -> MatchResponse:
    return score_payload(body)


# ── User endpoints ───────────────────────────────────────────────────────


@app.get("/users/{user_id}/match-scores", response_model=MatchResponse)
def user_match_scores(user_id: str) -> MatchResponse:
    return get_user_matches(user_id)


@app.post("/users/{user_id}/participations", response_model=ParticipationResponse)
def add_participation(user_id: str, body: ParticipationRequest) -> ParticipationResponse:
    try:
        version = data_store.add_participation(user_id, body.dinner_id)
    except data_store.DinnerNotFoundError:
        raise HTTPException(status_code=404, detail="Dinner not found")
    return ParticipationResponse(status="recorded", history_version=version)


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/analytics")
def analytics() -> dict:
    return compute_analytics(get_events())


@app.get("/cache/stats")
def cache_stats() -> dict:
    return get_cache_stats()
