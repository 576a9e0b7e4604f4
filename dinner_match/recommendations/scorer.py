from __future__ import annotations

import logging
import math

from ..config import DEFAULT_SCORING_CONFIG, ScoringConfig
from .locality import locality_key
from .models import (
    CandidateEvent,
    MatchReason,
    MatchReasonType,
    ParticipationHistory,
    UserProfile,
)

logger = logging.getLogger(__name__)

_REASON_EMOJI = {
    MatchReasonType.food: "🍽️",
    MatchReasonType.history: "📊",
    MatchReasonType.location: "📍",
    MatchReasonType.personality: "🎭",
    MatchReasonType.dietary: "✅",
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _reason(kind: MatchReasonType, label: str) -> MatchReason:
    return MatchReason(type=kind, label=label, emoji=_REASON_EMOJI[kind])


def _score_candidate(
    profile: UserProfile,
    history: ParticipationHistory,
    candidate: CandidateEvent,
    config: ScoringConfig,
) -> tuple[int, list[MatchReason]]:
    """Compute the capped match score and reasons for a single candidate."""
    points = 0
    max_points = 0
    reasons: list[MatchReason] = []
    candidate_foods = candidate.food_preferences

    # 1. Food preference overlap
    max_points += config.food_weight
    if profile.food_preferences and candidate_foods:
        user_prefs = {p.lower() for p in profile.food_preferences}
        matched_foods = [p for p in candidate_foods if p.lower() in user_prefs]
        points += _round_half_up(len(matched_foods) / len(candidate_foods) * config.food_weight)
        if matched_foods:
            reasons.append(_reason(MatchReasonType.food, "、".join(matched_foods[:2])))

    # 2. Historical cuisine affinity
    max_points += config.history_weight
    cuisine_freq = history.cuisine_frequency
    if cuisine_freq and candidate_foods:
        max_freq = max(max(cuisine_freq.values()), 1)
        history_score = 0.0
        matched_history: list[str] = []
        for pref in candidate_foods:
            if cuisine_freq.get(pref):
                history_score += cuisine_freq[pref] / max_freq
                matched_history.append(pref)
        avg_history = history_score / len(candidate_foods)
        points += _round_half_up(avg_history * config.history_weight)
        if matched_history and not any(r.type == MatchReasonType.food for r in reasons):
            reasons.append(_reason(MatchReasonType.history, matched_history[0]))

    # 3. Locality affinity
    max_points += config.location_weight
    if candidate.location:
        key = locality_key(candidate.location, config)
        location_freq = history.location_frequency
        if location_freq.get(key):
            max_loc = max(max(location_freq.values()), 1)
            points += _round_half_up(location_freq[key] / max_loc * config.location_history_points)
            reasons.append(_reason(MatchReasonType.location, key))
        # Flat bonus: dinners carry no coordinates of their own.
        if profile.has_coordinates:
            points += config.proximity_points

    # 4. Personality tag overlap
    max_points += config.personality_weight
    if profile.personality_tags and candidate.personality_tags:
        user_tags = {t.lower() for t in profile.personality_tags}
        matched_tags = [t for t in candidate.personality_tags if t.lower() in user_tags]
        ratio = len(matched_tags) / len(candidate.personality_tags)
        points += _round_half_up(ratio * config.personality_weight)
        if matched_tags:
            reasons.append(_reason(MatchReasonType.personality, matched_tags[0]))

    # 5. Dietary compatibility
    max_points += config.dietary_weight
    if profile.dietary_restrictions and candidate.dietary_restrictions:
        user_restrictions = {r.lower() for r in profile.dietary_restrictions}
        if any(r.lower() in user_restrictions for r in candidate.dietary_restrictions):
            points += config.dietary_weight
            reasons.append(_reason(MatchReasonType.dietary, candidate.dietary_restrictions[0]))
    elif not profile.dietary_restrictions:
        points += config.dietary_permissive_points

    normalized = _round_half_up(points / max_points * 100) if max_points > 0 else 0
    return min(max(normalized, 0), config.score_cap), reasons[: config.max_reasons]


def score_with_reasons(
    profile: UserProfile | None,
    history: ParticipationHistory,
    candidates: list[CandidateEvent],
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> tuple[dict[str, int], dict[str, list[MatchReason]]]:
    """
    Score every candidate for one user and explain each score.

    Returns ``(scores, reasons)`` keyed by event id. Both maps are empty when
    ``profile`` is ``None``; otherwise every candidate gets exactly one entry
    in each. Candidates are scored independently and never reordered.
    """
    scores: dict[str, int] = {}
    reasons: dict[str, list[MatchReason]] = {}

    if profile is None:
        return scores, reasons

    for candidate in candidates:
        scores[candidate.id], reasons[candidate.id] = _score_candidate(
            profile, history, candidate, config
        )

    logger.debug("Scored %d candidate events", len(scores))
    return scores, reasons


def score(
    profile: UserProfile | None,
    history: ParticipationHistory,
    candidates: list[CandidateEvent],
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> dict[str, int]:
    """Return the event id -> match score (0..99) map for one user."""
    scores, _ = score_with_reasons(profile, history, candidates, config)
    return scores
