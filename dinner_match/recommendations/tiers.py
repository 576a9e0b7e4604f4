from __future__ import annotations

from .models import MatchTier

EXCELLENT_THRESHOLD = 70
GOOD_THRESHOLD = 40


def match_tier(score: int | None) -> MatchTier | None:
    """Badge tier shown on a dinner card; ``None`` means no badge."""
    if score is None or score <= 0:
        return None
    if score >= EXCELLENT_THRESHOLD:
        return MatchTier.excellent
    if score >= GOOD_THRESHOLD:
        return MatchTier.good
    return MatchTier.fair
