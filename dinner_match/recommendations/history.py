from __future__ import annotations

from collections import Counter
from typing import Iterable

from ..config import DEFAULT_SCORING_CONFIG, ScoringConfig
from .locality import locality_key
from .models import ParticipationHistory, PastEvent


def build_history(
    past_events: Iterable[PastEvent],
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> ParticipationHistory:
    """Fold a user's past dinners into cuisine and locality frequency maps."""
    cuisine_counter: Counter[str] = Counter()
    location_counter: Counter[str] = Counter()

    for event in past_events:
        for pref in event.food_preferences:
            cuisine_counter[pref] += 1
        if event.location:
            location_counter[locality_key(event.location, config)] += 1

    return ParticipationHistory(
        cuisine_frequency=dict(cuisine_counter),
        location_frequency=dict(location_counter),
    )
