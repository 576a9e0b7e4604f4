from __future__ import annotations

from ..config import DEFAULT_SCORING_CONFIG, ScoringConfig


def locality_key(location: str, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> str:
    """
    Reduce a free-text address to a coarse locality key.

    Markers are tried one at a time in configured order (市, then 区, then 县);
    the first one found past the first character ends the key. Without a
    marker the key is the leading ``locality_fallback_length`` characters.

    >>> locality_key("北京市朝阳区建国路")
    '北京市'
    >>> locality_key("Main Street 123")
    'Main'
    """
    for marker in config.locality_markers:
        idx = location.find(marker)
        if idx > 0:
            return location[: idx + 1]
    return location[: config.locality_fallback_length]
