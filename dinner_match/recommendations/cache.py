from __future__ import annotations

import time

from ..config import DEFAULT_SERVICE_CONFIG
from .models import ParticipationHistory

_cache: dict[tuple[str, int], dict] = {}
_hits: int = 0
_misses: int = 0


def cache_get(
    user_id: str,
    version: int,
    ttl: float = DEFAULT_SERVICE_CONFIG.history_cache_ttl,
) -> ParticipationHistory | None:
    """Return the cached history for ``(user_id, version)`` if still fresh."""
    global _hits, _misses
    key = (user_id, version)
    entry = _cache.get(key)
    if entry and time.time() - entry["created_at"] < ttl:
        _hits += 1
        return entry["value"]
    if entry:
        del _cache[key]
    _misses += 1
    return None


def cache_set(user_id: str, version: int, value: ParticipationHistory) -> None:
    # Older versions of this user's history can never be hit again.
    for stale in [k for k in _cache if k[0] == user_id and k[1] != version]:
        del _cache[stale]
    _cache[(user_id, version)] = {"value": value, "created_at": time.time()}


def get_cache_stats() -> dict:
    total = _hits + _misses
    return {
        "size": len(_cache),
        "hits": _hits,
        "misses": _misses,
        "hit_rate": round(_hits / total * 100, 1) if total > 0 else 0.0,
    }


def clear_cache() -> None:
    global _hits, _misses
    _cache.clear()
    _hits = 0
    _misses = 0
