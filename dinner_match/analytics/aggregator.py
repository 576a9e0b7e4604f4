from __future__ import annotations

from collections import Counter
from typing import Any


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    runs = [e for e in events if e["type"] == "score"]
    total = len(runs)

    # Average response time
    times = [r["response_time_ms"] for r in runs if "response_time_ms" in r]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Average candidates per run
    candidates = [r.get("total_candidates", 0) for r in runs]
    avg_candidates = round(sum(candidates) / total, 1) if total else 0.0

    # Tier distribution over every scored match
    tier_counter: Counter[str] = Counter()
    for r in runs:
        for tier in r.get("tiers", []) or []:
            tier_counter[tier or "none"] += 1
    tier_distribution = {
        name: tier_counter.get(name, 0)
        for name in ("excellent", "good", "fair", "none")
    }

    # Top locality keys
    loc_counter: Counter[str] = Counter()
    for r in runs:
        for key in r.get("localities", []) or []:
            loc_counter[key] += 1
    top_localities = [{"name": n, "count": c} for n, c in loc_counter.most_common(10)]

    return {
        "total_runs": total,
        "user_runs": sum(1 for r in runs if r.get("user_id")),
        "avg_response_time_ms": avg_time,
        "avg_candidates": avg_candidates,
        "tier_distribution": tier_distribution,
        "top_localities": top_localities,
    }
