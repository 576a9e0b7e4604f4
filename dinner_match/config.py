from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

_PACKAGE_DIR = Path(__file__).resolve().parent


@dataclass(frozen=True)
class ScoringConfig:
    food_weight: int = 35
    history_weight: int = 25
    location_weight: int = 20
    location_history_points: int = 12
    proximity_points: int = 8
    personality_weight: int = 10
    dietary_weight: int = 10
    dietary_permissive_points: int = 5
    score_cap: int = 99
    max_reasons: int = 3
    locality_markers: tuple[str, ...] = ("市", "区", "县")
    locality_fallback_length: int = 4


@dataclass(frozen=True)
class ServiceConfig:
    data_dir: Path = Path(os.getenv("DINNER_MATCH_DATA_DIR", str(_PACKAGE_DIR / "data")))
    history_cache_ttl: float = float(os.getenv("HISTORY_CACHE_TTL", "300"))
    analytics_max_events: int = int(os.getenv("ANALYTICS_MAX_EVENTS", "10000"))


DEFAULT_SCORING_CONFIG = ScoringConfig()
DEFAULT_SERVICE_CONFIG = ServiceConfig()
