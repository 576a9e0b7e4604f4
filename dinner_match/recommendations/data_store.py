"""
In-process stand-in for the hosted dinner store.

Profiles, dinners and participations are seeded from CSV files in the
configured data directory and queried with the same shapes the app uses
against the real backend.
"""
from __future__ import annotations

import threading
from datetime import datetime, timezone
from pathlib import Path

import pandas as pd

from ..config import DEFAULT_SERVICE_CONFIG
from .cache import clear_cache
from .models import CandidateEvent, PastEvent, UserProfile

_TAG_COLUMNS = ["food_preferences", "personality_tags", "dietary_restrictions"]
_ID_COLUMNS = {"id": str, "user_id": str, "dinner_id": str, "created_by": str}

_data_dir: Path = DEFAULT_SERVICE_CONFIG.data_dir
_profiles: pd.DataFrame | None = None
_dinners: pd.DataFrame | None = None
_participants: pd.DataFrame | None = None
_versions: dict[str, int] = {}
# Guards lazy loading and every write to the frames and versions.
_lock = threading.RLock()


class DinnerNotFoundError(LookupError):
    """Raised when a participation references a dinner that does not exist."""


def _split_tags(value: object) -> list[str]:
    if not isinstance(value, str):
        return []
    return [t.strip() for t in value.split(",") if t.strip()]


def _read_csv(name: str) -> pd.DataFrame:
    return pd.read_csv(_data_dir / name, dtype=_ID_COLUMNS)


def _load_profiles() -> pd.DataFrame:
    df = _read_csv("profiles.csv")
    for col in _TAG_COLUMNS:
        df[col] = df[col].apply(_split_tags)
    return df.set_index("user_id", drop=False)


def _load_dinners() -> pd.DataFrame:
    df = _read_csv("dinners.csv")
    for col in _TAG_COLUMNS:
        df[col] = df[col].apply(_split_tags)
    df["location"] = df["location"].fillna("").astype(str)
    df["dinner_time"] = pd.to_datetime(df["dinner_time"], utc=True)
    return df


def _frames() -> tuple[pd.DataFrame, pd.DataFrame, pd.DataFrame]:
    global _profiles, _dinners, _participants
    with _lock:
        if _profiles is None:
            _profiles = _load_profiles()
        if _dinners is None:
            _dinners = _load_dinners()
        if _participants is None:
            _participants = _read_csv("participants.csv")
        return _profiles, _dinners, _participants


def configure(data_dir: Path) -> None:
    """Point the store at another seed directory and drop loaded state."""
    global _data_dir
    with _lock:
        _data_dir = Path(data_dir)
        reset_store()


def reset_store() -> None:
    """Drop loaded state. Versions restart at 0, so cached histories go too."""
    global _profiles, _dinners, _participants
    with _lock:
        _profiles = None
        _dinners = None
        _participants = None
        _versions.clear()
        clear_cache()


def get_profile(user_id: str) -> UserProfile | None:
    """Return the user's profile, or ``None`` when they have not created one."""
    profiles, _, _ = _frames()
    if user_id not in profiles.index:
        return None
    row = profiles.loc[user_id]
    return UserProfile(
        food_preferences=row["food_preferences"],
        personality_tags=row["personality_tags"],
        dietary_restrictions=row["dietary_restrictions"],
        location_latitude=float(row["location_latitude"]) if pd.notna(row["location_latitude"]) else None,
        location_longitude=float(row["location_longitude"]) if pd.notna(row["location_longitude"]) else None,
    )


def get_participated_dinners(user_id: str) -> list[PastEvent]:
    """Every dinner the user joined or organised, each listed once."""
    _, dinners, participants = _frames()
    joined = set(participants.loc[participants["user_id"] == user_id, "dinner_id"])
    mask = dinners["id"].isin(joined) | (dinners["created_by"] == user_id)
    return [
        PastEvent(
            food_preferences=row["food_preferences"],
            location=row["location"],
            personality_tags=row["personality_tags"],
        )
        for _, row in dinners.loc[mask].iterrows()
    ]


def get_open_dinners(now: datetime | None = None) -> list[CandidateEvent]:
    """Dinners starting after ``now``, earliest first."""
    _, dinners, _ = _frames()
    cutoff = pd.Timestamp(now or datetime.now(timezone.utc))
    if cutoff.tzinfo is None:
        cutoff = cutoff.tz_localize("UTC")
    upcoming = dinners.loc[dinners["dinner_time"] > cutoff]
    upcoming = upcoming.sort_values("dinner_time", kind="stable")
    return [
        CandidateEvent(
            id=row["id"],
            food_preferences=row["food_preferences"],
            location=row["location"],
            personality_tags=row["personality_tags"],
            dietary_restrictions=row["dietary_restrictions"],
        )
        for _, row in upcoming.iterrows()
    ]


def get_history_version(user_id: str) -> int:
    return _versions.get(user_id, 0)


def add_participation(user_id: str, dinner_id: str) -> int:
    """Record that ``user_id`` joined ``dinner_id``; returns the new history version."""
    global _participants
    with _lock:
        _, dinners, participants = _frames()
        if not (dinners["id"] == dinner_id).any():
            raise DinnerNotFoundError(dinner_id)
        _participants = pd.concat(
            [participants, pd.DataFrame([{"dinner_id": dinner_id, "user_id": user_id}])],
            ignore_index=True,
        )
        _versions[user_id] = get_history_version(user_id) + 1
        return _versions[user_id]
