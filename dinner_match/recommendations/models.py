from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class _TagLists(BaseModel):
    """Tag lists arrive as ``null`` from the store for rows never tagged."""

    @field_validator(
        "food_preferences",
        "personality_tags",
        "dietary_restrictions",
        mode="before",
        check_fields=False,
    )
    @classmethod
    def none_to_empty(cls, value):
        return [] if value is None else value


class UserProfile(_TagLists):
    food_preferences: list[str] = Field(default_factory=list)
    personality_tags: list[str] = Field(default_factory=list)
    dietary_restrictions: list[str] = Field(default_factory=list)
    location_latitude: float | None = None
    location_longitude: float | None = None

    @property
    def has_coordinates(self) -> bool:
        return self.location_latitude is not None and self.location_longitude is not None


class CandidateEvent(_TagLists):
    id: str = Field(..., min_length=1)
    food_preferences: list[str] = Field(default_factory=list)
    location: str | None = None
    personality_tags: list[str] = Field(default_factory=list)
    dietary_restrictions: list[str] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def int_id_to_str(cls, value):
        # bool is an int subclass but never a valid id
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class PastEvent(_TagLists):
    food_preferences: list[str] = Field(default_factory=list)
    location: str | None = None
    personality_tags: list[str] = Field(default_factory=list)


class ParticipationHistory(BaseModel):
    cuisine_frequency: dict[str, int] = Field(default_factory=dict)
    location_frequency: dict[str, int] = Field(default_factory=dict)


class MatchReasonType(str, Enum):
    food = "food"
    history = "history"
    location = "location"
    personality = "personality"
    dietary = "dietary"


class MatchReason(BaseModel):
    type: MatchReasonType
    label: str
    emoji: str


class MatchTier(str, Enum):
    excellent = "excellent"
    good = "good"
    fair = "fair"


class ScoreRequest(BaseModel):
    profile: UserProfile | None = None
    past_events: list[PastEvent] = Field(default_factory=list)
    candidates: list[CandidateEvent] = Field(default_factory=list)


class EventMatch(BaseModel):
    event_id: str
    score: int = Field(..., ge=0, le=99)
    tier: MatchTier | None = None
    reasons: list[MatchReason] = Field(default_factory=list)


class MatchResponse(BaseModel):
    scores: dict[str, int] = Field(default_factory=dict)
    reasons: dict[str, list[MatchReason]] = Field(default_factory=dict)
    matches: list[EventMatch] = Field(default_factory=list)
    total_candidates: int = 0


class ParticipationRequest(BaseModel):
    dinner_id: str = Field(..., min_length=1)


class ParticipationResponse(BaseModel):
    status: str
    history_version: int
