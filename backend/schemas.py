"""
backend/schemas.py
──────────────────
Pydantic v2 request / response models for all FastAPI endpoints.

Sections
────────
  1. Profile models            — ProfileIn, ProfileOut
  2. Swipe & match models      — SwipeAction, SwipeResponse, MatchOut, MatchListResponse
  3. Session models            — DragRequest, ReleaseRequest, DecideRequest, SessionState
  4. Shared / util models      — HealthResponse, CandidateResponse
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from models.entities import MAX_AGE, MIN_AGE, Match, Profile
from models.session import SwipeSession


# ─────────────────────────────────────────────────────────────────────────────
#  1. Profile models
# ─────────────────────────────────────────────────────────────────────────────

class ProfileIn(BaseModel):
    """Body for PUT /api/profiles/{user_id}. Omitted fields are left unchanged."""
    email:                Optional[str] = None
    full_name:            Optional[str] = Field(None, max_length=120)
    age:                  Optional[int] = Field(None, ge=MIN_AGE, le=MAX_AGE)
    bio:                  Optional[str] = Field(None, max_length=1000)
    location:             Optional[str] = None
    avatar_url:           Optional[str] = None
    favorite_cuisines:    Optional[list[str]] = None
    dining_style:         Optional[list[str]] = None
    dietary_restrictions: Optional[list[str]] = None
    food_preferences:     Optional[list[str]] = None


class ProfileOut(BaseModel):
    id:                   str
    email:                str = ""
    full_name:            str = ""
    age:                  Optional[int] = None
    bio:                  str = ""
    location:             str = ""
    avatar_url:           str = ""
    favorite_cuisines:    list[str] = Field(default_factory=list)
    dining_style:         list[str] = Field(default_factory=list)
    dietary_restrictions: list[str] = Field(default_factory=list)
    food_preferences:     list[str] = Field(default_factory=list)
    updated_at:           str

    @classmethod
    def from_profile(cls, profile: Profile) -> "ProfileOut":
        return cls(**profile.to_dict())


# ─────────────────────────────────────────────────────────────────────────────
#  2. Swipe & match models
# ─────────────────────────────────────────────────────────────────────────────

class SwipeAction(BaseModel):
    """Body for POST /api/swipe."""
    swiper_id:    str = Field(..., min_length=1)
    candidate_id: str = Field(..., min_length=1)
    liked:        bool


class MatchOut(BaseModel):
    user_a_id:  str
    user_b_id:  str
    created_at: str

    @classmethod
    def from_match(cls, match: Match) -> "MatchOut":
        return cls(
            user_a_id=match.user_a_id,
            user_b_id=match.user_b_id,
            created_at=match.created_at.isoformat(),
        )


class SwipeResponse(BaseModel):
    status:       str   # "recorded"
    swiper_id:    str
    candidate_id: str
    liked:        bool
    timestamp:    str
    match:        Optional[MatchOut] = None


class MatchListResponse(BaseModel):
    user_id:       str
    total_matches: int
    matches:       list[MatchOut]


# ─────────────────────────────────────────────────────────────────────────────
#  3. Session models
# ─────────────────────────────────────────────────────────────────────────────

class DragRequest(BaseModel):
    offset: float = Field(..., description="Horizontal drag offset; positive = right")


class ReleaseRequest(BaseModel):
    offset: Optional[float] = Field(None, description="Final offset; defaults to the last drag")


class DecideRequest(BaseModel):
    liked: bool


class FeedbackOut(BaseModel):
    offset:   float
    rotation: float
    opacity:  float
    leaning:  Optional[str] = None   # "liked" | "passed" | None


class SessionState(BaseModel):
    """Snapshot of a swipe session plus the events emitted since the last call."""
    user_id:    str
    card_state: Optional[str] = None
    candidate:  Optional[ProfileOut] = None
    exhausted:  bool
    events:     list[dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def from_session(cls, session: SwipeSession) -> "SessionState":
        card = session.card
        return cls(
            user_id=session.user_id,
            card_state=card.state.value if card else None,
            candidate=ProfileOut.from_profile(card.candidate) if card else None,
            exhausted=session.exhausted,
            events=[e.to_dict() for e in session.drain_events()],
        )


# ─────────────────────────────────────────────────────────────────────────────
#  4. Shared / utility models
# ─────────────────────────────────────────────────────────────────────────────

class CandidateResponse(BaseModel):
    user_id:    str
    total:      int
    candidates: list[ProfileOut]


class HealthResponse(BaseModel):
    """Response for GET /health."""
    status:          str
    profiles_loaded: int
    swipes_recorded: int
    matches:         int
    engine_ready:    bool
    version:         str = "1.0.0"
