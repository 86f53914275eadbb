"""
models/entities.py
──────────────────
Immutable domain records shared by every engine component.

  Profile      — owned by the Profile Store, read-only to the engine
  SwipeRecord  — one (swiper, candidate, liked) decision, owned by the ledger
  Match        — one mutual like, keyed by the canonical unordered pair
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

PairKey = tuple[str, str]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def canonical_pair(user_a: str, user_b: str) -> PairKey:
    """Order two user ids so {A, B} and {B, A} share one key."""
    if user_a == user_b:
        raise ValueError(f"A pair needs two distinct users, got '{user_a}' twice")
    return (user_a, user_b) if user_a < user_b else (user_b, user_a)


# ─────────────────────────────────────────────────────────────────────────────
#  Profile
# ─────────────────────────────────────────────────────────────────────────────

# Accepted profile ages, shared by onboarding and the API.
MIN_AGE = 18
MAX_AGE = 120

_TAG_FIELDS = ("favorite_cuisines", "dining_style", "dietary_restrictions", "food_preferences")


@dataclass(frozen=True)
class Profile:
    id: str
    full_name: str = ""
    email: str = ""
    age: int | None = None
    bio: str = ""
    location: str = ""
    avatar_url: str = ""
    favorite_cuisines: tuple[str, ...] = ()
    dining_style: tuple[str, ...] = ()
    dietary_restrictions: tuple[str, ...] = ()
    food_preferences: tuple[str, ...] = ()
    updated_at: datetime = field(default_factory=utcnow)

    @classmethod
    def from_fields(cls, user_id: str, fields: dict[str, Any]) -> "Profile":
        """Build a profile from loose form / CSV fields, ignoring unknown keys."""
        known = {
            k: v
            for k, v in fields.items()
            if k in cls.__dataclass_fields__ and k not in ("id", "updated_at")
        }
        for tag in _TAG_FIELDS:
            if tag in known:
                known[tag] = tuple(known[tag] or ())
        if known.get("age") in ("", None):
            known["age"] = None
        elif "age" in known:
            known["age"] = int(known["age"])
        for text in ("full_name", "email", "bio", "location", "avatar_url"):
            if text in known and known[text] is None:
                known[text] = ""
        return cls(id=user_id, **known)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for tag in _TAG_FIELDS:
            data[tag] = list(data[tag])
        data["updated_at"] = self.updated_at.isoformat()
        return data


# ─────────────────────────────────────────────────────────────────────────────
#  Ledger & match rows
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SwipeRecord:
    swiper_id: str
    candidate_id: str
    liked: bool
    created_at: datetime = field(default_factory=utcnow)

    @property
    def key(self) -> PairKey:
        """Directed key: (swiper, candidate). Not canonicalised."""
        return (self.swiper_id, self.candidate_id)


@dataclass(frozen=True)
class Match:
    user_a_id: str
    user_b_id: str
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        if not self.user_a_id < self.user_b_id:
            raise ValueError("Match users must be stored in canonical order (a < b)")

    @classmethod
    def for_pair(cls, user_x: str, user_y: str) -> "Match":
        a, b = canonical_pair(user_x, user_y)
        return cls(user_a_id=a, user_b_id=b)

    @property
    def pair(self) -> PairKey:
        return (self.user_a_id, self.user_b_id)

    def other(self, user_id: str) -> str:
        if user_id == self.user_a_id:
            return self.user_b_id
        if user_id == self.user_b_id:
            return self.user_a_id
        raise ValueError(f"User '{user_id}' is not part of match {self.pair}")
