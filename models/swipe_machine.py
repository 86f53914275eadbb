"""
models/swipe_machine.py
═══════════════════════
SwipeCard — the decision state machine for one displayed candidate.

States
──────
  PRESENTED ──drag──▶ DECIDING ──release ≥ T──▶ RESOLVED ──dismiss──▶ DISMISSED
      ▲                  │
      └──release < T─────┘          like() / pass_() jump straight to RESOLVED

  • drag() only produces visual feedback (rotation / opacity); nothing is
    written while a card is DECIDING.
  • dismiss() is the single side-effect point: it awaits exactly one ledger
    write and only then marks the card DISMISSED. A failed write puts the
    card back in RESOLVED with its decision intact so the same write can be
    retried.
  • Every transition out of DISMISSED raises InvalidTransition, so repeated
    gesture-end events or double taps can never write twice.
"""

from __future__ import annotations

import enum
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from models.entities import Profile
from models.errors import InvalidTransition

T = TypeVar("T")

DEFAULT_THRESHOLD = 100.0

# Card feedback curve: offset → rotation / opacity
_MAX_DRAG = 200.0
_MAX_ROTATION_DEG = 25.0
_FADE_START = 150.0


class CardState(str, enum.Enum):
    PRESENTED = "presented"
    DECIDING = "deciding"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


class Decision(str, enum.Enum):
    LIKED = "liked"
    PASSED = "passed"

    @property
    def liked(self) -> bool:
        return self is Decision.LIKED


@dataclass(frozen=True)
class CardFeedback:
    offset: float
    rotation: float
    opacity: float
    leaning: Decision | None


def rotation_for(offset: float) -> float:
    clamped = max(-_MAX_DRAG, min(_MAX_DRAG, offset))
    return clamped / _MAX_DRAG * _MAX_ROTATION_DEG


def opacity_for(offset: float) -> float:
    distance = abs(offset)
    if distance <= _FADE_START:
        return 1.0
    if distance >= _MAX_DRAG:
        return 0.0
    return 1.0 - (distance - _FADE_START) / (_MAX_DRAG - _FADE_START)


def decision_for(offset: float, threshold: float) -> Decision | None:
    if offset >= threshold:
        return Decision.LIKED
    if offset <= -threshold:
        return Decision.PASSED
    return None


class SwipeCard:
    def __init__(self, candidate: Profile, threshold: float = DEFAULT_THRESHOLD) -> None:
        if threshold <= 0:
            raise ValueError("threshold must be positive")
        self.candidate = candidate
        self.threshold = threshold
        self.state = CardState.PRESENTED
        self.decision: Decision | None = None
        self.offset = 0.0
        self._committing = False

    def __repr__(self) -> str:
        return f"<SwipeCard {self.candidate.id} {self.state.value} decision={self.decision}>"

    @property
    def candidate_id(self) -> str:
        return self.candidate.id

    # ── gesture ───────────────────────────────────────────────────────────────

    def drag(self, offset: float) -> CardFeedback:
        self._require({CardState.PRESENTED, CardState.DECIDING}, "drag")
        self.state = CardState.DECIDING
        self.offset = float(offset)
        return self.feedback()

    def feedback(self) -> CardFeedback:
        return CardFeedback(
            offset=self.offset,
            rotation=rotation_for(self.offset),
            opacity=opacity_for(self.offset),
            leaning=decision_for(self.offset, self.threshold),
        )

    def release(self, offset: float | None = None) -> Decision | None:
        """End a drag. Returns the decision, or None when the card snaps back."""
        self._require({CardState.PRESENTED, CardState.DECIDING}, "release")
        if offset is not None:
            self.offset = float(offset)
        decision = decision_for(self.offset, self.threshold)
        if decision is None:
            self.state = CardState.PRESENTED
            self.offset = 0.0
            return None
        return self._resolve(decision, "release")

    def cancel(self) -> None:
        """Drop an in-progress drag without deciding (e.g. the session ended)."""
        if self.state is CardState.DECIDING:
            self.state = CardState.PRESENTED
            self.offset = 0.0

    # ── buttons ───────────────────────────────────────────────────────────────

    def like(self) -> Decision:
        return self._resolve(Decision.LIKED, "like")

    def pass_(self) -> Decision:
        return self._resolve(Decision.PASSED, "pass")

    def decide(self, liked: bool) -> Decision:
        return self.like() if liked else self.pass_()

    def _resolve(self, decision: Decision, action: str) -> Decision:
        self._require({CardState.PRESENTED, CardState.DECIDING}, action)
        self.decision = decision
        self.state = CardState.RESOLVED
        return decision

    # ── side effect ───────────────────────────────────────────────────────────

    async def dismiss(self, commit: Callable[[str, bool], Awaitable[T]]) -> T:
        """Run `commit(candidate_id, liked)` once and mark the card DISMISSED."""
        self._require({CardState.RESOLVED}, "dismiss")
        if self._committing:
            raise InvalidTransition(self.state.name, "dismiss")

        self._committing = True
        try:
            result = await commit(self.candidate_id, self.decision.liked)
        finally:
            self._committing = False
        self.state = CardState.DISMISSED
        return result

    def _require(self, allowed: set[CardState], action: str) -> None:
        if self.state not in allowed:
            raise InvalidTransition(self.state.name, action)
