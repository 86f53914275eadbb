"""
models/match_detector.py
════════════════════════
MatchDetector — turns a newly recorded like into at most one Match row.

Algorithm
─────────
  On a new like A→B:
    1. Take the per-pair lock for canonical {A, B}.
    2. If a Match for the pair already exists → NoMatch (idempotent).
    3. If the ledger holds B→A with liked=True → create the Match,
       notify listeners once → MatchCreated.
    4. Otherwise → NoMatch.

Atomicity
─────────
  Steps 2–3 run under a lock keyed by the canonical pair, so two sessions
  liking each other at the same moment serialise on that pair only; the
  second one to enter sees the first one's Match and returns NoMatch.
  Unrelated pairs never wait on each other.

  This is the single detection path. Callers do not re-query the ledger for
  a reverse like after recording; they read the outcome returned here.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from models.entities import Match, PairKey, canonical_pair
from utils.locks import KeyedLock
from utils.logger import logger

if TYPE_CHECKING:
    from models.ledger import SwipeLedger

MatchListener = Callable[[Match], None]


@dataclass(frozen=True)
class MatchCreated:
    match: Match

    @property
    def pair(self) -> PairKey:
        return self.match.pair


@dataclass(frozen=True)
class NoMatch:
    pair: PairKey


DetectionOutcome = Union[MatchCreated, NoMatch]


class MatchDetector:
    def __init__(self, ledger: "SwipeLedger") -> None:
        self.ledger = ledger
        self._matches: dict[PairKey, Match] = {}
        self._pair_locks = KeyedLock()
        self._listeners: list[MatchListener] = []

    # ── listeners ─────────────────────────────────────────────────────────────

    def add_listener(self, listener: MatchListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: MatchListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ── detection ─────────────────────────────────────────────────────────────

    async def on_like_recorded(self, swiper_id: str, candidate_id: str) -> DetectionOutcome:
        pair = canonical_pair(swiper_id, candidate_id)

        async with self._pair_locks.hold(pair):
            if pair in self._matches:
                return NoMatch(pair)

            if not await self.ledger.has_liked(candidate_id, swiper_id):
                return NoMatch(pair)

            match = await self._create(pair)

        logger.success(f"Match created: {match.user_a_id} ↔ {match.user_b_id}")
        self._notify(match)
        return MatchCreated(match)

    async def _create(self, pair: PairKey) -> Match:
        match = Match(user_a_id=pair[0], user_b_id=pair[1])
        self._matches[pair] = match
        return match

    def _notify(self, match: Match) -> None:
        for listener in list(self._listeners):
            try:
                listener(match)
            except Exception:
                # Notification delivery is best-effort; the Match row stands.
                logger.exception(f"Match listener failed for pair {match.pair}")

    # ── queries ───────────────────────────────────────────────────────────────

    async def get_match(self, user_x: str, user_y: str) -> Match | None:
        return self._matches.get(canonical_pair(user_x, user_y))

    async def matches_for(self, user_id: str) -> list[Match]:
        found = [m for m in self._matches.values() if user_id in m.pair]
        return sorted(found, key=lambda m: m.created_at)

    async def match_count(self, user_id: str) -> int:
        return sum(1 for m in self._matches.values() if user_id in m.pair)

    def __len__(self) -> int:
        return len(self._matches)
