"""
models/session.py
═════════════════
SwipeSession — one user's browsing session over the Candidate Queue.

Owns the transient QueueCursor and the single active SwipeCard, and turns
engine activity into UI events:

  CandidatePresented(profile)      a new card is on top
  DecisionMade(candidate_id, liked) the ledger accepted the card's decision
  MatchFound(other_user_id)        a mutual like involving this user
  QueueExhausted                   nothing left; refresh() re-fetches
  TransientFailure(candidate_id)   the write failed; card kept, retry() it

Ordering
────────
  Decisions commit strictly in presentation order: the next card is only
  created after the previous card's ledger write finished, and every commit
  runs under the session lock.

Error recovery
──────────────
  DuplicatePair      → treated as already dismissed, cursor advances
  ProfileNotFound    → stale candidate skipped while presenting
  StoreUnavailable   → TransientFailure event, card stays RESOLVED, re-raised
"""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass, field
from typing import Any, ClassVar

from models.candidate_queue import CandidateQueue
from models.entities import Match, Profile
from models.errors import InvalidTransition, ProfileNotFound, StoreUnavailable
from models.ledger import Ack, RecordResult, SwipeLedger
from models.profile_store import InMemoryProfileStore
from models.swipe_machine import DEFAULT_THRESHOLD, CardFeedback, CardState, SwipeCard
from utils.logger import user_logger


# ─────────────────────────────────────────────────────────────────────────────
#  Engine → UI events
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SessionEvent:
    kind: ClassVar[str] = "event"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind}


@dataclass(frozen=True)
class CandidatePresented(SessionEvent):
    kind: ClassVar[str] = "candidate_presented"
    profile: Profile = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "profile": self.profile.to_dict()}


@dataclass(frozen=True)
class DecisionMade(SessionEvent):
    kind: ClassVar[str] = "decision_made"
    candidate_id: str = ""
    liked: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "candidate_id": self.candidate_id, "liked": self.liked}


@dataclass(frozen=True)
class MatchFound(SessionEvent):
    kind: ClassVar[str] = "match_found"
    other_user_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "other_user_id": self.other_user_id}


@dataclass(frozen=True)
class QueueExhausted(SessionEvent):
    kind: ClassVar[str] = "queue_exhausted"


@dataclass(frozen=True)
class TransientFailure(SessionEvent):
    kind: ClassVar[str] = "transient_failure"
    candidate_id: str = ""
    reason: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "candidate_id": self.candidate_id, "reason": self.reason}


# ─────────────────────────────────────────────────────────────────────────────
#  Session
# ─────────────────────────────────────────────────────────────────────────────

class SwipeSession:
    def __init__(
        self,
        user_id: str,
        queue: CandidateQueue,
        ledger: SwipeLedger,
        store: InMemoryProfileStore,
        threshold: float = DEFAULT_THRESHOLD,
        batch_limit: int | None = None,
    ) -> None:
        self.user_id = user_id
        self.queue = queue
        self.ledger = ledger
        self.store = store
        self.threshold = threshold
        self.batch_limit = batch_limit
        self.card: SwipeCard | None = None
        self.exhausted = False
        self.closed = False
        self._batch: list[Profile] = []
        self._cursor = 0
        self._events: deque[SessionEvent] = deque()
        self._lock = asyncio.Lock()
        self.log = user_logger(user_id)

    # ── lifecycle ─────────────────────────────────────────────────────────────

    async def start(self) -> SwipeCard | None:
        self._require_open("start")
        async with self._lock:
            await self._load_batch()
            return await self._present_next()

    async def refresh(self) -> SwipeCard | None:
        """Re-fetch candidates. Only ever called on an explicit user action."""
        self._require_open("refresh")
        async with self._lock:
            if self.card is not None and self.card.state is CardState.RESOLVED:
                raise InvalidTransition(self.card.state.name, "refresh")
            await self._load_batch()
            return await self._present_next()

    def close(self) -> None:
        """End the session; an in-progress drag is discarded with no write."""
        if self.card is not None:
            self.card.cancel()
        self.closed = True
        self.log.info("Swipe session closed")

    # ── gesture / button input ────────────────────────────────────────────────

    def drag(self, offset: float) -> CardFeedback:
        return self._current("drag").drag(offset)

    async def release(self, offset: float | None = None) -> RecordResult | None:
        card = self._current("release")
        if card.release(offset) is None:
            return None
        return await self._commit(card)

    async def decide(self, liked: bool) -> RecordResult:
        card = self._current("decide")
        card.decide(liked)
        return await self._commit(card)

    async def retry(self) -> RecordResult:
        """Re-attempt the ledger write of a card whose commit failed."""
        card = self._current("retry")
        if card.state is not CardState.RESOLVED:
            raise InvalidTransition(card.state.name, "retry")
        return await self._commit(card)

    # ── notifications ─────────────────────────────────────────────────────────

    def notify_match(self, match: Match) -> None:
        if self.closed:
            return
        self._emit(MatchFound(other_user_id=match.other(self.user_id)))

    def drain_events(self) -> list[SessionEvent]:
        events = list(self._events)
        self._events.clear()
        return events

    # ── internals ─────────────────────────────────────────────────────────────

    async def _load_batch(self) -> None:
        batch = await self.queue.next_batch(self.user_id, limit=self.batch_limit)
        self._batch = await batch.collect()
        self._cursor = 0
        self.exhausted = False
        self.log.debug(f"Loaded {len(self._batch)} candidates")

    async def _present_next(self) -> SwipeCard | None:
        while self._cursor < len(self._batch):
            candidate_id = self._batch[self._cursor].id
            try:
                profile = await self.store.get_profile(candidate_id)
            except ProfileNotFound:
                self.log.warning(f"Skipping stale candidate {candidate_id}: profile gone")
                self._cursor += 1
                continue
            if await self.ledger.get(self.user_id, candidate_id) is not None:
                self.log.debug(f"Skipping {candidate_id}: already judged")
                self._cursor += 1
                continue

            self.card = SwipeCard(profile, threshold=self.threshold)
            self._emit(CandidatePresented(profile=profile))
            return self.card

        self.card = None
        self.exhausted = True
        self._emit(QueueExhausted())
        self.log.info("Candidate queue exhausted")
        return None

    async def _commit(self, card: SwipeCard) -> RecordResult:
        """Save `card`'s decision, then advance if it is still the card on top."""
        async with self._lock:
            try:
                result = await card.dismiss(self._record)
            except StoreUnavailable as exc:
                self._emit(TransientFailure(candidate_id=card.candidate_id, reason=str(exc)))
                self.log.warning(f"Swipe on {card.candidate_id} not saved, card kept: {exc}")
                raise

            if isinstance(result, Ack):
                self._emit(DecisionMade(candidate_id=card.candidate_id, liked=result.record.liked))
            else:
                self.log.info(f"{card.candidate_id} was already judged; moving on")

            # a refresh may have re-presented the same candidate meanwhile
            current = self.card
            if current is card or (current is not None and current.candidate_id == card.candidate_id):
                self._cursor += 1
                await self._present_next()
            return result

    async def _record(self, candidate_id: str, liked: bool) -> RecordResult:
        return await self.ledger.record(self.user_id, candidate_id, liked)

    def _current(self, action: str) -> SwipeCard:
        self._require_open(action)
        if self.card is None:
            raise InvalidTransition("QUEUE_EXHAUSTED" if self.exhausted else "NOT_STARTED", action)
        return self.card

    def _require_open(self, action: str) -> None:
        if self.closed:
            raise InvalidTransition("CLOSED", action)

    def _emit(self, event: SessionEvent) -> None:
        self._events.append(event)


__all__ = [
    "CandidatePresented",
    "DecisionMade",
    "MatchFound",
    "QueueExhausted",
    "SessionEvent",
    "SwipeSession",
    "TransientFailure",
]
