"""
models/engine.py
════════════════
MatchingEngine — wires the Profile Store, Swipe Ledger, Match Detector and
Candidate Queue together and keeps one SwipeSession per active user.

Usage
─────
  engine  = MatchingEngine(store)
  session = await engine.open_session("alice")
  session.drag(150.0)
  await session.release()          # → ledger write → match check → next card

  ack = await engine.record_swipe("bob", "alice", liked=True)
  ack.match                        # Match('alice', 'bob') if mutual

When the detector creates a Match, both participants' open sessions receive a
MatchFound event exactly once.
"""

from __future__ import annotations

from models.candidate_queue import CandidateQueue
from models.entities import Match, Profile
from models.ledger import RecordResult, SwipeLedger
from models.match_detector import MatchDetector
from models.profile_store import InMemoryProfileStore
from models.session import SwipeSession
from models.swipe_machine import DEFAULT_THRESHOLD
from utils.logger import logger


class MatchingEngine:
    def __init__(
        self,
        store: InMemoryProfileStore | None = None,
        ledger: SwipeLedger | None = None,
        threshold: float = DEFAULT_THRESHOLD,
        batch_limit: int = 10,
    ) -> None:
        self.store = store if store is not None else InMemoryProfileStore()
        self.ledger = ledger if ledger is not None else SwipeLedger()
        self.detector = MatchDetector(self.ledger)
        self.ledger.bind_detector(self.detector)
        self.queue = CandidateQueue(self.store, self.ledger, default_limit=batch_limit)
        self.threshold = threshold
        self.batch_limit = batch_limit
        self._sessions: dict[str, SwipeSession] = {}
        self.detector.add_listener(self._route_match)

    @classmethod
    def from_settings(cls, store: InMemoryProfileStore | None = None) -> "MatchingEngine":
        from config.settings import get_settings

        settings = get_settings()
        return cls(store=store, threshold=settings.swipe_threshold, batch_limit=settings.batch_limit)

    # ── sessions ──────────────────────────────────────────────────────────────

    async def open_session(self, user_id: str) -> SwipeSession:
        """Start (or restart) the user's session and present the first card."""
        await self.store.get_profile(user_id)
        previous = self._sessions.pop(user_id, None)
        if previous is not None:
            previous.close()

        session = SwipeSession(
            user_id,
            queue=self.queue,
            ledger=self.ledger,
            store=self.store,
            threshold=self.threshold,
            batch_limit=self.batch_limit,
        )
        self._sessions[user_id] = session
        await session.start()
        logger.info(f"Session opened for {user_id}")
        return session

    def get_session(self, user_id: str) -> SwipeSession | None:
        return self._sessions.get(user_id)

    def close_session(self, user_id: str) -> bool:
        session = self._sessions.pop(user_id, None)
        if session is None:
            return False
        session.close()
        return True

    # ── direct operations ─────────────────────────────────────────────────────

    async def candidates(self, user_id: str, limit: int | None = None) -> list[Profile]:
        batch = await self.queue.next_batch(user_id, limit=limit)
        return await batch.collect()

    async def record_swipe(self, swiper_id: str, candidate_id: str, liked: bool) -> RecordResult:
        await self.store.get_profile(swiper_id)
        await self.store.get_profile(candidate_id)
        return await self.ledger.record(swiper_id, candidate_id, liked)

    async def matches_for(self, user_id: str) -> list[Match]:
        await self.store.get_profile(user_id)
        return await self.detector.matches_for(user_id)

    # ── match fan-out ─────────────────────────────────────────────────────────

    def _route_match(self, match: Match) -> None:
        for user_id in match.pair:
            session = self._sessions.get(user_id)
            if session is not None:
                session.notify_match(match)
