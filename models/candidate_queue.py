"""
models/candidate_queue.py
─────────────────────────
Candidate Queue — the not-yet-judged profiles a user can be shown next.

    batch = await queue.next_batch("alice", limit=10)
    async for profile in batch:
        ...

`next_batch` checks that the requester exists (ProfileNotFound otherwise) and
snapshots the ledger's exclusion set up front; the returned batch then walks
the Profile Store lazily and stops after `limit` profiles. A batch is
single-use. An empty batch is the normal "no more candidates" outcome, never
an error; re-fetching is the caller's explicit decision.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from models.entities import Profile
from models.ledger import SwipeLedger
from models.profile_store import InMemoryProfileStore
from utils.logger import logger


class CandidateBatch:
    """Single-pass async sequence of candidate profiles."""

    def __init__(self, user_id: str, source: AsyncIterator[Profile]) -> None:
        self.user_id = user_id
        self._source = source
        self._started = False

    def __aiter__(self) -> "CandidateBatch":
        if self._started:
            raise RuntimeError("A candidate batch can only be iterated once; fetch a new batch")
        self._started = True
        return self

    async def __anext__(self) -> Profile:
        return await self._source.__anext__()

    async def collect(self) -> list[Profile]:
        return [profile async for profile in self]


class CandidateQueue:
    def __init__(self, store: InMemoryProfileStore, ledger: SwipeLedger, default_limit: int = 10) -> None:
        self.store = store
        self.ledger = ledger
        self.default_limit = default_limit

    async def next_batch(
        self,
        user_id: str,
        exclude_self: bool = True,
        limit: int | None = None,
    ) -> CandidateBatch:
        limit = self.default_limit if limit is None else limit
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")

        await self.store.get_profile(user_id)   # raises ProfileNotFound
        excluded = await self.ledger.judged_by(user_id)
        if exclude_self:
            excluded.add(user_id)

        logger.debug(f"Candidate batch for {user_id}: {len(excluded)} excluded, limit={limit}")
        return CandidateBatch(user_id, self._walk(excluded, limit))

    async def _walk(self, excluded: set[str], limit: int) -> AsyncIterator[Profile]:
        served = 0
        for profile in await self.store.list_profiles():
            if served >= limit:
                return
            if profile.id in excluded:
                continue
            served += 1
            yield profile
