"""
models/ledger.py
════════════════
SwipeLedger — append-only record of every (swiper, candidate, liked) decision.

Contract
────────
  record(swiper_id, candidate_id, liked) → Ack | Rejected

  • Logically a set keyed by the directed pair (swiper, candidate):
    a second record for the same pair is Rejected(DuplicatePair),
    never overwritten. Decisions are immutable once written; an "undo"
    would have to be its own event type.
  • A successful liked=True write is handed to the MatchDetector before
    record() returns; the detection outcome travels back inside the Ack.
  • liked=False writes only feed future Candidate Queue exclusion.
  • A storage failure raises LedgerUnavailable and leaves no row behind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

from models.entities import PairKey, SwipeRecord
from models.errors import DuplicatePair
from utils.locks import KeyedLock
from utils.logger import logger

if TYPE_CHECKING:
    from models.match_detector import DetectionOutcome, MatchDetector


@dataclass(frozen=True)
class Ack:
    record: SwipeRecord
    detection: "DetectionOutcome | None" = None
    ok: bool = field(default=True, init=False)

    @property
    def match(self):
        """The Match this like completed, or None."""
        return getattr(self.detection, "match", None)


@dataclass(frozen=True)
class Rejected:
    reason: DuplicatePair
    existing: SwipeRecord
    ok: bool = field(default=False, init=False)


RecordResult = Union[Ack, Rejected]


class SwipeLedger:
    def __init__(self) -> None:
        self._rows: dict[PairKey, SwipeRecord] = {}
        self._order: list[SwipeRecord] = []
        self._pair_locks = KeyedLock()
        self._detector: MatchDetector | None = None

    def bind_detector(self, detector: "MatchDetector") -> None:
        self._detector = detector

    # ── writes ────────────────────────────────────────────────────────────────

    async def record(self, swiper_id: str, candidate_id: str, liked: bool) -> RecordResult:
        if swiper_id == candidate_id:
            raise ValueError("Users cannot swipe on themselves")

        key = (swiper_id, candidate_id)
        async with self._pair_locks.hold(key):
            existing = self._rows.get(key)
            if existing is not None:
                logger.info(
                    f"Swipe rejected (duplicate): {swiper_id} → {candidate_id} "
                    f"already {'liked' if existing.liked else 'passed'}"
                )
                return Rejected(reason=DuplicatePair(swiper_id, candidate_id), existing=existing)

            row = SwipeRecord(swiper_id=swiper_id, candidate_id=candidate_id, liked=bool(liked))
            await self._write(row)

        logger.info(f"Swipe recorded: {swiper_id} → {candidate_id} liked={row.liked}")

        detection = None
        if row.liked and self._detector is not None:
            detection = await self._detector.on_like_recorded(swiper_id, candidate_id)
        return Ack(record=row, detection=detection)

    async def _write(self, row: SwipeRecord) -> None:
        """Persist one row. Storage adapters override this and raise LedgerUnavailable on I/O failure."""
        self._rows[row.key] = row
        self._order.append(row)

    # ── reads ─────────────────────────────────────────────────────────────────

    async def get(self, swiper_id: str, candidate_id: str) -> SwipeRecord | None:
        return self._rows.get((swiper_id, candidate_id))

    async def has_liked(self, swiper_id: str, candidate_id: str) -> bool:
        row = self._rows.get((swiper_id, candidate_id))
        return row is not None and row.liked

    async def judged_by(self, swiper_id: str) -> set[str]:
        """Every candidate id this user has liked or passed."""
        return {cand for (swiper, cand) in self._rows if swiper == swiper_id}

    async def history(self, swiper_id: str | None = None, limit: int | None = None) -> list[SwipeRecord]:
        rows = [r for r in self._order if swiper_id is None or r.swiper_id == swiper_id]
        return rows[-limit:] if limit else rows

    def __len__(self) -> int:
        return len(self._rows)
