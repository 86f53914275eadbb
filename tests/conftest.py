"""Shared fixtures for the matching engine tests."""

import os
import tempfile
from pathlib import Path

# Settings are cached on first import; keep tests off the seed CSV and the repo log dir.
os.environ.setdefault("LOAD_SEED_PROFILES", "false")
os.environ.setdefault("LOG_FILE", str(Path(tempfile.gettempdir()) / "foodmatch-tests" / "app.log"))
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest

from models.engine import MatchingEngine
from models.entities import Profile
from models.ledger import SwipeLedger
from models.match_detector import MatchDetector
from models.profile_store import InMemoryProfileStore


# ============================================================================
# Profiles
# ============================================================================

USER_IDS = ["alice", "bob", "carol", "dave", "erin"]


def make_profile(user_id: str, **overrides) -> Profile:
    fields = {
        "full_name": user_id.title(),
        "email": f"{user_id}@example.com",
        "age": 30,
        "location": "Austin",
        "favorite_cuisines": ("Italian", "Thai"),
        "dining_style": ("Casual Dining",),
    }
    fields.update(overrides)
    return Profile.from_fields(user_id, fields)


@pytest.fixture
def profiles() -> list[Profile]:
    return [make_profile(uid) for uid in USER_IDS]


@pytest.fixture
def store(profiles) -> InMemoryProfileStore:
    return InMemoryProfileStore(profiles)


# ============================================================================
# Engine components
# ============================================================================

@pytest.fixture
def ledger() -> SwipeLedger:
    return SwipeLedger()


@pytest.fixture
def detector(ledger) -> MatchDetector:
    detector = MatchDetector(ledger)
    ledger.bind_detector(detector)
    return detector


@pytest.fixture
def engine(store) -> MatchingEngine:
    return MatchingEngine(store, threshold=100.0, batch_limit=10)


class FlakyWrite:
    """Stand-in for SwipeLedger._write that fails the first `failures` calls."""

    def __init__(self, original, failures: int = 1):
        self.original = original
        self.failures = failures
        self.calls = 0

    async def __call__(self, row):
        from models.errors import LedgerUnavailable

        self.calls += 1
        if self.calls <= self.failures:
            raise LedgerUnavailable("ledger write timed out")
        await self.original(row)


@pytest.fixture
def flaky_ledger_write(engine, monkeypatch) -> FlakyWrite:
    flaky = FlakyWrite(engine.ledger._write)
    monkeypatch.setattr(engine.ledger, "_write", flaky)
    return flaky


@pytest.fixture
def profile_factory():
    return make_profile
