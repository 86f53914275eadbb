"""
models/errors.py
────────────────
Exception hierarchy raised by the matching engine.

The HTTP layer (backend/main.py) maps each class to a status code:
  ProfileNotFound   → 404
  DuplicatePair     → 409
  InvalidTransition → 409
  StoreUnavailable  → 503
"""


class MatchingError(Exception):
    """Base class for every engine error."""


class ProfileNotFound(MatchingError):
    def __init__(self, user_id: str) -> None:
        super().__init__(f"Profile '{user_id}' not found")
        self.user_id = user_id


class DuplicatePair(MatchingError):
    """A swipe for this (swiper, candidate) pair is already recorded."""

    def __init__(self, swiper_id: str, candidate_id: str) -> None:
        super().__init__(f"'{swiper_id}' has already swiped on '{candidate_id}'")
        self.swiper_id = swiper_id
        self.candidate_id = candidate_id


class InvalidTransition(MatchingError):
    """A swipe card was asked to move to a state it cannot reach."""

    def __init__(self, state: str, action: str) -> None:
        super().__init__(f"Cannot '{action}' a card in state {state}")
        self.state = state
        self.action = action


class StoreUnavailable(MatchingError):
    """Transient I/O failure in a backing store; the write was not applied."""


class LedgerUnavailable(StoreUnavailable):
    pass
