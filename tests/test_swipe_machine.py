"""Swipe decision state machine: gesture → one decision → one ledger write."""

import asyncio

import pytest

from models.errors import InvalidTransition, LedgerUnavailable
from models.swipe_machine import (
    CardState,
    Decision,
    SwipeCard,
    decision_for,
    opacity_for,
    rotation_for,
)


class RecordingCommit:
    def __init__(self, fail: bool = False):
        self.calls = []
        self.fail = fail

    async def __call__(self, candidate_id, liked):
        self.calls.append((candidate_id, liked))
        await asyncio.sleep(0)
        if self.fail:
            raise LedgerUnavailable("offline")
        return "ack"


@pytest.fixture
def card(profile_factory) -> SwipeCard:
    return SwipeCard(profile_factory("bob"), threshold=100.0)


class TestGesture:

    def test_drag_enters_deciding_without_deciding(self, card):
        feedback = card.drag(60)

        assert card.state is CardState.DECIDING
        assert card.decision is None
        assert feedback.leaning is None

    def test_release_past_threshold_likes(self, card):
        card.drag(150)
        assert card.release() is Decision.LIKED
        assert card.state is CardState.RESOLVED

    def test_release_short_of_threshold_snaps_back(self, card):
        card.drag(80)
        assert card.release() is None
        assert card.state is CardState.PRESENTED
        assert card.offset == 0.0

    def test_release_left_passes(self, card):
        card.drag(-150)
        assert card.release() is Decision.PASSED

    def test_release_offset_overrides_last_drag(self, card):
        card.drag(20)
        assert card.release(offset=130) is Decision.LIKED

    @pytest.mark.parametrize("offset,expected", [
        (100, Decision.LIKED),
        (-100, Decision.PASSED),
        (99.9, None),
        (-99.9, None),
        (0, None),
    ])
    def test_threshold_boundary(self, offset, expected):
        assert decision_for(offset, 100.0) is expected

    def test_cancel_discards_drag(self, card):
        card.drag(180)
        card.cancel()
        assert card.state is CardState.PRESENTED
        assert card.decision is None

    def test_invalid_threshold(self, profile_factory):
        with pytest.raises(ValueError):
            SwipeCard(profile_factory("bob"), threshold=0)


class TestFeedback:

    def test_rotation_is_proportional_and_clamped(self):
        assert rotation_for(0) == 0
        assert rotation_for(100) == pytest.approx(12.5)
        assert rotation_for(-200) == pytest.approx(-25.0)
        assert rotation_for(400) == pytest.approx(25.0)

    def test_opacity_fades_past_150(self):
        assert opacity_for(0) == 1.0
        assert opacity_for(150) == 1.0
        assert opacity_for(-175) == pytest.approx(0.5)
        assert opacity_for(250) == 0.0

    def test_drag_reports_leaning_past_threshold(self, card):
        assert card.drag(120).leaning is Decision.LIKED
        assert card.drag(-120).leaning is Decision.PASSED


class TestButtons:

    def test_like_button_resolves_immediately(self, card):
        assert card.like() is Decision.LIKED
        assert card.state is CardState.RESOLVED

    def test_pass_button_ignores_drag_offset(self, card):
        card.drag(170)
        assert card.pass_() is Decision.PASSED

    def test_second_resolution_rejected(self, card):
        card.like()
        with pytest.raises(InvalidTransition):
            card.pass_()


class TestDismiss:

    @pytest.mark.asyncio
    async def test_dismiss_writes_once(self, card):
        commit = RecordingCommit()
        card.drag(150)
        card.release()

        assert await card.dismiss(commit) == "ack"
        assert card.state is CardState.DISMISSED
        assert commit.calls == [("bob", True)]

    @pytest.mark.asyncio
    async def test_dismissed_card_rejects_everything(self, card):
        commit = RecordingCommit()
        card.like()
        await card.dismiss(commit)

        for action in (card.like, card.pass_, lambda: card.drag(150), card.release):
            with pytest.raises(InvalidTransition):
                action()
        with pytest.raises(InvalidTransition):
            await card.dismiss(commit)

        assert len(commit.calls) == 1
        assert card.state is CardState.DISMISSED

    @pytest.mark.asyncio
    async def test_undecided_card_cannot_dismiss(self, card):
        with pytest.raises(InvalidTransition):
            await card.dismiss(RecordingCommit())

    @pytest.mark.asyncio
    async def test_double_tap_during_write_is_rejected(self, card):
        commit = RecordingCommit()
        card.like()

        results = await asyncio.gather(
            card.dismiss(commit), card.dismiss(commit), return_exceptions=True
        )

        assert results[0] == "ack"
        assert isinstance(results[1], InvalidTransition)
        assert len(commit.calls) == 1

    @pytest.mark.asyncio
    async def test_failed_write_keeps_decision_for_retry(self, card):
        card.pass_()
        with pytest.raises(LedgerUnavailable):
            await card.dismiss(RecordingCommit(fail=True))

        assert card.state is CardState.RESOLVED
        assert card.decision is Decision.PASSED

        retry = RecordingCommit()
        await card.dismiss(retry)
        assert retry.calls == [("bob", False)]
        assert card.state is CardState.DISMISSED
