"""HTTP surface: FastAPI routes over a fresh MatchingEngine per test."""

import pytest
from fastapi.testclient import TestClient

from backend.dependencies import engine_dep
from backend.main import app
from models.errors import InvalidTransition
from models.onboarding import OnboardingWizard, ProfileForm, Step


@pytest.fixture
def client(engine):
    app.dependency_overrides[engine_dep] = lambda: engine
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _swipe(client, swiper, candidate, liked):
    return client.post(
        "/api/swipe", json={"swiper_id": swiper, "candidate_id": candidate, "liked": liked}
    )


class TestProfiles:

    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "ok"
        assert body["profiles_loaded"] == 5

    def test_upsert_then_get(self, client):
        r = client.put("/api/profiles/frank", json={"full_name": "Frank", "age": 40, "location": "Waco"})
        assert r.status_code == 200

        r = client.put("/api/profiles/frank", json={"bio": "BBQ pilgrim"})
        body = client.get("/api/profiles/frank").json()
        assert body["full_name"] == "Frank"
        assert body["bio"] == "BBQ pilgrim"

    def test_unknown_profile_404(self, client):
        r = client.get("/api/profiles/zoe")
        assert r.status_code == 404
        assert r.json()["error"] == "ProfileNotFound"

    def test_underage_rejected(self, client):
        assert client.put("/api/profiles/kid", json={"age": 15}).status_code == 422

    @pytest.mark.parametrize("age, status", [(17, 422), (18, 200), (120, 200), (121, 422)])
    def test_age_bounds_match_onboarding(self, client, age, status):
        form = ProfileForm(
            full_name="Gus", age=str(age), location="Reno",
            favorite_cuisines=("Thai",), dining_style=("Local Gems",),
        )
        wizard = OnboardingWizard(step=Step.DIETARY, form=form)
        if status == 422:
            with pytest.raises(InvalidTransition):
                wizard.submit()
            fields = form.to_fields()
        else:
            fields = wizard.submit()

        assert client.put("/api/profiles/gus", json=fields).status_code == status


class TestSwipesAndMatches:

    def test_candidates_exclude_self_and_judged(self, client):
        _swipe(client, "alice", "bob", False)

        body = client.get("/api/candidates/alice", params={"limit": 2}).json()

        assert [c["id"] for c in body["candidates"]] == ["carol", "dave"]

    def test_duplicate_swipe_conflicts(self, client):
        assert _swipe(client, "alice", "bob", True).status_code == 200
        r = _swipe(client, "alice", "bob", False)
        assert r.status_code == 409

    def test_self_swipe_rejected(self, client):
        assert _swipe(client, "alice", "alice", True).status_code == 422

    def test_swipe_on_unknown_candidate_404(self, client):
        assert _swipe(client, "alice", "zoe", True).status_code == 404

    def test_mutual_like_returns_match(self, client):
        first = _swipe(client, "alice", "bob", True).json()
        second = _swipe(client, "bob", "alice", True).json()

        assert first["match"] is None
        assert second["match"]["user_a_id"] == "alice"
        assert second["match"]["user_b_id"] == "bob"

        body = client.get("/api/matches/alice").json()
        assert body["total_matches"] == 1

    def test_swipe_history(self, client):
        _swipe(client, "alice", "bob", True)
        _swipe(client, "carol", "bob", False)

        body = client.get("/api/swipes", params={"swiper_id": "alice"}).json()
        assert body["total"] == 2
        assert [s["candidate_id"] for s in body["swipes"]] == ["bob"]


class TestSessions:

    def test_swipe_flow(self, client):
        state = client.post("/api/sessions/alice").json()
        assert state["candidate"]["id"] == "bob"
        assert state["events"][0]["type"] == "candidate_presented"

        feedback = client.post("/api/sessions/alice/drag", json={"offset": 150}).json()
        assert feedback["leaning"] == "liked"

        state = client.post("/api/sessions/alice/release", json={}).json()
        assert [e["type"] for e in state["events"]] == ["decision_made", "candidate_presented"]
        assert state["candidate"]["id"] == "carol"

    def test_short_release_keeps_card(self, client):
        client.post("/api/sessions/alice")
        client.post("/api/sessions/alice/drag", json={"offset": 80})

        state = client.post("/api/sessions/alice/release", json={}).json()

        assert state["candidate"]["id"] == "bob"
        assert state["card_state"] == "presented"

    def test_exhaust_then_refresh(self, client):
        client.post("/api/sessions/alice")
        for _ in range(4):
            state = client.post("/api/sessions/alice/decide", json={"liked": False}).json()
        assert state["exhausted"] is True
        assert state["events"][-1]["type"] == "queue_exhausted"

        assert client.post("/api/sessions/alice/decide", json={"liked": True}).status_code == 409

        client.put("/api/profiles/frank", json={"full_name": "Frank", "age": 40})
        state = client.post("/api/sessions/alice/refresh").json()
        assert state["candidate"]["id"] == "frank"

    def test_match_event_reaches_both_sessions(self, client):
        client.post("/api/sessions/alice")
        client.post("/api/sessions/alice/decide", json={"liked": True})     # alice → bob
        client.post("/api/sessions/bob")
        state = client.post("/api/sessions/bob/decide", json={"liked": True}).json()  # bob → alice

        assert {"type": "match_found", "other_user_id": "alice"} in state["events"]
        alice_events = client.get("/api/sessions/alice").json()["events"]
        assert {"type": "match_found", "other_user_id": "bob"} in alice_events

    def test_outage_returns_503_and_retry_recovers(self, client, flaky_ledger_write):
        client.post("/api/sessions/alice")

        r = client.post("/api/sessions/alice/decide", json={"liked": True})
        assert r.status_code == 503

        state = client.get("/api/sessions/alice").json()
        assert state["card_state"] == "resolved"
        assert state["events"][-1]["type"] == "transient_failure"

        state = client.post("/api/sessions/alice/retry").json()
        assert state["candidate"]["id"] == "carol"

    def test_end_session(self, client):
        client.post("/api/sessions/alice")
        assert client.delete("/api/sessions/alice").status_code == 204
        assert client.get("/api/sessions/alice").status_code == 404
        assert client.delete("/api/sessions/alice").status_code == 404

    def test_events_endpoint_drains(self, client):
        client.post("/api/sessions/alice")
        client.post("/api/sessions/bob")
        client.post("/api/sessions/bob/decide", json={"liked": True})   # bob likes alice
        client.post("/api/sessions/alice/decide", json={"liked": True})  # alice likes bob

        body = client.get("/api/sessions/bob/events").json()
        assert body["events"] == [{"type": "match_found", "other_user_id": "alice"}]
        assert client.get("/api/sessions/bob/events").json()["events"] == []
