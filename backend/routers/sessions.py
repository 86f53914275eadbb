"""
backend/routers/sessions.py
───────────────────────────
FastAPI router driving a user's SwipeSession (one card at a time).

Endpoints
─────────
POST   /api/sessions/{user_id}           — Start a session, present the first card
GET    /api/sessions/{user_id}           — Current card + pending events
GET    /api/sessions/{user_id}/events    — Pending events only
POST   /api/sessions/{user_id}/drag      — Drag feedback (no write)
POST   /api/sessions/{user_id}/release   — End a drag; ≥ threshold decides
POST   /api/sessions/{user_id}/decide    — Like / pass button
POST   /api/sessions/{user_id}/retry     — Retry a write that failed transiently
POST   /api/sessions/{user_id}/refresh   — Explicit re-fetch after QueueExhausted
DELETE /api/sessions/{user_id}           — End the session (pending drag discarded)

Every non-drag response is a SessionState, whose `events` list carries the
CandidatePresented / DecisionMade / MatchFound / QueueExhausted events
emitted since the previous call.
"""

from fastapi import APIRouter, Depends, HTTPException

from backend.dependencies import engine_dep
from backend.schemas import DecideRequest, DragRequest, FeedbackOut, ReleaseRequest, SessionState
from models.engine import MatchingEngine
from models.session import SwipeSession

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


def _session(user_id: str, engine: MatchingEngine) -> SwipeSession:
    session = engine.get_session(user_id)
    if session is None:
        raise HTTPException(404, f"No active session for '{user_id}'")
    return session


@router.post("/{user_id}", response_model=SessionState)
async def start_session(user_id: str, engine: MatchingEngine = Depends(engine_dep)):
    session = await engine.open_session(user_id)
    return SessionState.from_session(session)


@router.get("/{user_id}", response_model=SessionState)
async def session_state(user_id: str, engine: MatchingEngine = Depends(engine_dep)):
    return SessionState.from_session(_session(user_id, engine))


@router.get("/{user_id}/events")
async def session_events(user_id: str, engine: MatchingEngine = Depends(engine_dep)):
    """Drain pending events without touching the card."""
    events = _session(user_id, engine).drain_events()
    return {"user_id": user_id, "events": [e.to_dict() for e in events]}


@router.post("/{user_id}/drag", response_model=FeedbackOut)
async def drag(user_id: str, body: DragRequest, engine: MatchingEngine = Depends(engine_dep)):
    feedback = _session(user_id, engine).drag(body.offset)
    return FeedbackOut(
        offset=feedback.offset,
        rotation=feedback.rotation,
        opacity=feedback.opacity,
        leaning=feedback.leaning.value if feedback.leaning else None,
    )


@router.post("/{user_id}/release", response_model=SessionState)
async def release(user_id: str, body: ReleaseRequest, engine: MatchingEngine = Depends(engine_dep)):
    session = _session(user_id, engine)
    await session.release(body.offset)
    return SessionState.from_session(session)


@router.post("/{user_id}/decide", response_model=SessionState)
async def decide(user_id: str, body: DecideRequest, engine: MatchingEngine = Depends(engine_dep)):
    session = _session(user_id, engine)
    await session.decide(body.liked)
    return SessionState.from_session(session)


@router.post("/{user_id}/retry", response_model=SessionState)
async def retry(user_id: str, engine: MatchingEngine = Depends(engine_dep)):
    session = _session(user_id, engine)
    await session.retry()
    return SessionState.from_session(session)


@router.post("/{user_id}/refresh", response_model=SessionState)
async def refresh(user_id: str, engine: MatchingEngine = Depends(engine_dep)):
    session = _session(user_id, engine)
    await session.refresh()
    return SessionState.from_session(session)


@router.delete("/{user_id}", status_code=204)
async def end_session(user_id: str, engine: MatchingEngine = Depends(engine_dep)):
    if not engine.close_session(user_id):
        raise HTTPException(404, f"No active session for '{user_id}'")
