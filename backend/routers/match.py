"""
backend/routers/match.py
────────────────────────
FastAPI router for profiles, candidates, swipes and matches.

Endpoints
─────────
PUT    /api/profiles/{user_id}    — Create or update a profile (onboarding)
GET    /api/profiles/{user_id}    — Fetch one profile
DELETE /api/profiles/{user_id}    — Remove a profile
GET    /api/candidates/{user_id}  — Next batch of not-yet-judged profiles
POST   /api/swipe                 — Record a like / pass (409 on a repeat)
GET    /api/swipes                — Recent ledger rows
GET    /api/matches/{user_id}     — Mutual matches for a user
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from backend.dependencies import engine_dep
from backend.schemas import (
    CandidateResponse,
    MatchListResponse,
    MatchOut,
    ProfileIn,
    ProfileOut,
    SwipeAction,
    SwipeResponse,
)
from models.engine import MatchingEngine
from models.ledger import Rejected
from utils.logger import logger

router = APIRouter(prefix="/api", tags=["matchmaking"])


# ── profiles ──────────────────────────────────────────────────────────────────

@router.put("/profiles/{user_id}", response_model=ProfileOut)
async def upsert_profile(
    user_id: str,
    body: ProfileIn,
    engine: MatchingEngine = Depends(engine_dep),
):
    fields = body.model_dump(exclude_unset=True)
    profile = await engine.store.upsert_profile(user_id, fields)
    return ProfileOut.from_profile(profile)


@router.get("/profiles/{user_id}", response_model=ProfileOut)
async def get_profile(user_id: str, engine: MatchingEngine = Depends(engine_dep)):
    return ProfileOut.from_profile(await engine.store.get_profile(user_id))


@router.delete("/profiles/{user_id}", status_code=204)
async def delete_profile(user_id: str, engine: MatchingEngine = Depends(engine_dep)):
    await engine.store.delete_profile(user_id)


# ── candidates ────────────────────────────────────────────────────────────────

@router.get("/candidates/{user_id}", response_model=CandidateResponse)
async def get_candidates(
    user_id: str,
    limit: int | None = Query(None, ge=1, le=100, description="Batch size (defaults to settings)"),
    engine: MatchingEngine = Depends(engine_dep),
):
    profiles = await engine.candidates(user_id, limit=limit)
    return CandidateResponse(
        user_id=user_id,
        total=len(profiles),
        candidates=[ProfileOut.from_profile(p) for p in profiles],
    )


# ── swipes ────────────────────────────────────────────────────────────────────

@router.post("/swipe", response_model=SwipeResponse)
async def record_swipe(action: SwipeAction, engine: MatchingEngine = Depends(engine_dep)):
    if action.swiper_id == action.candidate_id:
        raise HTTPException(422, "Users cannot swipe on themselves")

    result = await engine.record_swipe(action.swiper_id, action.candidate_id, action.liked)
    if isinstance(result, Rejected):
        raise HTTPException(409, str(result.reason))

    match = result.match
    return SwipeResponse(
        status="recorded",
        swiper_id=action.swiper_id,
        candidate_id=action.candidate_id,
        liked=result.record.liked,
        timestamp=result.record.created_at.isoformat(),
        match=MatchOut.from_match(match) if match else None,
    )


@router.get("/swipes")
async def list_swipes(
    swiper_id: str | None = Query(None),
    limit: int = Query(50, ge=1, le=500),
    engine: MatchingEngine = Depends(engine_dep),
):
    rows = await engine.ledger.history(swiper_id, limit=limit)
    return {
        "total": len(engine.ledger),
        "swipes": [
            {
                "swiper_id": r.swiper_id,
                "candidate_id": r.candidate_id,
                "liked": r.liked,
                "created_at": r.created_at.isoformat(),
            }
            for r in rows
        ],
    }


# ── matches ───────────────────────────────────────────────────────────────────

@router.get("/matches/{user_id}", response_model=MatchListResponse)
async def get_matches(user_id: str, engine: MatchingEngine = Depends(engine_dep)):
    matches = await engine.matches_for(user_id)
    logger.debug(f"{user_id} has {len(matches)} matches")
    return MatchListResponse(
        user_id=user_id,
        total_matches=len(matches),
        matches=[MatchOut.from_match(m) for m in matches],
    )
