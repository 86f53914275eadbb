"""
backend/main.py
═══════════════
FastAPI application for FoodMatch — swipe to find a dining companion.

Endpoints
─────────
  GET  /health                          — Liveness / readiness probe

  Profiles, swipes & matches  (backend/routers/match.py)
  PUT  /api/profiles/{user_id}          — Create / update a profile
  GET  /api/candidates/{user_id}        — Next batch of unjudged profiles
  POST /api/swipe                       — Record a like / pass
  GET  /api/matches/{user_id}           — Mutual matches

  Swipe sessions  (backend/routers/sessions.py)
  POST /api/sessions/{user_id}          — Start browsing, first card presented
  POST /api/sessions/{user_id}/drag     — Gesture feedback
  POST /api/sessions/{user_id}/release  — Gesture end → like / pass / snap back
  POST /api/sessions/{user_id}/decide   — Like / pass button

  Run with:
      uvicorn backend.main:app --reload --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.dependencies import engine_dep, get_engine
from backend.routers import match, sessions
from backend.schemas import HealthResponse
from config.settings import get_settings
from models.engine import MatchingEngine
from models.errors import (
    DuplicatePair,
    InvalidTransition,
    MatchingError,
    ProfileNotFound,
    StoreUnavailable,
)
from utils.data_loader import seed_store
from utils.logger import logger

# ─────────────────────────────────────────────────────────────────────────────
#  Startup: seed the in-memory Profile Store once
# ─────────────────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    engine = get_engine()
    if settings.load_seed_profiles and settings.profiles_path.exists():
        n = await seed_store(engine.store, settings.profiles_path)
        logger.info(f"[startup] Seeded {n} profiles from {settings.profiles_path}")
    else:
        logger.info("[startup] No seed profiles loaded")
    logger.info("[startup] MatchingEngine ready ✓")
    yield


app = FastAPI(
    title="FoodMatch — Matching API",
    description=(
        "Candidate discovery, like / pass swipes and mutual-match detection "
        "for finding someone to share a meal with."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(match.router)
app.include_router(sessions.router)


# ─────────────────────────────────────────────────────────────────────────────
#  Engine errors → HTTP
# ─────────────────────────────────────────────────────────────────────────────

_STATUS = {
    ProfileNotFound: 404,
    DuplicatePair: 409,
    InvalidTransition: 409,
    StoreUnavailable: 503,
}


@app.exception_handler(MatchingError)
async def matching_error_handler(request: Request, exc: MatchingError) -> JSONResponse:
    status = next((code for cls, code in _STATUS.items() if isinstance(exc, cls)), 400)
    if status >= 500:
        logger.warning(f"{request.method} {request.url.path} → {status}: {exc}")
    return JSONResponse(status_code=status, content={"detail": str(exc), "error": type(exc).__name__})


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc), "error": "ValueError"})


# ─────────────────────────────────────────────────────────────────────────────
#  Health check
# ─────────────────────────────────────────────────────────────────────────────

@app.get("/health", response_model=HealthResponse, tags=["Meta"])
def health_check(engine: MatchingEngine = Depends(engine_dep)) -> HealthResponse:
    """Liveness & readiness probe with store / ledger sizes."""
    return HealthResponse(
        status="ok",
        profiles_loaded=len(engine.store),
        swipes_recorded=len(engine.ledger),
        matches=len(engine.detector),
        engine_ready=True,
    )
