"""
backend/dependencies.py
───────────────────────
Process-wide MatchingEngine singleton and the FastAPI dependency that hands
it to route handlers. Tests swap it via `app.dependency_overrides`.
"""

from functools import lru_cache

from models.engine import MatchingEngine
from utils.logger import logger


@lru_cache(maxsize=1)
def get_engine() -> MatchingEngine:
    logger.info("Initialising MatchingEngine …")
    return MatchingEngine.from_settings()


def engine_dep() -> MatchingEngine:
    return get_engine()
