"""
models/profile_store.py
───────────────────────
Async in-memory Profile Store.

Stands in for the hosted `profiles` table. The matching core only reads from
it (`get_profile`, `list_profiles`); `upsert_profile` is used by onboarding and
by the seed loader. Listing order is insertion order and is what the
Candidate Queue presents.
"""

from __future__ import annotations

import asyncio
import dataclasses
from typing import Any

from models.entities import Profile, utcnow
from models.errors import ProfileNotFound
from utils.logger import logger


class InMemoryProfileStore:
    def __init__(self, profiles: list[Profile] | None = None) -> None:
        self._profiles: dict[str, Profile] = {}
        self._lock = asyncio.Lock()
        for profile in profiles or []:
            self._profiles[profile.id] = profile

    def __len__(self) -> int:
        return len(self._profiles)

    async def get_profile(self, user_id: str) -> Profile:
        try:
            return self._profiles[user_id]
        except KeyError:
            raise ProfileNotFound(user_id) from None

    async def list_profiles(self) -> list[Profile]:
        return list(self._profiles.values())

    async def delete_profile(self, user_id: str) -> None:
        async with self._lock:
            if self._profiles.pop(user_id, None) is None:
                raise ProfileNotFound(user_id)
        logger.info(f"Profile deleted: {user_id}")

    async def upsert_profile(self, user_id: str, fields: dict[str, Any]) -> Profile:
        """Insert a profile or merge `fields` into the existing one."""
        async with self._lock:
            current = self._profiles.get(user_id)
            if current is None:
                profile = Profile.from_fields(user_id, fields)
                logger.info(f"Profile created: {user_id}")
            else:
                patch = Profile.from_fields(user_id, fields)
                changes = {
                    k: getattr(patch, k)
                    for k in fields
                    if k in Profile.__dataclass_fields__ and k not in ("id", "updated_at")
                }
                profile = dataclasses.replace(current, **changes, updated_at=utcnow())
                logger.debug(f"Profile updated: {user_id} fields={sorted(changes)}")
            self._profiles[user_id] = profile
            return profile
