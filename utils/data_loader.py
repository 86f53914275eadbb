"""
utils/data_loader.py
────────────────────
Loads seed profiles from a CSV file into the Profile Store.

Expected columns (extra columns are ignored):
  id, email, full_name, age, bio, location, avatar_url,
  favorite_cuisines, dining_style, dietary_restrictions, food_preferences

Tag columns hold pipe-separated values, e.g. "Italian|Thai|Korean".
"""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from models.entities import Profile
from models.profile_store import InMemoryProfileStore
from utils.logger import logger

TAG_COLUMNS = ["favorite_cuisines", "dining_style", "dietary_restrictions", "food_preferences"]
TEXT_COLUMNS = ["email", "full_name", "bio", "location", "avatar_url"]


def _split_tags(raw) -> tuple[str, ...]:
    if not isinstance(raw, str):
        return ()
    return tuple(t.strip() for t in raw.split("|") if t.strip())


def read_profiles(csv_path: str | Path) -> pd.DataFrame:
    """Read and clean the seed CSV. Rows without an id are dropped."""
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Seed profiles not found at {csv_path}")

    logger.info(f"Loading seed profiles from {csv_path}")
    df = pd.read_csv(csv_path, dtype={"id": str})
    df.columns = [c.strip().lower() for c in df.columns]
    if "id" not in df.columns:
        raise ValueError(f"{csv_path} has no 'id' column")

    df = df.dropna(subset=["id"])
    df["id"] = df["id"].str.strip()
    df = df.drop_duplicates(subset="id", keep="last")

    for col in TEXT_COLUMNS:
        if col in df.columns:
            df[col] = df[col].fillna("").astype(str)
    if "age" in df.columns:
        df["age"] = pd.to_numeric(df["age"], errors="coerce").astype("Int64")
    for col in TAG_COLUMNS:
        if col in df.columns:
            df[col] = df[col].map(_split_tags)

    logger.info(f"Seed profiles: {len(df)} rows × {len(df.columns)} columns")
    return df


def profiles_from_frame(df: pd.DataFrame) -> list[Profile]:
    profiles = []
    for record in df.to_dict(orient="records"):
        user_id = record.pop("id")
        if "age" in record and pd.isna(record["age"]):
            record["age"] = None
        profiles.append(Profile.from_fields(user_id, record))
    return profiles


async def seed_store(store: InMemoryProfileStore, csv_path: str | Path) -> int:
    """Upsert every CSV profile into `store`; returns how many were loaded."""
    profiles = profiles_from_frame(read_profiles(csv_path))
    for profile in profiles:
        fields = profile.to_dict()
        fields.pop("id")
        await store.upsert_profile(profile.id, fields)
    return len(profiles)
