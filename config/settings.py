"""
config/settings.py
──────────────────
FoodMatch runtime configuration, read from the environment and `.env`.

  SWIPE_THRESHOLD      horizontal offset at which a drag becomes a decision
  BATCH_LIMIT          candidates fetched per Candidate Queue batch
  LOAD_SEED_PROFILES   seed the in-memory Profile Store from data/profiles.csv
  FOODMATCH_API_URL    where the Streamlit UI finds the backend
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    # API server
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    cors_origins: list[str] = ["*"]

    # Profile seed
    data_dir: Path = Path("./data")
    profiles_file: str = "profiles.csv"
    load_seed_profiles: bool = True

    # Swipe engine
    swipe_threshold: float = Field(100.0, gt=0.0)
    batch_limit: int = Field(10, ge=1, le=100)

    api_url: str = Field(default="http://localhost:8000", alias="FOODMATCH_API_URL")

    # Logs
    log_level: str = "INFO"
    log_file: Path = Path("./logs/app.log")
    log_rotation: str = "10 MB"
    log_retention: str = "14 days"

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper()

    @property
    def profiles_path(self) -> Path:
        return self.data_dir / self.profiles_file

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()
