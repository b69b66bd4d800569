"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Missing API keys are legal: services degrade to constitutional/statutory fallbacks

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support (ADR: developer UX)
    - FEC limit amounts keep their historical env names (FEC_ANNUAL, FEC_PER_DONATION, FEC_PER_CAMPAIGN)
"""

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://compliance:compliance@db:5432/compliance"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Congress.gov
    congress_gov_api_key: str | None = None
    congress_api_base_url: str = "https://api.congress.gov/v3"
    congress_api_timeout_seconds: float = 10.0
    # None: cache lives as long as the process
    session_cache_ttl_seconds: float | None = None

    @field_validator("congress_api_base_url", "fec_api_base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/") if isinstance(v, str) else v

    # OpenFEC
    fec_api_key: str | None = None
    fec_api_base_url: str = "https://api.open.fec.gov/v1"
    fec_page_size: int = 100

    # Election dates snapshot
    snapshots_dir: Path = Path("snapshots")
    election_dates_snapshot_file: str = "electionDates.snapshot.json"

    # Tier limits
    fec_annual: float = 200
    fec_per_donation: float = 50
    fec_per_campaign: float = 3500
    # Resolved donations do not consume limit unless this is set
    count_resolved_toward_limits: bool = False

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def election_dates_snapshot_path(self) -> Path:
        return self.snapshots_dir / self.election_dates_snapshot_file


@lru_cache
def get_settings() -> Settings:
    return Settings()
