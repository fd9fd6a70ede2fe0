"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - Gateway success rates are probabilities in [0, 1]; latencies are non-negative ms

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every setting: a local SQLite file works out-of-the-box
"""

from datetime import date
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "sqlite+aiosqlite:///./jobbook.db"
    database_echo: bool = False
    database_pool_size: int = 5
    database_max_overflow: int = 10

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    # Payment gateways (simulated)
    paypal_success_rate: float = Field(0.90, ge=0.0, le=1.0)
    gcash_success_rate: float = Field(0.85, ge=0.0, le=1.0)
    card_success_rate: float = Field(0.95, ge=0.0, le=1.0)
    venmo_success_rate: float = Field(0.90, ge=0.0, le=1.0)
    paypal_latency_ms: int = Field(2000, ge=0)
    gcash_latency_ms: int = Field(1500, ge=0)
    card_latency_ms: int = Field(1200, ge=0)
    venmo_latency_ms: int = Field(1000, ge=0)
    refund_latency_ms: int = Field(1000, ge=0)

    # Receipt storage (simulated cloud bucket)
    receipt_base_url: str = "https://mock-cloud-storage.com"
    receipt_upload_latency_ms: int = Field(1000, ge=0)

    # Seeding
    seed_anchor_date: date = date(2024, 6, 1)

    # API
    cors_origins: list[str] = ["http://localhost:8081"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
