from typing import Literal

from pydantic import computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    # Database (async SQLAlchemy URL)
    DATABASE_URL: str = "sqlite+aiosqlite:///./shiftgap.db"
    DATABASE_ECHO: bool = False
    DATABASE_POOL_PRE_PING: bool = True

    @computed_field  # type: ignore[prop-decorator]
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        # Supabase/Heroku style URLs need the async driver spelled out
        if self.DATABASE_URL.startswith("postgresql://"):
            return self.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://", 1)
        if self.DATABASE_URL.startswith("postgres://"):
            return self.DATABASE_URL.replace("postgres://", "postgresql+asyncpg://", 1)
        return self.DATABASE_URL

    # Gap engine
    FALLBACK_NET_SHIFT_HOURS: float = 8.0
    STRICT_ORG_SCOPE: bool = True
    # 0 = fan out every employee lookup at once
    COMPETENCE_FETCH_CONCURRENCY: int = 0

    @field_validator("FALLBACK_NET_SHIFT_HOURS")
    @classmethod
    def _positive_fallback(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("FALLBACK_NET_SHIFT_HOURS must be > 0")
        return v

    @field_validator("COMPETENCE_FETCH_CONCURRENCY")
    @classmethod
    def _non_negative_concurrency(cls, v: int) -> int:
        if v < 0:
            raise ValueError("COMPETENCE_FETCH_CONCURRENCY must be >= 0")
        return v

    # Observability Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # "json" or "console"
    LOG_SQL: bool = False
    ENABLE_METRICS: bool = True


settings = Settings()
