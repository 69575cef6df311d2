from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class UnresolvedPolicy(str, Enum):
    # vacuous: unresolved names compile to all-zero rows (logged)
    VACUOUS = "vacuous"
    REJECT = "reject"


class Settings(BaseSettings):
    """Service settings, read from environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    port: int = 8000
    reload: bool = False
    log_level: str = "INFO"

    # Solver
    solver_id: str = "GLOP"
    solver_time_limit_ms: int = 10_000  # 0 disables the limit

    # Compiler
    unresolved_policy: UnresolvedPolicy = UnresolvedPolicy.VACUOUS


@lru_cache
def get_settings() -> Settings:
    return Settings()
