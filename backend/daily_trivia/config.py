"""Settings — every tunable of the service, read from the environment or .env.

Invariants:
    - Secrets (API keys, cron key) only ever come from the environment
    - similarity_threshold is within [0, 1]; max_generation_attempts is at least 1
    - get_settings() builds Settings once per process

Design Decisions:
    - pydantic-settings: typed, validated, case-insensitive env names
    - Placeholder API keys let the app boot for health checks without secrets;
      the first external call fails instead
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # ── Storage ──
    database_url: str = "postgresql+asyncpg://trivia:trivia@db:5432/trivia"
    database_pool_size: int = 20
    database_max_overflow: int = 10

    # ── Question generation and grading (Anthropic) ──
    anthropic_api_key: str = "sk-ant-placeholder"
    generator_model: str = "claude-sonnet-4-5"
    grader_model: str = "claude-haiku-4-5"
    anthropic_timeout_seconds: int = 30

    # ── Embeddings (OpenAI) ──
    openai_api_key: str = "sk-placeholder"
    embed_model: str = "text-embedding-3-small"
    embed_timeout_seconds: int = 20

    # ── Novelty gate and retry budget ──
    similarity_threshold: float = Field(default=0.6, ge=0.0, le=1.0)
    max_generation_attempts: int = Field(default=5, ge=1)

    # ── HTTP ──
    cron_key: str = ""  # empty: admin generation always answers 401
    cors_origins: list[str] = ["http://localhost:3000"]

    # ── Logging ──
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_asyncpg_driver(cls, value: str) -> str:
        """postgresql:// (as hosting providers hand it out) → postgresql+asyncpg://."""
        if isinstance(value, str) and value.startswith("postgresql://"):
            return "postgresql+asyncpg://" + value[len("postgresql://"):]
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
