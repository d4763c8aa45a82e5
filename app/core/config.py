# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_VOICE_AGENT_ID = "agent_8701kfjzrrhcf408keqd06k3pryw"


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Supabase Postgres connection string)

    Token verification (one of):
      - SUPABASE_JWT_SECRET (JWT signing secret, verified locally)
      - SUPABASE_URL + SUPABASE_KEY (verified remotely via Supabase Auth)

    Optional:
      - VOICE_AGENT_ID (falls back to the default City Assistant agent)
    """

    PROJECT_NAME: str = "OurStreet API"
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Supabase / DB config
    DATABASE_URL: str
    SUPABASE_URL: str | None = None
    SUPABASE_KEY: str | None = None

    # JWT verification (backend-side)
    SUPABASE_JWT_SECRET: str | None = None
    SUPABASE_JWT_ALG: str = "HS256"

    # Cookie checked when no Authorization header is sent
    AUTH_COOKIE_NAME: str = "auth-token"

    # Conversational voice agent
    VOICE_AGENT_ID: str = DEFAULT_VOICE_AGENT_ID
    VOICE_AGENT_NAME: str = "City Assistant"
    VOICE_AGENT_DESCRIPTION: str = "Your AI-powered civic assistant"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
