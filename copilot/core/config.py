import logging
from typing import List, Literal, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    # ============================================================
    # APPLICATION INFO
    # ============================================================
    PROJECT_NAME: str = "Travel Copilot"
    API_V1_STR: str = "/api/v1"
    VERSION: str = "1.0.0"
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False

    # ============================================================
    # HOSTED BACKEND (AUTH + RECORD DATABASE)
    # ============================================================
    BACKEND_URL: str = ""
    BACKEND_ANON_KEY: str = ""
    BACKEND_JWT_SECRET: str = ""
    BACKEND_JWT_AUDIENCE: str = "authenticated"
    BACKEND_TIMEOUT: float = 15.0

    # ============================================================
    # LLM GATEWAY (OPENAI-COMPATIBLE CHAT COMPLETIONS)
    # ============================================================
    LLM_GATEWAY_URL: str = "https://ai.gateway.lovable.dev/v1/chat/completions"
    LLM_API_KEY: str = ""
    LLM_MODEL: str = "google/gemini-3-flash-preview"
    LLM_TEMPERATURE: float = 0.7
    LLM_MAX_TOKENS: int = 2000
    LLM_TIMEOUT: float = 60.0

    # ============================================================
    # OFFLINE CACHE
    # ============================================================
    OFFLINE_CACHE_BACKEND: Literal["file", "redis", "memory"] = "file"
    OFFLINE_CACHE_PATH: str = ".offline_cache.json"
    OFFLINE_CACHE_PREFIX: str = "offline_cache_"
    REDIS_URI: str = "redis://localhost:6379/0"
    REDIS_URL: Optional[str] = None  # alias

    @property
    def get_redis_url(self) -> str:
        return self.REDIS_URL or self.REDIS_URI

    # ============================================================
    # CONNECTIVITY
    # ============================================================
    CONNECTIVITY_PROBE_URL: Optional[str] = None  # manual source when unset
    CONNECTIVITY_PROBE_INTERVAL: float = Field(default=15.0, gt=0)
    CONNECTIVITY_PROBE_TIMEOUT: float = Field(default=3.0, gt=0)

    # ============================================================
    # FRONTEND / CORS
    # ============================================================
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    # ============================================================
    # LOGGING
    # ============================================================
    LOG_LEVEL: str = "INFO"

    # ============================================================
    # PYDANTIC CONFIG
    # ============================================================
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


# ============================================================
# GLOBAL INSTANCE
# ============================================================
settings = Settings()


# ============================================================
# VALIDATION
# ============================================================
def validate_required_settings():
    missing = []

    if not settings.BACKEND_URL:
        missing.append("BACKEND_URL")
    if not settings.BACKEND_ANON_KEY:
        missing.append("BACKEND_ANON_KEY")
    if not settings.BACKEND_JWT_SECRET:
        missing.append("BACKEND_JWT_SECRET")
    if not settings.LLM_API_KEY:
        missing.append("LLM_API_KEY")

    if missing:
        raise ValueError(f"Missing required env vars: {', '.join(missing)}")


try:
    validate_required_settings()
except ValueError as e:
    logging.warning(f"Config warning: {e}")
