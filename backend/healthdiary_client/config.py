"""
Health Diary Client — Configuration
====================================

What:  Client settings from HEALTHDIARY_* environment variables (or .env).
How:   Same pydantic-settings pattern as the backend; a module-level
       `client_settings` singleton is the default for create_client_app().
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):

    # ── API ───────────────────────────────────────────────────────────────
    # Base URL every endpoint path is appended to
    api_url: str = Field(default="http://localhost:3000/api")

    # Origin the client is served from; links on other origins are not routed
    origin: str = Field(default="http://localhost:5000")

    # Per-request timeout in seconds (connect + read)
    request_timeout: float = Field(default=10.0, gt=0, le=300)

    # ── Entry Cache ───────────────────────────────────────────────────────
    # Seconds a full entry fetch stays fresh
    cache_lifetime: float = Field(default=30.0, ge=0, le=3600)

    # ── Storage ───────────────────────────────────────────────────────────
    # JSON file holding the token and user between runs; None keeps them in memory
    storage_path: Optional[str] = Field(default=None)

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("api_url", "origin")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    model_config = {
        "env_prefix": "HEALTHDIARY_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


client_settings = ClientSettings()
