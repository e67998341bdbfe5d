"""
RecipeBox Backend: Application Configuration
==============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by main.py (app factory), Alembic and the test suite.
When:  Loaded once at import time; critical values are validated in the
       application lifespan before the first request is served.

Critical values:
    JWT_SECRET has no default. The service must never sign tokens with an
    empty or built-in key, so `validate_required()` raises ConfigurationError
    when it is missing and startup aborts.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from recipebox.exceptions import ConfigurationError


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes are grouped by concern. Everything except JWT_SECRET has a
    development default.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # Format: sqlite+aiosqlite:///<path>  (relative paths resolve from CWD)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./recipes.db",
        description="Async SQLAlchemy database URL",
    )

    # Insert sample users, categories and recipes into empty tables at startup
    seed_sample_data: bool = Field(default=True)

    # ── Tokens ────────────────────────────────────────────────────────────
    jwt_secret: str = Field(
        default="",
        description="HMAC secret used to sign identity tokens (required)",
    )
    jwt_algorithm: str = Field(default="HS256")
    token_ttl_days: int = Field(default=7, ge=1, le=365)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated origins; "*" allows any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=3000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    def validate_required(self) -> None:
        """
        What:  Validates that critical settings are configured.
        When:  Called during app startup (lifespan), before any token is issued.
        Raises:
            ConfigurationError listing every missing value.
        """
        errors = []
        if not self.jwt_secret.strip():
            errors.append("JWT_SECRET is not set. Tokens cannot be signed without it.")
        if errors:
            raise ConfigurationError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors),
                context={"missing": ["JWT_SECRET"]},
            )


# Singleton instance used by the module-level app in main.py
settings = Settings()
