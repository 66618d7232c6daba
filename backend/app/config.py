"""
VendorBridge Backend — Application Configuration
==================================================

What:  Centralized configuration using Pydantic Settings.
Why:   Typed environment loading; bad values fail at startup, not mid-request.
How:   Reads environment variables (or .env), validates them, and exposes a
       `settings` object. The application factory also accepts an explicit
       Settings instance so tests never depend on the process environment.

Environment variable names match the field names (case-insensitive):
    STRIPE_SECRET_KEY, SUPABASE_URL, SUPABASE_KEY, BUCKET_NAME,
    RESEND_API_KEY, MAIL_FROM, PORT, CORS_ORIGINS, LOG_LEVEL
"""

from typing import List

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Credentials default to empty strings so the server can boot (and answer
    health checks) without them; the matching endpoints then fail with a
    ProviderError until they are configured.
    """

    # ── Stripe ────────────────────────────────────────────────────────────
    stripe_secret_key: str = Field(default="", description="Stripe secret API key")

    # ── Supabase Storage ──────────────────────────────────────────────────
    supabase_url: str = Field(default="", description="Supabase project URL")
    supabase_key: str = Field(default="", description="Supabase service or anon key")
    bucket_name: str = Field(default="profiles", description="Storage bucket holding avatars")

    # What: Folder inside the bucket where every avatar key lives
    avatar_folder: str = Field(default="avatars")

    # Default: 5MB = 5 * 1024 * 1024
    max_file_size: int = Field(default=5_242_880, ge=1024, le=52_428_800)

    # ── Resend Mail ───────────────────────────────────────────────────────
    resend_api_key: str = Field(default="", description="Resend API key")
    mail_from: str = Field(default="Orders <orders@example.com>")
    order_email_subject: str = Field(default="Order confirmation")

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated origins; "*" allows any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(
        default=5000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("backend_port", "port"),
    )

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

    @field_validator("avatar_folder")
    @classmethod
    def strip_folder_slashes(cls, v: str) -> str:
        folder = v.strip().strip("/")
        if not folder:
            raise ValueError("avatar_folder must not be empty")
        return folder

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
        "populate_by_name": True,
    }

    @property
    def storage_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @property
    def payments_configured(self) -> bool:
        return bool(self.stripe_secret_key)

    @property
    def mail_configured(self) -> bool:
        return bool(self.resend_api_key)

    def validate_required_for_production(self) -> None:
        """
        What:  Checks that every collaborator has credentials.
        When:  Called during app startup (lifespan).
        Raises ValueError listing every missing variable.
        """
        errors = []
        if not self.payments_configured:
            errors.append("STRIPE_SECRET_KEY is not set (payment intents will fail)")
        if not self.storage_configured:
            errors.append("SUPABASE_URL / SUPABASE_KEY are not set (avatar endpoints will fail)")
        if not self.resend_api_key:
            errors.append("RESEND_API_KEY is not set (order emails will fail)")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


settings = Settings()
