"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Values are validated at load time.
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.domain.enums import AdminMatchMode


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings have defaults; validate_modes_and_timeouts rejects unknown
    admin match modes, unknown exporters and non-positive timeouts.
    """

    # App
    app_name: str = "bizdesk-access"
    app_version: str = "1.0.0"
    debug: bool = False

    # Backend API
    api_base_url: str = "http://localhost:8000/api"
    api_timeout_seconds: float = 30.0
    identity_path: str = "/current-identity"
    permissions_path: str = "/permissions"
    translations_path: str = "/public/translations"

    # Role profile loading
    identity_timeout_seconds: float = 5.0
    identity_max_attempts: int = 3

    # Admin bypass: "substring" (name/code contains admin|administrator|owner)
    # or "allowlist" (role code must be in admin_role_codes).
    admin_match_mode: str = AdminMatchMode.SUBSTRING.value
    admin_role_codes: str = "ADMIN,ADMINISTRATOR,OWNER"

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Request / middleware
    request_id_header: str = "X-Request-ID"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_modes_and_timeouts(self) -> "Settings":
        """Validate enumerated settings and numeric bounds."""
        if self.admin_match_mode.lower() not in AdminMatchMode.values():
            raise ValueError(
                f"admin_match_mode must be one of {AdminMatchMode.values()}, "
                f"got: {self.admin_match_mode!r}"
            )
        self.admin_match_mode = self.admin_match_mode.lower()
        if self.identity_timeout_seconds <= 0 or self.api_timeout_seconds <= 0:
            raise ValueError("identity_timeout_seconds and api_timeout_seconds must be positive")
        if self.identity_max_attempts < 1:
            raise ValueError("identity_max_attempts must be at least 1")
        if self.telemetry_exporter not in ("console", "otlp", "none"):
            raise ValueError(
                f"Invalid telemetry_exporter '{self.telemetry_exporter}'. "
                "Must be one of: 'console', 'otlp', 'none'"
            )
        if not 0.0 <= self.telemetry_sample_rate <= 1.0:
            raise ValueError("telemetry_sample_rate must be between 0.0 and 1.0")
        return self

    @property
    def admin_match(self) -> AdminMatchMode:
        return AdminMatchMode(self.admin_match_mode)

    @property
    def admin_role_code_list(self) -> list[str]:
        """admin_role_codes split on commas, blanks dropped."""
        return [c.strip() for c in self.admin_role_codes.split(",") if c.strip()]

    @property
    def allowed_origin_list(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
