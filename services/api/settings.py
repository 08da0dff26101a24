# services/api/settings.py
from pydantic_settings import BaseSettings
from pydantic import ConfigDict, Field
import base64
from typing import List, Optional
from pathlib import Path


class Settings(BaseSettings):
    # Spreadsheet settings
    sheets_spreadsheet_id: str = ""
    # Range read and appended to. Without a tab name this is the first tab.
    sheets_range: str = "A:Z"

    # Upstream credentials. A service account allows writes; an API key is read-only.
    # GOOGLE_CREDENTIALS holds inline service-account JSON (Render/Heroku style),
    # GOOGLE_SA_JSON a file path or inline JSON, GOOGLE_SA_JSON_BASE64 the same JSON base64-encoded.
    google_credentials: str = ""
    google_sa_json: str = ""
    google_sa_json_base64: str = ""
    google_api_key: str = ""

    # Shared password gating writes; empty disables login
    auth_password: str = ""
    # Optional seed, only reported at startup; tokens are minted with `secrets`
    auth_token_secret: Optional[str] = None
    token_ttl_seconds: int = Field(default=24 * 60 * 60, gt=0)
    max_active_tokens: int = Field(default=100_000, gt=0)

    # In-memory read cache lifetime
    cache_max_age_seconds: float = Field(default=5.0, ge=0)

    # CORS settings
    allowed_origins: str = "*"

    port: int = 3000
    log_level: str = "INFO"

    model_config = ConfigDict(
        # Always load .env from the same folder as this settings.py
        env_file=str(Path(__file__).resolve().parent / ".env"),
        extra="ignore",
    )

    def resolved_google_credentials(self) -> str:
        """
        Return service-account JSON (inline) or a path to it, or "" when
        only an API key is configured.

        Priority: GOOGLE_CREDENTIALS, then GOOGLE_SA_JSON_BASE64 (decoded
        in memory), then GOOGLE_SA_JSON.
        """
        if self.google_credentials:
            return self.google_credentials

        if self.google_sa_json_base64:
            return base64.b64decode(self.google_sa_json_base64).decode("utf-8")

        if self.google_sa_json:
            return self.google_sa_json

        # Local dev: credentials.json next to the service
        local = Path(__file__).resolve().parent / "credentials.json"
        if local.exists():
            return str(local)
        return ""

    def get_origins_list(self) -> List[str]:
        """Parse comma-separated origins into a list."""
        if not self.allowed_origins:
            return ["*"]
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


_settings_instance = None

def get_settings() -> Settings:
    """Singleton pattern for settings."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
