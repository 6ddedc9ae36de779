"""
Application configuration settings.
"""
import json
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SERVER_DIR = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env.server", case_sensitive=True, extra="ignore")

    PROJECT_NAME: str = "SnapVault Server"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "backend server for the SnapVault PDF bundle store"

    API_PREFIX: str = "/api"

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    DEBUG: bool = False
    BASE_URL: str = "http://localhost:5000"
    LOGFIRE_TOKEN: str | None = None

    # CORS settings (accept both comma-separated string and JSON list from env)
    BACKEND_CORS_ORIGINS: list[str] = [
        "https://snapvault-pdf.netlify.app",
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # Payment gateway
    PAYMENT_GATEWAY: str = "razorpay"
    PAYMENT_VERIFIER: str = "signature"
    GATEWAY_KEY_ID: str = ""
    GATEWAY_KEY_SECRET: str = ""
    GATEWAY_SANDBOX: bool = False
    GATEWAY_TIMEOUT_SECONDS: float = 10.0
    CURRENCY: str = "INR"

    # Order lifecycle
    ORDER_EXPIRY_MINUTES: int = 30
    ORDER_SWEEP_INTERVAL_MINUTES: int = 30

    # Admin endpoints are disabled while this is empty
    ADMIN_SECRET_KEY: str = ""

    # Content and persistence
    ASSETS_DIR: Path = SERVER_DIR / "assets"
    REDEMPTION_STORE_PATH: str = ""

    # Mail
    MAIL_USERNAME: str = ""
    MAIL_PASSWORD: str = ""
    MAIL_FROM: str = ""
    MAIL_FROM_NAME: str | None = None
    MAIL_SERVER: str = ""
    MAIL_PORT: int = 587
    MAIL_STARTTLS: bool = True
    MAIL_SSL_TLS: bool = False
    MAIL_SUPPRESS_SEND: bool = False
    ADMIN_EMAIL: str = ""
    SUPPORT_EMAIL: str = ""

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors(cls, v):
        if v is None or v == "":
            return []
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("["):
                try:
                    parsed = json.loads(s)
                    if isinstance(parsed, list):
                        return [str(x).strip() for x in parsed]
                except json.JSONDecodeError:
                    # fall back to comma-splitting if JSON fails
                    pass
            return [part.strip() for part in s.split(",") if part.strip()]
        if isinstance(v, (list, tuple, set)):
            return [str(x).strip() for x in v]
        raise TypeError("BACKEND_CORS_ORIGINS must be a list or a string")

    @field_validator("PAYMENT_GATEWAY", "PAYMENT_VERIFIER", mode="before")
    @classmethod
    def normalize_choice(cls, v):
        return str(v).strip().lower()

    @property
    def api_base_url(self) -> str:
        """Absolute URL prefix used in download links."""
        return self.BASE_URL.rstrip("/") + self.API_PREFIX

    @property
    def mail_configured(self) -> bool:
        return bool(self.MAIL_SERVER and self.MAIL_FROM)


settings = Settings()
