"""
Application settings (Pydantic Settings).
"""

from pathlib import Path

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings

# Load .env from server root (server/src/parlor/config.py -> server/.env)
SERVER_ROOT = Path(__file__).parent.parent.parent
load_dotenv(SERVER_ROOT / ".env")


class Settings(BaseSettings):
    # Sessions not touched for this long are deleted by the reclaimer
    session_timeout_secs: int = 1200
    # Time between the starts of two reclaimer sweeps
    session_sweep_period_secs: int = 300

    session_cookie_name: str = "session_id"
    session_cookie_secure: bool = False

    log_level: str = "INFO"

    # Comma-separated in the environment
    cors_origins: str = "http://localhost:3000"

    class Config:
        env_file = SERVER_ROOT / ".env"
        extra = "ignore"

    @field_validator("log_level", mode="after")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.strip().upper()

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


settings = Settings()
