# hotel_api/config.py
import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

RECAPTCHA_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"


def _flag(name: str, default: str) -> bool:
    return (os.getenv(name, default) or default).strip().lower() in ("on", "true", "1", "yes")


def _origins(raw: Optional[str]) -> List[str]:
    items = [o.strip() for o in (raw or "*").split(",") if o.strip()]
    return items or ["*"]


class Settings(BaseModel):
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "hotel_devang"
    mongo_tls: bool = False
    port: int = 3000

    # --- Bot verification ---
    recaptcha_secret_key: Optional[str] = None
    verification_enabled: bool = False
    recaptcha_min_score: float = Field(default=0.5, ge=0.0, le=1.0)
    recaptcha_verify_url: str = RECAPTCHA_VERIFY_URL

    # --- Feature flags ---
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    session_log_enabled: bool = True
    unique_index: bool = False
    obs_on: bool = True

    sentry_dsn: Optional[str] = None
    log_level: str = "INFO"

    @property
    def cors_restricted(self) -> bool:
        return "*" not in self.cors_origins

    @classmethod
    def from_env(cls) -> "Settings":
        secret = os.getenv("RECAPTCHA_SECRET_KEY") or None
        return cls(
            mongo_uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
            mongo_db=os.getenv("MONGO_DB", "hotel_devang"),
            mongo_tls=_flag("MONGO_TLS", "off"),
            port=int(os.getenv("PORT", "3000")),
            recaptcha_secret_key=secret,
            # verification defaults to on only when a secret is configured
            verification_enabled=_flag("VERIFICATION", "on" if secret else "off"),
            recaptcha_min_score=float(os.getenv("RECAPTCHA_MIN_SCORE", "0.5")),
            recaptcha_verify_url=os.getenv("RECAPTCHA_VERIFY_URL", RECAPTCHA_VERIFY_URL),
            cors_origins=_origins(os.getenv("CORS_ORIGINS")),
            session_log_enabled=_flag("SESSION_LOG", "on"),
            unique_index=_flag("BOOKING_UNIQUE_INDEX", "off"),
            obs_on=_flag("OBS_ON", "on"),
            sentry_dsn=os.getenv("SENTRY_DSN") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
