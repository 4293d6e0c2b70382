# hotel_api/context.py
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from .config import Settings
from .db import StoreHandle
from .services.verification import RecaptchaVerifier, Verifier


@dataclass
class AppContext:
    settings: Settings
    store: StoreHandle
    verifier: Optional[Verifier] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        verifier = None
        if settings.verification_enabled:
            verifier = RecaptchaVerifier(
                secret=settings.recaptcha_secret_key or "",
                url=settings.recaptcha_verify_url,
            )
        return cls(settings=settings, store=StoreHandle(), verifier=verifier)


def get_context(request: Request) -> AppContext:
    return request.app.state.ctx
