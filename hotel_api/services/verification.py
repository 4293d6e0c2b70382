# hotel_api/services/verification.py
from __future__ import annotations

import logging
from typing import Optional, Protocol

import requests
from pydantic import BaseModel
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

log = logging.getLogger(__name__)

TIMEOUT = 10


class VerificationResult(BaseModel):
    success: bool = False
    score: float = 0.0
    error_codes: list[str] = []


class Verifier(Protocol):
    def verify(self, token: str, remote_ip: Optional[str] = None) -> VerificationResult: ...


class RecaptchaVerifier:
    """reCAPTCHA v3 siteverify client. Any failure to reach it counts as a failed check."""

    def __init__(self, secret: str, url: str, timeout: float = TIMEOUT):
        self.secret = secret
        self.url = url
        self.timeout = timeout

    @retry(
        wait=wait_fixed(1),
        stop=stop_after_attempt(2),
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
        reraise=True,
    )
    def _post(self, data: dict) -> dict:
        r = requests.post(self.url, data=data, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def verify(self, token: str, remote_ip: Optional[str] = None) -> VerificationResult:
        data = {"secret": self.secret, "response": token}
        if remote_ip:
            data["remoteip"] = remote_ip
        try:
            body = self._post(data)
            return VerificationResult(
                success=bool(body.get("success")),
                score=float(body.get("score") or 0.0),
                error_codes=list(body.get("error-codes") or []),
            )
        except (requests.RequestException, ValueError, TypeError, AttributeError) as e:
            log.warning("reCAPTCHA verification call failed: %s", e)
            return VerificationResult(success=False, score=0.0, error_codes=["verifier-unreachable"])


def is_human(result: VerificationResult, min_score: float = 0.5) -> bool:
    return result.success and result.score >= min_score
