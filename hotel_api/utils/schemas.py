from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ..db import DUPLICATE_KEY

NO_MESSAGE = "None"
UNKNOWN_DEVICE = "Unknown"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


# -------- Booking --------


class BookingForm(BaseModel):
    """Raw booking submission, JSON or form-encoded. Everything optional here;
    required fields are checked by the intake service so a missing field is a 400,
    not a schema error."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    guest_name: Optional[str] = None
    # contact arrives as phone or email depending on the site form
    phone: Optional[str] = None
    email: Optional[str] = None
    contact: Optional[str] = None
    check_in: Optional[str] = None  # date string, stored as sent
    check_out: Optional[str] = None
    room_type: Optional[str] = None
    message: Optional[str] = None
    device: Optional[str] = None
    recaptcha_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "recaptcha_token", "recaptchaToken", "g-recaptcha-response"
        ),
    )

    @field_validator("*", mode="before")
    @classmethod
    def strip_blank(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @property
    def resolved_contact(self) -> Optional[str]:
        return self.phone or self.email or self.contact

    def missing_fields(self) -> List[str]:
        values = {
            "guest_name": self.guest_name,
            "contact": self.resolved_contact,
            "check_in": self.check_in,
            "check_out": self.check_out,
            "room_type": self.room_type,
        }
        return [k for k, v in values.items() if not v]

    def to_record(self, now: Optional[datetime] = None) -> "BookingRecord":
        return BookingRecord(
            guest_name=self.guest_name,
            contact=self.resolved_contact,
            check_in=self.check_in,
            check_out=self.check_out,
            room_type=self.room_type,
            message=self.message or NO_MESSAGE,
            device=self.device or UNKNOWN_DEVICE,
            timestamp=now or utcnow(),
        )


class BookingRecord(BaseModel):
    guest_name: str
    contact: str
    check_in: str
    check_out: str
    room_type: str
    message: str = NO_MESSAGE
    device: str = UNKNOWN_DEVICE
    timestamp: datetime = Field(default_factory=utcnow)

    def duplicate_filter(self) -> Dict[str, str]:
        return {k: getattr(self, k) for k in DUPLICATE_KEY}

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump()


# -------- Visitor sessions --------


def parse_client_timestamp(v: Any) -> Optional[datetime]:
    """ISO-8601 string or epoch milliseconds -> aware datetime; None if unusable."""
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, datetime):
        return v if v.tzinfo else v.replace(tzinfo=timezone.utc)
    try:
        if isinstance(v, (int, float)):
            return datetime.fromtimestamp(v / 1000.0, tz=timezone.utc)
        s = str(v).strip()
        if not s:
            return None
        if s.lstrip("-").isdigit():
            return datetime.fromtimestamp(int(s) / 1000.0, tz=timezone.utc)
        dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
        return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)
    except (ValueError, OverflowError, OSError):
        return None


class SessionEvent(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    sessionId: Optional[str] = None
    page: Optional[str] = None
    eventType: Optional[str] = None  # "page_visit" | "page_exit"
    timestamp: Optional[Any] = None

    def to_document(self, user_agent: Optional[str], ip: Optional[str]) -> Dict[str, Any]:
        return {
            "sessionId": self.sessionId,
            "page": self.page,
            "eventType": self.eventType,
            "timestamp": parse_client_timestamp(self.timestamp) or utcnow(),
            "userAgent": user_agent,
            "ip": ip,
        }
