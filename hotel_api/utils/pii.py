# hotel_api/utils/pii.py
import re
from typing import Any, Dict

EMAIL = re.compile(r"([A-Za-z0-9._%+-])[A-Za-z0-9._%+-]*(@[A-Za-z0-9.-]+\.[A-Za-z]{2,})")
PHONE = re.compile(r"(?:\+?\d{1,3}[ -]?)?(?:\(?\d{2,4}\)?[ -]?)?\d{3,4}[ -]?(\d{4})")

# form fields that carry guest contact details
CONTACT_FIELDS = ("phone", "email", "contact")
SECRET_FIELDS = ("recaptcha_token", "recaptchaToken", "g-recaptcha-response")


def mask_contact(text: str) -> str:
    """Keep just enough of an email/phone to recognise it in logs."""
    if not text:
        return text
    t = EMAIL.sub(r"\1***\2", text)
    t = PHONE.sub(r"***\1", t)
    return t


def scrub_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a submitted form that is safe to log."""
    out: Dict[str, Any] = {}
    for k, v in (payload or {}).items():
        if k in SECRET_FIELDS:
            out[k] = "[TOKEN]" if v else v
        elif k in CONTACT_FIELDS and isinstance(v, str):
            out[k] = mask_contact(v)
        else:
            out[k] = v
    return out
