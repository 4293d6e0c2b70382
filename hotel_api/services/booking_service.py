# hotel_api/services/booking_service.py
import logging
from typing import Any, Dict, List, Optional

from pymongo.errors import PyMongoError

from ..context import AppContext
from ..db import BOOKINGS
from ..errors import BookingValidationError, InternalError, VerificationFailed
from ..repositories.booking_repo_mongo import BookingsRepo
from ..telemetry import bookings_created, bookings_duplicate, bookings_rejected, inc
from ..utils.schemas import BookingForm
from .verification import is_human

log = logging.getLogger(__name__)

NOT_READY = "DB not ready"
INITIALIZING = "Server initializing, try again"
DUPLICATE = "Duplicate booking"


def list_bookings(ctx: AppContext) -> List[Dict[str, Any]]:
    repo = BookingsRepo(ctx.store.collection(BOOKINGS, NOT_READY))
    try:
        return repo.all()
    except PyMongoError as e:
        log.error("Error fetching bookings: %s", e)
        raise InternalError(str(e)) from e


def _verify(ctx: AppContext, token: Optional[str], remote_ip: Optional[str]) -> None:
    if not token:
        inc(bookings_rejected, ctx.settings.obs_on, reason="verification")
        raise VerificationFailed("Missing verification token")
    if ctx.verifier is None:
        # verification switched on without a verifier configured: fail closed
        inc(bookings_rejected, ctx.settings.obs_on, reason="verification")
        raise VerificationFailed("Bot verification failed")
    result = ctx.verifier.verify(token, remote_ip)
    if not is_human(result, ctx.settings.recaptcha_min_score):
        log.warning(
            "Bot verification rejected (success=%s score=%.2f)", result.success, result.score
        )
        inc(bookings_rejected, ctx.settings.obs_on, reason="verification")
        raise VerificationFailed("Bot verification failed")


def submit_booking(
    ctx: AppContext, form: BookingForm, remote_ip: Optional[str] = None
) -> Dict[str, Any]:
    """Validate, optionally verify, de-duplicate and persist one booking.

    A duplicate is a normal outcome: ``{"success": False, "message": "Duplicate booking"}``.
    """
    repo = BookingsRepo(ctx.store.collection(BOOKINGS, INITIALIZING))

    if form.missing_fields():
        inc(bookings_rejected, ctx.settings.obs_on, reason="validation")
        raise BookingValidationError("Missing required fields")

    if ctx.settings.verification_enabled:
        _verify(ctx, form.recaptcha_token, remote_ip)

    record = form.to_record()

    try:
        if ctx.settings.unique_index:
            booking_id = repo.insert_unique(record)
        elif repo.find_duplicate(record) is not None:
            booking_id = None
        else:
            booking_id = repo.insert(record)
    except PyMongoError as e:
        log.error("Error saving booking: %s", e)
        raise InternalError(str(e)) from e

    if booking_id is None:
        log.info("Duplicate booking ignored")
        inc(bookings_duplicate, ctx.settings.obs_on)
        return {"success": False, "message": DUPLICATE}

    log.info("Booking saved: %s", booking_id)
    inc(bookings_created, ctx.settings.obs_on)
    return {"success": True, "id": booking_id}
