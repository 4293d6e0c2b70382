# hotel_api/telemetry.py
import logging
from typing import Optional

import sentry_sdk
from prometheus_client import Counter, Histogram

log = logging.getLogger(__name__)

# --- Metrics ---
bookings_created = Counter("bookings_created_total", "Bookings persisted")
bookings_duplicate = Counter("bookings_duplicate_total", "Soft-duplicate booking submissions")
bookings_rejected = Counter(
    "bookings_rejected_total", "Rejected booking submissions", ["reason"]
)
session_events = Counter("visitor_session_events_total", "Visitor session events logged")
submit_latency_seconds = Histogram(
    "booking_submit_latency_seconds", "Booking submission latency"
)

_reporting_on = False


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def init_error_reporting(dsn: Optional[str]) -> bool:
    global _reporting_on
    if not dsn:
        _reporting_on = False
        return False
    sentry_sdk.init(dsn=dsn, send_default_pii=False)
    _reporting_on = True
    log.info("Error reporting enabled")
    return True


def report_exception(exc: BaseException) -> None:
    """Queue the exception for the reporting backend; never raises."""
    if not _reporting_on:
        return
    try:
        # the SDK hands events to its background transport
        sentry_sdk.capture_exception(exc)
    except Exception as e:  # reporting must never break a response
        log.warning("Error reporting failed: %s", e)


def inc(counter, enabled: bool = True, **labels) -> None:
    if not enabled:
        return
    try:
        (counter.labels(**labels) if labels else counter).inc()
    except Exception:
        pass
