# hotel_api/errors.py


class BookingAPIError(Exception):
    """Base for failures rendered as ``{"success": false, "error": ...}``."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ServiceUnavailable(BookingAPIError):
    # store handle not attached yet; the caller may retry
    status_code = 503


class BookingValidationError(BookingAPIError):
    status_code = 400


class VerificationFailed(BookingAPIError):
    status_code = 403


class InternalError(BookingAPIError):
    status_code = 500
