"""
Custom exception classes for the fleet rental engine.

Every rejection raised by the services is a ``RentalError``: a local,
recoverable condition that carries enough context (ids, dates) for the
caller to explain it. The HTTP layer maps ``http_status`` and ``code``
onto a JSON error body instead of a generic 500.
"""


class RentalError(Exception):
    """Base class for all reservation engine errors."""

    code = "rental_error"
    http_status = 400
    default_message = "Error: request could not be processed"

    def __init__(self, message: str | None = None, **context) -> None:
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover
        return self.message

    def to_dict(self) -> dict:
        body = {"error": self.code, "message": self.message}
        body.update({k: str(v) for k, v in self.context.items() if v is not None})
        return body


class NotFoundError(RentalError):
    """Raised when a customer, vehicle or reservation ID does not exist."""

    code = "not_found"
    http_status = 404
    default_message = "Error: record not found"


class VehicleUnavailableError(RentalError):
    """Raised when a vehicle is not in the available state."""

    code = "vehicle_unavailable"
    http_status = 409
    default_message = "Error: vehicle is not available"


class LeadTimeViolationError(RentalError):
    """Raised when a booking starts fewer than the required days from today."""

    code = "lead_time_violation"
    http_status = 422
    default_message = "Error: booking must be scheduled further in advance"


class AmendmentWindowExpiredError(RentalError):
    """Raised when amend/cancel is attempted after the amendment window."""

    code = "amendment_window_expired"
    http_status = 422
    default_message = "Error: reservation can no longer be changed"


class ScheduleConflictError(RentalError):
    """Raised when a date range overlaps another active reservation of the vehicle."""

    code = "schedule_conflict"
    http_status = 409
    default_message = "Error: dates overlap an existing reservation"


class NoAvailableVehicleError(RentalError):
    """Raised when no vehicle of the requested category is available."""

    code = "no_available_vehicle"
    http_status = 409
    default_message = "Error: no available vehicle in this category"


class InvalidStateError(RentalError):
    """Raised when a lifecycle transition is attempted from a terminal state."""

    code = "invalid_state"
    http_status = 409
    default_message = "Error: reservation is not in a valid state for this action"


class InvalidRequestError(RentalError):
    """Raised when input values are missing or malformed."""

    code = "invalid_request"
    http_status = 400
    default_message = "Error: invalid request"


class InvalidDateRangeError(RentalError):
    """Raised when a date cannot be parsed or a day count is not positive."""

    code = "invalid_date_range"
    http_status = 400
    default_message = "Error: invalid date range"


class AuthenticationError(RentalError):
    """Raised when an admin-only action is attempted without a valid session."""

    code = "unauthorized"
    http_status = 401
    default_message = "Error: admin login required"
