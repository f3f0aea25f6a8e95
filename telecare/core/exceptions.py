"""Error taxonomy for the booking core.

Validation and conflict errors are surfaced to the caller. Upstream errors
mean the catalog or appointment store could not be read or written.
Best-effort failures are raised internally by side-effect writers and always
caught by the orchestrator.
"""


class BookingError(Exception):
    """Base class for booking core errors."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BookingValidationError(BookingError):
    """Missing or malformed request fields."""

    status_code = 422


class ConflictError(BookingError):
    """The requested slot is no longer available."""

    status_code = 409


class AppointmentNotFound(BookingError):
    status_code = 404


class UpstreamUnavailable(BookingError):
    """The doctor catalog or the appointment store is unreachable."""

    status_code = 503


class BestEffortFailure(BookingError):
    """A bookkeeping write that must never block the appointment failed."""

    status_code = 500

    def __init__(self, effect: str, message: str):
        super().__init__(message)
        self.effect = effect
