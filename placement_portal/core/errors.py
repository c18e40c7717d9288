"""
Domain errors raised by the services.

Every error carries the HTTP status the API layer answers with, so routes
never have to translate them by hand (see the handlers in main.py).
"""


class PlacementError(Exception):
    """Base class for recoverable, caller-facing errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PlacementError):
    """Missing or malformed input; the operation was not attempted."""

    status_code = 400


class ForbiddenError(PlacementError):
    """Role or ownership mismatch."""

    status_code = 403


class NotFoundError(PlacementError):
    """A referenced id does not exist."""

    status_code = 404


class ConflictError(PlacementError):
    """Duplicate application, booking or account."""

    status_code = 409
