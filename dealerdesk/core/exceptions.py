"""Domain exceptions mapped to HTTP status codes by safe_error_response()."""


class DealerDeskError(Exception):
    """Base class for expected, client-facing failures."""

    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ValidationError(DealerDeskError, ValueError):
    """Request payload failed validation."""

    status_code = 400


class NotFoundError(DealerDeskError):
    """Record does not exist within the caller's dealer scope."""

    status_code = 404


class ConflictError(DealerDeskError):
    """Write would violate a per-dealer uniqueness rule."""

    status_code = 409
