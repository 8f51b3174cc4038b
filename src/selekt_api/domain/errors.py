"""Error kinds raised by the session store."""

from http import HTTPStatus


class SessionError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(SessionError):
    """Raised when a session or asset does not exist."""

    status_code = HTTPStatus.NOT_FOUND


class SessionExpiredError(SessionError):
    """Raised when a session is read after its expiry timestamp."""

    status_code = HTTPStatus.GONE


class CorruptMetadataError(SessionError):
    """Raised when a stored session document cannot be parsed."""


class QuotaExceededError(SessionError):
    """Raised when a session already holds the maximum number of photos."""

    status_code = HTTPStatus.TOO_MANY_REQUESTS


class BadRequestError(SessionError):
    """Raised when required input is missing or malformed."""

    status_code = HTTPStatus.BAD_REQUEST


class PayloadTooLargeError(BadRequestError):
    """Raised when an uploaded file exceeds the configured size ceiling."""
