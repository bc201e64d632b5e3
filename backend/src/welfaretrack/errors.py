"""Error taxonomy for welfaretrack.

ConfigurationError is raised while rule sets are built and is never caught.
Everything else is converted to a JSON response at the request boundary
(see welfaretrack.api.errors).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from welfaretrack.validation.types import ValidationError


class ConfigurationError(Exception):
    """Raised when validation configuration does not match the code using it."""

    pass


class RequestError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RecordInvalidError(RequestError):
    """One or more validation rules failed for a write attempt."""

    status_code = 422

    def __init__(self, errors: list["ValidationError"]):
        super().__init__("Validation failed")
        self.errors = errors

    @property
    def messages(self) -> list[str]:
        return [e.message for e in self.errors]


class AuthenticationError(RequestError):
    """Missing, invalid or expired credentials.

    The message is deliberately the same for every token failure.
    """

    status_code = 401

    def __init__(self, message: str = "unauthorized"):
        super().__init__(message)


class AuthorizationError(RequestError):
    """The caller is authenticated but their role is too low."""

    status_code = 403

    def __init__(self, message: str = "Forbidden Insufficient privileges"):
        super().__init__(message)


class MalformedRequestError(RequestError):
    """A required parameter is missing or has the wrong shape."""

    status_code = 400


class RecordNotFoundError(RequestError):
    """The requested record does not exist."""

    status_code = 404
