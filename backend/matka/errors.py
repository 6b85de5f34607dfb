"""Error taxonomy shared by the bet slip engine and the weekly aggregator.

Every error carries a stable machine ``code`` and a user-facing ``message``.
"""

from typing import Optional


class MatkaError(Exception):
    """Base class for all client-side failures."""

    default_message = "Something went wrong."

    def __init__(self, code: str, message: Optional[str] = None):
        self.code = code
        self.message = message or self.default_message
        super().__init__(f"{code}: {self.message}")


class ValidationError(MatkaError):
    """Local input problem, detected before any request is made."""

    default_message = "Invalid input."


class AuthError(MatkaError):
    """Missing or rejected bearer credential; the user must log in again."""

    default_message = "You need to log in."

    def __init__(self, code: str = "not-authenticated", message: Optional[str] = None):
        super().__init__(code, message)


class NetworkError(MatkaError):
    """Transport failure or non-success HTTP status."""

    default_message = "Request failed."

    def __init__(
        self,
        code: str = "request-failed",
        message: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.status_code = status_code
        super().__init__(code, message)


class DataError(MatkaError):
    """Backend payload could not be interpreted."""

    default_message = "Malformed data from server."
