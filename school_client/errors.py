"""Client error hierarchy.

Every failure of a backend call surfaces as ``ApiRequestError`` regardless of
its cause (transport failure, non-2xx status, undecodable body, or an explicit
``success: false`` envelope), so callers need a single ``except`` branch.
The remaining subclasses are raised by the service layer before or after a
request, never by the access layer itself.
"""

from __future__ import annotations

from typing import Any


class SchoolClientError(Exception):
    """Base error for all school client errors."""

    message: str = "Something went wrong"

    def __init__(self, message: str | None = None, details: Any = None) -> None:
        self.message = message or self.__class__.message
        self.details = details
        super().__init__(self.message)


class ApiRequestError(SchoolClientError):
    """A backend call failed.

    ``status`` is the HTTP status code, or ``None`` when no response was
    received. ``details`` is the parsed response body, or ``{"cause": exc}``
    for transport and decode failures.
    """

    def __init__(
        self,
        message: str | None = None,
        status: int | None = None,
        details: Any = None,
    ) -> None:
        self.status = status
        super().__init__(message, details=details)

    def __repr__(self) -> str:
        return f"ApiRequestError(message={self.message!r}, status={self.status!r})"


class FormValidationError(SchoolClientError):
    """Form input rejected before any request was sent."""

    message = "Validation error"

    def __init__(
        self, message: str | None = None, fields: list[dict] | None = None
    ) -> None:
        self.fields = fields or []
        super().__init__(message, details={"fields": self.fields})


class AuthenticationError(SchoolClientError):
    """Teacher login did not return a teacher record."""

    message = "Invalid login credentials"


class LookupFailedError(SchoolClientError):
    """A lookup against already-loaded reference data found nothing."""

    message = "Record not found"
