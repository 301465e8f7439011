"""Mini README: Error kinds raised while handling expense requests.

Each error carries the HTTP status it maps to so the handler boundary can
turn it into a ``{"success": false, "error": ...}`` payload without a lookup
table. Anything outside this hierarchy is treated as an internal failure.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for request failures with a client-facing message."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MalformedBodyError(LedgerError):
    """The request body is not valid JSON."""

    status_code = 400


class MissingFieldError(LedgerError):
    """One or more required fields are absent."""

    status_code = 400


class InvalidAmountError(LedgerError):
    """The amount is present but does not parse to a finite number."""

    status_code = 400


class RecordNotFoundError(LedgerError):
    """The identifier resolves to no stored record."""

    status_code = 404


class MethodNotAllowedError(LedgerError):
    """The HTTP method is outside the supported set."""

    status_code = 405
