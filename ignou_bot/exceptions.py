"""Custom exceptions for the IGNOU portal scraping layer."""

from .models import FailureKind, Outcome


class PortalError(Exception):
    """Base exception for portal query errors."""

    failure = FailureKind.SERVER_ERROR


class InputValidationError(PortalError):
    """Enrollment number or programme code failed syntactic checks."""


class InvalidEnrollmentError(InputValidationError):
    """Enrollment number is not 9-10 digits."""

    failure = FailureKind.INVALID_ENROLLMENT


class InvalidProgramError(InputValidationError):
    """Programme code is not 2-10 letters."""

    failure = FailureKind.INVALID_PROGRAM


class TransportError(PortalError):
    """A single request variant failed (network error, timeout, non-2xx)."""

    failure = FailureKind.PORTAL_UNREACHABLE

    def __init__(self, message: str, url: str | None = None, status: int | None = None):
        super().__init__(message)
        self.url = url
        self.status = status


class PortalSoftError(PortalError):
    """Portal answered normally but the page body reports an error."""

    _FAILURES = {
        Outcome.INVALID_ENROLLMENT: FailureKind.INVALID_ENROLLMENT,
        Outcome.INVALID_PROGRAM: FailureKind.INVALID_PROGRAM,
        Outcome.NO_RECORDS: FailureKind.NO_RECORDS,
        Outcome.SERVER_ERROR: FailureKind.SERVER_ERROR,
    }

    def __init__(self, outcome: Outcome):
        super().__init__(f"Portal reported {outcome.value}")
        self.outcome = outcome
        self.failure = self._FAILURES.get(outcome, FailureKind.SERVER_ERROR)


class ExtractionEmptyError(PortalError):
    """Neither structural nor pattern extraction found a valid record."""

    failure = FailureKind.NO_RECORDS
