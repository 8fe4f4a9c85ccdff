"""Syntactic validation of enrollment numbers and programme codes."""

import re

from ..exceptions import InvalidEnrollmentError, InvalidProgramError
from ..models import QueryKind, QueryRequest

ENROLLMENT_RE = re.compile(r"^\d{9,10}$")
PROGRAM_RE = re.compile(r"^[A-Za-z]{2,10}$")


def validate_enrollment(raw: str | None) -> str:
    """Check an enrollment number.

    Args:
        raw: Enrollment number as typed by the user.

    Returns:
        Trimmed enrollment number.

    Raises:
        InvalidEnrollmentError: If it is not 9-10 digits.
    """
    enrollment = (raw or "").strip()
    if not ENROLLMENT_RE.match(enrollment):
        raise InvalidEnrollmentError(f"Invalid enrollment number: {enrollment!r}")
    return enrollment


def validate_program(raw: str | None) -> str:
    """Check a programme code.

    Args:
        raw: Programme code as typed by the user.

    Returns:
        Trimmed, upper-cased programme code.

    Raises:
        InvalidProgramError: If it is not 2-10 letters.
    """
    program = (raw or "").strip()
    if not PROGRAM_RE.match(program):
        raise InvalidProgramError(f"Invalid programme code: {program!r}")
    return program.upper()


def validate_input(enrollment: str | None, program: str | None, kind: QueryKind) -> QueryRequest:
    """Validate raw user input and build an immutable query request.

    Raises:
        InvalidEnrollmentError: If the enrollment number is malformed.
        InvalidProgramError: If the programme code is malformed.
    """
    return QueryRequest(
        enrollment_number=validate_enrollment(enrollment),
        program_code=validate_program(program),
        query_kind=kind,
    )
