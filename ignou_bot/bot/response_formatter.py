"""Response formatting for portal reports and chat delivery.

Renders validated query data into chat-ready report text and splits
oversized reports into Telegram-sized chunks. Formatting is pure: no
network or parsing happens here.
"""

import logging

from ..models import (
    AssignmentMark,
    AssignmentStatusData,
    FailureKind,
    GradeCardData,
    QueryFailure,
    QueryKind,
)
from .messages import (
    ASSIGNMENT_DATE_LINE,
    ASSIGNMENT_DETAILS_HEADER,
    ASSIGNMENT_ITEM_LINE,
    ASSIGNMENT_LABEL_LINE,
    ASSIGNMENT_MARKS_HEADER,
    ASSIGNMENT_NAME_LINE,
    ASSIGNMENT_SESSION_LINE,
    ASSIGNMENT_STATUS_HEADER,
    ASSIGNMENT_STATUS_LINE,
    CGPA_LINE,
    COURSE_DETAIL_LINE,
    COURSE_LINE,
    ENROLLMENT_LINE,
    ERROR_INVALID_ENROLLMENT,
    ERROR_INVALID_PROGRAM,
    ERROR_NO_RECORDS,
    ERROR_PORTAL_UNREACHABLE,
    ERROR_SERVER,
    FAILURE_TEMPLATE,
    GRADE_CARD_HEADER,
    MARKS_LINE,
    MARKS_SECTION_HEADER,
    MARKS_SEMESTER_HEADER,
    NO_ASSIGNMENTS,
    NO_MARKS,
    NO_SEMESTERS,
    PROGRAMME_LINE,
    SEMESTER_CREDITS_LINE,
    SEMESTER_HEADER,
    SEMESTER_SGPA_LINE,
    SEPARATOR_LINE,
    STUDENT_NAME_LINE,
    STUDENT_PROGRAMME_LINE,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_MESSAGE_LENGTH = 4000

FAILURE_REASONS = {
    FailureKind.INVALID_ENROLLMENT: ERROR_INVALID_ENROLLMENT,
    FailureKind.INVALID_PROGRAM: ERROR_INVALID_PROGRAM,
    FailureKind.PORTAL_UNREACHABLE: ERROR_PORTAL_UNREACHABLE,
    FailureKind.NO_RECORDS: ERROR_NO_RECORDS,
    FailureKind.SERVER_ERROR: ERROR_SERVER,
}


def _split_long_line(line: str, max_length: int) -> list[str]:
    """Split one over-long line at spaces.

    Pieces rejoin with a single space. A word longer than max_length is the
    only thing ever cut, and then by characters.
    """
    pieces: list[str] = []
    current: str | None = None

    for word in line.split(" "):
        if len(word) > max_length:
            if current is not None:
                pieces.append(current)
                current = None
            pieces.extend(word[i : i + max_length] for i in range(0, len(word), max_length))
            continue

        if current is None:
            current = word
        elif len(current) + 1 + len(word) <= max_length:
            current = f"{current} {word}"
        else:
            pieces.append(current)
            current = word

    if current is not None:
        pieces.append(current)
    return pieces


def split_message(text: str, max_length: int = DEFAULT_MAX_MESSAGE_LENGTH) -> list[str]:
    """Split text into chunks no longer than max_length.

    Lines are kept whole and packed greedily; chunks made of whole lines
    rejoin with "\\n". A single line longer than max_length is split at word
    boundaries into pieces that rejoin with " ".

    Args:
        text: Report text.
        max_length: Maximum chunk length in characters.

    Returns:
        Chunks in order; [text] when it already fits.

    Raises:
        ValueError: If max_length is not positive.
    """
    if max_length <= 0:
        raise ValueError("max_length must be positive")
    if len(text) <= max_length:
        return [text]

    chunks: list[str] = []
    current: list[str] = []
    current_length = 0

    for line in text.split("\n"):
        if len(line) > max_length:
            if current:
                chunks.append("\n".join(current))
                current, current_length = [], 0
            chunks.extend(_split_long_line(line, max_length))
            continue

        new_length = current_length + 1 + len(line) if current else len(line)
        if new_length > max_length:
            chunks.append("\n".join(current))
            current, current_length = [line], len(line)
        else:
            current.append(line)
            current_length = new_length

    if current:
        chunks.append("\n".join(current))

    logger.debug(f"Split {len(text)} chars into {len(chunks)} chunk(s)")
    return chunks


def format_percentage(mark: AssignmentMark) -> str:
    """Percentage text, "0" when the maximum marks are unknown."""
    if mark.total_marks <= 0:
        return "0"
    return f"{mark.percentage:.2f}"


class ResultFormatter:
    """Formats portal query results into chat-ready text."""

    def __init__(self, max_message_length: int = DEFAULT_MAX_MESSAGE_LENGTH) -> None:
        """Initialize result formatter.

        Args:
            max_message_length: Chunk size used by render().
        """
        self.max_message_length = max_message_length

    def render(self, kind: QueryKind, data: AssignmentStatusData | GradeCardData) -> list[str]:
        """Format a report and split it into sendable chunks."""
        return split_message(self.format_report(kind, data), self.max_message_length)

    def format_report(self, kind: QueryKind, data: AssignmentStatusData | GradeCardData) -> str:
        """Format the report for a query kind.

        Raises:
            TypeError: If data does not fit the query kind.
        """
        if kind is QueryKind.ASSIGNMENT_STATUS and isinstance(data, AssignmentStatusData):
            return self.format_assignment_status(data)
        if kind is QueryKind.GRADE_CARD and isinstance(data, GradeCardData):
            return self.format_grade_card(data)
        if kind is QueryKind.ASSIGNMENT_MARKS and isinstance(data, GradeCardData):
            return self.format_assignment_marks(data)
        raise TypeError(f"Cannot format {type(data).__name__} as {kind.value}")

    def format_assignment_status(self, data: AssignmentStatusData) -> str:
        """Numbered assignment list with optional name, session and date."""
        lines = [
            ASSIGNMENT_STATUS_HEADER,
            "",
            ENROLLMENT_LINE.format(enrollment=data.enrollment_number),
            PROGRAMME_LINE.format(programme=data.program_code),
            "",
        ]

        if not data.assignments:
            lines.append(NO_ASSIGNMENTS)
            return "\n".join(lines)

        lines.extend([ASSIGNMENT_DETAILS_HEADER, SEPARATOR_LINE])
        for index, assignment in enumerate(data.assignments, start=1):
            lines.append(ASSIGNMENT_ITEM_LINE.format(index=index, course_code=assignment.course_code))
            if assignment.course_name:
                lines.append(ASSIGNMENT_NAME_LINE.format(course_name=assignment.course_name))
            if assignment.assignment_label:
                lines.append(ASSIGNMENT_LABEL_LINE.format(label=assignment.assignment_label))
            if assignment.session:
                lines.append(ASSIGNMENT_SESSION_LINE.format(session=assignment.session))
            lines.append(ASSIGNMENT_STATUS_LINE.format(status=assignment.status))
            if assignment.submission_date:
                lines.append(ASSIGNMENT_DATE_LINE.format(date=assignment.submission_date))
            lines.append("")

        return "\n".join(lines).rstrip("\n")

    def format_grade_card(self, data: GradeCardData) -> str:
        """Per-semester course listing with SGPA and the overall CGPA."""
        lines = [
            GRADE_CARD_HEADER,
            "",
            ENROLLMENT_LINE.format(enrollment=data.enrollment_number),
            PROGRAMME_LINE.format(programme=data.program_code),
        ]
        if data.student_info.name:
            lines.append(STUDENT_NAME_LINE.format(name=data.student_info.name))
        if data.student_info.programme:
            lines.append(STUDENT_PROGRAMME_LINE.format(programme=data.student_info.programme))
        lines.extend(["", SEPARATOR_LINE])

        if not data.semester_results:
            lines.append(NO_SEMESTERS)
            return "\n".join(lines)

        for semester in data.semester_results:
            lines.extend(
                [
                    "",
                    SEMESTER_HEADER.format(label=semester.label),
                    SEMESTER_CREDITS_LINE.format(credits=semester.total_credits),
                    SEMESTER_SGPA_LINE.format(sgpa=semester.sgpa),
                    "",
                ]
            )
            for course in semester.courses:
                name = f" - {course.course_name}" if course.course_name else ""
                lines.append(COURSE_LINE.format(course_code=course.course_code, course_name=name))
                lines.append(
                    COURSE_DETAIL_LINE.format(
                        credits=course.credits,
                        grade=course.grade or "-",
                        grade_points=course.grade_points,
                    )
                )

        total_credits = sum(semester.total_credits for semester in data.semester_results)
        lines.extend(["", SEPARATOR_LINE, CGPA_LINE.format(cgpa=data.cgpa, credits=total_credits)])
        return "\n".join(lines)

    def format_assignment_marks(self, data: GradeCardData) -> str:
        """Marks grouped by semester, one "code: marks/total (pct%)" line each."""
        lines = [
            ASSIGNMENT_MARKS_HEADER,
            "",
            ENROLLMENT_LINE.format(enrollment=data.enrollment_number),
            PROGRAMME_LINE.format(programme=data.program_code),
            "",
        ]

        if not data.assignment_marks:
            lines.append(NO_MARKS)
            return "\n".join(lines)

        lines.extend([MARKS_SECTION_HEADER, SEPARATOR_LINE])
        for semester, marks in data.assignment_marks.items():
            lines.extend(["", MARKS_SEMESTER_HEADER.format(semester=semester)])
            for mark in marks:
                lines.append(
                    MARKS_LINE.format(
                        course_code=mark.course_code,
                        marks=mark.assignment_marks,
                        total=mark.total_marks,
                        percentage=format_percentage(mark),
                    )
                )
        return "\n".join(lines)

    @staticmethod
    def failure_reason(failure: FailureKind) -> str:
        """User-safe reason text for a failure kind."""
        return FAILURE_REASONS.get(failure, ERROR_SERVER)

    def format_failure(self, result: QueryFailure) -> str:
        """Format a failed query for the user."""
        return FAILURE_TEMPLATE.format(reason=result.reason)


# Global result formatter instance
result_formatter = ResultFormatter()
