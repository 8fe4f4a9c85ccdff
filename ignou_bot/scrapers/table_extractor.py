"""Structured extraction of portal records from HTML tables.

The portals render results as loosely structured tables whose column order
has changed between versions. Every row is read with two explicit, ordered
strategies:

1. Positional mapping. Column positions are resolved from the header row
   when its labels are recognised, otherwise a default layout is assumed.
2. Content sniffing. A cell that is exactly one course code overrides the
   positional course code (likewise a ``Mon-YYYY`` cell supplies the session
   when no session column was found).
"""

import logging
import re

from bs4 import BeautifulSoup, Comment, Doctype, Tag

from ..models import (
    AssignmentMark,
    AssignmentRecord,
    CourseResult,
    SemesterResult,
    StudentInfo,
)
from .record_validator import is_course_code

SESSION_RE = re.compile(r"[A-Za-z]{3,9}-\d{4}")
SEMESTER_LABEL_RE = re.compile(r"\bsem(?:ester)?\b|\byear\b", re.IGNORECASE)
NON_NUMERIC_RE = re.compile(r"[^\d.]")
LAST_DIGITS_RE = re.compile(r"(\d+)$")

MIN_ROW_CELLS = 3
MIN_RECOGNISED_COLUMNS = 2

# (field, header alias) pairs, most specific first. The first alias found in
# a header cell decides the column's field.
ASSIGNMENT_COLUMNS = [
    ("course_name", "course name"),
    ("course_name", "course title"),
    ("submission_date", "submission date"),
    ("submission_date", "submitted on"),
    ("submission_date", "received on"),
    ("course_code", "course code"),
    ("status", "status"),
    ("session", "session"),
    ("assignment_label", "assignment"),
    ("submission_date", "date"),
    ("course_code", "course"),
    ("course_code", "code"),
    ("assignment_label", "name"),
    ("course_name", "title"),
]
ASSIGNMENT_DEFAULT_LAYOUT = {
    "course_code": 0,
    "course_name": 1,
    "assignment_label": 2,
    "status": 3,
    "submission_date": 4,
}

GRADE_COLUMNS = [
    ("course_name", "course name"),
    ("course_name", "course title"),
    ("course_code", "course code"),
    ("grade_points", "grade point"),
    ("grade_points", "points"),
    ("grade_points", "gp"),
    ("credits", "credit"),
    ("grade", "grade"),
    ("course_code", "course"),
    ("course_code", "code"),
    ("course_name", "title"),
    ("course_name", "name"),
]
GRADE_DEFAULT_LAYOUT = {
    "course_code": 0,
    "course_name": 1,
    "credits": 2,
    "grade": 3,
    "grade_points": 4,
}

MARKS_COLUMNS = [
    ("total_marks", "total"),
    ("total_marks", "max"),
    ("total_marks", "out of"),
    ("course_code", "course"),
    ("course_code", "code"),
    ("assignment_marks", "obtained"),
    ("assignment_marks", "marks"),
    ("assignment_marks", "assignment"),
    ("assignment_marks", "score"),
]
MARKS_DEFAULT_LAYOUT = {
    "course_code": 0,
    "assignment_marks": 1,
    "total_marks": 2,
}


def parse_html(html: str) -> BeautifulSoup:
    """Parse raw HTML into a DOM."""
    return BeautifulSoup(html, "lxml")


def parse_number(text: str | None) -> float:
    """Parse a numeric cell, keeping only digits and dots.

    Returns:
        Parsed value, 0.0 if nothing parsable remains.
    """
    cleaned = NON_NUMERIC_RE.sub("", text or "")
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def parse_int(text: str | None) -> int:
    """Parse an integer cell the same way as parse_number."""
    return int(parse_number(text))


def normalize_code(text: str) -> str:
    """Remove whitespace inside a course code cell ("BCS 011" -> "BCS011")."""
    return re.sub(r"\s+", "", text or "")


def table_rows(table: Tag) -> list[Tag]:
    """Rows that belong to this table, excluding rows of nested tables."""
    return [row for row in table.find_all("tr") if row.find_parent("table") is table]


def row_cells(row: Tag) -> list[str]:
    """Text of each direct cell of a row."""
    return [cell.get_text(" ", strip=True) for cell in row.find_all(["td", "th"], recursive=False)]


def match_column(header: str, aliases: list[tuple[str, str]]) -> str | None:
    """Return the field named by a header cell, if any alias matches."""
    text = header.lower()
    for field, alias in aliases:
        if alias in text:
            return field
    return None


def resolve_columns(
    header: list[str],
    aliases: list[tuple[str, str]],
    default_layout: dict[str, int],
) -> dict[str, int]:
    """Resolve field -> column index for a table.

    Header labels are used when at least two distinct fields are
    recognised; otherwise the default layout applies.
    """
    columns: dict[str, int] = {}
    for index, label in enumerate(header):
        field = match_column(label, aliases)
        if field and field not in columns:
            columns[field] = index

    if len(columns) >= MIN_RECOGNISED_COLUMNS:
        return columns
    return dict(default_layout)


def map_positional(cells: list[str], columns: dict[str, int]) -> dict[str, str]:
    """Strategy 1: read fields from their resolved positions."""
    values: dict[str, str] = {}
    for field, index in columns.items():
        if index < len(cells):
            values[field] = cells[index]
    return values


def sniff_course_code(cells: list[str]) -> str | None:
    """Strategy 2: the first cell that is exactly one course code."""
    for cell in cells:
        candidate = normalize_code(cell)
        if is_course_code(candidate):
            return candidate
    return None


def sniff_session(cells: list[str]) -> str | None:
    """Strategy 2: the first cell that is exactly a session token."""
    for cell in cells:
        if SESSION_RE.fullmatch(cell.strip()):
            return cell.strip()
    return None


def determine_semester(course_code: str) -> str:
    """Best-effort semester bucket for a course code.

    Uses the second to last digit of the trailing number (MCS021 ->
    Semester 2), or the only digit for one-digit numbers. Anything outside
    1-6 lands in "Other"; the mapping is a heuristic, not portal data.
    """
    match = LAST_DIGITS_RE.search(course_code or "")
    if not match:
        return "Other"
    digits = match.group(1)
    digit = int(digits[-2] if len(digits) >= 2 else digits)
    if 1 <= digit <= 6:
        return f"Semester {digit}"
    return "Other"


def preceding_label(table: Tag, pattern: re.Pattern[str] = SEMESTER_LABEL_RE) -> str | None:
    """Find a semester-like label for a table.

    Looks at the table caption first, then at the few text nodes right
    before the table, stopping at the content of another table.
    """
    caption = table.find("caption")
    if caption:
        text = caption.get_text(" ", strip=True)
        if text and pattern.search(text):
            return text[:60]

    ancestors = list(table.parents)
    checked = 0
    for string in table.find_all_previous(string=True):
        if isinstance(string, (Comment, Doctype)):
            continue
        if string.parent is not None and string.parent.name in ("script", "style", "title"):
            continue
        text = string.strip()
        if not text:
            continue
        owner = string.find_parent("table")
        if owner is not None and not any(owner is parent for parent in ancestors):
            break
        if pattern.search(text):
            return text[:60]
        checked += 1
        if checked >= 3:
            break
    return None


class TableExtractor:
    """Extracts assignment, grade card and marks records from HTML tables."""

    ASSIGNMENT_KEYWORDS = ("course", "status")

    def __init__(self, logger: logging.Logger | None = None):
        """Initialize table extractor.

        Args:
            logger: Logger instance for debugging.
        """
        self.logger = logger or logging.getLogger(__name__)

    # Assignment status ---------------------------------------------------

    def extract_assignments(self, html: str) -> list[AssignmentRecord]:
        """Extract assignment status rows from every candidate table."""
        soup = parse_html(html)
        records: list[AssignmentRecord] = []

        for table in soup.find_all("table"):
            rows = table_rows(table)
            if len(rows) < 2:
                continue
            text = " ".join(" ".join(row_cells(row)) for row in rows).lower()
            if not all(keyword in text for keyword in self.ASSIGNMENT_KEYWORDS):
                continue

            columns = resolve_columns(row_cells(rows[0]), ASSIGNMENT_COLUMNS, ASSIGNMENT_DEFAULT_LAYOUT)
            for row in rows[1:]:
                record = self._assignment_from_row(row_cells(row), columns)
                if record:
                    records.append(record)

        self.logger.debug(f"Table extraction found {len(records)} assignment row(s)")
        return records

    def _assignment_from_row(
        self, cells: list[str], columns: dict[str, int]
    ) -> AssignmentRecord | None:
        if len(cells) < MIN_ROW_CELLS:
            return None

        values = map_positional(cells, columns)
        code = sniff_course_code(cells) or normalize_code(values.get("course_code", ""))
        if not is_course_code(code):
            return None

        session = values.get("session") or sniff_session(cells)
        return AssignmentRecord(
            course_code=code,
            course_name=values.get("course_name", ""),
            assignment_label=values.get("assignment_label", ""),
            status=values.get("status", ""),
            submission_date=values.get("submission_date") or None,
            session=session or None,
        )

    # Grade card ----------------------------------------------------------

    def extract_grade_card(self, html: str) -> tuple[StudentInfo, list[SemesterResult]]:
        """Extract student details and one semester result per grade table."""
        soup = parse_html(html)
        return self.extract_student_info(soup), self._extract_semesters(soup)

    def extract_student_info(self, soup: BeautifulSoup) -> StudentInfo:
        """Read name and programme from label/value rows."""
        info = StudentInfo()
        for row in soup.find_all("tr"):
            cells = row_cells(row)
            if len(cells) < 2 or not cells[1]:
                continue
            label = cells[0].lower()
            # "Programme Name" labels the programme, not the student
            if "programme" in label or "program" in label:
                if info.programme is None:
                    info.programme = cells[1]
            elif info.name is None and "name" in label and "course" not in label:
                info.name = cells[1]
        return info

    def _extract_semesters(self, soup: BeautifulSoup) -> list[SemesterResult]:
        semesters: list[SemesterResult] = []

        for table in soup.find_all("table"):
            rows = table_rows(table)
            if len(rows) < 2 or not self._is_grade_header(row_cells(rows[0])):
                continue

            columns = resolve_columns(row_cells(rows[0]), GRADE_COLUMNS, GRADE_DEFAULT_LAYOUT)
            courses = [
                course
                for course in (self._course_from_row(row_cells(row), columns) for row in rows[1:])
                if course is not None
            ]
            if not courses:
                continue

            label = preceding_label(table) or f"Semester {len(semesters) + 1}"
            semesters.append(SemesterResult.from_courses(label, courses))

        self.logger.debug(f"Table extraction found {len(semesters)} semester table(s)")
        return semesters

    @staticmethod
    def _is_grade_header(header: list[str]) -> bool:
        text = " ".join(header).lower()
        if TableExtractor._is_marks_header(header):
            return False
        return "course" in text and any(word in text for word in ("grade", "credit", "marks"))

    def _course_from_row(self, cells: list[str], columns: dict[str, int]) -> CourseResult | None:
        if len(cells) < MIN_ROW_CELLS:
            return None

        values = map_positional(cells, columns)
        code = sniff_course_code(cells) or normalize_code(values.get("course_code", ""))
        if not is_course_code(code):
            return None

        return CourseResult(
            course_code=code,
            course_name=values.get("course_name", ""),
            credits=parse_int(values.get("credits")),
            grade=values.get("grade", ""),
            grade_points=parse_number(values.get("grade_points")),
        )

    # Assignment marks ----------------------------------------------------

    def extract_assignment_marks(self, html: str) -> dict[str, list[AssignmentMark]]:
        """Extract assignment marks grouped by semester label."""
        soup = parse_html(html)
        by_semester: dict[str, list[AssignmentMark]] = {}

        for table in soup.find_all("table"):
            rows = table_rows(table)
            if len(rows) < 2 or not self._is_marks_header(row_cells(rows[0])):
                continue

            columns = resolve_columns(row_cells(rows[0]), MARKS_COLUMNS, MARKS_DEFAULT_LAYOUT)
            table_label = preceding_label(table)
            for row in rows[1:]:
                cells = row_cells(row)
                if len(cells) < MIN_ROW_CELLS:
                    continue
                values = map_positional(cells, columns)
                code = sniff_course_code(cells) or normalize_code(values.get("course_code", ""))
                if not is_course_code(code):
                    continue

                mark = AssignmentMark.from_marks(
                    code,
                    parse_number(values.get("assignment_marks")),
                    parse_number(values.get("total_marks")),
                )
                semester = table_label or determine_semester(code)
                by_semester.setdefault(semester, []).append(mark)

        self.logger.debug(
            f"Table extraction found {sum(len(v) for v in by_semester.values())} mark row(s)"
        )
        return by_semester

    @staticmethod
    def _is_marks_header(header: list[str]) -> bool:
        text = " ".join(header).lower()
        # Grade tables may carry a marks column; those stay grade tables
        if "grade" in text or "credit" in text:
            return False
        return "assignment" in text or "marks" in text
