"""Filtering and deduplication of extracted assignment records."""

import logging
import re

from ..models import AssignmentRecord

logger = logging.getLogger(__name__)

COURSE_CODE_RE = re.compile(r"[A-Z]{2,6}\d{1,3}")


def is_course_code(value: str | None) -> bool:
    """Check that a value is exactly one course code."""
    return bool(value) and COURSE_CODE_RE.fullmatch(value) is not None


def is_valid(record: AssignmentRecord) -> bool:
    """Check a candidate record.

    A record is kept when its course code is at least 3 characters and
    matches the course code pattern exactly, and its status is longer than
    2 characters.
    """
    code = record.course_code
    if not code or len(code) < 3 or not is_course_code(code):
        return False
    status = (record.status or "").strip()
    return len(status) > 2


def dedupe(records: list[AssignmentRecord]) -> list[AssignmentRecord]:
    """Drop records repeating a course code + status pair.

    The first occurrence wins and page order is preserved.
    """
    seen: set[str] = set()
    unique: list[AssignmentRecord] = []
    for record in records:
        key = f"{record.course_code}-{record.status}"
        if key in seen:
            continue
        seen.add(key)
        unique.append(record)
    return unique


def validate_records(records: list[AssignmentRecord]) -> list[AssignmentRecord]:
    """Filter out invalid records, then dedupe."""
    valid = [record for record in records if is_valid(record)]
    dropped = len(records) - len(valid)
    if dropped:
        logger.debug(f"Dropped {dropped} invalid assignment record(s)")
    return dedupe(valid)
