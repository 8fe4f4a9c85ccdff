"""Text-proximity fallback extraction of assignment records.

Used only when table extraction yields nothing: the assignment portal has
served the same data with different markup between requests, so when no
usable table is found the records are recovered from the text around
course codes instead.
"""

import logging
import re

from ..models import AssignmentRecord
from .table_extractor import parse_html

# A course code not embedded in a longer alphanumeric token.
COURSE_CODE_SCAN_RE = re.compile(r"(?<![A-Za-z0-9])[A-Z]{2,6}\d{1,3}(?![A-Za-z0-9])")
SESSION_SCAN_RE = re.compile(r"(?<![A-Za-z])[A-Za-z]{3,9}-\d{4}(?!\d)")
TAG_RE = re.compile(r"<[^>]*>")
PARTIAL_TAG_RE = re.compile(r"^[^<]*>|<[^>]*$")
WHITESPACE_RE = re.compile(r"\s+")

STATUS_NOT_AVAILABLE = "Status not available"


def strip_markup(fragment: str) -> str:
    """Turn an HTML fragment into single-spaced text.

    Tags cut in half by the window edges are dropped as well.
    """
    text = PARTIAL_TAG_RE.sub(" ", fragment)
    text = TAG_RE.sub(" ", text)
    return WHITESPACE_RE.sub(" ", text).strip()


class PatternExtractor:
    """Recovers assignment records from text near course codes."""

    def __init__(
        self,
        status_keywords: list[str],
        context_window: int = 500,
        logger: logging.Logger | None = None,
    ):
        """Initialize pattern extractor.

        Args:
            status_keywords: Status phrases in priority order.
            context_window: Characters scanned on each side of a course code.
            logger: Logger instance for debugging.
        """
        self.context_window = context_window
        self.logger = logger or logging.getLogger(__name__)
        self._status_patterns = [
            re.compile(re.escape(keyword), re.IGNORECASE) for keyword in status_keywords
        ]

    def extract(self, html: str) -> list[AssignmentRecord]:
        """Run the fallback chain: status lines first, then the code scan."""
        records = self.extract_by_status_lines(html)
        if records:
            return records
        return self.extract_by_course_code_scan(html)

    def find_status(self, text: str) -> str | None:
        """Return the first status keyword found in text, as written there."""
        for pattern in self._status_patterns:
            match = pattern.search(text)
            if match:
                return match.group(0)
        return None

    def extract_by_status_lines(self, html: str) -> list[AssignmentRecord]:
        """Build records from visible text lines holding a code and a status."""
        text = parse_html(html).get_text("\n")
        records: list[AssignmentRecord] = []

        for line in text.splitlines():
            line = WHITESPACE_RE.sub(" ", line).strip()
            if not line:
                continue
            code_match = COURSE_CODE_SCAN_RE.search(line)
            if not code_match:
                continue
            status = self.find_status(line)
            if not status:
                continue
            session_match = SESSION_SCAN_RE.search(line)
            records.append(
                AssignmentRecord(
                    course_code=code_match.group(0),
                    status=status,
                    session=session_match.group(0) if session_match else None,
                )
            )

        self.logger.debug(f"Status line scan found {len(records)} record(s)")
        return records

    def extract_by_course_code_scan(self, html: str) -> list[AssignmentRecord]:
        """Scan raw HTML for course codes and read status from their context.

        Each distinct code contributes one record built from the window of
        ``context_window`` characters on either side of its first occurrence.
        """
        first_seen: dict[str, int] = {}
        for match in COURSE_CODE_SCAN_RE.finditer(html):
            first_seen.setdefault(match.group(0), match.start())

        records: list[AssignmentRecord] = []
        for code, position in first_seen.items():
            start = max(0, position - self.context_window)
            end = position + len(code) + self.context_window
            context = strip_markup(html[start:end])

            session_match = SESSION_SCAN_RE.search(context)
            records.append(
                AssignmentRecord(
                    course_code=code,
                    status=self.find_status(context) or STATUS_NOT_AVAILABLE,
                    session=session_match.group(0) if session_match else None,
                )
            )

        self.logger.debug(f"Course code scan found {len(records)} record(s)")
        return records
