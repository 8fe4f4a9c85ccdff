"""Grade card and assignment marks scrapers for the IGNOU grade card portal.

Both lookups read the same page; they differ in which part of it must be
present for the lookup to count as answered.
"""

from ..config import PortalConfig
from ..models import GradeCardData, QueryKind, QueryRequest
from .base import BaseScraper
from .table_extractor import TableExtractor


class GradeCardScraper(BaseScraper):
    """Grade card lookup implementing ScraperProtocol.

    Requires at least one semester table with valid courses.
    """

    def __init__(self, portal: PortalConfig, query_kind: QueryKind = QueryKind.GRADE_CARD):
        """Initialize grade card scraper.

        Args:
            portal: Portal endpoints and vocabulary.
            query_kind: Query kind to register under.
        """
        super().__init__(query_kind, portal)
        self.table_extractor = TableExtractor(self.logger)

    def get_endpoints(self) -> list[str]:
        """Grade card endpoints in preference order."""
        return list(self.portal.grade_card_urls)

    def parse(self, html: str, request: QueryRequest) -> GradeCardData:
        """Parse every section of the grade card page."""
        student_info, semester_results = self.table_extractor.extract_grade_card(html)
        return GradeCardData(
            enrollment_number=request.enrollment_number,
            program_code=request.program_code,
            student_info=student_info,
            semester_results=semester_results,
            assignment_marks=self.table_extractor.extract_assignment_marks(html),
        )

    def extract(self, html: str, request: QueryRequest) -> GradeCardData | None:
        """Extract the grade card, None when no semester result was found."""
        self._log_extraction_start(request, html)
        data = self.parse(html, request)

        if not data.semester_results:
            self._log_extraction_empty(request, html)
            return None

        self._log_extraction_success(
            request, f"{len(data.semester_results)} semester(s), CGPA {data.cgpa:.2f}"
        )
        return data


class AssignmentMarksScraper(GradeCardScraper):
    """Assignment marks lookup, read from the grade card page.

    Requires at least one assignment marks row.
    """

    def __init__(self, portal: PortalConfig):
        """Initialize assignment marks scraper.

        Args:
            portal: Portal endpoints and vocabulary.
        """
        super().__init__(portal, QueryKind.ASSIGNMENT_MARKS)

    def extract(self, html: str, request: QueryRequest) -> GradeCardData | None:
        """Extract assignment marks, None when no marks row was found."""
        self._log_extraction_start(request, html)
        data = self.parse(html, request)

        mark_count = sum(len(marks) for marks in data.assignment_marks.values())
        if not mark_count:
            self._log_extraction_empty(request, html)
            return None

        self._log_extraction_success(
            request, f"{mark_count} mark(s) in {len(data.assignment_marks)} group(s)"
        )
        return data
