"""Assignment status scraper for the IGNOU assignment portal.

Tries structured table extraction first and falls back to text-proximity
extraction when the page carries no usable table. Both paths end in the
record validator, so only well-formed, deduplicated records come out.
"""

from ..config import PortalConfig
from ..models import AssignmentStatusData, QueryKind, QueryRequest
from .base import BaseScraper
from .pattern_extractor import PatternExtractor
from .record_validator import validate_records
from .table_extractor import TableExtractor


class AssignmentStatusScraper(BaseScraper):
    """Assignment status lookup implementing ScraperProtocol."""

    def __init__(self, portal: PortalConfig):
        """Initialize assignment status scraper.

        Args:
            portal: Portal endpoints and vocabulary.
        """
        super().__init__(QueryKind.ASSIGNMENT_STATUS, portal)
        self.table_extractor = TableExtractor(self.logger)
        self.pattern_extractor = PatternExtractor(
            portal.status_keywords, portal.context_window, self.logger
        )

    def get_endpoints(self) -> list[str]:
        """Assignment status endpoints in preference order."""
        return list(self.portal.assignment_status_urls)

    def extract(self, html: str, request: QueryRequest) -> AssignmentStatusData | None:
        """Extract validated assignment records.

        Args:
            html: Page already classified as OK.
            request: Query the page answers.

        Returns:
            AssignmentStatusData, or None when no valid record was found.
        """
        self._log_extraction_start(request, html)

        records = validate_records(self.table_extractor.extract_assignments(html))
        if not records:
            self.logger.info("No assignment table rows, falling back to pattern extraction")
            records = validate_records(self.pattern_extractor.extract(html))

        if not records:
            self._log_extraction_empty(request, html)
            return None

        self._log_extraction_success(request, f"{len(records)} assignment(s)")
        return AssignmentStatusData(
            enrollment_number=request.enrollment_number,
            program_code=request.program_code,
            assignments=records,
        )
