"""Base scraper protocol and abstractions for portal data extraction.

Defines the unified interface every query kind implements so the query
engine can drive assignment status, grade card and assignment marks lookups
through one pipeline.
"""

import logging
from typing import Protocol

from ..config import PortalConfig
from ..models import AssignmentStatusData, GradeCardData, QueryKind, QueryRequest

logger = logging.getLogger(__name__)

PortalData = AssignmentStatusData | GradeCardData


class ScraperProtocol(Protocol):
    """Protocol defining the interface for all portal scrapers.

    Methods:
        get_query_kind: Query kind handled by the scraper.
        get_endpoints: Candidate endpoint URLs in preference order.
        extract: Turn a classified-OK page into validated data.
    """

    def get_query_kind(self) -> QueryKind:
        """Get the query kind identifier.

        Returns:
            Query kind handled by this scraper.
        """
        ...

    def get_endpoints(self) -> list[str]:
        """Get candidate endpoint URLs.

        Returns:
            URLs in the order they should be tried.
        """
        ...

    def extract(self, html: str, request: QueryRequest) -> PortalData | None:
        """Extract validated data from a portal page.

        Args:
            html: Raw page already classified as OK.
            request: Query the page answers.

        Returns:
            Data object if at least one valid record was found, None otherwise.
        """
        ...


class BaseScraper:
    """Base class providing common functionality for all scrapers."""

    def __init__(self, query_kind: QueryKind, portal: PortalConfig):
        """Initialize base scraper.

        Args:
            query_kind: Query kind handled by the scraper.
            portal: Portal endpoints and vocabulary.
        """
        self.query_kind = query_kind
        self.portal = portal
        self.logger = logging.getLogger(f"{__name__}.{query_kind.value}")

    def get_query_kind(self) -> QueryKind:
        """Get the query kind identifier."""
        return self.query_kind

    def _log_extraction_start(self, request: QueryRequest, html: str) -> None:
        """Log the start of an extraction.

        Args:
            request: Query being answered.
            html: Page being parsed.
        """
        self.logger.info(
            f"Extracting {self.query_kind.value} for {request.enrollment_number}/"
            f"{request.program_code} ({len(html)} chars)"
        )

    def _log_extraction_success(self, request: QueryRequest, result: str) -> None:
        """Log a successful extraction.

        Args:
            request: Query that was answered.
            result: Brief description of result.
        """
        self.logger.info(
            f"Extracted {self.query_kind.value} for {request.enrollment_number}: {result}"
        )

    def _log_extraction_empty(self, request: QueryRequest, html: str) -> None:
        """Log an extraction that found nothing usable.

        Args:
            request: Query being answered.
            html: Page that was parsed; only a short snippet is logged.
        """
        self.logger.warning(
            f"No {self.query_kind.value} records for {request.enrollment_number}"
        )
        self.logger.debug(f"Page snippet: {html[:300]!r}")


class ScraperRegistry:
    """Registry mapping query kinds to their scrapers."""

    def __init__(self) -> None:
        """Initialize empty scraper registry."""
        self._scrapers: dict[QueryKind, ScraperProtocol] = {}
        self.logger = logging.getLogger(f"{__name__}.registry")

    def register(self, scraper: ScraperProtocol) -> None:
        """Register a new scraper.

        Args:
            scraper: Scraper instance implementing ScraperProtocol.
        """
        kind = scraper.get_query_kind()
        self._scrapers[kind] = scraper
        self.logger.debug(f"Registered scraper for query kind: {kind.value}")

    def get_scraper(self, kind: QueryKind) -> ScraperProtocol | None:
        """Get scraper by query kind.

        Args:
            kind: Query kind.

        Returns:
            Scraper instance if registered, None otherwise.
        """
        return self._scrapers.get(kind)

    def get_all_kinds(self) -> list[QueryKind]:
        """Get list of all registered query kinds."""
        return list(self._scrapers.keys())
