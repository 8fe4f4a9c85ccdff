"""Portal scrapers package.

Contains the scraping and response-normalization layer for the IGNOU
portals: input validation, request variants, soft-error classification,
table and pattern extraction, and record validation.

Architecture:
- ScraperProtocol: Unified interface for all query kinds
- ScraperRegistry: Maps query kinds to scrapers
- AssignmentStatusScraper: Assignment portal, table then pattern extraction
- GradeCardScraper / AssignmentMarksScraper: Grade card portal
"""

from ..config import PortalConfig, config
from .assignment_status import AssignmentStatusScraper
from .base import BaseScraper, ScraperProtocol, ScraperRegistry
from .grade_card import AssignmentMarksScraper, GradeCardScraper


def create_scraper_registry(portal: PortalConfig) -> ScraperRegistry:
    """Build a registry with a scraper for every query kind.

    Args:
        portal: Portal endpoints and vocabulary shared by the scrapers.

    Returns:
        Populated scraper registry.
    """
    registry = ScraperRegistry()
    registry.register(AssignmentStatusScraper(portal))
    registry.register(GradeCardScraper(portal))
    registry.register(AssignmentMarksScraper(portal))
    return registry


# Global registry built from the application configuration
scraper_registry = create_scraper_registry(config.portal)

__all__ = [
    "ScraperProtocol",
    "BaseScraper",
    "ScraperRegistry",
    "AssignmentStatusScraper",
    "GradeCardScraper",
    "AssignmentMarksScraper",
    "create_scraper_registry",
    "scraper_registry",
]
