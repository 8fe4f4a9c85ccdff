"""Portal query orchestration.

Drives one portal lookup from raw user input to a tagged result: input
validation, sequential request variants, soft-error classification,
extraction and formatting. Every anticipated failure ends as a
QueryFailure carrying a reason that is safe to show the user.
"""

import asyncio
import logging

import aiohttp

from ..config import BrowserProfile, PortalConfig, config
from ..exceptions import ExtractionEmptyError, PortalError, PortalSoftError, TransportError
from ..models import (
    FailureKind,
    Outcome,
    QueryFailure,
    QueryKind,
    QueryRequest,
    QueryResult,
    QuerySuccess,
)
from ..scrapers import ScraperRegistry, create_scraper_registry, scraper_registry
from ..scrapers.classifier import ResponseClassifier
from ..scrapers.transport import TransportAttempter, build_attempts
from ..scrapers.validation import validate_input
from .response_formatter import ResultFormatter
from .utils import create_session

logger = logging.getLogger(__name__)


class PortalQueryEngine:
    """Runs portal queries end to end.

    Responsibilities:
    - Validate enrollment number and programme code before any request
    - Try request variants strictly in order, one at a time
    - Stop on the first soft error reported by the portal
    - Move on to the next variant when a page yields no valid records
    - Render successful results into chat-sized chunks

    The engine holds only configuration and collaborators, so one instance
    serves any number of concurrent queries.
    """

    def __init__(
        self,
        portal: PortalConfig | None = None,
        browser: BrowserProfile | None = None,
        registry: ScraperRegistry | None = None,
        attempter: TransportAttempter | None = None,
        classifier: ResponseClassifier | None = None,
        formatter: ResultFormatter | None = None,
    ) -> None:
        """Initialize query engine.

        Args:
            portal: Portal configuration, defaults to the application config.
            browser: Browser header profile, defaults to the application config.
            registry: Scrapers by query kind, built from portal when omitted.
            attempter: Performs single request variants.
            classifier: Soft-error classifier, built from portal error phrases.
            formatter: Report formatter, chunking at portal.max_message_length.
        """
        self.portal = portal or config.portal
        self.browser = browser or config.browser
        if registry is None:
            registry = scraper_registry if portal is None else create_scraper_registry(self.portal)
        self.registry = registry
        self.attempter = attempter or TransportAttempter()
        self.classifier = classifier or ResponseClassifier(self.portal.error_phrases)
        self.formatter = formatter or ResultFormatter(self.portal.max_message_length)

    async def query(
        self,
        kind: QueryKind,
        enrollment: str | None,
        program: str | None,
        session: aiohttp.ClientSession | None = None,
    ) -> QueryResult:
        """Run one portal lookup.

        Args:
            kind: Lookup to perform.
            enrollment: Enrollment number as typed by the user.
            program: Programme code as typed by the user.
            session: HTTP session to reuse; a private one is created and
                closed when omitted.

        Returns:
            QuerySuccess with data and report chunks, or QueryFailure.

        Raises:
            asyncio.CancelledError: If the caller cancels the query.
        """
        try:
            request = validate_input(enrollment, program, kind)
            logger.info(
                f"Starting {kind.value} query for {request.enrollment_number}/{request.program_code}"
            )
            if session is None:
                async with create_session() as own_session:
                    return await self._run(request, own_session)
            return await self._run(request, session)

        except asyncio.CancelledError:
            logger.info(f"{kind.value} query cancelled")
            raise
        except PortalError as e:
            logger.info(f"{kind.value} query failed ({e.failure.value}): {e}")
            return self._failure(kind, e.failure)
        except Exception:
            logger.exception(f"Unexpected error during {kind.value} query")
            return self._failure(kind, FailureKind.SERVER_ERROR)

    async def _run(self, request: QueryRequest, session: aiohttp.ClientSession) -> QuerySuccess:
        """Walk the request variants until one yields valid data.

        Raises:
            PortalSoftError: If the portal reports an error in the page body.
            ExtractionEmptyError: If pages were answered but held no records.
            TransportError: If no variant got an answer at all.
        """
        scraper = self.registry.get_scraper(request.query_kind)
        if scraper is None:
            raise PortalError(f"No scraper registered for {request.query_kind.value}")

        attempts = build_attempts(request, scraper.get_endpoints(), self.browser, self.portal)
        answered = False

        for index, variant in enumerate(attempts, start=1):
            try:
                html = await self.attempter.attempt(variant, session)
            except TransportError as e:
                logger.warning(f"Attempt {index}/{len(attempts)} failed: {e}")
                continue

            outcome = self.classifier.classify(html)
            if outcome is not Outcome.OK:
                raise PortalSoftError(outcome)

            data = scraper.extract(html, request)
            if data is None:
                answered = True
                logger.info(
                    f"Attempt {index}/{len(attempts)} ({variant.method} {variant.url}) "
                    f"returned no records, trying next variant"
                )
                continue

            messages = self.formatter.render(request.query_kind, data)
            logger.info(
                f"{request.query_kind.value} query answered by {variant.method} {variant.url} "
                f"({len(messages)} message(s))"
            )
            return QuerySuccess(
                kind=request.query_kind, request=request, data=data, messages=messages
            )

        if answered:
            raise ExtractionEmptyError("Portal pages contained no valid records")
        raise TransportError(f"All {len(attempts)} request variants failed")

    def _failure(self, kind: QueryKind, failure: FailureKind) -> QueryFailure:
        """Build a failure result with its user-facing reason."""
        return QueryFailure(kind=kind, failure=failure, reason=self.formatter.failure_reason(failure))


# Global query engine instance
query_engine = PortalQueryEngine()
