"""HTTP transport for the IGNOU portals.

Builds the ordered list of request variants for a query and performs a
single variant at a time. Each variant is tried exactly once; deciding what
to do after a failure is left to the query engine.
"""

import asyncio
import logging
from urllib.parse import urlparse

import aiohttp

from ..config import BrowserProfile, PortalConfig
from ..exceptions import TransportError
from ..models import QueryRequest, TransportAttempt

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def build_headers(url: str, profile: BrowserProfile, method: str) -> dict[str, str]:
    """Build the browser header set for one request.

    Args:
        url: Target endpoint.
        profile: Browser header profile.
        method: HTTP method of the variant.

    Returns:
        Header dictionary.
    """
    headers = {
        "User-Agent": profile.user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": profile.accept_language,
        "Connection": "keep-alive",
        "Upgrade-Insecure-Requests": "1",
    }

    parsed = urlparse(url)
    origin = f"{parsed.scheme}://{parsed.netloc}"
    if profile.referer_policy == "origin":
        headers["Origin"] = origin
        headers["Referer"] = f"{origin}/"
    elif profile.referer_policy == "url":
        headers["Referer"] = url

    if method == "POST":
        headers["Content-Type"] = FORM_CONTENT_TYPE

    return headers


def build_attempts(
    request: QueryRequest,
    urls: list[str],
    profile: BrowserProfile,
    portal: PortalConfig,
) -> list[TransportAttempt]:
    """Build ordered request variants for a query.

    Every endpoint gets a form-encoded POST followed by a query-string GET.

    Args:
        request: Validated query.
        urls: Candidate endpoints in preference order.
        profile: Browser header profile.
        portal: Portal configuration (submit marker, timeout).

    Returns:
        Variants in the order they must be tried.
    """
    form = {
        "eno": request.enrollment_number,
        "prog": request.program_code.upper(),
        portal.submit_field: portal.submit_value,
    }

    attempts: list[TransportAttempt] = []
    for url in urls:
        for method in ("POST", "GET"):
            attempts.append(
                TransportAttempt(
                    method=method,
                    url=url,
                    form=dict(form),
                    headers=build_headers(url, profile, method),
                    timeout=portal.timeout,
                )
            )
    return attempts


class TransportAttempter:
    """Performs one request variant and returns the raw HTML."""

    async def attempt(self, variant: TransportAttempt, session: aiohttp.ClientSession) -> str:
        """Issue a single request variant.

        Args:
            variant: Request variant to perform.
            session: HTTP session for requests.

        Returns:
            Response body as text.

        Raises:
            TransportError: On network failure, timeout or non-2xx status.
        """
        request_kwargs: dict[str, object] = {
            "headers": variant.headers,
            "timeout": aiohttp.ClientTimeout(total=variant.timeout),
        }
        if variant.method == "POST":
            request_kwargs["data"] = variant.form
        else:
            request_kwargs["params"] = variant.form

        logger.debug(f"{variant.method} {variant.url}")

        try:
            async with session.request(variant.method, variant.url, **request_kwargs) as response:
                if not 200 <= response.status < 300:
                    raise TransportError(
                        f"HTTP {response.status} from {variant.url}",
                        url=variant.url,
                        status=response.status,
                    )
                return await response.text(errors="replace")
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"Timed out after {variant.timeout:.0f}s: {variant.url}", url=variant.url
            ) from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Request to {variant.url} failed: {e}", url=variant.url) from e
