"""Soft-error detection for portal responses.

The portals answer HTTP 200 for almost everything, including invalid
enrollment numbers and internal failures, so the body text is the only
reliable signal. Rules are checked in order and the first hit wins, which
lets specific phrases ("invalid enrollment") take precedence over generic
ones further down the list.
"""

import logging
import re

from ..config import ErrorPhraseRule
from ..models import ClassifiedResponse, Outcome

logger = logging.getLogger(__name__)


class ResponseClassifier:
    """Classifies raw HTML by matching ordered error phrase rules."""

    def __init__(self, rules: list[ErrorPhraseRule]):
        """Compile phrase rules.

        Args:
            rules: Ordered rules; outcomes must be Outcome values.

        Raises:
            ValueError: If a rule names an unknown outcome or OK.
        """
        self._rules: list[tuple[Outcome, list[re.Pattern[str]]]] = []
        for rule in rules:
            outcome = Outcome(rule.outcome)
            if outcome is Outcome.OK:
                raise ValueError("Error phrase rules cannot map to the OK outcome")
            patterns = [re.compile(pattern, re.IGNORECASE) for pattern in rule.patterns]
            self._rules.append((outcome, patterns))

    def classify(self, html: str) -> Outcome:
        """Return the outcome encoded in the page body.

        Args:
            html: Raw response body.

        Returns:
            First matching error outcome, or OK if no phrase matches.
        """
        for outcome, patterns in self._rules:
            for pattern in patterns:
                match = pattern.search(html)
                if match:
                    logger.info(f"Portal soft error {outcome.value}: matched {match.group(0)!r}")
                    return outcome
        return Outcome.OK

    def classify_response(self, html: str) -> ClassifiedResponse:
        """Classify HTML and keep it alongside the outcome."""
        return ClassifiedResponse(raw_html=html, outcome=self.classify(html))
