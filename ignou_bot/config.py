"""Configuration management for the IGNOU portal bot.

Handles all application configuration including environment variables, the
YAML portal description and default settings. Provides structured
configuration classes for the bot, the browser header profile used against
the portals, and the portal endpoints and vocabulary.
"""

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ASSIGNMENT_STATUS_URLS = [
    "https://isms.ignou.ac.in/changeadmdata/StatusAssignment.asp",
]
DEFAULT_GRADE_CARD_URLS = [
    "https://gradecard.ignou.ac.in/gradecard/",
    "https://gradecard.ignou.ac.in/gradecardR/",
]

DEFAULT_STATUS_KEYWORDS = [
    "check grade card status for detail",
    "received to be processed",
    "submitted",
    "processed",
    "evaluated",
]

# Order matters: the first rule whose phrase matches decides the outcome.
DEFAULT_ERROR_PHRASES: list[dict[str, Any]] = [
    {
        "outcome": "invalid_enrollment",
        "patterns": [
            r"invalid\s+enrol+ment",
            r"enrol+ment\s+(?:number|no\.?)\s+(?:is\s+)?(?:invalid|incorrect|not\s+found|does\s+not\s+exist)",
            r"not\s+a\s+valid\s+enrol+ment",
        ],
    },
    {
        "outcome": "invalid_program",
        "patterns": [
            r"invalid\s+program(?:me)?",
            r"program(?:me)?\s+(?:code\s+)?(?:is\s+)?(?:invalid|incorrect|not\s+found)",
            r"not\s+a\s+valid\s+program(?:me)?",
        ],
    },
    {
        "outcome": "no_records",
        "patterns": [
            r"no\s+records?\s+(?:found|exists?|available)",
            r"no\s+data\s+(?:found|available)",
            r"records?\s+not\s+found",
            r"no\s+results?\s+found",
            r"data\s+not\s+available",
        ],
    },
    {
        "outcome": "server_error",
        "patterns": [
            r"internal\s+server\s+error",
            r"server\s+error\s+in",
            r"service\s+(?:is\s+)?(?:temporarily\s+)?unavailable",
            r"runtime\s+error",
            r"an\s+error\s+has\s+occurred",
            r"error\s+occurred\s+while\s+processing",
        ],
    },
]


class BrowserProfile(BaseSettings):
    """Browser header profile presented to the portals.

    Attributes:
        user_agent: User-Agent header sent with every attempt.
        accept_language: Accept-Language header value.
        referer_policy: How Origin/Referer are derived from the target URL:
            "origin" sends the target host root, "url" sends the full target
            URL as Referer, "none" omits both.
    """

    model_config = SettingsConfigDict(env_prefix="PORTAL_")

    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    )
    accept_language: str = "en-IN,en;q=0.9"
    referer_policy: Literal["origin", "url", "none"] = "origin"


class ErrorPhraseRule(BaseModel):
    """Soft-error phrase rule.

    Attributes:
        outcome: Outcome value reported when one of the patterns matches.
        patterns: Case-insensitive regular expressions searched in raw HTML.
    """

    outcome: str
    patterns: list[str]


class PortalConfig(BaseModel):
    """Portal endpoints, request shape and page vocabulary.

    Attributes:
        assignment_status_urls: Candidate endpoints for assignment status.
        grade_card_urls: Candidate endpoints for grade cards and marks.
        submit_field: Name of the static submit marker form field.
        submit_value: Value of the static submit marker form field.
        timeout: Per-attempt ceiling in seconds.
        context_window: Characters scanned on each side of a course code
            by the fallback pattern extractor.
        max_message_length: Chunk size for chat-ready report text.
        status_keywords: Ordered status phrases searched near course codes.
        error_phrases: Ordered soft-error rules for the response classifier.
    """

    assignment_status_urls: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ASSIGNMENT_STATUS_URLS)
    )
    grade_card_urls: list[str] = Field(default_factory=lambda: list(DEFAULT_GRADE_CARD_URLS))
    submit_field: str = "submit"
    submit_value: str = "Submit"
    timeout: float = 30.0
    context_window: int = 500
    max_message_length: int = 4000
    status_keywords: list[str] = Field(default_factory=lambda: list(DEFAULT_STATUS_KEYWORDS))
    error_phrases: list[ErrorPhraseRule] = Field(
        default_factory=lambda: [ErrorPhraseRule(**rule) for rule in DEFAULT_ERROR_PHRASES]
    )


class BotConfig(BaseSettings):
    """Main Telegram bot configuration.

    Attributes:
        bot_token: Telegram bot API token from environment.
        port: Server port for webhook mode.
        railway_domain: Railway public domain for webhooks.
        railway_url: Railway URL for webhooks (fallback).
        listen_host: Interface the webhook server binds to.
        log_level: Root logging level name.
    """

    bot_token: str | None = Field(default=None, validation_alias="BOT_TOKEN")
    port: int = Field(default=8000, validation_alias="PORT")
    railway_domain: str | None = Field(default=None, validation_alias="RAILWAY_PUBLIC_DOMAIN")
    railway_url: str | None = Field(default=None, validation_alias="RAILWAY_URL")
    listen_host: str = Field(default="127.0.0.1", validation_alias="BOT_LISTEN_HOST")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @property
    def webhook_domain(self) -> str | None:
        """Get webhook domain for Railway deployment.

        Returns:
            Domain string if available, None for polling mode.
        """
        return self.railway_domain or self.railway_url

    @property
    def use_webhook(self) -> bool:
        """Determine if webhook mode should be used.

        Returns:
            True if webhook domain is configured, False for polling mode.
        """
        return bool(self.webhook_domain)


class Config:
    """Application configuration manager.

    Centralizes loading of environment variables and the YAML portal
    description. Provides typed access to configuration sections for
    different application components.
    """

    def __init__(self, config_dir: Path | None = None):
        """Initialize configuration manager.

        Args:
            config_dir: Path to configuration directory, defaults to ignou_bot/config.
        """
        if config_dir is None:
            config_dir = Path(__file__).parent / "config"

        self.config_dir = Path(config_dir)

        self.bot = BotConfig()
        self.browser = BrowserProfile()
        self.portal = self._load_portal_config()

    def _load_portal_config(self) -> PortalConfig:
        """Load portal endpoints and vocabulary from YAML configuration.

        Returns:
            PortalConfig built from portal.yml, or defaults if the file is missing.
        """
        portal_path = self.config_dir / "portal.yml"
        if not portal_path.exists():
            return PortalConfig()

        with open(portal_path) as f:
            data = yaml.safe_load(f) or {}

        endpoints = data.get("endpoints", {})
        request = data.get("request", {})
        limits = data.get("limits", {})

        overrides: dict[str, Any] = {}
        if endpoints.get("assignment_status"):
            overrides["assignment_status_urls"] = endpoints["assignment_status"]
        if endpoints.get("grade_card"):
            overrides["grade_card_urls"] = endpoints["grade_card"]
        if "submit_field" in request:
            overrides["submit_field"] = request["submit_field"]
        if "submit_value" in request:
            overrides["submit_value"] = request["submit_value"]
        if "timeout" in request:
            overrides["timeout"] = request["timeout"]
        if "context_window" in limits:
            overrides["context_window"] = limits["context_window"]
        if "max_message_length" in limits:
            overrides["max_message_length"] = limits["max_message_length"]
        if data.get("status_keywords"):
            overrides["status_keywords"] = data["status_keywords"]
        if data.get("error_phrases"):
            overrides["error_phrases"] = data["error_phrases"]

        return PortalConfig(**overrides)


# Global configuration instance
config = Config()
