"""Global test configuration and fixtures.

Provides shared fixtures for all test levels including portal
configuration, fake aiohttp sessions and representative portal pages.
Ensures test isolation and consistency.
"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest

from ignou_bot.config import BrowserProfile, PortalConfig

# Test constants
TEST_BOT_TOKEN = os.getenv("TEST_BOT_TOKEN", "test_bot_token_placeholder")
TEST_ENROLLMENT = "123456789"
TEST_PROGRAM = "BCA"


@pytest.fixture(autouse=True)
def test_environment():
    """Setup test environment variables for all tests."""
    test_env = {
        "BOT_TOKEN": TEST_BOT_TOKEN,
        "LOG_LEVEL": "DEBUG",
    }

    # Store original values
    original_env = {}
    for key, value in test_env.items():
        original_env[key] = os.environ.get(key)
        os.environ[key] = value

    yield

    # Restore original values
    for key, original_value in original_env.items():
        if original_value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original_value


@pytest.fixture
def portal_config() -> PortalConfig:
    """Portal configuration with built-in defaults and short timeouts."""
    return PortalConfig(timeout=5.0)


@pytest.fixture
def browser_profile() -> BrowserProfile:
    """Browser profile with a recognisable user agent."""
    return BrowserProfile(user_agent="TestBrowser/1.0")


def make_response_context(status: int = 200, text: str = "") -> MagicMock:
    """Build the async context manager returned by session.request()."""
    response = MagicMock()
    response.status = status
    response.text = AsyncMock(return_value=text)

    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=False)
    return context


@pytest.fixture
def mock_http_session():
    """Factory for a mocked aiohttp.ClientSession.

    Each item describes one call to session.request(): a (status, text)
    tuple for a response, or an exception instance raised by the call.
    """

    def _make(*outcomes):
        side_effect = [
            outcome if isinstance(outcome, BaseException) else make_response_context(*outcome)
            for outcome in outcomes
        ]
        session = MagicMock()
        session.request = MagicMock(side_effect=side_effect)
        return session

    return _make


@pytest.fixture
def assignment_status_html() -> str:
    """Assignment status page with a header-mapped status table."""
    return """
    <html><head><title>Assignment Status</title></head><body>
      <h2>Student Assignment Status</h2>
      <table>
        <tr><th>Name</th><th>Course</th><th>Session</th><th>Status</th><th>Date</th></tr>
        <tr><td>Assignment</td><td>BCS011</td><td>Jan-2024</td><td>Submitted</td><td>12-Jan-2024</td></tr>
        <tr><td>Assignment</td><td>BCS012</td><td>Jan-2024</td><td>Received to be processed</td><td>14-Jan-2024</td></tr>
        <tr><td>Assignment</td><td>BCS011</td><td>Jan-2024</td><td>Submitted</td><td>12-Jan-2024</td></tr>
      </table>
    </body></html>
    """


@pytest.fixture
def assignment_text_html() -> str:
    """Assignment status page without any table."""
    return """
    <html><body>
      <div class="result">
        <p>MCS012 Computer Organisation received to be processed Jul-2023</p>
      </div>
    </body></html>
    """


@pytest.fixture
def grade_card_html() -> str:
    """Grade card page with student details, three semesters and marks."""
    return """
    <html><head><title>Grade Card</title></head><body>
      <table>
        <tr><td>Name</td><td>ASHA KUMARI</td></tr>
        <tr><td>Programme</td><td>BCA</td></tr>
      </table>

      <h3>Semester 1</h3>
      <table>
        <tr><th>Course Code</th><th>Course Title</th><th>Credits</th><th>Grade</th><th>Grade Points</th></tr>
        <tr><td>BCS011</td><td>Computer Basics</td><td>4</td><td>A</td><td>14</td></tr>
        <tr><td>BCS012</td><td>Mathematics</td><td>4</td><td>A</td><td>14</td></tr>
        <tr><td>ECO01</td><td>Business Organisation</td><td>4</td><td>A</td><td>14</td></tr>
        <tr><td>FEG02</td><td>Foundation English</td><td>4</td><td>A</td><td>14</td></tr>
      </table>

      <h3>Semester 2</h3>
      <table>
        <tr><th>Course Code</th><th>Course Title</th><th>Credits</th><th>Grade</th><th>Grade Points</th></tr>
        <tr><td>MCS021</td><td>Data Structures</td><td>4</td><td>A</td><td>15</td></tr>
        <tr><td>MCS023</td><td>Database Systems</td><td>4</td><td>A</td><td>15</td></tr>
        <tr><td>BCS040</td><td>Statistics</td><td>4</td><td>B</td><td>14.5</td></tr>
      </table>

      <h3>Semester 3</h3>
      <table>
        <tr><th>Course Code</th><th>Course Title</th><th>Credits</th><th>Grade</th><th>Grade Points</th></tr>
        <tr><td>MCS024</td><td>Java Programming</td><td>4</td><td>A</td><td>14</td></tr>
        <tr><td>BCS031</td><td>C++ Programming</td><td>4</td><td>A</td><td>14</td></tr>
      </table>

      <h3>Assignment Marks</h3>
      <table>
        <tr><th>Course Code</th><th>Assignment Marks</th><th>Max Marks</th></tr>
        <tr><td>BCS011</td><td>80</td><td>100</td></tr>
        <tr><td>MCS021</td><td>75</td><td>100</td></tr>
      </table>
    </body></html>
    """
