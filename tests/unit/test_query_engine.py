"""Tests for the portal query engine."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from ignou_bot.bot.messages import (
    ERROR_INVALID_ENROLLMENT,
    ERROR_NO_RECORDS,
    ERROR_PORTAL_UNREACHABLE,
    ERROR_SERVER,
)
from ignou_bot.bot.query_engine import PortalQueryEngine
from ignou_bot.models import (
    AssignmentStatusData,
    FailureKind,
    GradeCardData,
    QueryFailure,
    QueryKind,
    QuerySuccess,
)

EMPTY_PAGE = "<html><body><form><input name='eno'></form></body></html>"


@pytest.fixture
def engine(portal_config, browser_profile) -> PortalQueryEngine:
    return PortalQueryEngine(portal=portal_config, browser=browser_profile)


class TestQueryEngine:
    """End-to-end query behaviour with a mocked HTTP session."""

    @pytest.mark.asyncio
    async def test_assignment_status_success(self, engine, mock_http_session, assignment_status_html):
        session = mock_http_session((200, assignment_status_html))

        result = await engine.query(QueryKind.ASSIGNMENT_STATUS, "123456789", "bca", session)

        assert isinstance(result, QuerySuccess)
        assert isinstance(result.data, AssignmentStatusData)
        assert [a.course_code for a in result.data.assignments] == ["BCS011", "BCS012"]
        assert result.request.program_code == "BCA"
        assert result.messages and "BCS011" in result.messages[0]
        assert session.request.call_count == 1

    @pytest.mark.asyncio
    async def test_pattern_fallback(self, engine, mock_http_session, assignment_text_html):
        session = mock_http_session((200, assignment_text_html))

        result = await engine.query(QueryKind.ASSIGNMENT_STATUS, "123456789", "MCA", session)

        assert isinstance(result, QuerySuccess)
        record = result.data.assignments[0]
        assert (record.course_code, record.status, record.session) == (
            "MCS012",
            "received to be processed",
            "Jul-2023",
        )

    @pytest.mark.asyncio
    async def test_grade_card_success(self, engine, mock_http_session, grade_card_html):
        session = mock_http_session((200, grade_card_html))

        result = await engine.query(QueryKind.GRADE_CARD, "123456789", "BCA", session)

        assert isinstance(result, QuerySuccess)
        assert isinstance(result.data, GradeCardData)
        assert result.data.cgpa == 3.57
        assert any("CGPA: 3.57" in message for message in result.messages)

    @pytest.mark.asyncio
    async def test_assignment_marks_success(self, engine, mock_http_session, grade_card_html):
        session = mock_http_session((200, grade_card_html))

        result = await engine.query(QueryKind.ASSIGNMENT_MARKS, "123456789", "BCA", session)

        assert isinstance(result, QuerySuccess)
        assert "BCS011: 80/100 (80.00%)" in "\n".join(result.messages)

    @pytest.mark.asyncio
    async def test_all_variants_http_500(self, engine, mock_http_session):
        session = mock_http_session(*[(500, "Internal Server Error")] * 4)

        result = await engine.query(QueryKind.GRADE_CARD, "123456789", "BCA", session)

        assert isinstance(result, QueryFailure)
        assert result.failure is FailureKind.PORTAL_UNREACHABLE
        assert result.reason == ERROR_PORTAL_UNREACHABLE
        assert session.request.call_count == 4

    @pytest.mark.asyncio
    async def test_falls_back_to_next_variant(self, engine, mock_http_session, grade_card_html):
        session = mock_http_session(
            aiohttp.ClientConnectionError("reset"),
            asyncio.TimeoutError(),
            (200, grade_card_html),
        )

        result = await engine.query(QueryKind.GRADE_CARD, "123456789", "BCA", session)

        assert isinstance(result, QuerySuccess)
        methods = [call.args for call in session.request.call_args_list]
        assert methods == [
            ("POST", "https://gradecard.ignou.ac.in/gradecard/"),
            ("GET", "https://gradecard.ignou.ac.in/gradecard/"),
            ("POST", "https://gradecard.ignou.ac.in/gradecardR/"),
        ]

    @pytest.mark.asyncio
    async def test_empty_page_moves_to_next_variant(self, engine, mock_http_session, grade_card_html):
        session = mock_http_session((200, EMPTY_PAGE), (200, grade_card_html))

        result = await engine.query(QueryKind.GRADE_CARD, "123456789", "BCA", session)

        assert isinstance(result, QuerySuccess)
        assert session.request.call_count == 2

    @pytest.mark.asyncio
    async def test_only_empty_pages_means_no_records(self, engine, mock_http_session):
        session = mock_http_session((200, EMPTY_PAGE), (500, ""), (200, EMPTY_PAGE), (503, ""))

        result = await engine.query(QueryKind.GRADE_CARD, "123456789", "BCA", session)

        assert isinstance(result, QueryFailure)
        assert result.failure is FailureKind.NO_RECORDS
        assert result.reason == ERROR_NO_RECORDS

    @pytest.mark.asyncio
    async def test_soft_error_stops_immediately(self, engine, mock_http_session):
        session = mock_http_session((200, "<p>Invalid Enrollment Number</p>"), (200, "unused"))

        result = await engine.query(QueryKind.GRADE_CARD, "123456789", "BCA", session)

        assert isinstance(result, QueryFailure)
        assert result.failure is FailureKind.INVALID_ENROLLMENT
        assert result.reason == ERROR_INVALID_ENROLLMENT
        assert session.request.call_count == 1

    @pytest.mark.asyncio
    async def test_invalid_input_makes_no_request(self, engine, mock_http_session):
        session = mock_http_session()

        result = await engine.query(QueryKind.GRADE_CARD, "12345", "BCA", session)

        assert isinstance(result, QueryFailure)
        assert result.failure is FailureKind.INVALID_ENROLLMENT
        session.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_programme(self, engine, mock_http_session):
        result = await engine.query(QueryKind.GRADE_CARD, "123456789", "B1", mock_http_session())

        assert isinstance(result, QueryFailure)
        assert result.failure is FailureKind.INVALID_PROGRAM

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind", list(QueryKind))
    async def test_failure_keeps_requested_kind(self, engine, mock_http_session, kind):
        result = await engine.query(kind, None, None, mock_http_session())

        assert isinstance(result, QueryFailure)
        assert result.kind is kind
        assert result.failure is FailureKind.INVALID_ENROLLMENT

    @pytest.mark.asyncio
    async def test_unexpected_error_is_server_error(self, engine, mock_http_session):
        session = mock_http_session((200, "<table></table>"))

        with patch.object(engine.classifier, "classify", side_effect=RuntimeError("boom")):
            result = await engine.query(QueryKind.GRADE_CARD, "123456789", "BCA", session)

        assert isinstance(result, QueryFailure)
        assert result.failure is FailureKind.SERVER_ERROR
        assert result.reason == ERROR_SERVER

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, engine):
        started = asyncio.Event()

        async def slow_attempt(variant, session):
            started.set()
            await asyncio.sleep(60)

        engine.attempter = MagicMock()
        engine.attempter.attempt = AsyncMock(side_effect=slow_attempt)

        task = asyncio.create_task(
            engine.query(QueryKind.GRADE_CARD, "123456789", "BCA", MagicMock())
        )
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

    @pytest.mark.asyncio
    async def test_creates_and_closes_own_session(self, engine, grade_card_html):
        session = MagicMock()
        session.__aenter__ = AsyncMock(return_value=session)
        session.__aexit__ = AsyncMock(return_value=False)
        engine.attempter = MagicMock()
        engine.attempter.attempt = AsyncMock(return_value=grade_card_html)

        with patch("ignou_bot.bot.query_engine.create_session", return_value=session):
            result = await engine.query(QueryKind.GRADE_CARD, "123456789", "BCA")

        assert isinstance(result, QuerySuccess)
        engine.attempter.attempt.assert_awaited_once()
        assert engine.attempter.attempt.await_args.args[1] is session
        session.__aexit__.assert_awaited_once()
