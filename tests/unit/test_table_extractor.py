"""Tests for structured table extraction."""

import pytest

from ignou_bot.scrapers.table_extractor import (
    ASSIGNMENT_COLUMNS,
    ASSIGNMENT_DEFAULT_LAYOUT,
    TableExtractor,
    determine_semester,
    map_positional,
    parse_html,
    parse_number,
    preceding_label,
    resolve_columns,
    sniff_course_code,
    sniff_session,
)


def _table(rows: list[list[str]], header_tag: str = "th") -> str:
    header, *body = rows
    html = "<tr>" + "".join(f"<{header_tag}>{cell}</{header_tag}>" for cell in header) + "</tr>"
    for row in body:
        html += "<tr>" + "".join(f"<td>{cell}</td>" for cell in row) + "</tr>"
    return f"<table>{html}</table>"


@pytest.fixture
def extractor() -> TableExtractor:
    return TableExtractor()


class TestColumnStrategies:
    """Positional mapping and content sniffing in isolation."""

    def test_resolve_columns_from_header(self):
        columns = resolve_columns(
            ["Name", "Course", "Session", "Status", "Date"],
            ASSIGNMENT_COLUMNS,
            ASSIGNMENT_DEFAULT_LAYOUT,
        )

        assert columns == {
            "assignment_label": 0,
            "course_code": 1,
            "session": 2,
            "status": 3,
            "submission_date": 4,
        }

    def test_resolve_columns_falls_back_to_default_layout(self):
        columns = resolve_columns(["A", "B", "C"], ASSIGNMENT_COLUMNS, ASSIGNMENT_DEFAULT_LAYOUT)

        assert columns == ASSIGNMENT_DEFAULT_LAYOUT

    def test_map_positional_ignores_missing_cells(self):
        values = map_positional(["BCS011", "Intro"], {"course_code": 0, "status": 3})

        assert values == {"course_code": "BCS011"}

    def test_sniff_course_code_needs_exact_cell(self):
        assert sniff_course_code(["Assignment", "BCS 011", "Submitted"]) == "BCS011"
        assert sniff_course_code(["BCS011 and more", "Submitted"]) is None
        assert sniff_course_code(["bcs011"]) is None

    def test_sniff_session(self):
        assert sniff_session(["BCS011", " Jun-2023 ", "Submitted"]) == "Jun-2023"
        assert sniff_session(["12-Jan-2024"]) is None


class TestAssignmentTables:
    """Assignment status table extraction."""

    def test_header_mapped_row(self, extractor):
        html = _table(
            [
                ["Name", "Course", "Session", "Status", "Date"],
                ["Assignment", "BCS011", "Jan-2024", "Submitted", "12-Jan-2024"],
            ]
        )

        records = extractor.extract_assignments(html)

        assert len(records) == 1
        record = records[0]
        assert record.course_code == "BCS011"
        assert record.status == "Submitted"
        assert record.session == "Jan-2024"
        assert record.submission_date == "12-Jan-2024"
        assert record.assignment_label == "Assignment"

    def test_sniffed_code_overrides_header_position(self, extractor):
        # Header puts the code in column 0, content says column 1
        html = _table(
            [
                ["Course", "X", "Y", "Status"],
                ["Sr 1", "MCS011", "Problem Solving", "Evaluated"],
            ]
        )

        records = extractor.extract_assignments(html)

        assert [record.course_code for record in records] == ["MCS011"]

    def test_default_layout_for_unlabelled_table(self, extractor):
        html = _table(
            [
                ["Details of Course / Status", "", "", "", ""],
                ["ECO01", "Business Organisation", "TMA-1", "Submitted", "02-Feb-2024"],
            ],
            header_tag="td",
        )

        records = extractor.extract_assignments(html)

        assert len(records) == 1
        assert records[0].course_code == "ECO01"
        assert records[0].course_name == "Business Organisation"
        assert records[0].status == "Submitted"
        assert records[0].submission_date == "02-Feb-2024"

    def test_rows_without_course_code_are_skipped(self, extractor):
        html = _table(
            [
                ["Name", "Course", "Status"],
                ["Total", "-", "Submitted"],
                ["Assignment", "BCS011", "Submitted"],
                ["Short", "BCS012"],
            ]
        )

        records = extractor.extract_assignments(html)

        assert [record.course_code for record in records] == ["BCS011"]

    def test_tables_without_keywords_are_ignored(self, extractor):
        html = _table([["Name", "Value"], ["Enrollment", "123456789"], ["Code", "BCS011"]])

        assert extractor.extract_assignments(html) == []

    def test_every_code_is_well_formed(self, extractor, assignment_status_html):
        records = extractor.extract_assignments(assignment_status_html)

        assert records
        for record in records:
            assert sniff_course_code([record.course_code]) == record.course_code


class TestGradeCardTables:
    """Grade card and assignment marks extraction."""

    def test_semesters_and_student_info(self, extractor, grade_card_html):
        student_info, semesters = extractor.extract_grade_card(grade_card_html)

        assert student_info.name == "ASHA KUMARI"
        assert student_info.programme == "BCA"
        assert [semester.label for semester in semesters] == [
            "Semester 1",
            "Semester 2",
            "Semester 3",
        ]
        assert [semester.total_credits for semester in semesters] == [16, 12, 8]
        assert [semester.total_grade_points for semester in semesters] == [56.0, 44.5, 28.0]
        assert semesters[1].sgpa == 3.71

    def test_course_fields(self, extractor, grade_card_html):
        _, semesters = extractor.extract_grade_card(grade_card_html)
        course = semesters[1].courses[2]

        assert course.course_code == "BCS040"
        assert course.course_name == "Statistics"
        assert course.credits == 4
        assert course.grade == "B"
        assert course.grade_points == 14.5

    def test_unlabelled_semester_tables_are_numbered(self, extractor):
        header = ["Course Code", "Credits", "Grade", "Grade Points"]
        html = _table([header, ["BCS011", "4", "A", "14"]]) + _table(
            [header, ["BCS012", "4", "B", "12"]]
        )

        _, semesters = extractor.extract_grade_card(html)

        assert [semester.label for semester in semesters] == ["Semester 1", "Semester 2"]

    def test_marks_table_is_not_a_semester(self, extractor, grade_card_html):
        _, semesters = extractor.extract_grade_card(grade_card_html)

        codes = [course.course_code for semester in semesters for course in semester.courses]
        assert len(codes) == 9

    def test_grade_table_with_marks_column(self, extractor):
        html = "<h3>Semester 1</h3>" + _table(
            [
                ["Course Code", "Course Title", "Credits", "Grade", "Grade Points", "Marks"],
                ["BCS011", "Computer Basics", "4", "A", "14", "78"],
            ]
        )

        _, semesters = extractor.extract_grade_card(html)

        assert [semester.label for semester in semesters] == ["Semester 1"]
        course = semesters[0].courses[0]
        assert course.course_code == "BCS011"
        assert course.credits == 4
        assert course.grade == "A"
        assert course.grade_points == 14.0
        assert extractor.extract_assignment_marks(html) == {}

    def test_programme_name_is_not_student_name(self, extractor):
        html = _table(
            [["Programme Name", "BCA"], ["Student Name", "ASHA KUMARI"]], header_tag="td"
        )

        student_info, _ = extractor.extract_grade_card(html)

        assert student_info.name == "ASHA KUMARI"
        assert student_info.programme == "BCA"

    def test_assignment_marks_grouped_by_course_code(self, extractor, grade_card_html):
        marks = extractor.extract_assignment_marks(grade_card_html)

        assert list(marks) == ["Semester 1", "Semester 2"]
        assert marks["Semester 1"][0].course_code == "BCS011"
        assert marks["Semester 1"][0].percentage == 80.0
        assert marks["Semester 2"][0].assignment_marks == 75.0
        assert marks["Semester 2"][0].total_marks == 100.0

    def test_assignment_marks_use_table_label(self, extractor):
        html = "<h4>Semester 5 Assignments</h4>" + _table(
            [["Course", "Marks", "Max"], ["MCS011", "40", "0"]]
        )

        marks = extractor.extract_assignment_marks(html)

        assert list(marks) == ["Semester 5 Assignments"]
        assert marks["Semester 5 Assignments"][0].percentage == 0.0


class TestHelpers:
    """Small parsing helpers."""

    @pytest.mark.parametrize(
        "code, expected",
        [
            ("MCS021", "Semester 2"),
            ("BCS011", "Semester 1"),
            ("BCS1", "Semester 1"),
            ("MCS091", "Other"),
            ("ECO01", "Other"),
            ("BCSL", "Other"),
        ],
    )
    def test_determine_semester(self, code, expected):
        assert determine_semester(code) == expected

    @pytest.mark.parametrize(
        "text, expected",
        [("14", 14.0), (" 14.5 ", 14.5), ("80/100", 80100.0), ("-", 0.0), ("", 0.0), (None, 0.0)],
    )
    def test_parse_number(self, text, expected):
        assert parse_number(text) == expected

    def test_preceding_label_prefers_caption(self):
        soup = parse_html(
            "<p>Semester 9</p><table><caption>Semester 4</caption><tr><td>x</td></tr></table>"
        )

        assert preceding_label(soup.find("table")) == "Semester 4"

    def test_preceding_label_stops_at_previous_table(self):
        soup = parse_html(
            "<table><tr><td>Semester 1</td></tr></table>"
            "<table><tr><td>BCS011</td></tr></table>"
        )

        assert preceding_label(soup.find_all("table")[1]) is None
