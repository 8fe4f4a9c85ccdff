"""Data models for the IGNOU portal bot.

Defines Pydantic models for all data structures used throughout the
application: query requests and transport variants, classified portal
responses, extracted assignment and grade card records, and the tagged
query result handed back to the chat layer.
"""

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class QueryKind(StrEnum):
    """Kind of portal lookup requested by the user."""

    ASSIGNMENT_STATUS = "assignment_status"
    GRADE_CARD = "grade_card"
    ASSIGNMENT_MARKS = "assignment_marks"


class Outcome(StrEnum):
    """Classification of a portal response body."""

    OK = "ok"
    INVALID_ENROLLMENT = "invalid_enrollment"
    INVALID_PROGRAM = "invalid_program"
    NO_RECORDS = "no_records"
    SERVER_ERROR = "server_error"


class FailureKind(StrEnum):
    """Reason category of a failed query."""

    INVALID_ENROLLMENT = "invalid_enrollment"
    INVALID_PROGRAM = "invalid_program"
    PORTAL_UNREACHABLE = "portal_unreachable"
    NO_RECORDS = "no_records"
    SERVER_ERROR = "server_error"


class QueryRequest(BaseModel):
    """Validated user query.

    Attributes:
        enrollment_number: 9-10 digit enrollment number.
        program_code: Upper-cased 2-10 letter programme code.
        query_kind: Lookup to perform.
    """

    model_config = ConfigDict(frozen=True)

    enrollment_number: str
    program_code: str
    query_kind: QueryKind


class TransportAttempt(BaseModel):
    """One request variant against a portal endpoint.

    Attributes:
        method: HTTP method; GET sends form fields as query string, POST as
            an url-encoded body.
        url: Endpoint URL.
        form: Form fields (eno, prog, submit marker).
        headers: Browser header set for this request.
        timeout: Attempt ceiling in seconds.
    """

    method: Literal["GET", "POST"]
    url: str
    form: dict[str, str]
    headers: dict[str, str] = Field(default_factory=dict)
    timeout: float = 30.0


class ClassifiedResponse(BaseModel):
    """Raw portal HTML with its classified outcome."""

    raw_html: str
    outcome: Outcome


class AssignmentRecord(BaseModel):
    """Assignment submission status for one course.

    Attributes:
        course_code: Course code such as BCS011.
        course_name: Course title, empty if the page does not show it.
        assignment_label: Assignment identifier or row label.
        status: Status text as shown by the portal.
        submission_date: Submission/processing date, if shown.
        session: Academic session such as Dec-2023, if shown.
    """

    course_code: str
    course_name: str = ""
    assignment_label: str = ""
    status: str
    submission_date: str | None = None
    session: str | None = None


class CourseResult(BaseModel):
    """Grade card line for one course."""

    course_code: str
    course_name: str = ""
    credits: int = 0
    grade: str = ""
    grade_points: float = 0.0


class SemesterResult(BaseModel):
    """Courses of one grade card table with credit-weighted average.

    Attributes:
        label: Semester label shown to the user.
        courses: Courses in page order.
        total_credits: Sum of course credits.
        total_grade_points: Sum of course grade points.
        sgpa: total_grade_points / total_credits rounded to 2 decimals,
            0 when there are no credits.
    """

    label: str
    courses: list[CourseResult] = Field(default_factory=list)
    total_credits: int = 0
    total_grade_points: float = 0.0
    sgpa: float = 0.0

    @classmethod
    def from_courses(cls, label: str, courses: list[CourseResult]) -> "SemesterResult":
        """Build a semester result computing totals and SGPA."""
        total_credits = sum(course.credits for course in courses)
        total_grade_points = sum(course.grade_points for course in courses)
        sgpa = round(total_grade_points / total_credits, 2) if total_credits > 0 else 0.0
        return cls(
            label=label,
            courses=courses,
            total_credits=total_credits,
            total_grade_points=total_grade_points,
            sgpa=sgpa,
        )


class StudentInfo(BaseModel):
    """Student details printed on the grade card."""

    name: str | None = None
    programme: str | None = None


class AssignmentMark(BaseModel):
    """Assignment marks for one course.

    Attributes:
        course_code: Course code.
        assignment_marks: Marks obtained.
        total_marks: Maximum marks.
        percentage: assignment_marks / total_marks * 100 rounded to 2
            decimals, 0 when total_marks is 0.
    """

    course_code: str
    assignment_marks: float = 0.0
    total_marks: float = 0.0
    percentage: float = 0.0

    @classmethod
    def from_marks(
        cls, course_code: str, assignment_marks: float, total_marks: float
    ) -> "AssignmentMark":
        """Build a mark entry computing the guarded percentage."""
        percentage = (
            round(assignment_marks / total_marks * 100, 2) if total_marks > 0 else 0.0
        )
        return cls(
            course_code=course_code,
            assignment_marks=assignment_marks,
            total_marks=total_marks,
            percentage=percentage,
        )


class AssignmentStatusData(BaseModel):
    """Assignment status lookup payload."""

    enrollment_number: str
    program_code: str
    assignments: list[AssignmentRecord] = Field(default_factory=list)


class GradeCardData(BaseModel):
    """Grade card lookup payload, also used for assignment marks.

    Attributes:
        enrollment_number: Enrollment number queried.
        program_code: Programme code queried.
        student_info: Name/programme read from the page.
        semester_results: One entry per grade table.
        assignment_marks: Semester label -> marks in page order.
    """

    enrollment_number: str
    program_code: str
    student_info: StudentInfo = Field(default_factory=StudentInfo)
    semester_results: list[SemesterResult] = Field(default_factory=list)
    assignment_marks: dict[str, list[AssignmentMark]] = Field(default_factory=dict)

    @property
    def cgpa(self) -> float:
        """Credit-weighted average across all semesters, 0 without credits."""
        total_credits = sum(semester.total_credits for semester in self.semester_results)
        if total_credits <= 0:
            return 0.0
        total_points = sum(semester.total_grade_points for semester in self.semester_results)
        return round(total_points / total_credits, 2)


class QuerySuccess(BaseModel):
    """Successful query with its data and chat-ready report chunks."""

    status: Literal["success"] = "success"
    kind: QueryKind
    request: QueryRequest
    data: AssignmentStatusData | GradeCardData
    messages: list[str] = Field(default_factory=list)


class QueryFailure(BaseModel):
    """Failed query with a reason that is safe to show verbatim."""

    status: Literal["failure"] = "failure"
    kind: QueryKind
    failure: FailureKind
    reason: str


QueryResult = QuerySuccess | QueryFailure
