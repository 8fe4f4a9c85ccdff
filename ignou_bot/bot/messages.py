"""Telegram bot message templates and constants.

Contains all user-facing message templates, failure reasons and report
formatting constants. Centralizes message management for consistent wording
across the service menu, the conversation prompts and the reports.
"""

# Bot commands and menus
START_MESSAGE = (
    "👋 Welcome!\n\n"
    "Check your IGNOU assignment status, grade card and assignment marks "
    "without leaving Telegram.\n\n"
    "Choose an option below:"
)

SERVICES_MENU_MESSAGE = (
    "🎓 IGNOU Services\n\n"
    "Select the service you need:\n\n"
    "📋 Assignment Status - Check your assignment submission status\n"
    "🎓 Grade Card - View your complete semester results with SGPA\n"
    "📊 Assignment Marks - Check semester-wise assignment marks"
)

SERVICE_TITLES = {
    "assignment_status": "📋 IGNOU Assignment Status",
    "grade_card": "🎓 IGNOU Grade Card",
    "assignment_marks": "📊 IGNOU Assignment Marks",
}

ENROLLMENT_PROMPT = (
    "{title}\n\n"
    "Please enter your Enrollment Number (9 or 10 digits):\n\n"
    "Example: 123456789\n\n"
    "⚠️ Make sure to enter the correct enrollment number."
)

PROGRAM_PROMPT = (
    "✅ Enrollment Number: {enrollment}\n\n"
    "Now please enter your Programme Code:\n\n"
    "Examples:\n"
    "• BCA - Bachelor of Computer Applications\n"
    "• MCA - Master of Computer Applications\n"
    "• BA - Bachelor of Arts\n"
    "• MA - Master of Arts\n"
    "• BCOM - Bachelor of Commerce\n"
    "• MCOM - Master of Commerce"
)

LOADING_MESSAGE = "⏳ Fetching your {service} data...\n\nPlease wait, this may take a few moments."
ANOTHER_SERVICE_MESSAGE = "Would you like to check another service?"
CANCELLED_MESSAGE = "❌ Request cancelled."
NOTHING_TO_CANCEL_MESSAGE = "Nothing to cancel."
UNEXPECTED_ERROR_MESSAGE = "❌ Service temporarily unavailable. Please try again later."

# Buttons
BUTTON_SERVICES = "🎓 IGNOU Services"
BUTTON_ASSIGNMENT_STATUS = "📋 Assignment Status"
BUTTON_GRADE_CARD = "🎓 Grade Card"
BUTTON_ASSIGNMENT_MARKS = "📊 Assignment Marks"
BUTTON_MAIN_MENU = "🏠 Main Menu"
BUTTON_CANCEL = "❌ Cancel"
BUTTON_TRY_AGAIN = "🔄 Try Again"

# Failure reasons, safe to show verbatim
ERROR_INVALID_ENROLLMENT = "Invalid enrollment number. Please enter a 9 or 10 digit enrollment number."
ERROR_INVALID_PROGRAM = "Invalid programme code. Please enter a valid programme code (e.g., BCA, MCA, BA)."
ERROR_PORTAL_UNREACHABLE = "Unable to reach the IGNOU portal. Please try again later."
ERROR_NO_RECORDS = "No records found for the provided enrollment number and programme code."
ERROR_SERVER = "The IGNOU portal reported an internal error. Please try again later."
FAILURE_TEMPLATE = "❌ Error: {reason}"

# Report formatting
SEPARATOR_LINE = "━━━━━━━━━━━━━━━━━━━━"
ENROLLMENT_LINE = "👤 Enrollment: {enrollment}"
PROGRAMME_LINE = "🎓 Programme: {programme}"

ASSIGNMENT_STATUS_HEADER = "📋 Assignment Status Report"
ASSIGNMENT_DETAILS_HEADER = "📚 Assignment Details:"
ASSIGNMENT_ITEM_LINE = "{index}. {course_code}"
ASSIGNMENT_NAME_LINE = "   📖 {course_name}"
ASSIGNMENT_LABEL_LINE = "   📝 Assignment: {label}"
ASSIGNMENT_SESSION_LINE = "   🗓 Session: {session}"
ASSIGNMENT_STATUS_LINE = "   ✅ Status: {status}"
ASSIGNMENT_DATE_LINE = "   📅 Date: {date}"
NO_ASSIGNMENTS = "❌ No assignment records found."

GRADE_CARD_HEADER = "🎓 Grade Card Report"
STUDENT_NAME_LINE = "📝 Name: {name}"
STUDENT_PROGRAMME_LINE = "📚 Programme: {programme}"
SEMESTER_HEADER = "📊 {label}:"
SEMESTER_CREDITS_LINE = "▫️ Total Credits: {credits}"
SEMESTER_SGPA_LINE = "▫️ SGPA: {sgpa:.2f}"
COURSE_LINE = "📖 {course_code}{course_name}"
COURSE_DETAIL_LINE = "   Credits: {credits} | Grade: {grade} | GP: {grade_points:g}"
CGPA_LINE = "🏆 CGPA: {cgpa:.2f} ({credits} credits)"
NO_SEMESTERS = "❌ No semester results found."

ASSIGNMENT_MARKS_HEADER = "📊 Assignment Marks Report"
MARKS_SECTION_HEADER = "📝 Semester-wise Assignment Marks:"
MARKS_SEMESTER_HEADER = "📚 {semester}:"
MARKS_LINE = "▫️ {course_code}: {marks:g}/{total:g} ({percentage}%)"
NO_MARKS = "❌ No assignment marks found."
