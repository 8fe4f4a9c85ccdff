"""Telegram bot handlers for the IGNOU portal services.

Handlers stay thin: they walk the user through picking a service and
entering an enrollment number and programme code, then delegate the lookup
to the query engine and the rendering to the result formatter. Each lookup
runs as its own task so a Cancel press can stop it mid-flight.
"""

import asyncio
import logging

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Message, Update
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from ..exceptions import InputValidationError
from ..models import QueryKind, QuerySuccess
from ..scrapers.validation import validate_enrollment, validate_program
from .messages import (
    ANOTHER_SERVICE_MESSAGE,
    BUTTON_ASSIGNMENT_MARKS,
    BUTTON_ASSIGNMENT_STATUS,
    BUTTON_CANCEL,
    BUTTON_GRADE_CARD,
    BUTTON_MAIN_MENU,
    BUTTON_SERVICES,
    BUTTON_TRY_AGAIN,
    CANCELLED_MESSAGE,
    ENROLLMENT_PROMPT,
    FAILURE_TEMPLATE,
    LOADING_MESSAGE,
    NOTHING_TO_CANCEL_MESSAGE,
    PROGRAM_PROMPT,
    SERVICE_TITLES,
    SERVICES_MENU_MESSAGE,
    START_MESSAGE,
    UNEXPECTED_ERROR_MESSAGE,
)
from .query_engine import query_engine
from .response_formatter import result_formatter
from .types import (
    ConversationStep,
    PortalConversation,
    end_conversation,
    get_conversation,
    start_conversation,
)
from .utils import send_chunks

logger = logging.getLogger(__name__)

# Callback data
CALLBACK_SERVICES = "ignou_services"
CALLBACK_CANCEL = "ignou_cancel"
CALLBACK_MAIN_MENU = "back_to_main"
SERVICE_PREFIX = "ignou_"

SERVICE_BUTTONS = {
    QueryKind.ASSIGNMENT_STATUS: BUTTON_ASSIGNMENT_STATUS,
    QueryKind.GRADE_CARD: BUTTON_GRADE_CARD,
    QueryKind.ASSIGNMENT_MARKS: BUTTON_ASSIGNMENT_MARKS,
}


def service_callback(service: QueryKind) -> str:
    """Callback data that opens a service, e.g. "ignou_grade_card"."""
    return f"{SERVICE_PREFIX}{service.value}"


def parse_service_callback(data: str) -> QueryKind | None:
    """Service named by callback data, None if it is not a service callback."""
    if not data.startswith(SERVICE_PREFIX):
        return None
    try:
        return QueryKind(data[len(SERVICE_PREFIX) :])
    except ValueError:
        return None


# === KEYBOARDS ===


def main_menu_keyboard() -> InlineKeyboardMarkup:
    """Keyboard shown with the welcome message."""
    button = InlineKeyboardButton(BUTTON_SERVICES, callback_data=CALLBACK_SERVICES)
    return InlineKeyboardMarkup([[button]])


def services_keyboard() -> InlineKeyboardMarkup:
    """One button per service plus the way back to the main menu."""
    rows = [
        [InlineKeyboardButton(label, callback_data=service_callback(service))]
        for service, label in SERVICE_BUTTONS.items()
    ]
    rows.append([InlineKeyboardButton(BUTTON_MAIN_MENU, callback_data=CALLBACK_MAIN_MENU)])
    return InlineKeyboardMarkup(rows)


def cancel_keyboard() -> InlineKeyboardMarkup:
    """Single Cancel button for prompts and running lookups."""
    button = InlineKeyboardButton(BUTTON_CANCEL, callback_data=CALLBACK_CANCEL)
    return InlineKeyboardMarkup([[button]])


def failure_keyboard(service: QueryKind) -> InlineKeyboardMarkup:
    """Try Again for the same service, or back to the services menu."""
    return InlineKeyboardMarkup(
        [
            [InlineKeyboardButton(BUTTON_TRY_AGAIN, callback_data=service_callback(service))],
            [InlineKeyboardButton(BUTTON_SERVICES, callback_data=CALLBACK_SERVICES)],
        ]
    )


# === COMMANDS ===


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command.

    Drops any unfinished dialogue and shows the welcome message.

    Args:
        update: Telegram update object containing message data.
        context: Bot context holding the per-chat conversation.
    """
    if not update.message:
        return

    _cancel_conversation(context)
    await update.message.reply_text(START_MESSAGE, reply_markup=main_menu_keyboard())


async def cancel_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /cancel command."""
    if not update.message:
        return

    if get_conversation(context) is None:
        await update.message.reply_text(NOTHING_TO_CANCEL_MESSAGE)
        return

    if _cancel_conversation(context):
        # A running lookup reports its own cancellation.
        return
    await update.message.reply_text(CANCELLED_MESSAGE, reply_markup=services_keyboard())


# === CALLBACKS ===


async def handle_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle inline keyboard presses.

    Args:
        update: Telegram update object containing the callback query.
        context: Bot context holding the per-chat conversation.
    """
    query = update.callback_query
    if query is None or query.data is None:
        return

    await query.answer()
    data = query.data

    if data == CALLBACK_SERVICES:
        _cancel_conversation(context)
        await query.edit_message_text(SERVICES_MENU_MESSAGE, reply_markup=services_keyboard())
        return

    if data == CALLBACK_MAIN_MENU:
        _cancel_conversation(context)
        await query.edit_message_text(START_MESSAGE, reply_markup=main_menu_keyboard())
        return

    if data == CALLBACK_CANCEL:
        conversation = get_conversation(context)
        if conversation is not None and conversation.is_running:
            _cancel_conversation(context)
            return
        end_conversation(context)
        await query.edit_message_text(CANCELLED_MESSAGE, reply_markup=services_keyboard())
        return

    service = parse_service_callback(data)
    if service is None:
        logger.warning(f"Unknown callback data: {data!r}")
        return

    _cancel_conversation(context)
    start_conversation(context, service)
    await query.edit_message_text(
        ENROLLMENT_PROMPT.format(title=SERVICE_TITLES[service.value]),
        reply_markup=cancel_keyboard(),
    )


# === CONVERSATION ===


async def handle_text(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Consume free-text replies for the active conversation.

    The first reply is the enrollment number, the second the programme
    code; the second one starts the lookup. Text outside a conversation is
    answered with the main menu.

    Args:
        update: Telegram update object containing message data.
        context: Bot context holding the per-chat conversation.
    """
    message = update.message
    if message is None:
        return

    conversation = get_conversation(context)
    if conversation is None:
        await message.reply_text(START_MESSAGE, reply_markup=main_menu_keyboard())
        return

    text = message.text or ""

    if conversation.step is ConversationStep.AWAITING_ENROLLMENT:
        try:
            conversation.enrollment_number = validate_enrollment(text)
        except InputValidationError as e:
            await _reply_invalid_input(message, e)
            return
        conversation.step = ConversationStep.AWAITING_PROGRAM
        await message.reply_text(
            PROGRAM_PROMPT.format(enrollment=conversation.enrollment_number),
            reply_markup=cancel_keyboard(),
        )
        return

    if conversation.step is ConversationStep.AWAITING_PROGRAM:
        try:
            conversation.program_code = validate_program(text)
        except InputValidationError as e:
            await _reply_invalid_input(message, e)
            return
        await run_query(message, context, conversation)


async def run_query(
    message: Message, context: ContextTypes.DEFAULT_TYPE, conversation: PortalConversation
) -> None:
    """Run the lookup as a cancellable task and deliver its result.

    Args:
        message: User message that completed the input.
        context: Bot context holding the per-chat conversation.
        conversation: Conversation with enrollment number and programme code.
    """
    service = conversation.service
    conversation.step = ConversationStep.RUNNING
    loading_message = await message.reply_text(
        LOADING_MESSAGE.format(service=SERVICE_TITLES[service.value]),
        reply_markup=cancel_keyboard(),
    )

    task = asyncio.create_task(
        query_engine.query(service, conversation.enrollment_number, conversation.program_code)
    )
    conversation.task = task

    try:
        result = await task
    except asyncio.CancelledError:
        current = asyncio.current_task()
        if current is not None and current.cancelling():
            raise
        logger.info(f"{service.value} lookup cancelled by user")
        await loading_message.edit_text(CANCELLED_MESSAGE, reply_markup=services_keyboard())
        return
    finally:
        if get_conversation(context) is conversation:
            end_conversation(context)

    try:
        if isinstance(result, QuerySuccess):
            await send_chunks(loading_message, result.messages)
            await message.reply_text(ANOTHER_SERVICE_MESSAGE, reply_markup=services_keyboard())
        else:
            await loading_message.edit_text(
                result_formatter.format_failure(result), reply_markup=failure_keyboard(service)
            )
    except TelegramError as e:
        logger.error(f"Failed to deliver {service.value} result: {e}")
        await message.reply_text(UNEXPECTED_ERROR_MESSAGE, reply_markup=failure_keyboard(service))


# === HELPER FUNCTIONS ===


def _cancel_conversation(context: ContextTypes.DEFAULT_TYPE) -> bool:
    """End the chat's conversation, cancelling a running lookup.

    Returns:
        True if a running lookup was cancelled.
    """
    conversation = end_conversation(context)
    if conversation is None or conversation.task is None or conversation.task.done():
        return False

    conversation.task.cancel()
    logger.info(f"Cancelling running {conversation.service.value} lookup")
    return True


async def _reply_invalid_input(message: Message, error: InputValidationError) -> None:
    """Explain a rejected enrollment number or programme code.

    The conversation stays at the same step so the user can retype.
    """
    reason = result_formatter.failure_reason(error.failure)
    await message.reply_text(FAILURE_TEMPLATE.format(reason=reason), reply_markup=cancel_keyboard())
