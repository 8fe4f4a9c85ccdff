"""Per-chat conversation state for the portal services."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import StrEnum

from telegram.ext import ContextTypes

from ..models import QueryKind

CONVERSATION_KEY = "portal"


class ConversationStep(StrEnum):
    """What the conversation expects next."""

    AWAITING_ENROLLMENT = "awaiting_enrollment"
    AWAITING_PROGRAM = "awaiting_program"
    RUNNING = "running"


@dataclass
class PortalConversation:
    """State of one chat's service dialogue.

    Attributes:
        service: Lookup the user picked.
        step: Next expected input.
        enrollment_number: Enrollment number entered so far.
        program_code: Programme code entered so far.
        task: Query task while a lookup is running.
    """

    service: QueryKind
    step: ConversationStep = ConversationStep.AWAITING_ENROLLMENT
    enrollment_number: str | None = None
    program_code: str | None = None
    task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        """True while a query task is in flight."""
        return self.task is not None and not self.task.done()


def get_conversation(context: ContextTypes.DEFAULT_TYPE) -> PortalConversation | None:
    """Current conversation of the chat, if any."""
    if context.chat_data is None:
        return None
    return context.chat_data.get(CONVERSATION_KEY)


def start_conversation(context: ContextTypes.DEFAULT_TYPE, service: QueryKind) -> PortalConversation:
    """Replace the chat's conversation with a fresh one for service."""
    conversation = PortalConversation(service=service)
    if context.chat_data is not None:
        context.chat_data[CONVERSATION_KEY] = conversation
    return conversation


def end_conversation(context: ContextTypes.DEFAULT_TYPE) -> PortalConversation | None:
    """Remove and return the chat's conversation."""
    if context.chat_data is None:
        return None
    return context.chat_data.pop(CONVERSATION_KEY, None)
