"""Bot utility functions.

Provides HTTP session management for the portal queries and helpers for
delivering chunked reports through Telegram.
"""

import logging

import aiohttp
from telegram import InlineKeyboardMarkup, Message

from ..config import config

logger = logging.getLogger(__name__)


def create_session() -> aiohttp.ClientSession:
    """Create configured aiohttp session for portal queries.

    Per-request headers come from the browser profile, so the session only
    carries connection limits and an overall timeout.

    Returns:
        aiohttp.ClientSession: Configured HTTP session for making requests.
    """
    connector = aiohttp.TCPConnector(limit=20, limit_per_host=5)
    # Sequential variants each get their own ceiling; this bounds the whole query.
    attempts_per_query = 2 * max(
        len(config.portal.assignment_status_urls), len(config.portal.grade_card_urls)
    )
    timeout = aiohttp.ClientTimeout(total=config.portal.timeout * attempts_per_query)
    return aiohttp.ClientSession(connector=connector, timeout=timeout)


async def send_chunks(
    message: Message,
    chunks: list[str],
    reply_markup: InlineKeyboardMarkup | None = None,
) -> None:
    """Deliver report chunks, replacing the loading message with the first one.

    Blank chunks are skipped since Telegram rejects empty messages. The
    keyboard, if any, is attached to the last chunk.

    Args:
        message: Bot message showing the loading text.
        chunks: Report chunks in order.
        reply_markup: Keyboard for the final chunk.
    """
    chunks = [chunk for chunk in chunks if chunk.strip()]
    if not chunks:
        return

    last = len(chunks) - 1
    for index, chunk in enumerate(chunks):
        markup = reply_markup if index == last else None
        if index == 0:
            await message.edit_text(chunk, reply_markup=markup)
        else:
            await message.chat.send_message(chunk, reply_markup=markup)

    logger.debug(f"Sent {len(chunks)} chunk(s) to chat {message.chat_id}")
