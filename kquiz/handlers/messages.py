from __future__ import annotations

import logging

from telegram import Bot, Update
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from kquiz.handlers.common import command_router

logger = logging.getLogger(__name__)


class TelegramReplySender:
    """Sends router replies; delivery failures are logged and dropped."""

    def __init__(self, bot: Bot) -> None:
        self._bot = bot

    async def __call__(self, chat_id: int, text: str) -> None:
        try:
            await self._bot.send_message(chat_id=chat_id, text=text)
        except TelegramError as exc:
            logger.warning("Failed to send reply to chat %d: %s", chat_id, exc)


async def text_message_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    message = update.effective_message
    chat = update.effective_chat
    if message is None or chat is None or not message.text:
        return

    logger.info("Received message from %s[%d]: %s", chat.username, chat.id, message.text)
    await command_router(context).route(
        chat.id,
        message.text,
        TelegramReplySender(context.bot),
        bot_username=context.bot.username,
    )
