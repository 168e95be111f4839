from __future__ import annotations

import asyncio
from types import SimpleNamespace

from telegram.error import NetworkError

from kquiz.handlers.messages import TelegramReplySender, text_message_handler
from kquiz.runtime_keys import COMMAND_ROUTER_KEY


class _StubBot:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.username = "kquiz_bot"
        self.calls: list[tuple[int, str]] = []

    async def send_message(self, chat_id: int, text: str) -> None:
        self.calls.append((chat_id, text))
        if self.fail:
            raise NetworkError("connection reset")


def test_sender_delivers_message() -> None:
    bot = _StubBot()
    asyncio.run(TelegramReplySender(bot)(42, "Words cleared."))
    assert bot.calls == [(42, "Words cleared.")]


def test_sender_logs_and_swallows_transport_errors(caplog) -> None:
    bot = _StubBot(fail=True)
    asyncio.run(TelegramReplySender(bot)(42, "Words cleared."))
    assert len(bot.calls) == 1
    assert "Failed to send reply to chat 42" in caplog.text


def _context(router: object, bot: _StubBot) -> SimpleNamespace:
    return SimpleNamespace(
        application=SimpleNamespace(bot_data={COMMAND_ROUTER_KEY: router}),
        bot=bot,
    )


def _update(chat_id: int, text: str | None) -> SimpleNamespace:
    return SimpleNamespace(
        effective_message=SimpleNamespace(text=text),
        effective_chat=SimpleNamespace(id=chat_id, username="anna"),
    )


def test_text_handler_routes_through_router(router) -> None:
    bot = _StubBot()
    asyncio.run(text_message_handler(_update(42, "/register"), _context(router, bot)))
    assert bot.calls == [(42, "Thanks for your registration.")]


def test_text_handler_keeps_processing_after_send_failure(router, words_repo) -> None:
    bot = _StubBot(fail=True)
    asyncio.run(text_message_handler(_update(42, "/register"), _context(router, bot)))
    assert asyncio.run(words_repo.is_registered(42)) is True


def test_text_handler_ignores_commands_for_other_bots(router, words_repo) -> None:
    bot = _StubBot()
    asyncio.run(text_message_handler(_update(42, "/register@otherbot"), _context(router, bot)))
    assert bot.calls == []
    assert asyncio.run(words_repo.is_registered(42)) is False

    asyncio.run(text_message_handler(_update(42, "/register@KQuiz_Bot"), _context(router, bot)))
    assert bot.calls == [(42, "Thanks for your registration.")]


def test_text_handler_ignores_empty_messages(router) -> None:
    bot = _StubBot()
    asyncio.run(text_message_handler(_update(42, None), _context(router, bot)))
    assert bot.calls == []
