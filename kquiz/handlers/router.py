from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable

from kquiz.constants import (
    CORRECT_ANSWER_REPLY,
    DEFAULT_WORD_LANGUAGE,
    REGISTER_COMMANDS,
    REGISTERED_REPLY,
    UNREGISTER_COMMANDS,
    UNREGISTERED_REPLY,
    WORDS_CLEARED_REPLY,
)
from kquiz.db.repositories.words import WordRepository
from kquiz.domain.models import VocabularyEntry
from kquiz.domain.normalization import answers_match
from kquiz.domain.quiz_state import QuizState
from kquiz.errors import RepositoryError
from kquiz.utils.formatting import (
    format_added,
    format_entry,
    format_failure,
    format_incorrect_answer,
    format_question,
    format_search_result,
    format_word_prompt,
)

logger = logging.getLogger(__name__)

SendReply = Callable[[int, str], Awaitable[None]]
CommandHandler = Callable[[int, str, SendReply], Awaitable[None]]

_FIRST_WHITESPACE_RE = re.compile(r"\s")


def parse_command(text: str) -> tuple[str, str]:
    """Split a message into its first token and the remaining text."""
    parts = _FIRST_WHITESPACE_RE.split(text, maxsplit=1)
    command = parts[0]
    argument = parts[1].strip() if len(parts) > 1 else ""
    if command.startswith("/"):
        command = command.split("@", 1)[0]
    return command, argument


def command_mention(text: str) -> str | None:
    """Return the bot username a ``/command@username`` message is addressed to."""
    first_token = _FIRST_WHITESPACE_RE.split(text, maxsplit=1)[0]
    if not first_token.startswith("/") or "@" not in first_token:
        return None
    return first_token.split("@", 1)[1]


def split_word_and_translation(argument: str) -> tuple[str, str] | None:
    parts = argument.split(maxsplit=1)
    if len(parts) < 2:
        return None
    return parts[0], parts[1].strip()


class CommandRouter:
    """Dispatches chat messages to the word repository and the quiz state.

    Replies are handed to ``send``; the router never retries and expects the
    sender to deal with its own delivery failures.
    """

    def __init__(
        self,
        words: WordRepository,
        quiz_state: QuizState,
        *,
        word_language: str = DEFAULT_WORD_LANGUAGE,
    ) -> None:
        self._words = words
        self._quiz_state = quiz_state
        self._word_language = word_language
        self._handlers: dict[str, CommandHandler] = {
            "/add": self._add_word,
            "/search": self._search_word,
            "/random": self._random_word,
            "/delete": self._delete_word,
            "/list": self._list_words,
            "/clear": self._clear_words,
        }
        for command in REGISTER_COMMANDS:
            self._handlers[command] = self._register
        for command in UNREGISTER_COMMANDS:
            self._handlers[command] = self._unregister

    @property
    def commands(self) -> frozenset[str]:
        return frozenset(self._handlers)

    async def route(
        self,
        chat_id: int,
        text: str,
        send: SendReply,
        *,
        bot_username: str | None = None,
    ) -> None:
        mention = command_mention(text)
        if mention is not None and bot_username and mention.lower() != bot_username.lower():
            logger.debug("Ignoring command for @%s in chat %d.", mention, chat_id)
            return

        command, argument = parse_command(text)
        expected = self._quiz_state.take(chat_id)

        handler = self._handlers.get(command)
        if handler is None:
            await self._check_answer(chat_id, text, expected, send)
            return

        if expected is not None:
            logger.info("Chat %d skipped the pending quiz with %s.", chat_id, command)
        await handler(chat_id, argument, send)

    async def _register(self, chat_id: int, argument: str, send: SendReply) -> None:
        try:
            await self._words.register(chat_id)
        except RepositoryError as exc:
            await send(chat_id, format_failure("Registration", exc))
            return
        await send(chat_id, REGISTERED_REPLY)

    async def _unregister(self, chat_id: int, argument: str, send: SendReply) -> None:
        try:
            await self._words.unregister(chat_id)
        except RepositoryError as exc:
            await send(chat_id, format_failure("Unregistration", exc))
            return
        await send(chat_id, UNREGISTERED_REPLY)

    async def _add_word(self, chat_id: int, argument: str, send: SendReply) -> None:
        parsed = split_word_and_translation(argument)
        if parsed is None:
            await send(
                chat_id, format_word_prompt(self._word_language, with_translation=True)
            )
            return

        entry = VocabularyEntry(word=parsed[0], translation=parsed[1])
        try:
            await self._words.add_word(chat_id, entry.word, entry.translation)
        except RepositoryError as exc:
            await send(chat_id, format_failure("Add word", exc))
            return
        await send(chat_id, format_added(entry))

    async def _search_word(self, chat_id: int, argument: str, send: SendReply) -> None:
        if not argument:
            await send(chat_id, format_word_prompt(self._word_language))
            return

        try:
            translation = await self._words.search_word(chat_id, argument)
        except RepositoryError as exc:
            await send(chat_id, format_failure("Search word", exc))
            return
        await send(
            chat_id,
            format_search_result(VocabularyEntry(word=argument, translation=translation)),
        )

    async def _random_word(self, chat_id: int, argument: str, send: SendReply) -> None:
        try:
            entry = await self._words.random_word(chat_id)
        except RepositoryError as exc:
            await send(chat_id, format_failure("Get random word", exc))
            return
        self._quiz_state.set(chat_id, entry.translation)
        await send(chat_id, format_question(entry.word))

    async def _delete_word(self, chat_id: int, argument: str, send: SendReply) -> None:
        if not argument:
            await send(chat_id, format_word_prompt(self._word_language))
            return

        try:
            await self._words.delete_word(chat_id, argument)
        except RepositoryError as exc:
            await send(chat_id, format_failure("Delete word", exc))
            return
        await send(chat_id, f"{argument} deleted.")

    async def _list_words(self, chat_id: int, argument: str, send: SendReply) -> None:
        try:
            entries = await self._words.list_words(chat_id)
        except RepositoryError as exc:
            await send(chat_id, format_failure("List words", exc))
            return
        for entry in entries:
            await send(chat_id, format_entry(entry))

    async def _clear_words(self, chat_id: int, argument: str, send: SendReply) -> None:
        try:
            await self._words.clear_words(chat_id)
        except RepositoryError as exc:
            await send(chat_id, format_failure("Clear words", exc))
            return
        await send(chat_id, WORDS_CLEARED_REPLY)

    async def _check_answer(
        self, chat_id: int, text: str, expected: str | None, send: SendReply
    ) -> None:
        if expected is None:
            logger.info("Unknown command [%s] from chat %d.", text, chat_id)
            return

        if answers_match(text, expected):
            await send(chat_id, CORRECT_ANSWER_REPLY)
        else:
            await send(chat_id, format_incorrect_answer(expected))
