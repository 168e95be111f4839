from __future__ import annotations

import logging
import random

from psycopg import Error as PsycopgError

from kquiz.db.kv import BucketNotFoundError, KeyValueStore
from kquiz.domain.models import VocabularyEntry
from kquiz.errors import (
    AlreadyRegisteredError,
    DatabaseError,
    DuplicateWordError,
    NotRegisteredError,
    WordNotFoundError,
)

logger = logging.getLogger(__name__)

KEY_SEPARATOR = b"\x00"

_STORE_ERRORS = (PsycopgError, BucketNotFoundError)


def registration_key(chat_id: int) -> bytes:
    return str(chat_id).encode("ascii")


def vocabulary_prefix(chat_id: int) -> bytes:
    return registration_key(chat_id) + KEY_SEPARATOR


def vocabulary_key(chat_id: int, word: str) -> bytes:
    return vocabulary_prefix(chat_id) + word.encode("utf-8")


class WordRepository:
    """Registrations and per-chat vocabulary kept in two store buckets.

    The registration bucket maps the decimal chat id to itself. The vocabulary
    bucket maps ``chat id + 0x00 + word`` to the translation, so ownership of
    an entry is decided by its key prefix.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        registration_bucket: str,
        vocabulary_bucket: str,
        rng: random.Random | None = None,
    ) -> None:
        self._store = store
        self._registration_bucket = registration_bucket
        self._vocabulary_bucket = vocabulary_bucket
        self._rng = rng or random.Random()

    async def is_registered(self, chat_id: int) -> bool:
        try:
            async with self._store.view() as tx:
                bucket = await tx.bucket(self._registration_bucket)
                return await bucket.get(registration_key(chat_id)) is not None
        except _STORE_ERRORS as exc:
            logger.error("Failed to read registration of chat %d: %s", chat_id, exc)
            raise DatabaseError() from exc

    async def is_added(self, chat_id: int, word: str) -> bool:
        try:
            async with self._store.view() as tx:
                bucket = await tx.bucket(self._vocabulary_bucket)
                return await bucket.get(vocabulary_key(chat_id, word)) is not None
        except _STORE_ERRORS as exc:
            logger.error("Failed to look up word for chat %d: %s", chat_id, exc)
            raise DatabaseError() from exc

    async def _ensure_registered(self, chat_id: int) -> None:
        if not await self.is_registered(chat_id):
            raise NotRegisteredError()

    async def register(self, chat_id: int) -> None:
        if await self.is_registered(chat_id):
            raise AlreadyRegisteredError()

        key = registration_key(chat_id)
        try:
            async with self._store.update() as tx:
                bucket = await tx.bucket(self._registration_bucket)
                await bucket.put(key, key)
        except _STORE_ERRORS as exc:
            logger.error("Failed to update registration data: %s", exc)
            raise DatabaseError() from exc
        logger.info("Chat %d registered.", chat_id)

    async def unregister(self, chat_id: int) -> None:
        await self._ensure_registered(chat_id)

        try:
            async with self._store.update() as tx:
                bucket = await tx.bucket(self._registration_bucket)
                await bucket.delete(registration_key(chat_id))
        except _STORE_ERRORS as exc:
            logger.error("Failed to update registration data: %s", exc)
            raise DatabaseError() from exc
        logger.info("Chat %d unregistered.", chat_id)

    async def add_word(self, chat_id: int, word: str, translation: str) -> None:
        await self._ensure_registered(chat_id)
        if await self.is_added(chat_id, word):
            raise DuplicateWordError()

        try:
            async with self._store.update() as tx:
                bucket = await tx.bucket(self._vocabulary_bucket)
                await bucket.put(vocabulary_key(chat_id, word), translation.encode("utf-8"))
        except _STORE_ERRORS as exc:
            logger.error("Failed to add word: %s", exc)
            raise DatabaseError() from exc

    async def search_word(self, chat_id: int, word: str) -> str:
        await self._ensure_registered(chat_id)

        try:
            async with self._store.view() as tx:
                bucket = await tx.bucket(self._vocabulary_bucket)
                translation = await bucket.get(vocabulary_key(chat_id, word))
        except _STORE_ERRORS as exc:
            logger.error("Failed to get word: %s", exc)
            raise DatabaseError() from exc

        if translation is None:
            raise WordNotFoundError()
        return translation.decode("utf-8")

    async def delete_word(self, chat_id: int, word: str) -> None:
        await self._ensure_registered(chat_id)
        if not await self.is_added(chat_id, word):
            raise WordNotFoundError()

        try:
            async with self._store.update() as tx:
                bucket = await tx.bucket(self._vocabulary_bucket)
                await bucket.delete(vocabulary_key(chat_id, word))
        except _STORE_ERRORS as exc:
            logger.error("Failed to delete word: %s", exc)
            raise DatabaseError() from exc

    async def clear_words(self, chat_id: int) -> int:
        await self._ensure_registered(chat_id)

        removed = 0
        try:
            async with self._store.update() as tx:
                bucket = await tx.bucket(self._vocabulary_bucket)
                for key, _ in await bucket.scan(vocabulary_prefix(chat_id)):
                    if await bucket.delete(key):
                        removed += 1
        except _STORE_ERRORS as exc:
            logger.error("Failed to clear words: %s", exc)
            raise DatabaseError() from exc
        logger.info("Cleared %d words of chat %d.", removed, chat_id)
        return removed

    async def list_words(self, chat_id: int) -> list[VocabularyEntry]:
        await self._ensure_registered(chat_id)

        prefix = vocabulary_prefix(chat_id)
        try:
            async with self._store.view() as tx:
                bucket = await tx.bucket(self._vocabulary_bucket)
                rows = await bucket.scan(prefix)
        except _STORE_ERRORS as exc:
            logger.error("Failed to list words: %s", exc)
            raise DatabaseError() from exc

        entries = [
            VocabularyEntry(
                word=key.removeprefix(prefix).decode("utf-8"),
                translation=value.decode("utf-8"),
            )
            for key, value in rows
        ]
        if not entries:
            raise WordNotFoundError()
        return entries

    async def random_word(self, chat_id: int) -> VocabularyEntry:
        await self._ensure_registered(chat_id)
        entries = await self.list_words(chat_id)
        return self._rng.choice(entries)
