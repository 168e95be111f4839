from __future__ import annotations

import copy
import random
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import psycopg
import pytest

from kquiz.db.kv import BucketNotFoundError
from kquiz.db.repositories.words import WordRepository
from kquiz.domain.quiz_state import QuizState
from kquiz.handlers.router import CommandRouter

REGISTRATION_BUCKET = "telegram"
VOCABULARY_BUCKET = "kquiz"


class InMemoryBucket:
    def __init__(self, store: InMemoryKeyValueStore, data: dict[bytes, bytes]) -> None:
        self._store = store
        self._data = data

    async def get(self, key: bytes) -> bytes | None:
        self._store.check_read()
        return self._data.get(key)

    async def put(self, key: bytes, value: bytes) -> None:
        self._store.check_write()
        self._data[key] = value

    async def delete(self, key: bytes) -> bool:
        self._store.check_write()
        return self._data.pop(key, None) is not None

    async def scan(self, prefix: bytes = b"") -> list[tuple[bytes, bytes]]:
        self._store.check_read()
        return [(key, self._data[key]) for key in sorted(self._data) if key.startswith(prefix)]


class InMemoryTransaction:
    def __init__(
        self,
        store: InMemoryKeyValueStore,
        buckets: dict[str, dict[bytes, bytes]],
        *,
        writable: bool,
    ) -> None:
        self._store = store
        self._buckets = buckets
        self.writable = writable

    async def bucket(self, name: str) -> InMemoryBucket:
        if name not in self._buckets:
            raise BucketNotFoundError(name)
        return InMemoryBucket(self._store, self._buckets[name])

    async def create_bucket_if_not_exists(self, name: str) -> InMemoryBucket:
        return InMemoryBucket(self._store, self._buckets.setdefault(name, {}))


class InMemoryKeyValueStore:
    """Mirrors KeyValueStore: updates work on a copy that is kept only on success."""

    def __init__(self) -> None:
        self.buckets: dict[str, dict[bytes, bytes]] = {}
        self.fail_reads = False
        self.fail_writes = False

    def check_read(self) -> None:
        if self.fail_reads:
            raise psycopg.OperationalError("simulated read failure")

    def check_write(self) -> None:
        if self.fail_writes:
            raise psycopg.OperationalError("simulated write failure")

    @asynccontextmanager
    async def view(self) -> AsyncIterator[InMemoryTransaction]:
        yield InMemoryTransaction(self, copy.deepcopy(self.buckets), writable=False)

    @asynccontextmanager
    async def update(self) -> AsyncIterator[InMemoryTransaction]:
        working = copy.deepcopy(self.buckets)
        yield InMemoryTransaction(self, working, writable=True)
        self.buckets = working

    async def create_buckets(self, *names: str) -> None:
        for name in names:
            self.buckets.setdefault(name, {})


class RecordingSender:
    def __init__(self) -> None:
        self.sent: list[tuple[int, str]] = []

    async def __call__(self, chat_id: int, text: str) -> None:
        self.sent.append((chat_id, text))

    def texts(self, chat_id: int | None = None) -> list[str]:
        return [text for target, text in self.sent if chat_id is None or target == chat_id]

    def clear(self) -> None:
        self.sent.clear()


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    kv = InMemoryKeyValueStore()
    kv.buckets = {REGISTRATION_BUCKET: {}, VOCABULARY_BUCKET: {}}
    return kv


@pytest.fixture
def words_repo(store: InMemoryKeyValueStore) -> WordRepository:
    return WordRepository(
        store,
        registration_bucket=REGISTRATION_BUCKET,
        vocabulary_bucket=VOCABULARY_BUCKET,
        rng=random.Random(1234),
    )


@pytest.fixture
def quiz_state() -> QuizState:
    return QuizState()


@pytest.fixture
def router(words_repo: WordRepository, quiz_state: QuizState) -> CommandRouter:
    return CommandRouter(words_repo, quiz_state, word_language="Korean")


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()
