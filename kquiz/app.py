from __future__ import annotations

import logging

from telegram import BotCommand, Update
from telegram.ext import Application, ContextTypes, MessageHandler, filters

from kquiz.config import Settings
from kquiz.constants import BOT_COMMANDS, UNEXPECTED_ERROR_REPLY
from kquiz.db.kv import KeyValueStore
from kquiz.db.pool import DatabasePool
from kquiz.db.repositories.words import WordRepository
from kquiz.domain.quiz_state import QuizState
from kquiz.handlers.messages import text_message_handler
from kquiz.handlers.router import CommandRouter
from kquiz.runtime_keys import (
    BUCKETS_KEY,
    COMMAND_ROUTER_KEY,
    DB_POOL_KEY,
    KV_STORE_KEY,
)

logger = logging.getLogger(__name__)


def create_application(settings: Settings) -> Application:
    db_pool = DatabasePool(
        settings.database_url,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
    )
    store = KeyValueStore(db_pool.pool)
    words_repo = WordRepository(
        store,
        registration_bucket=settings.registration_bucket,
        vocabulary_bucket=settings.vocabulary_bucket,
    )
    quiz_state = QuizState()
    router = CommandRouter(words_repo, quiz_state, word_language=settings.word_language)

    app = (
        Application.builder()
        .token(settings.telegram_bot_token)
        .concurrent_updates(False)
        .post_init(_post_init)
        .post_shutdown(_post_shutdown)
        .build()
    )

    app.bot_data[DB_POOL_KEY] = db_pool
    app.bot_data[KV_STORE_KEY] = store
    app.bot_data[COMMAND_ROUTER_KEY] = router
    app.bot_data[BUCKETS_KEY] = (settings.registration_bucket, settings.vocabulary_bucket)

    app.add_handler(MessageHandler(filters.TEXT, text_message_handler))
    app.add_error_handler(_error_handler)
    return app


async def _post_init(app: Application) -> None:
    db_pool: DatabasePool = app.bot_data[DB_POOL_KEY]
    store: KeyValueStore = app.bot_data[KV_STORE_KEY]
    await db_pool.open()
    await store.create_buckets(*app.bot_data[BUCKETS_KEY])
    await app.bot.set_my_commands(
        [BotCommand(command, description) for command, description in BOT_COMMANDS]
    )
    logger.info("Telegram command menu registered.")


async def _post_shutdown(app: Application) -> None:
    db_pool: DatabasePool = app.bot_data[DB_POOL_KEY]
    await db_pool.close()


async def _error_handler(
    update: object, context: ContextTypes.DEFAULT_TYPE
) -> None:  # pragma: no cover - framework callback
    logger.exception("Unhandled telegram error", exc_info=context.error)
    if isinstance(update, Update) and update.effective_message is not None:
        await update.effective_message.reply_text(UNEXPECTED_ERROR_REPLY)
