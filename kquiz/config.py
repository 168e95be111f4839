from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from kquiz.constants import (
    DEFAULT_REGISTRATION_BUCKET,
    DEFAULT_VOCABULARY_BUCKET,
    DEFAULT_WORD_LANGUAGE,
)


class ConfigError(ValueError):
    """Raised when required environment configuration is missing."""


def _mask_secret(value: str) -> str:
    return "[redacted]" if value else ""


@dataclass(frozen=True)
class Settings:
    telegram_bot_token: str
    database_url: str
    log_level: str = "INFO"
    registration_bucket: str = DEFAULT_REGISTRATION_BUCKET
    vocabulary_bucket: str = DEFAULT_VOCABULARY_BUCKET
    word_language: str = DEFAULT_WORD_LANGUAGE
    db_pool_min_size: int = 1
    db_pool_max_size: int = 4

    def safe_log_values(self) -> dict[str, str]:
        return {
            "telegram_bot_token": _mask_secret(self.telegram_bot_token),
            "database_url": _mask_secret(self.database_url),
            "log_level": self.log_level,
            "registration_bucket": self.registration_bucket,
            "vocabulary_bucket": self.vocabulary_bucket,
            "word_language": self.word_language,
            "db_pool_min_size": str(self.db_pool_min_size),
            "db_pool_max_size": str(self.db_pool_max_size),
        }


def _require(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise ConfigError(f"Missing required environment variable: {name}")
    return value


def _optional(name: str, default: str) -> str:
    return os.getenv(name, default).strip() or default


def _positive_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default)).strip()
    try:
        return max(1, int(raw))
    except ValueError:
        return default


def load_settings() -> Settings:
    load_dotenv(override=False)
    registration_bucket = _optional("REGISTRATION_BUCKET", DEFAULT_REGISTRATION_BUCKET)
    vocabulary_bucket = _optional("VOCABULARY_BUCKET", DEFAULT_VOCABULARY_BUCKET)
    if registration_bucket == vocabulary_bucket:
        raise ConfigError("REGISTRATION_BUCKET and VOCABULARY_BUCKET must differ")
    return Settings(
        telegram_bot_token=_require("TELEGRAM_BOT_TOKEN"),
        database_url=_require("DATABASE_URL"),
        log_level=_optional("LOG_LEVEL", "INFO").upper(),
        registration_bucket=registration_bucket,
        vocabulary_bucket=vocabulary_bucket,
        word_language=_optional("WORD_LANGUAGE", DEFAULT_WORD_LANGUAGE),
        db_pool_min_size=_positive_int("DB_POOL_MIN_SIZE", 1),
        db_pool_max_size=_positive_int("DB_POOL_MAX_SIZE", 4),
    )
