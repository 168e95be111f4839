from __future__ import annotations

import logging
import re
import sys

_SECRET_PATTERNS = [
    re.compile(r"(TELEGRAM_BOT_TOKEN\s*=\s*)(\S+)", re.IGNORECASE),
    re.compile(r"(DATABASE_URL\s*=\s*)(\S+)", re.IGNORECASE),
    re.compile(r"(api\.telegram\.org/(?:file/)?bot)([^/\s]+)"),
]


class RedactingFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = message
        for pattern in _SECRET_PATTERNS:
            redacted = pattern.sub(r"\1***REDACTED***", redacted)
        if redacted != message:
            record.msg = redacted
            record.args = ()
        return True


def configure_logging(log_level: str) -> None:
    level = getattr(logging, log_level.upper(), logging.INFO)
    redacting_filter = RedactingFilter()
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(redacting_filter)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[handler],
        force=True,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("psycopg.pool").setLevel(logging.WARNING)
