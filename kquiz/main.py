from __future__ import annotations

import argparse
import logging

from telegram import Update

from kquiz.app import create_application
from kquiz.config import ConfigError, load_settings
from kquiz.db.migrate import apply_migrations
from kquiz.logging_setup import configure_logging

logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Vocabulary quiz bot")
    parser.add_argument(
        "--migrate",
        action="store_true",
        help="Apply SQL migrations before starting bot.",
    )
    args = parser.parse_args()

    try:
        settings = load_settings()
    except ConfigError as exc:
        raise SystemExit(str(exc)) from exc

    configure_logging(settings.log_level)
    logger.info("Loaded configuration: %s", settings.safe_log_values())
    if args.migrate:
        applied = apply_migrations(settings.database_url)
        logger.info("Migrations applied: %s", ", ".join(applied) or "none pending")

    application = create_application(settings)
    application.run_polling(allowed_updates=[Update.MESSAGE])
    logger.info("Shutting down.")


if __name__ == "__main__":
    main()
