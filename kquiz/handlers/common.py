from __future__ import annotations

from telegram.ext import ContextTypes

from kquiz.handlers.router import CommandRouter
from kquiz.runtime_keys import COMMAND_ROUTER_KEY


def command_router(context: ContextTypes.DEFAULT_TYPE) -> CommandRouter:
    return context.application.bot_data[COMMAND_ROUTER_KEY]
