from __future__ import annotations

DEFAULT_REGISTRATION_BUCKET = "telegram"
DEFAULT_VOCABULARY_BUCKET = "kquiz"
DEFAULT_WORD_LANGUAGE = "Korean"

REGISTER_COMMANDS: frozenset[str] = frozenset({"/start", "/register"})
UNREGISTER_COMMANDS: frozenset[str] = frozenset({"/stop", "/unregister"})

BOT_COMMANDS: tuple[tuple[str, str], ...] = (
    ("register", "Register to start building your vocabulary"),
    ("add", "Add a word and its translation"),
    ("search", "Show the translation of a word"),
    ("random", "Quiz yourself on a random word"),
    ("delete", "Delete a word"),
    ("list", "List all your words"),
    ("clear", "Delete all your words"),
    ("unregister", "Stop using the bot"),
)

REGISTERED_REPLY = "Thanks for your registration."
UNREGISTERED_REPLY = (
    "You have been successfully unregistered. You will not receive any future updates."
)
WORDS_CLEARED_REPLY = "Words cleared."
CORRECT_ANSWER_REPLY = "Your answer is correct"
UNEXPECTED_ERROR_REPLY = "Something went wrong. Please try again later."
