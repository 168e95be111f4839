from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_answer(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text.strip()).casefold()


def answers_match(answer: str, expected: str) -> bool:
    return normalize_answer(answer) == normalize_answer(expected)
