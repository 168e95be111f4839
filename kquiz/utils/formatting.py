from __future__ import annotations

from kquiz.domain.models import VocabularyEntry


def format_entry(entry: VocabularyEntry) -> str:
    return f"{entry.word} -> {entry.translation}"


def format_failure(action: str, error: Exception) -> str:
    return f"{action} failed. {error}."


def format_added(entry: VocabularyEntry) -> str:
    return f"New word successfully added. {format_entry(entry)}."


def format_search_result(entry: VocabularyEntry) -> str:
    return f"{format_entry(entry)}."


def format_question(word: str) -> str:
    return f"What is translation for: {word}"


def format_incorrect_answer(expected: str) -> str:
    return f"Your answer is incorrect. Correct answer is {expected}."


def format_word_prompt(language: str, *, with_translation: bool = False) -> str:
    if with_translation:
        return f"Please provide the {language} word and its translation."
    return f"Please provide the {language} word."
