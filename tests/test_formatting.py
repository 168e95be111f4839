from kquiz.domain.models import VocabularyEntry
from kquiz.errors import DuplicateWordError
from kquiz.utils.formatting import (
    format_added,
    format_entry,
    format_failure,
    format_incorrect_answer,
    format_question,
    format_search_result,
    format_word_prompt,
)


def test_entry_formats() -> None:
    entry = VocabularyEntry(word="사과", translation="apple")
    assert format_entry(entry) == "사과 -> apple"
    assert format_search_result(entry) == "사과 -> apple."
    assert format_added(entry) == "New word successfully added. 사과 -> apple."


def test_failure_uses_error_message() -> None:
    assert format_failure("Add word", DuplicateWordError()) == "Add word failed. duplicate word."


def test_quiz_messages() -> None:
    assert format_question("사과") == "What is translation for: 사과"
    assert format_incorrect_answer("apple") == "Your answer is incorrect. Correct answer is apple."


def test_word_prompts() -> None:
    assert format_word_prompt("Korean") == "Please provide the Korean word."
    assert (
        format_word_prompt("Korean", with_translation=True)
        == "Please provide the Korean word and its translation."
    )
