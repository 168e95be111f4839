from __future__ import annotations


class QuizState:
    """Pending quiz answers, one slot per chat.

    Lives only in process memory. Mutated from the single update loop, so no
    locking is done here.
    """

    def __init__(self) -> None:
        self._answers: dict[int, str] = {}

    def set(self, chat_id: int, answer: str) -> None:
        self._answers[chat_id] = answer

    def peek(self, chat_id: int) -> str | None:
        return self._answers.get(chat_id)

    def take(self, chat_id: int) -> str | None:
        return self._answers.pop(chat_id, None)

    def __contains__(self, chat_id: object) -> bool:
        return chat_id in self._answers

    def __len__(self) -> int:
        return len(self._answers)
