from __future__ import annotations


class RepositoryError(Exception):
    """Base class for failures reported by the vocabulary repository."""

    default_message = "repository error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class AlreadyRegisteredError(RepositoryError):
    default_message = "already registered"


class NotRegisteredError(RepositoryError):
    default_message = "not yet registered"


class DuplicateWordError(RepositoryError):
    default_message = "duplicate word"


class WordNotFoundError(RepositoryError):
    default_message = "word not found"


class DatabaseError(RepositoryError):
    default_message = "database error"
