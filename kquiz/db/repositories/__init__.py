"""Repository implementations."""

from kquiz.db.repositories.words import WordRepository

__all__ = ["WordRepository"]
