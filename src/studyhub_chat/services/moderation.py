"""Moderation services for StudyHub chat."""

from __future__ import annotations

from collections.abc import Iterable

from studyhub_chat.core.settings import settings
from studyhub_chat.schemas.chat import MessageKind


def is_blocked(text: str, terms: Iterable[str]) -> bool:
    """Return True when ``text`` contains any denylisted term.

    Matching is a case-insensitive substring test; no stemming and no unicode
    normalization beyond lowercasing.
    """
    lowered = text.lower()
    return any(term and term.lower() in lowered for term in terms)


class ModerationFilter:
    """Stateless classifier for outgoing chat content."""

    def __init__(self, blocked_terms: Iterable[str]) -> None:
        """Initialize the filter with its denylist.

        Args:
            blocked_terms: Terms that must not appear in a text message.
        """
        self.blocked_terms = tuple(term.lower() for term in blocked_terms if term)

    @classmethod
    def from_settings(cls) -> ModerationFilter:
        """Build a filter from ``CHAT_BLOCKED_TERMS``."""
        return cls(settings.chat_blocked_terms)

    def is_blocked(self, text: str) -> bool:
        """Return True when the text matches the denylist."""
        return is_blocked(text, self.blocked_terms)

    def should_reject(self, kind: MessageKind, content: str) -> bool:
        """Return True when a message of ``kind`` must not be stored.

        Image messages carry an opaque media reference and are never scanned.
        """
        if kind is not MessageKind.TEXT:
            return False
        return self.is_blocked(content)
