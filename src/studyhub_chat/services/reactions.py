"""Reaction toggling for chat messages."""

from __future__ import annotations

from collections.abc import Mapping, Sequence


def toggle_reaction(
    reactions: Mapping[str, Sequence[str]] | None,
    emoji: str,
    user_id: str,
) -> dict[str, list[str]]:
    """Return a copy of ``reactions`` with ``user_id`` toggled under ``emoji``.

    The caller never chooses a direction: a user already listed under the
    emoji is removed (and the emoji dropped once nobody is left), otherwise the
    user is appended. The input mapping is not modified.

    Args:
        reactions: Current ``{emoji: [user_id, ...]}`` map, or None for none.
        emoji: Reaction symbol.
        user_id: Acting user.

    Returns:
        The updated reaction map.
    """
    updated: dict[str, list[str]] = {}
    for key, users in (reactions or {}).items():
        # Collapse any duplicates left by older writers.
        deduped = list(dict.fromkeys(users))
        if deduped:
            updated[key] = deduped

    users = updated.get(emoji, [])
    if user_id in users:
        users = [existing for existing in users if existing != user_id]
    else:
        users = [*users, user_id]

    if users:
        updated[emoji] = users
    else:
        updated.pop(emoji, None)
    return updated


def has_reacted(reactions: Mapping[str, Sequence[str]], emoji: str, user_id: str) -> bool:
    """Return True when ``user_id`` is listed under ``emoji``."""
    return user_id in reactions.get(emoji, ())
