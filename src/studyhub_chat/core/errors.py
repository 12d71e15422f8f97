"""Domain errors raised by the chat core and its stores."""

from __future__ import annotations


class ChatError(Exception):
    """Base class for chat domain errors."""


class InvalidTargetError(ChatError, ValueError):
    """A message or event names neither or both of group and stream."""


class MessageNotFoundError(ChatError, LookupError):
    """Raised when a message id does not exist in the log."""

    def __init__(self, message_id: str) -> None:
        super().__init__(f"Message not found: {message_id}")
        self.message_id = message_id


class GroupNotFoundError(ChatError, LookupError):
    """Raised when a group id does not exist."""

    def __init__(self, group_id: str) -> None:
        super().__init__(f"Group not found: {group_id}")
        self.group_id = group_id


class MembershipNotFoundError(ChatError, LookupError):
    """Raised when a membership id does not exist."""

    def __init__(self, membership_id: str) -> None:
        super().__init__(f"Membership not found: {membership_id}")
        self.membership_id = membership_id


class GroupUsernameTakenError(ChatError):
    """Raised when a new group reuses an existing handle."""


class DuplicateMembershipError(ChatError):
    """Raised when a user already has a membership row for a group."""
