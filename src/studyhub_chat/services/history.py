"""Room history reads for clients opening a chat."""

from __future__ import annotations

from studyhub_chat.repositories.membership_repo import MembershipStore
from studyhub_chat.repositories.message_repo import MessageLog
from studyhub_chat.schemas.chat import ChatTarget, EnrichedMessage


async def load_history(
    target: ChatTarget,
    messages: MessageLog,
    members: MembershipStore,
    limit: int | None = None,
) -> list[EnrichedMessage]:
    """Return a room's messages oldest first, each with its author's name and photo.

    Authors that no longer exist are reported as "Unknown".
    """
    history = await messages.list_messages(target, limit=limit)
    authors = await members.get_users({message.user_id for message in history})
    enriched: list[EnrichedMessage] = []
    for message in history:
        author = authors.get(message.user_id)
        enriched.append(
            EnrichedMessage(
                **message.model_dump(),
                user_name=author.name if author else "Unknown",
                user_photo=author.profile_photo if author else None,
            )
        )
    return enriched
