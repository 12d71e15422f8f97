# src/studyhub_chat/api/v1/endpoints/messages.py
"""Chat history and pin endpoints for the StudyHub API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from studyhub_chat.core.errors import InvalidTargetError, MessageNotFoundError
from studyhub_chat.schemas.chat import (
    ChatMessageResponse,
    ChatTarget,
    CommunityTarget,
    EnrichedMessage,
    GroupTarget,
    PinUpdate,
)
from studyhub_chat.services.history import load_history
from studyhub_chat.services.rooms import resolve_target

from ..dependencies import GatewayDep, MembershipRepoDep, MessageRepoDep

router = APIRouter(prefix="/messages", tags=["messages"])


async def _history(
    target: ChatTarget,
    messages: MessageRepoDep,
    members: MembershipRepoDep,
    limit: int | None,
) -> list[EnrichedMessage]:
    return await load_history(target, messages, members, limit=limit)


@router.get("/", response_model=list[EnrichedMessage])
async def list_messages(
    messages: MessageRepoDep,
    members: MembershipRepoDep,
    group_id: str | None = Query(None),
    stream: str | None = Query(None),
    limit: int | None = Query(None, ge=1, le=1000),
) -> list[EnrichedMessage]:
    """Get the history of a group or community room, oldest first."""
    try:
        target = resolve_target(group_id, stream)
    except InvalidTargetError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Exactly one of group_id and stream is required",
        ) from exc
    return await _history(target, messages, members, limit)


@router.get("/community/{stream}", response_model=list[EnrichedMessage])
async def list_community_messages(
    stream: str,
    messages: MessageRepoDep,
    members: MembershipRepoDep,
    limit: int | None = Query(None, ge=1, le=1000),
) -> list[EnrichedMessage]:
    """Get the history of a stream's community room."""
    return await _history(CommunityTarget(stream=stream), messages, members, limit)


@router.get("/group/{group_id}", response_model=list[EnrichedMessage])
async def list_group_messages(
    group_id: str,
    messages: MessageRepoDep,
    members: MembershipRepoDep,
    limit: int | None = Query(None, ge=1, le=1000),
) -> list[EnrichedMessage]:
    """Get the history of a group room."""
    return await _history(GroupTarget(group_id=group_id), messages, members, limit)


@router.patch("/{message_id}/pin", response_model=ChatMessageResponse)
async def pin_message(
    message_id: str,
    update: PinUpdate,
    gateway: GatewayDep,
) -> ChatMessageResponse:
    """Pin or unpin a message and notify everyone in its room.

    Restricting this to admins is left to the platform's authorization layer.
    """
    try:
        return await gateway.set_pinned(message_id, update.pinned)
    except MessageNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Message not found",
        ) from exc
