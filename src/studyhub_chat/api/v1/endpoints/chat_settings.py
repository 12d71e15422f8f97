# src/studyhub_chat/api/v1/endpoints/chat_settings.py
"""Community chat switch endpoints for the StudyHub API."""

from __future__ import annotations

import logging

from fastapi import APIRouter

from studyhub_chat.schemas.chat_setting import ChatSettingResponse, ChatSettingUpdate

from ..dependencies import MembershipRepoDep

router = APIRouter(prefix="/chat-settings", tags=["chat-settings"])

logger = logging.getLogger(__name__)


@router.get("/{stream}", response_model=ChatSettingResponse)
async def get_chat_setting(stream: str, members: MembershipRepoDep) -> ChatSettingResponse:
    """Get whether a stream's community chat is open; streams without a row are open."""
    setting = await members.get_chat_setting(stream)
    if setting is None:
        return ChatSettingResponse(stream=stream, enabled=True)
    return setting


@router.patch("/{stream}", response_model=ChatSettingResponse)
async def update_chat_setting(
    stream: str,
    update: ChatSettingUpdate,
    members: MembershipRepoDep,
) -> ChatSettingResponse:
    """Open or close a stream's community chat for non-admin users."""
    setting = await members.set_chat_setting(stream, update.enabled)
    logger.info(
        "Community chat for %s %s", stream, "enabled" if setting.enabled else "disabled"
    )
    return setting
