# src/studyhub_chat/schemas/chat_setting.py
"""Chat setting Pydantic schemas."""

from pydantic import BaseModel, ConfigDict


class ChatSettingResponse(BaseModel):
    """Whether the community chat of a stream accepts posts from non-admins."""

    stream: str
    enabled: bool = True

    model_config = ConfigDict(from_attributes=True)


class ChatSettingUpdate(BaseModel):
    """Schema for switching a stream's community chat on or off."""

    enabled: bool
