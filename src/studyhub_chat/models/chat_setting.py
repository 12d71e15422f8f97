# src/studyhub_chat/models/chat_setting.py
"""Per-stream switch for the community chat."""

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from studyhub_chat.db.session import Base
from studyhub_chat.db.time import new_id


class ChatSetting(Base):
    """Whether non-admins may post into a stream's community room."""

    __tablename__ = "chat_settings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    stream: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
