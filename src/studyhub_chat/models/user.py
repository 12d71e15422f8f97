# src/studyhub_chat/models/user.py
"""SQLAlchemy model for platform user profiles read by the chat core."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from studyhub_chat.db.session import Base
from studyhub_chat.db.time import new_id, utcnow


class User(Base):
    """Student, teacher or admin account.

    Only the fields the chat needs are mapped; registration, password hashing
    and the rest of the profile belong to the wider platform.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    username: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    # School, NEET, JEE; selects the community room.
    stream: Mapped[str] = mapped_column(Text, nullable=False)
    profile_photo: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
