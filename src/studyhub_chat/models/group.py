# src/studyhub_chat/models/group.py
"""Models describing private chat groups and their membership."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from studyhub_chat.db.session import Base
from studyhub_chat.db.time import new_id, utcnow

MEMBERSHIP_STATUS_PENDING = "pending"
MEMBERSHIP_STATUS_ACCEPTED = "accepted"


class ChatGroup(Base):
    """Private group chat created by a user."""

    __tablename__ = "groups"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    # Public handle used to find and join the group.
    username: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    creator_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(default=utcnow)


class GroupMember(Base):
    """Membership of a user in a group, pending until the creator accepts it."""

    __tablename__ = "group_members"
    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name="uq_group_members_group_user"),
        Index("ix_group_members_user_id", "user_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    group_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("groups.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False
    )
    status: Mapped[str] = mapped_column(
        Text, nullable=False, default=MEMBERSHIP_STATUS_PENDING
    )
    joined_at: Mapped[datetime] = mapped_column(default=utcnow)
