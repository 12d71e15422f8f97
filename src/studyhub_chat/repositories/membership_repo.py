"""Data access helpers for users, groups, memberships and chat settings."""
from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from studyhub_chat.core.errors import (
    DuplicateMembershipError,
    GroupNotFoundError,
    GroupUsernameTakenError,
    MembershipNotFoundError,
)
from studyhub_chat.models import ChatGroup, ChatSetting, GroupMember, User
from studyhub_chat.models.group import MEMBERSHIP_STATUS_ACCEPTED
from studyhub_chat.schemas.chat import UserProfile
from studyhub_chat.schemas.chat_setting import ChatSettingResponse
from studyhub_chat.schemas.group import (
    GroupCreate,
    GroupMemberResponse,
    GroupResponse,
    MembershipStatus,
)

__all__ = ["MembershipStore", "MembershipRepository"]


class MembershipStore(Protocol):
    """Identity, group membership and chat switch lookups used by the chat core."""

    async def get_user(self, user_id: str) -> UserProfile | None: ...

    async def get_users(self, user_ids: Iterable[str]) -> dict[str, UserProfile]: ...

    async def get_group_members(self, group_id: str) -> list[GroupMemberResponse]: ...

    async def get_chat_setting(self, stream: str) -> ChatSettingResponse | None: ...


class MembershipRepository:
    """SQLAlchemy-backed membership store."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        """Initialize the repository with a session factory."""
        self.session_factory = session_factory

    # Users

    async def get_user(self, user_id: str) -> UserProfile | None:
        """Return a user profile by identifier."""
        return await asyncio.to_thread(self._get_user, user_id)

    async def get_users(self, user_ids: Iterable[str]) -> dict[str, UserProfile]:
        """Return the profiles of the given users keyed by id; unknown ids are skipped."""
        return await asyncio.to_thread(self._get_users, set(user_ids))

    # Groups

    async def get_group(self, group_id: str) -> GroupResponse | None:
        """Return a group by identifier."""
        return await asyncio.to_thread(self._get_group, group_id)

    async def get_group_by_username(self, username: str) -> GroupResponse | None:
        """Return a group by its public handle."""
        return await asyncio.to_thread(self._get_group_by_username, username)

    async def create_group(self, data: GroupCreate) -> GroupResponse:
        """Create a group and enrol its creator as an accepted member.

        Raises:
            GroupUsernameTakenError: If another group already uses the handle.
        """
        return await asyncio.to_thread(self._create_group, data)

    async def get_groups_by_user(self, user_id: str) -> list[GroupResponse]:
        """Return the groups a user is an accepted member of."""
        return await asyncio.to_thread(self._get_groups_by_user, user_id)

    # Memberships

    async def get_group_members(self, group_id: str) -> list[GroupMemberResponse]:
        """Return every membership row of a group, pending ones included."""
        return await asyncio.to_thread(self._get_group_members, group_id)

    async def create_group_member(
        self,
        group_id: str,
        user_id: str,
        status: MembershipStatus = MembershipStatus.PENDING,
    ) -> GroupMemberResponse:
        """Insert a membership row.

        Raises:
            GroupNotFoundError: If the group does not exist.
            DuplicateMembershipError: If the user already has a row for the group.
        """
        return await asyncio.to_thread(
            self._create_group_member, group_id, user_id, status
        )

    async def update_group_member_status(
        self, membership_id: str, status: MembershipStatus
    ) -> GroupMemberResponse:
        """Change the status of a membership row.

        Raises:
            MembershipNotFoundError: If the membership does not exist.
        """
        return await asyncio.to_thread(
            self._update_group_member_status, membership_id, status
        )

    # Chat settings

    async def get_chat_setting(self, stream: str) -> ChatSettingResponse | None:
        """Return the chat switch of a stream, or None when never configured."""
        return await asyncio.to_thread(self._get_chat_setting, stream)

    async def set_chat_setting(self, stream: str, enabled: bool) -> ChatSettingResponse:
        """Create or update the chat switch of a stream."""
        return await asyncio.to_thread(self._set_chat_setting, stream, enabled)

    def _get_user(self, user_id: str) -> UserProfile | None:
        with self.session_factory() as db:
            user = db.get(User, user_id)
            return UserProfile.model_validate(user) if user else None

    def _get_users(self, user_ids: set[str]) -> dict[str, UserProfile]:
        if not user_ids:
            return {}
        with self.session_factory() as db:
            rows = db.execute(select(User).where(User.id.in_(user_ids))).scalars()
            return {row.id: UserProfile.model_validate(row) for row in rows}

    def _get_group(self, group_id: str) -> GroupResponse | None:
        with self.session_factory() as db:
            group = db.get(ChatGroup, group_id)
            return GroupResponse.model_validate(group) if group else None

    def _get_group_by_username(self, username: str) -> GroupResponse | None:
        with self.session_factory() as db:
            group = db.execute(
                select(ChatGroup).where(ChatGroup.username == username)
            ).scalars().first()
            return GroupResponse.model_validate(group) if group else None

    def _create_group(self, data: GroupCreate) -> GroupResponse:
        with self.session_factory() as db:
            group = ChatGroup(
                name=data.name,
                username=data.username,
                creator_id=data.creator_id,
            )
            db.add(group)
            try:
                db.flush()
                db.add(
                    GroupMember(
                        group_id=group.id,
                        user_id=data.creator_id,
                        status=MEMBERSHIP_STATUS_ACCEPTED,
                    )
                )
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                # Only a handle collision is a domain error; other violations propagate.
                taken = db.execute(
                    select(ChatGroup.id).where(ChatGroup.username == data.username)
                ).first()
                if taken is None:
                    raise
                raise GroupUsernameTakenError(data.username) from exc
            db.refresh(group)
            return GroupResponse.model_validate(group)

    def _get_groups_by_user(self, user_id: str) -> list[GroupResponse]:
        stmt = (
            select(ChatGroup)
            .join(GroupMember, GroupMember.group_id == ChatGroup.id)
            .where(
                GroupMember.user_id == user_id,
                GroupMember.status == MEMBERSHIP_STATUS_ACCEPTED,
            )
            .order_by(ChatGroup.created_at.asc())
        )
        with self.session_factory() as db:
            return [GroupResponse.model_validate(row) for row in db.execute(stmt).scalars()]

    def _get_group_members(self, group_id: str) -> list[GroupMemberResponse]:
        stmt = (
            select(GroupMember)
            .where(GroupMember.group_id == group_id)
            .order_by(GroupMember.joined_at.asc())
        )
        with self.session_factory() as db:
            return [
                GroupMemberResponse.model_validate(row)
                for row in db.execute(stmt).scalars()
            ]

    def _create_group_member(
        self, group_id: str, user_id: str, status: MembershipStatus
    ) -> GroupMemberResponse:
        with self.session_factory() as db:
            if db.get(ChatGroup, group_id) is None:
                raise GroupNotFoundError(group_id)
            member = GroupMember(group_id=group_id, user_id=user_id, status=status.value)
            db.add(member)
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                raise DuplicateMembershipError(
                    f"User {user_id} already has a membership in group {group_id}"
                ) from exc
            db.refresh(member)
            return GroupMemberResponse.model_validate(member)

    def _update_group_member_status(
        self, membership_id: str, status: MembershipStatus
    ) -> GroupMemberResponse:
        with self.session_factory() as db:
            member = db.get(GroupMember, membership_id)
            if member is None:
                raise MembershipNotFoundError(membership_id)
            member.status = status.value
            db.commit()
            db.refresh(member)
            return GroupMemberResponse.model_validate(member)

    def _get_chat_setting(self, stream: str) -> ChatSettingResponse | None:
        with self.session_factory() as db:
            setting = db.execute(
                select(ChatSetting).where(ChatSetting.stream == stream)
            ).scalars().first()
            return ChatSettingResponse.model_validate(setting) if setting else None

    def _set_chat_setting(self, stream: str, enabled: bool) -> ChatSettingResponse:
        with self.session_factory() as db:
            setting = db.execute(
                select(ChatSetting).where(ChatSetting.stream == stream)
            ).scalars().first()
            if setting is None:
                setting = ChatSetting(stream=stream, enabled=enabled)
                db.add(setting)
            else:
                setting.enabled = enabled
            db.commit()
            db.refresh(setting)
            return ChatSettingResponse.model_validate(setting)
