# src/studyhub_chat/schemas/group.py
"""Group and membership Pydantic schemas."""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class MembershipStatus(str, Enum):
    """Lifecycle of a join request; there is no rejected state."""

    PENDING = "pending"
    ACCEPTED = "accepted"


class GroupCreate(BaseModel):
    """Schema for creating a new group."""

    name: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1, description="Unique public handle")
    creator_id: str = Field(..., min_length=1)


class GroupResponse(BaseModel):
    """Schema for group information returned by the API."""

    id: str
    name: str
    username: str
    creator_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class JoinGroupRequest(BaseModel):
    """Request from a user to join a group."""

    user_id: str = Field(..., min_length=1)


class MembershipStatusUpdate(BaseModel):
    """Status change applied by the group creator."""

    status: Literal["accepted"]


class GroupMemberResponse(BaseModel):
    """Schema for a membership row."""

    id: str
    group_id: str
    user_id: str
    status: MembershipStatus
    joined_at: datetime

    model_config = ConfigDict(from_attributes=True)


class JoinRequestResponse(GroupMemberResponse):
    """Pending membership decorated with the requester's name."""

    user_name: str
