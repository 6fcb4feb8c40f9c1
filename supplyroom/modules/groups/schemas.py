from enum import Enum
from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class GroupRole(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"


class GroupCreate(BaseModel):
    name: str
    description: Optional[str] = None


class GroupResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    created_by: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GroupWithRoleResponse(GroupResponse):
    role: GroupRole  # caller's role in the group


class GroupMemberAdd(BaseModel):
    user_id: str
    role: GroupRole = GroupRole.MEMBER


class GroupMemberResponse(BaseModel):
    id: str
    group_id: str
    user_id: str
    role: GroupRole
    created_at: datetime

    class Config:
        from_attributes = True
