from datetime import datetime
from pydantic import BaseModel, Field

from app.schemas.permission_schemas import PermissionResponse


class PermissionGroupSummary(BaseModel):
    """Group listing entry with counts"""

    id: int
    organization_id: int
    name: str
    description: str | None
    is_system: bool
    permission_count: int
    member_count: int
    created_at: datetime
    updated_at: datetime


class PermissionGroupBrief(BaseModel):
    """Group without nested permissions or counts"""

    id: int
    organization_id: int
    name: str
    description: str | None
    is_system: bool

    model_config = {"from_attributes": True}


class PermissionGroupResponse(BaseModel):
    """Full group with its resolved permission list"""

    id: int
    organization_id: int
    name: str
    description: str | None
    is_system: bool
    permissions: list[PermissionResponse]
    created_at: datetime
    updated_at: datetime
    created_by: str | None
    updated_by: str | None


class PermissionGroupCreate(BaseModel):
    """Create a custom (non-system) permission group"""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    permission_ids: list[int] = Field(default_factory=list)


class PermissionGroupUpdate(BaseModel):
    """
    Partial update. Only fields that were sent are applied; a sent
    permission_ids list replaces the whole permission set.
    """

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    permission_ids: list[int] | None = None


class GroupPermissionsUpdate(BaseModel):
    """Replace a group's permission set (empty list clears it)"""

    permission_ids: list[int]


class MemberSummary(BaseModel):
    """Organization member profile"""

    id: int
    first_name: str
    last_name: str
    email: str | None

    model_config = {"from_attributes": True}


class GroupMemberResponse(BaseModel):
    """Group membership assignment"""

    id: int
    member_id: int
    group_id: int
    assigned_at: datetime
    assigned_by: str | None
    member: MemberSummary


class GroupMemberAdd(BaseModel):
    member_id: int = Field(..., ge=1)


class GroupMemberRemoveResponse(BaseModel):
    message: str
    removed: bool
