from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundException
from app.database import get_db
from app.dependencies import get_current_user_id, get_decision_cache, require_permission
from app.services.decision_cache import DecisionCache
from app.services.permission_group_service import PermissionGroupService
from app.schemas.permission_group_schemas import (
    PermissionGroupSummary,
    PermissionGroupResponse,
    PermissionGroupCreate,
    PermissionGroupUpdate,
    GroupPermissionsUpdate,
    GroupMemberResponse,
    GroupMemberAdd,
    GroupMemberRemoveResponse,
    MemberSummary,
)

router = APIRouter()

can_view = Depends(require_permission("permissions:view"))
can_manage = Depends(require_permission("permissions:manage"))


def get_group_service(
    db: Session = Depends(get_db),
    cache: DecisionCache = Depends(get_decision_cache),
) -> PermissionGroupService:
    return PermissionGroupService(db, cache)


def _get_org_group(
    service: PermissionGroupService, organization_id: int, group_id: int
) -> PermissionGroupResponse:
    # Groups of other organizations are indistinguishable from missing ones
    group = service.get_group(group_id)
    if group is None or group.organization_id != organization_id:
        raise NotFoundException("Permission group not found")
    return group


@router.get("", response_model=list[PermissionGroupSummary], dependencies=[can_view])
async def list_groups(
    organization_id: int,
    service: PermissionGroupService = Depends(get_group_service),
):
    """
    List the organization's permission groups.

    System groups first, then by name, with permission and member counts.
    """
    return service.list_groups(organization_id)


@router.post(
    "",
    response_model=PermissionGroupResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[can_manage],
)
async def create_group(
    organization_id: int,
    group_data: PermissionGroupCreate,
    user_id: str = Depends(get_current_user_id),
    service: PermissionGroupService = Depends(get_group_service),
):
    """
    Create a custom permission group.

    - **Requires permissions:manage**
    - Group names are unique within the organization
    """
    return service.create_group(
        organization_id,
        group_data.name,
        description=group_data.description,
        permission_ids=group_data.permission_ids,
        actor=user_id,
    )


@router.post("/seed", response_model=list[PermissionGroupSummary], dependencies=[can_manage])
async def seed_groups(
    organization_id: int,
    service: PermissionGroupService = Depends(get_group_service),
):
    """Create the default system groups; existing ones are left alone"""
    return service.seed_default_groups(organization_id)


@router.get("/{group_id}", response_model=PermissionGroupResponse, dependencies=[can_view])
async def get_group(
    organization_id: int,
    group_id: int,
    service: PermissionGroupService = Depends(get_group_service),
):
    return _get_org_group(service, organization_id, group_id)


@router.patch("/{group_id}", response_model=PermissionGroupResponse, dependencies=[can_manage])
async def update_group(
    organization_id: int,
    group_id: int,
    group_update: PermissionGroupUpdate,
    user_id: str = Depends(get_current_user_id),
    service: PermissionGroupService = Depends(get_group_service),
):
    """
    Update a group.

    - **Requires permissions:manage**
    - System groups cannot be renamed or re-described
    - permission_ids, when sent, replaces the whole permission set
    """
    _get_org_group(service, organization_id, group_id)
    return service.update_group(group_id, group_update, actor=user_id)


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[can_manage])
async def delete_group(
    organization_id: int,
    group_id: int,
    service: PermissionGroupService = Depends(get_group_service),
):
    """Delete a custom group with its permission and member links"""
    _get_org_group(service, organization_id, group_id)
    service.delete_group(group_id)
    return None


@router.put("/{group_id}/permissions", response_model=PermissionGroupResponse, dependencies=[can_manage])
async def set_group_permissions(
    organization_id: int,
    group_id: int,
    permissions_update: GroupPermissionsUpdate,
    user_id: str = Depends(get_current_user_id),
    service: PermissionGroupService = Depends(get_group_service),
):
    """
    Replace the group's permission set.

    An empty list removes every permission. Allowed on system groups.
    """
    _get_org_group(service, organization_id, group_id)
    service.set_group_permissions(group_id, permissions_update.permission_ids, actor=user_id)
    return service.get_group(group_id)


@router.get("/{group_id}/members", response_model=list[GroupMemberResponse], dependencies=[can_view])
async def list_group_members(
    organization_id: int,
    group_id: int,
    service: PermissionGroupService = Depends(get_group_service),
):
    """Members of the group, most recently assigned first"""
    _get_org_group(service, organization_id, group_id)
    return service.list_members(group_id)


@router.post(
    "/{group_id}/members",
    response_model=GroupMemberResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[can_manage],
)
async def add_group_member(
    organization_id: int,
    group_id: int,
    member_add: GroupMemberAdd,
    user_id: str = Depends(get_current_user_id),
    service: PermissionGroupService = Depends(get_group_service),
):
    """
    Assign a member to the group.

    - **Requires permissions:manage**
    - The member must belong to the same organization
    - Assigning twice returns 409
    """
    _get_org_group(service, organization_id, group_id)
    return service.add_member(group_id, member_add.member_id, actor=user_id)


@router.delete(
    "/{group_id}/members/{member_id}",
    response_model=GroupMemberRemoveResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[can_manage],
)
async def remove_group_member(
    organization_id: int,
    group_id: int,
    member_id: int,
    service: PermissionGroupService = Depends(get_group_service),
):
    """Remove a member from the group. Removing an absent member is not an error."""
    _get_org_group(service, organization_id, group_id)
    removed = service.remove_member(group_id, member_id)

    return {
        "message": "Member removed successfully" if removed else "Member was not in the group",
        "removed": removed,
    }


@router.get("/{group_id}/available-members", response_model=list[MemberSummary], dependencies=[can_view])
async def list_available_members(
    organization_id: int,
    group_id: int,
    service: PermissionGroupService = Depends(get_group_service),
):
    """Organization members not yet assigned to the group"""
    _get_org_group(service, organization_id, group_id)
    return service.list_members_not_in_group(organization_id, group_id)
