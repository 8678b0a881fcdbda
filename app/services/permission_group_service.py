"""Permission group management (the group store)."""

import logging

from sqlalchemy.orm import Session

from app.core.exceptions import (
    NotFoundException,
    ValidationException,
    SystemGroupProtectedException,
    DuplicateMembershipException,
)
from app.core.permission_catalog import SYSTEM_GROUPS
from app.models.permission_group import PermissionGroup, PermissionGroupMember
from app.repositories.organization_member_repository import OrganizationMemberRepository
from app.repositories.permission_group_member_repository import PermissionGroupMemberRepository
from app.repositories.permission_group_repository import PermissionGroupRepository
from app.repositories.permission_repository import PermissionRepository
from app.schemas.permission_group_schemas import (
    PermissionGroupSummary,
    PermissionGroupBrief,
    PermissionGroupResponse,
    PermissionGroupUpdate,
    GroupMemberResponse,
    MemberSummary,
)
from app.schemas.permission_schemas import PermissionResponse
from app.services.decision_cache import DecisionCache

logger = logging.getLogger(__name__)


def _unique(ids) -> list[int]:
    """Drop repeated ids, keeping first-seen order"""
    return list(dict.fromkeys(ids))


class PermissionGroupService:
    """
    Service layer for permission groups and their assignments.

    Every mutation that can change the codes reachable by a member
    invalidates the decision cache for each affected member.
    """

    def __init__(self, db: Session, cache: DecisionCache | None = None):
        self.db = db
        self.cache = cache
        self.group_repo = PermissionGroupRepository(db)
        self.assignment_repo = PermissionGroupMemberRepository(db)
        self.member_repo = OrganizationMemberRepository(db)
        self.permission_repo = PermissionRepository(db)

    # Reads

    def list_groups(self, organization_id: int) -> list[PermissionGroupSummary]:
        """
        List every group of an organization with counts.

        System groups come first, then alphabetical by name.
        """
        return [
            PermissionGroupSummary(
                id=group.id,
                organization_id=group.organization_id,
                name=group.name,
                description=group.description,
                is_system=group.is_system,
                permission_count=permission_count,
                member_count=member_count,
                created_at=group.created_at,
                updated_at=group.updated_at,
            )
            for group, permission_count, member_count in self.group_repo.list_with_counts(organization_id)
        ]

    def get_group(self, group_id: int) -> PermissionGroupResponse | None:
        """
        Get a group with its permissions.

        Links whose catalog entry no longer exists are left out.

        Returns:
            PermissionGroupResponse or None if the group does not exist
        """
        group = self.group_repo.get_by_id(group_id)
        if group is None:
            return None
        return self._to_response(group)

    def list_members(self, group_id: int) -> list[GroupMemberResponse]:
        """Members assigned to a group, most recently assigned first"""
        return [self._to_member_response(a) for a in self.assignment_repo.list_for_group(group_id)]

    def list_members_not_in_group(self, organization_id: int, group_id: int) -> list[MemberSummary]:
        """Organization members that can still be added to the group"""
        return [
            MemberSummary.model_validate(member)
            for member in self.member_repo.list_not_in_group(organization_id, group_id)
        ]

    def list_member_groups(self, member_id: int) -> list[PermissionGroupBrief]:
        return [PermissionGroupBrief.model_validate(g) for g in self.group_repo.get_member_groups(member_id)]

    def get_member_permission_codes(self, member_id: int) -> list[str]:
        """
        Deduplicated permission codes of a member.

        Raises:
            NotFoundException: If the member does not exist
        """
        member = self.member_repo.get_by_id(member_id)
        if member is None:
            raise NotFoundException("Member not found")
        return self.group_repo.get_member_permission_codes(member.id, member.organization_id)

    # Group mutations

    def create_group(
        self,
        organization_id: int,
        name: str,
        description: str | None = None,
        permission_ids: list[int] | None = None,
        actor: str | None = None,
    ) -> PermissionGroupResponse:
        """
        Create a custom group and attach its permissions.

        The group row is committed before permissions are attached. If
        the attachment fails the DataServiceException propagates and the
        group stays in place without permissions.

        Raises:
            ValidationException: If the name is already used in the organization
        """
        if self.group_repo.get_by_name(organization_id, name) is not None:
            raise ValidationException(f"A permission group named '{name}' already exists")

        group = self.group_repo.create(
            PermissionGroup(
                organization_id=organization_id,
                name=name,
                description=description or None,
                is_system=False,
                created_by=actor,
                updated_by=actor,
            )
        )
        self.group_repo.add_permissions(group.id, _unique(permission_ids or []), assigned_by=actor)
        logger.info("Created permission group %s '%s' in org %s", group.id, name, organization_id)
        return self.get_group(group.id)

    def update_group(
        self, group_id: int, data: PermissionGroupUpdate, actor: str | None = None
    ) -> PermissionGroupResponse:
        """
        Apply the fields present in data.

        Raises:
            NotFoundException: If the group does not exist
            SystemGroupProtectedException: If renaming or re-describing a system group
            ValidationException: If the new name is taken
        """
        group = self.group_repo.get_by_id(group_id)
        if group is None:
            raise NotFoundException("Permission group not found")

        provided = data.model_fields_set
        details = {}
        if "name" in provided and data.name is not None and data.name != group.name:
            details["name"] = data.name
        if "description" in provided and data.description != group.description:
            details["description"] = data.description

        if details:
            if group.is_system:
                raise SystemGroupProtectedException("System permission groups cannot be renamed or re-described")
            if "name" in details:
                existing = self.group_repo.get_by_name(group.organization_id, details["name"])
                if existing is not None and existing.id != group.id:
                    raise ValidationException(f"A permission group named '{details['name']}' already exists")
            for field, value in details.items():
                setattr(group, field, value)
            group.updated_by = actor
            self.group_repo.update(group)

        if "permission_ids" in provided and data.permission_ids is not None:
            self._replace_permissions(group, data.permission_ids, actor)

        return self.get_group(group_id)

    def delete_group(self, group_id: int) -> None:
        """
        Delete a custom group together with its links.

        Raises:
            NotFoundException: If the group does not exist
            SystemGroupProtectedException: If the group is a system group
        """
        group = self.group_repo.get_by_id(group_id)
        if group is None:
            raise NotFoundException("Permission group not found")
        if group.is_system:
            raise SystemGroupProtectedException("Cannot delete system permission groups")

        organization_id = group.organization_id
        affected = self.group_repo.get_member_user_ids(group_id)
        self.group_repo.delete(group)
        logger.info("Deleted permission group %s in org %s", group_id, organization_id)
        self._invalidate(affected, organization_id)

    def set_group_permissions(self, group_id: int, permission_ids: list[int], actor: str | None = None) -> None:
        """
        Replace the group's permission set. An empty list clears it.

        Raises:
            NotFoundException: If the group does not exist
        """
        group = self.group_repo.get_by_id(group_id)
        if group is None:
            raise NotFoundException("Permission group not found")
        self._replace_permissions(group, permission_ids, actor)

    def seed_default_groups(self, organization_id: int) -> list[PermissionGroupSummary]:
        """
        Create the protected system groups of an organization.

        Groups that already exist by name are left untouched.
        """
        for definition in SYSTEM_GROUPS:
            if self.group_repo.get_by_name(organization_id, definition["name"]) is not None:
                continue
            group = self.group_repo.create(
                PermissionGroup(
                    organization_id=organization_id,
                    name=definition["name"],
                    description=definition["description"],
                    is_system=True,
                )
            )
            self.group_repo.add_permissions(group.id, self._select_permission_ids(definition["selector"]))
            logger.info("Seeded system group '%s' in org %s", definition["name"], organization_id)
        return self.list_groups(organization_id)

    # Membership mutations

    def add_member(self, group_id: int, member_id: int, actor: str | None = None) -> GroupMemberResponse:
        """
        Assign a member to a group.

        Raises:
            NotFoundException: If the group or member does not exist
            ValidationException: If the member belongs to another organization
            DuplicateMembershipException: If the member is already assigned
        """
        group = self.group_repo.get_by_id(group_id)
        if group is None:
            raise NotFoundException("Permission group not found")
        member = self.member_repo.get_by_id(member_id)
        if member is None:
            raise NotFoundException("Member not found")
        if member.organization_id != group.organization_id:
            raise ValidationException("Member belongs to a different organization")
        if self.assignment_repo.get(group_id, member_id) is not None:
            raise DuplicateMembershipException("Member is already assigned to this group")

        assignment = self.assignment_repo.create(
            PermissionGroupMember(permission_group_id=group_id, member_id=member_id, assigned_by=actor)
        )
        logger.info("Added member %s to permission group %s", member_id, group_id)
        self._invalidate([member.user_id], group.organization_id)
        return self._to_member_response(assignment)

    def remove_member(self, group_id: int, member_id: int) -> bool:
        """
        Remove a member from a group. Safe when the pair does not exist.

        Returns:
            True if an assignment was removed
        """
        member = self.member_repo.get_by_id(member_id)
        removed = self.assignment_repo.delete_pair(group_id, member_id)
        if removed:
            logger.info("Removed member %s from permission group %s", member_id, group_id)
        if member is not None:
            self._invalidate([member.user_id], member.organization_id)
        return bool(removed)

    # Helpers

    def _replace_permissions(self, group: PermissionGroup, permission_ids: list[int], actor: str | None) -> None:
        group_id = group.id
        organization_id = group.organization_id
        self.group_repo.replace_permissions(group, _unique(permission_ids), assigned_by=actor)
        logger.info("Replaced permissions of group %s (%d codes)", group_id, len(_unique(permission_ids)))
        self._invalidate(self.group_repo.get_member_user_ids(group_id), organization_id)

    def _select_permission_ids(self, selector: tuple) -> list[int]:
        kind, value = selector
        if kind == "all":
            return self.permission_repo.get_all_ids()
        if kind == "modules":
            return self.permission_repo.get_ids_by_modules(value)
        if kind == "action":
            return self.permission_repo.get_ids_by_code_suffix(value)
        raise ValueError(f"Unknown permission selector: {kind}")

    def _invalidate(self, user_ids: list[str], organization_id: int) -> None:
        if self.cache is None:
            return
        removed = 0
        for user_id in set(user_ids):
            removed += self.cache.invalidate(user_id=user_id, organization_id=organization_id)
        logger.info(
            "Invalidated %d cached permission decisions for %d members of org %s",
            removed,
            len(set(user_ids)),
            organization_id,
        )

    @staticmethod
    def _to_response(group: PermissionGroup) -> PermissionGroupResponse:
        permissions = sorted(
            (link.permission for link in group.permission_links if link.permission is not None),
            key=lambda p: (p.module, p.sort_order, p.code),
        )
        return PermissionGroupResponse(
            id=group.id,
            organization_id=group.organization_id,
            name=group.name,
            description=group.description,
            is_system=group.is_system,
            permissions=[PermissionResponse.model_validate(p) for p in permissions],
            created_at=group.created_at,
            updated_at=group.updated_at,
            created_by=group.created_by,
            updated_by=group.updated_by,
        )

    @staticmethod
    def _to_member_response(assignment: PermissionGroupMember) -> GroupMemberResponse:
        return GroupMemberResponse(
            id=assignment.id,
            member_id=assignment.member_id,
            group_id=assignment.permission_group_id,
            assigned_at=assignment.assigned_at,
            assigned_by=assignment.assigned_by,
            member=MemberSummary.model_validate(assignment.member),
        )
