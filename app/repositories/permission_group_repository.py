"""Repository for permission groups and their permission sets."""

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from app.models.organization_member import OrganizationMember
from app.models.permission import Permission
from app.models.permission_group import (
    PermissionGroup,
    PermissionGroupPermission,
    PermissionGroupMember,
)
from app.repositories.base import data_service_call


class PermissionGroupRepository:
    """Repository for PermissionGroup model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, group_id: int) -> PermissionGroup | None:
        """
        Get group by ID with its permission links loaded.

        Returns:
            PermissionGroup object or None if not found
        """
        with data_service_call(self.db, "load permission group"):
            return (
                self.db.query(PermissionGroup)
                .options(
                    selectinload(PermissionGroup.permission_links).selectinload(
                        PermissionGroupPermission.permission
                    )
                )
                .filter(PermissionGroup.id == group_id)
                .first()
            )

    def get_by_name(self, organization_id: int, name: str) -> PermissionGroup | None:
        with data_service_call(self.db, "load permission group by name"):
            return (
                self.db.query(PermissionGroup)
                .filter(
                    PermissionGroup.organization_id == organization_id,
                    PermissionGroup.name == name,
                )
                .first()
            )

    def list_with_counts(self, organization_id: int) -> list[tuple[PermissionGroup, int, int]]:
        """
        List an organization's groups with permission and member counts.

        Only links to existing catalog entries are counted. System groups
        come first, then groups are ordered by name.

        Returns:
            List of (group, permission_count, member_count) tuples
        """
        permission_counts = (
            self.db.query(
                PermissionGroupPermission.permission_group_id.label("group_id"),
                func.count(PermissionGroupPermission.id).label("total"),
            )
            .join(Permission, Permission.id == PermissionGroupPermission.permission_id)
            .group_by(PermissionGroupPermission.permission_group_id)
            .subquery()
        )
        member_counts = (
            self.db.query(
                PermissionGroupMember.permission_group_id.label("group_id"),
                func.count(PermissionGroupMember.id).label("total"),
            )
            .group_by(PermissionGroupMember.permission_group_id)
            .subquery()
        )
        with data_service_call(self.db, "list permission groups"):
            rows = (
                self.db.query(
                    PermissionGroup,
                    func.coalesce(permission_counts.c.total, 0),
                    func.coalesce(member_counts.c.total, 0),
                )
                .outerjoin(permission_counts, permission_counts.c.group_id == PermissionGroup.id)
                .outerjoin(member_counts, member_counts.c.group_id == PermissionGroup.id)
                .filter(PermissionGroup.organization_id == organization_id)
                .order_by(PermissionGroup.is_system.desc(), PermissionGroup.name)
                .all()
            )
        return [(group, int(perm_count), int(member_count)) for group, perm_count, member_count in rows]

    def create(self, group: PermissionGroup) -> PermissionGroup:
        """
        Create a new permission group.

        Returns:
            Created PermissionGroup with ID populated
        """
        with data_service_call(self.db, "create permission group"):
            self.db.add(group)
            self.db.commit()
            self.db.refresh(group)
        return group

    def update(self, group: PermissionGroup) -> PermissionGroup:
        """Persist attribute changes made on a loaded group"""
        with data_service_call(self.db, "update permission group"):
            self.db.commit()
            self.db.refresh(group)
        return group

    def delete(self, group: PermissionGroup) -> None:
        """
        Delete a group.

        Permission and member links are removed with it.
        """
        with data_service_call(self.db, "delete permission group"):
            self.db.delete(group)
            self.db.commit()

    def add_permissions(
        self, group_id: int, permission_ids: list[int], assigned_by: str | None = None
    ) -> None:
        """Attach permissions to a group in a single insert"""
        if not permission_ids:
            return
        with data_service_call(self.db, "attach group permissions"):
            self.db.add_all(
                [
                    PermissionGroupPermission(
                        permission_group_id=group_id,
                        permission_id=permission_id,
                        assigned_by=assigned_by,
                    )
                    for permission_id in permission_ids
                ]
            )
            self.db.commit()

    def replace_permissions(
        self, group: PermissionGroup, permission_ids: list[int], assigned_by: str | None = None
    ) -> None:
        """
        Replace the group's whole permission set.

        The delete and the insert share one transaction: on failure the
        previous set is kept. Old links are flushed out through the
        delete-orphan cascade before the new ones are added.
        """
        with data_service_call(self.db, "replace group permissions"):
            group.permission_links.clear()
            self.db.flush()
            self.db.add_all(
                [
                    PermissionGroupPermission(
                        permission_group_id=group.id,
                        permission_id=permission_id,
                        assigned_by=assigned_by,
                    )
                    for permission_id in permission_ids
                ]
            )
            self.db.commit()

    def get_member_user_ids(self, group_id: int) -> list[str]:
        """User ids of every member assigned to the group"""
        with data_service_call(self.db, "group member user ids"):
            rows = (
                self.db.query(OrganizationMember.user_id)
                .join(PermissionGroupMember, PermissionGroupMember.member_id == OrganizationMember.id)
                .filter(PermissionGroupMember.permission_group_id == group_id)
                .distinct()
                .all()
            )
        return [row[0] for row in rows]

    def get_member_groups(self, member_id: int) -> list[PermissionGroup]:
        """All groups a member belongs to, ordered by name"""
        with data_service_call(self.db, "member groups"):
            return (
                self.db.query(PermissionGroup)
                .join(PermissionGroupMember, PermissionGroupMember.permission_group_id == PermissionGroup.id)
                .filter(PermissionGroupMember.member_id == member_id)
                .order_by(PermissionGroup.name)
                .all()
            )

    def get_member_permission_codes(self, member_id: int, organization_id: int) -> list[str]:
        """
        Deduplicated codes reachable through every group the member is in.

        Groups from other organizations are never consulted. Links to
        missing catalog entries drop out of the inner join.
        """
        with data_service_call(self.db, "member permission codes"):
            rows = (
                self.db.query(Permission.code)
                .join(PermissionGroupPermission, PermissionGroupPermission.permission_id == Permission.id)
                .join(PermissionGroup, PermissionGroup.id == PermissionGroupPermission.permission_group_id)
                .join(
                    PermissionGroupMember,
                    PermissionGroupMember.permission_group_id == PermissionGroup.id,
                )
                .filter(
                    PermissionGroupMember.member_id == member_id,
                    PermissionGroup.organization_id == organization_id,
                )
                .distinct()
                .order_by(Permission.code)
                .all()
            )
        return [row[0] for row in rows]
