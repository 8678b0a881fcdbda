"""Repository for group membership assignments."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import DuplicateMembershipException
from app.models.permission_group import PermissionGroupMember
from app.repositories.base import data_service_call


class PermissionGroupMemberRepository:
    """Repository for PermissionGroupMember model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, group_id: int, member_id: int) -> PermissionGroupMember | None:
        with data_service_call(self.db, "load group membership"):
            return (
                self.db.query(PermissionGroupMember)
                .filter(
                    PermissionGroupMember.permission_group_id == group_id,
                    PermissionGroupMember.member_id == member_id,
                )
                .first()
            )

    def list_for_group(self, group_id: int) -> list[PermissionGroupMember]:
        """
        Get all assignments for a group, most recently assigned first.

        Each assignment has its member profile loaded.
        """
        with data_service_call(self.db, "list group members"):
            return (
                self.db.query(PermissionGroupMember)
                .options(joinedload(PermissionGroupMember.member))
                .filter(PermissionGroupMember.permission_group_id == group_id)
                .order_by(PermissionGroupMember.assigned_at.desc(), PermissionGroupMember.id.desc())
                .all()
            )

    def create(self, assignment: PermissionGroupMember) -> PermissionGroupMember:
        """
        Create a new assignment.

        Raises:
            DuplicateMembershipException: If (group, member) already exists
        """
        with data_service_call(self.db, "add group member"):
            try:
                self.db.add(assignment)
                self.db.commit()
            except IntegrityError as exc:
                self.db.rollback()
                raise DuplicateMembershipException("Member is already assigned to this group") from exc
            self.db.refresh(assignment)
        return assignment

    def delete_pair(self, group_id: int, member_id: int) -> int:
        """
        Remove a member from a group.

        Returns:
            Number of rows removed (0 when the pair did not exist)
        """
        with data_service_call(self.db, "remove group member"):
            removed = (
                self.db.query(PermissionGroupMember)
                .filter(
                    PermissionGroupMember.permission_group_id == group_id,
                    PermissionGroupMember.member_id == member_id,
                )
                .delete(synchronize_session=False)
            )
            self.db.commit()
        return removed
