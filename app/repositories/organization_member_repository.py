from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.organization_member import OrganizationMember
from app.models.permission_group import PermissionGroupMember
from app.repositories.base import data_service_call


class OrganizationMemberRepository:
    """Read access to organization member profiles"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, member_id: int) -> OrganizationMember | None:
        with data_service_call(self.db, "load member"):
            return self.db.query(OrganizationMember).filter(OrganizationMember.id == member_id).first()

    def list_not_in_group(self, organization_id: int, group_id: int) -> list[OrganizationMember]:
        """Organization members without an assignment to the group, by first name"""
        assigned = select(PermissionGroupMember.member_id).where(
            PermissionGroupMember.permission_group_id == group_id
        )
        with data_service_call(self.db, "list members not in group"):
            return (
                self.db.query(OrganizationMember)
                .filter(
                    OrganizationMember.organization_id == organization_id,
                    OrganizationMember.id.not_in(assigned),
                )
                .order_by(OrganizationMember.first_name, OrganizationMember.last_name, OrganizationMember.id)
                .all()
            )
