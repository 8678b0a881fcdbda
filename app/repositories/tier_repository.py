"""Existence checks for the four authority tiers."""

from sqlalchemy.orm import Session, joinedload

from app.models.platform_admin import PlatformAdmin
from app.models.organization_owner import OrganizationOwner, OrganizationDelegate
from app.models.organization_member import OrganizationMember
from app.repositories.base import data_service_call


class TierRepository:
    """Read-only lookups against the platform admin and tenant tier tables"""

    def __init__(self, db: Session):
        self.db = db

    def is_platform_admin(self, user_id: str) -> bool:
        """Platform admin status is global, independent of any organization."""
        with data_service_call(self.db, "platform admin lookup"):
            row = self.db.query(PlatformAdmin.id).filter(PlatformAdmin.user_id == user_id).first()
        return row is not None

    def get_owner(self, user_id: str, organization_id: int) -> OrganizationOwner | None:
        with data_service_call(self.db, "owner lookup"):
            return (
                self.db.query(OrganizationOwner)
                .filter(
                    OrganizationOwner.user_id == user_id,
                    OrganizationOwner.organization_id == organization_id,
                )
                .first()
            )

    def get_active_delegate(self, user_id: str, organization_id: int) -> OrganizationDelegate | None:
        """Inactive delegate rows are treated as absent."""
        with data_service_call(self.db, "delegate lookup"):
            return (
                self.db.query(OrganizationDelegate)
                .filter(
                    OrganizationDelegate.user_id == user_id,
                    OrganizationDelegate.organization_id == organization_id,
                    OrganizationDelegate.is_active.is_(True),
                )
                .first()
            )

    def get_member(self, user_id: str, organization_id: int) -> OrganizationMember | None:
        """Member row with its role loaded."""
        with data_service_call(self.db, "member lookup"):
            return (
                self.db.query(OrganizationMember)
                .options(joinedload(OrganizationMember.role))
                .filter(
                    OrganizationMember.user_id == user_id,
                    OrganizationMember.organization_id == organization_id,
                )
                .first()
            )
