"""Organization member model linking users to organizations."""

from sqlalchemy import String, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from app.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.organization import Organization
    from app.models.organization_role import OrganizationRole
    from app.models.permission_group import PermissionGroupMember


class OrganizationMember(Base, TimestampMixin):
    """
    Regular member of an organization.

    Access comes from two independent sources:
    - the assigned role's default module flags (none assigned -> all false)
    - the permission groups the member belongs to (permission codes)

    Constraints:
    - Unique(organization_id, user_id) - one member row per user per organization
    """

    __tablename__ = "organization_members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    role_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("organization_roles.id", ondelete="SET NULL"),
        nullable=True,
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Relationships
    organization: Mapped["Organization"] = relationship("Organization", back_populates="members")
    role: Mapped["OrganizationRole | None"] = relationship("OrganizationRole")
    group_assignments: Mapped[list["PermissionGroupMember"]] = relationship(
        "PermissionGroupMember",
        back_populates="member",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint("organization_id", "user_id", name="uq_organization_members_org_user"),
    )

    def __repr__(self) -> str:
        return f"<OrganizationMember(id={self.id}, organization_id={self.organization_id}, user_id='{self.user_id}')>"
