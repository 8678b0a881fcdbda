"""Permission groups and their join tables."""

from datetime import datetime

from sqlalchemy import String, Integer, Text, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from app.models.base import Base, TimestampMixin, utcnow

if TYPE_CHECKING:
    from app.models.organization import Organization
    from app.models.organization_member import OrganizationMember
    from app.models.permission import Permission


class PermissionGroup(Base, TimestampMixin):
    """
    Organization-scoped, named bundle of permission codes.

    System groups (is_system=True) are seeded per organization. They can
    not be deleted or renamed, but their permission set stays editable.
    """

    __tablename__ = "permission_groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_system: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Relationships
    organization: Mapped["Organization"] = relationship("Organization", back_populates="permission_groups")
    permission_links: Mapped[list["PermissionGroupPermission"]] = relationship(
        "PermissionGroupPermission",
        back_populates="group",
        cascade="all, delete-orphan",
    )
    member_links: Mapped[list["PermissionGroupMember"]] = relationship(
        "PermissionGroupMember",
        back_populates="group",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint("organization_id", "name", name="uq_permission_groups_org_name"),
    )

    def __repr__(self) -> str:
        return f"<PermissionGroup(id={self.id}, name='{self.name}', is_system={self.is_system})>"


class PermissionGroupPermission(Base):
    """Links a permission code to a permission group"""

    __tablename__ = "permission_group_permissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    permission_group_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("permission_groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    permission_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("permissions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    assigned_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    group: Mapped["PermissionGroup"] = relationship("PermissionGroup", back_populates="permission_links")
    # Left unresolved when the catalog row is gone; readers filter those out
    permission: Mapped["Permission | None"] = relationship("Permission")

    __table_args__ = (
        UniqueConstraint("permission_group_id", "permission_id", name="uq_permission_group_permissions"),
    )


class PermissionGroupMember(Base):
    """Assigns an organization member to a permission group"""

    __tablename__ = "permission_group_members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    permission_group_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("permission_groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    member_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organization_members.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    assigned_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    group: Mapped["PermissionGroup"] = relationship("PermissionGroup", back_populates="member_links")
    member: Mapped["OrganizationMember"] = relationship("OrganizationMember", back_populates="group_assignments")

    __table_args__ = (
        UniqueConstraint("permission_group_id", "member_id", name="uq_permission_group_members_group_member"),
    )
