"""Organization model: the tenant isolation boundary."""

from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from app.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.organization_member import OrganizationMember
    from app.models.permission_group import PermissionGroup


class Organization(Base, TimestampMixin):
    """
    Multi-tenant isolation boundary.

    Owners, delegates, members, roles and permission groups all belong to
    exactly one organization. Only platform admins and the permission
    catalog live outside of it.
    """

    __tablename__ = "organizations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relationships
    members: Mapped[list["OrganizationMember"]] = relationship(
        "OrganizationMember",
        back_populates="organization",
        cascade="all, delete-orphan",
    )
    permission_groups: Mapped[list["PermissionGroup"]] = relationship(
        "PermissionGroup",
        back_populates="organization",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, name='{self.name}')>"
