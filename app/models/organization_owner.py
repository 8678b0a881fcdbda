"""Owner and delegate tiers: full authority within one organization."""

from sqlalchemy import String, Integer, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin


class OrganizationOwner(Base, TimestampMixin):
    """Organization owners with full administrative access"""

    __tablename__ = "organization_owners"

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

    __table_args__ = (
        UniqueConstraint("organization_id", "user_id", name="uq_organization_owners_org_user"),
    )

    def __repr__(self) -> str:
        return f"<OrganizationOwner(organization_id={self.organization_id}, user_id='{self.user_id}')>"


class OrganizationDelegate(Base, TimestampMixin):
    """
    Co-administrators.

    Same authority as an owner; kept as a separate table so the role
    label and audit trail differ. Inactive delegates hold no authority.
    """

    __tablename__ = "organization_delegates"

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
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint("organization_id", "user_id", name="uq_organization_delegates_org_user"),
    )

    def __repr__(self) -> str:
        return f"<OrganizationDelegate(organization_id={self.organization_id}, user_id='{self.user_id}')>"
