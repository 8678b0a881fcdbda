from sqlalchemy import String, Integer, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin


class OrganizationRole(Base, TimestampMixin):
    """
    Named bundle of legacy module flags.

    default_permissions maps module name -> bool, e.g.
    {"dashboard": true, "finance": true, "education": false, ...}
    """

    __tablename__ = "organization_roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role_name: Mapped[str] = mapped_column(String(100), nullable=False)
    default_permissions: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        UniqueConstraint("organization_id", "role_name", name="uq_organization_roles_org_name"),
    )

    def __repr__(self) -> str:
        return f"<OrganizationRole(id={self.id}, role_name='{self.role_name}')>"
