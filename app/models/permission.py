"""Global permission catalog."""

from enum import Enum as PyEnum
from datetime import datetime

from sqlalchemy import String, Integer, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, utcnow

WILDCARD = "*"


class PermissionModule(str, PyEnum):
    """Functional areas a permission code can belong to"""

    MEMBERS = "members"
    HOUSEHOLDS = "households"
    DONATIONS = "donations"
    FUNDS = "funds"
    PLEDGES = "pledges"
    EXPENSES = "expenses"
    EDUCATION = "education"
    CASES = "cases"
    UMRAH = "umrah"
    QURBANI = "qurbani"
    SERVICES = "services"
    ANNOUNCEMENTS = "announcements"
    REPORTS = "reports"
    SETTINGS = "settings"
    PERMISSIONS = "permissions"


class Permission(Base):
    """
    Catalog entry for a single capability.

    code has the form "module:action" (e.g. "donations:create") and the
    module prefix always equals the module column. Entries are global and
    immutable from the resolver's point of view.
    """

    __tablename__ = "permissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    module: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Permission(code='{self.code}')>"
