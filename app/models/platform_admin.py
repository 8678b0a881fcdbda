from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin


class PlatformAdmin(Base, TimestampMixin):
    """
    Platform operators with access to every organization.

    Existence of a row is the whole grant; there is no payload.
    """

    __tablename__ = "platform_admins"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<PlatformAdmin(user_id='{self.user_id}')>"
