from sqlalchemy.orm import Session

from app.models.permission import Permission
from app.repositories.base import data_service_call


class PermissionRepository:
    """Repository for the global permission catalog"""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> list[Permission]:
        """All catalog entries ordered by module, then display order"""
        with data_service_call(self.db, "list permissions"):
            return (
                self.db.query(Permission)
                .order_by(Permission.module, Permission.sort_order, Permission.code)
                .all()
            )

    def get_existing_codes(self) -> set[str]:
        with data_service_call(self.db, "list permission codes"):
            return {code for (code,) in self.db.query(Permission.code).all()}

    def get_ids_by_modules(self, modules: list[str]) -> list[int]:
        with data_service_call(self.db, "permission ids by module"):
            rows = self.db.query(Permission.id).filter(Permission.module.in_(modules)).all()
        return [row[0] for row in rows]

    def get_ids_by_code_suffix(self, suffix: str) -> list[int]:
        """Ids of codes ending in suffix, e.g. ":view"."""
        with data_service_call(self.db, "permission ids by action"):
            rows = self.db.query(Permission.id).filter(Permission.code.like(f"%{suffix}")).all()
        return [row[0] for row in rows]

    def get_all_ids(self) -> list[int]:
        with data_service_call(self.db, "all permission ids"):
            return [row[0] for row in self.db.query(Permission.id).all()]

    def create_many(self, permissions: list[Permission]) -> list[Permission]:
        """Insert catalog entries in one transaction"""
        with data_service_call(self.db, "create permissions"):
            self.db.add_all(permissions)
            self.db.commit()
        return permissions
