import logging
from collections import defaultdict

from sqlalchemy.orm import Session

from app.core.permission_catalog import DEFAULT_PERMISSIONS
from app.models.permission import Permission
from app.repositories.permission_repository import PermissionRepository
from app.schemas.permission_schemas import PermissionResponse

logger = logging.getLogger(__name__)


class PermissionCatalogService:
    """Read access to the global permission catalog, plus seeding"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PermissionRepository(db)

    def list_permissions(self) -> list[PermissionResponse]:
        """All permissions ordered by module, then display order"""
        return [PermissionResponse.model_validate(p) for p in self.repo.get_all()]

    def permissions_by_module(self) -> dict[str, list[PermissionResponse]]:
        grouped: dict[str, list[PermissionResponse]] = defaultdict(list)
        for permission in self.list_permissions():
            grouped[permission.module].append(permission)
        return dict(grouped)

    def seed_catalog(self) -> int:
        """
        Insert default catalog entries that are not present yet.

        Returns:
            Number of permissions created
        """
        existing = self.repo.get_existing_codes()
        missing = [
            Permission(code=code, name=name, description=description, module=module, sort_order=sort_order)
            for code, name, description, module, sort_order in DEFAULT_PERMISSIONS
            if code not in existing
        ]
        if missing:
            self.repo.create_many(missing)
            logger.info("Seeded %d permission catalog entries", len(missing))
        return len(missing)
