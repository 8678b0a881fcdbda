from typing import Literal

from pydantic import BaseModel, Field

from app.models.permission_state import EffectivePermissionState
from app.models.role import AccessTier


class PermissionResponse(BaseModel):
    """Catalog entry"""

    id: int
    code: str
    name: str
    description: str | None = None
    module: str
    sort_order: int = 0

    model_config = {"from_attributes": True}


class EffectivePermissionsResponse(BaseModel):
    """Resolved permissions of the authenticated user"""

    tier: AccessTier
    organization_id: int | None
    module_flags: dict[str, bool] | None
    permission_codes: list[str]
    has_wildcard: bool
    is_platform_admin: bool
    tenant_tier: AccessTier | None
    member_id: int | None
    is_admin: bool
    is_full_admin: bool
    role_base_path: str
    error: str | None = None

    @classmethod
    def from_state(cls, state: EffectivePermissionState) -> "EffectivePermissionsResponse":
        return cls(
            tier=state.tier,
            organization_id=state.organization_id,
            module_flags=dict(state.module_flags) if state.module_flags is not None else None,
            permission_codes=sorted(state.permission_codes),
            has_wildcard=state.has_wildcard,
            is_platform_admin=state.is_platform_admin,
            tenant_tier=state.tenant_tier,
            member_id=state.member_id,
            is_admin=state.is_admin,
            is_full_admin=state.is_full_admin,
            role_base_path=state.role_base_path,
            error=state.error,
        )


class PermissionCheckResponse(BaseModel):
    """Outcome of a single permission code or module check"""

    allowed: bool
    reason: str
    code: str | None = None
    module: str | None = None


class CatalogSeedResponse(BaseModel):
    created: int
    total: int


class RoleLabelRequest(BaseModel):
    """Module-flag selection from the legacy role editor"""

    role_type: Literal["member", "admin"]
    module_flags: dict[str, bool] = Field(default_factory=dict)


class RoleLabelResponse(BaseModel):
    system_role: str
    module_flags: dict[str, bool]
    is_admin: bool
