from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.exceptions import ValidationException
from app.database import get_db
from app.dependencies import get_current_user_id, get_permission_state, require_platform_admin
from app.models.permission_state import EffectivePermissionState
from app.services.permission_catalog_service import PermissionCatalogService
from app.services.role_labels import derive_system_role, default_flags_for_system_role, is_admin_role
from app.schemas.permission_schemas import (
    PermissionResponse,
    EffectivePermissionsResponse,
    PermissionCheckResponse,
    CatalogSeedResponse,
    RoleLabelRequest,
    RoleLabelResponse,
)

router = APIRouter()


@router.get("/catalog", response_model=list[PermissionResponse])
async def list_catalog(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    List the global permission catalog.

    Ordered by module, then display order within the module.
    """
    service = PermissionCatalogService(db)
    return service.list_permissions()


@router.get("/catalog/by-module", response_model=dict[str, list[PermissionResponse]])
async def list_catalog_by_module(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Permission catalog grouped by module"""
    service = PermissionCatalogService(db)
    return service.permissions_by_module()


@router.post("/catalog/seed", response_model=CatalogSeedResponse, status_code=status.HTTP_200_OK)
async def seed_catalog(
    admin: EffectivePermissionState = Depends(require_platform_admin),
    db: Session = Depends(get_db),
):
    """
    Insert missing default catalog entries.

    - **Requires platform admin**
    - Safe to call repeatedly
    """
    service = PermissionCatalogService(db)
    created = service.seed_catalog()
    return {"created": created, "total": len(service.list_permissions())}


@router.get("/me", response_model=EffectivePermissionsResponse)
async def get_my_permissions(state: EffectivePermissionState = Depends(get_permission_state)):
    """
    Effective permissions of the authenticated user.

    Pass organization_id to resolve within an organization. Without it,
    only platform admin status is considered.
    """
    return EffectivePermissionsResponse.from_state(state)


@router.get("/me/check", response_model=PermissionCheckResponse)
async def check_my_permission(
    code: str | None = None,
    module: str | None = None,
    state: EffectivePermissionState = Depends(get_permission_state),
):
    """
    Check a single permission code or legacy module flag.

    Exactly one of code or module must be given.
    """
    if (code is None) == (module is None):
        raise ValidationException("Provide exactly one of 'code' or 'module'")

    if code is not None:
        allowed, reason = state.check_permission_code(code)
    else:
        allowed, reason = state.check_module_access(module)
    return {"allowed": allowed, "reason": reason, "code": code, "module": module}


@router.post("/role-label", response_model=RoleLabelResponse)
async def derive_role_label(
    request: RoleLabelRequest,
    user_id: str = Depends(get_current_user_id),
):
    """
    Bucket a legacy module-flag selection into a system role label.

    Returns the label together with the flags that would be stored.
    """
    system_role, module_flags = derive_system_role(request.role_type, request.module_flags)
    return {"system_role": system_role, "module_flags": module_flags, "is_admin": is_admin_role(system_role)}


@router.get("/role-label/{system_role}/flags", response_model=RoleLabelResponse)
async def get_role_label_flags(
    system_role: str,
    user_id: str = Depends(get_current_user_id),
):
    """Module flags implied by a system role label when none were stored"""
    return {
        "system_role": system_role,
        "module_flags": default_flags_for_system_role(system_role),
        "is_admin": is_admin_role(system_role),
    }
