from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.config import settings
from app.core.security import extract_user_id
from app.core.exceptions import UnauthorizedException, ForbiddenException
from app.database import get_db
from app.models.permission_state import EffectivePermissionState
from app.services.decision_cache import DecisionCache
from app.services.permission_resolver import PermissionResolver

security = HTTPBearer(auto_error=False)

# Process-wide decision cache shared by every request
decision_cache = DecisionCache(ttl_seconds=settings.PERMISSION_CACHE_TTL_SECONDS)


def get_decision_cache() -> DecisionCache:
    return decision_cache


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    """
    FastAPI dependency to validate JWT and return the caller's user id.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate JWT using shared SECRET_KEY
    3. Return the opaque user id from the 'sub' claim

    Raises:
        HTTPException 401: If token missing, invalid or expired
    """
    try:
        if credentials is None:
            raise UnauthorizedException("Not authenticated")
        return extract_user_id(credentials.credentials)

    except UnauthorizedException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_permission_state(
    organization_id: int | None = None,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    cache: DecisionCache = Depends(get_decision_cache),
) -> EffectivePermissionState:
    """
    Effective permissions of the caller, never raising on data failures.

    A lookup failure yields the denied state with its error set.
    """
    return PermissionResolver(db, cache).resolve_or_deny(user_id, organization_id)


def require_permission(code: str):
    """
    Build a dependency that resolves the caller in the path's organization
    and rejects the request unless the code is granted.

    Usage:
        @router.get("", dependencies=[Depends(require_permission("permissions:view"))])
    """

    async def dependency(
        organization_id: int,
        user_id: str = Depends(get_current_user_id),
        db: Session = Depends(get_db),
        cache: DecisionCache = Depends(get_decision_cache),
    ) -> EffectivePermissionState:
        state = PermissionResolver(db, cache).resolve(user_id, organization_id)
        if not state.has_permission_code(code):
            raise ForbiddenException(f"Missing permission: {code}")
        return state

    return dependency


async def require_platform_admin(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    cache: DecisionCache = Depends(get_decision_cache),
) -> EffectivePermissionState:
    """Only platform admins may pass"""
    state = PermissionResolver(db, cache).resolve(user_id, None)
    if not state.is_platform_admin:
        raise ForbiddenException("Platform admin access required")
    return state
