"""Resolution of effective permissions for a user in an organization."""

import dataclasses
import logging

from sqlalchemy.orm import Session

from app.core.exceptions import DataServiceException, ValidationException
from app.models.permission import WILDCARD
from app.models.permission_state import EffectivePermissionState
from app.models.role import AccessTier, full_module_flags, empty_module_flags
from app.models.tier_match import OwnerMatch, DelegateMatch, MemberMatch, NoTierMatch
from app.repositories.permission_group_repository import PermissionGroupRepository
from app.services.decision_cache import DecisionCache
from app.services.tier_lookup import TierLookup

logger = logging.getLogger(__name__)

FULL_CODES = frozenset({WILDCARD})


class PermissionResolver:
    """
    Combines tier lookup and group membership into one decision.

    Precedence: platform_admin > owner > delegate > member. Platform
    admin status is checked on its own and then overrides whatever the
    tenant tier produced.
    """

    def __init__(self, db: Session, cache: DecisionCache | None = None):
        self.db = db
        self.cache = cache
        self.tiers = TierLookup(db)
        self.group_repo = PermissionGroupRepository(db)

    def compute(self, user_id: str, organization_id: int | None) -> EffectivePermissionState:
        """
        Resolve without consulting the cache.

        A missing organization_id only checks platform admin status.

        Raises:
            ValidationException: If user_id is empty
            DataServiceException: If any lookup fails
        """
        if not user_id:
            raise ValidationException("user_id is required")

        is_platform_admin = self.tiers.is_platform_admin(user_id)
        match = self.tiers.lookup(user_id, organization_id) if organization_id is not None else NoTierMatch()

        if isinstance(match, (OwnerMatch, DelegateMatch)):
            state = EffectivePermissionState(
                tier=match.tier,
                organization_id=match.organization_id,
                module_flags=full_module_flags(),
                permission_codes=FULL_CODES,
                tenant_tier=match.tier,
            )
        elif isinstance(match, MemberMatch):
            if match.default_permissions is not None:
                flags = dict(match.default_permissions)
            else:
                flags = empty_module_flags()
            codes = self.group_repo.get_member_permission_codes(match.member_id, match.organization_id)
            state = EffectivePermissionState(
                tier=AccessTier.MEMBER,
                organization_id=match.organization_id,
                module_flags=flags,
                permission_codes=frozenset(codes),
                tenant_tier=AccessTier.MEMBER,
                member_id=match.member_id,
            )
        elif is_platform_admin:
            state = EffectivePermissionState(
                tier=AccessTier.PLATFORM_ADMIN,
                organization_id=None,
                module_flags=full_module_flags(),
                permission_codes=FULL_CODES,
                is_platform_admin=True,
            )
        else:
            state = EffectivePermissionState.denied()

        if is_platform_admin and state.tier != AccessTier.PLATFORM_ADMIN:
            state = dataclasses.replace(
                state,
                tier=AccessTier.PLATFORM_ADMIN,
                module_flags=full_module_flags(),
                permission_codes=FULL_CODES,
                is_platform_admin=True,
            )

        logger.debug(
            "Resolved user %s in org %s to tier %s (tenant tier %s)",
            user_id,
            organization_id,
            state.tier.value,
            state.tenant_tier.value if state.tenant_tier else None,
        )
        return state

    def resolve(self, user_id: str, organization_id: int | None) -> EffectivePermissionState:
        """Cached resolution; errors propagate and nothing is cached for them."""
        if self.cache is None:
            return self.compute(user_id, organization_id)
        return self.cache.get_or_compute(
            user_id, organization_id, lambda: self.compute(user_id, organization_id)
        )

    def resolve_or_deny(self, user_id: str, organization_id: int | None) -> EffectivePermissionState:
        """
        Fail-closed variant of resolve().

        Returns the denied state carrying an error message instead of
        raising when the data service fails.
        """
        try:
            return self.resolve(user_id, organization_id)
        except DataServiceException as exc:
            logger.warning("Permission resolution failed for user %s in org %s: %s", user_id, organization_id, exc)
            return EffectivePermissionState.denied(error=str(exc))
