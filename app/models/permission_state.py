"""Effective permission state for a user within an organization."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from app.models.permission import WILDCARD
from app.models.role import AccessTier, empty_module_flags

FULL_ACCESS_TIERS = (AccessTier.PLATFORM_ADMIN, AccessTier.OWNER, AccessTier.DELEGATE)


@dataclass(frozen=True)
class EffectivePermissionState:
    """
    The single decision object produced by permission resolution.

    Two independent permission representations coexist:
    - module_flags: legacy coarse gates (module name -> bool)
    - permission_codes: fine-grained "module:action" codes, or the
      wildcard "*" meaning every code

    Attributes:
        tier: Highest-precedence tier after the platform admin override
        organization_id: Organization the state applies to, None for a
            platform admin resolved without a tenant relationship
        module_flags: Legacy module flags, stored as a read-only mapping
        permission_codes: Granted permission codes
        is_platform_admin: Whether a platform admin row exists
        tenant_tier: Tier matched inside the organization, if any
        member_id: Member row id when the tenant tier is member
        error: Set only on a denied state produced after a lookup failure
    """

    tier: AccessTier
    organization_id: int | None
    module_flags: Mapping[str, bool] | None
    permission_codes: frozenset[str] = field(default_factory=frozenset)
    is_platform_admin: bool = False
    tenant_tier: AccessTier | None = None
    member_id: int | None = None
    error: str | None = None

    def __post_init__(self):
        # Shared through the decision cache: flags stay read-only
        if self.module_flags is not None and not isinstance(self.module_flags, MappingProxyType):
            object.__setattr__(self, "module_flags", MappingProxyType(dict(self.module_flags)))
        if not isinstance(self.permission_codes, frozenset):
            object.__setattr__(self, "permission_codes", frozenset(self.permission_codes))

    @classmethod
    def denied(cls, error: str | None = None) -> "EffectivePermissionState":
        """Most restrictive state: member tier, every flag false, no codes."""
        return cls(
            tier=AccessTier.MEMBER,
            organization_id=None,
            module_flags=empty_module_flags(),
            permission_codes=frozenset(),
            error=error,
        )

    @property
    def has_wildcard(self) -> bool:
        return WILDCARD in self.permission_codes

    @property
    def has_full_access(self) -> bool:
        return self.is_platform_admin or self.tier in FULL_ACCESS_TIERS

    @property
    def is_admin(self) -> bool:
        """Any admin-level access: elevated tier or at least one module flag."""
        if self.has_full_access:
            return True
        return bool(self.module_flags) and any(v is True for v in self.module_flags.values())

    @property
    def is_full_admin(self) -> bool:
        """Platform admin or owner; delegates are excluded."""
        return self.is_platform_admin or self.tier in (AccessTier.PLATFORM_ADMIN, AccessTier.OWNER)

    @property
    def role_base_path(self) -> str:
        if self.is_platform_admin:
            return "platform"
        if self.tier == AccessTier.OWNER:
            return "owner"
        if self.tier == AccessTier.DELEGATE:
            return "delegate-owner"
        return "member"

    def can_access_module(self, module: str) -> bool:
        return can_access_module(self, module)

    def has_permission_code(self, code: str) -> bool:
        return has_permission_code(self, code)

    def check_permission_code(self, code: str) -> tuple[bool, str]:
        """
        Check a permission code and report why it was allowed or denied.

        Returns:
            (allowed, reason) where reason is one of platform_admin, owner,
            delegate, permission_granted, no_permission
        """
        if self.is_platform_admin or self.tier == AccessTier.PLATFORM_ADMIN:
            return True, "platform_admin"
        if self.tier == AccessTier.OWNER:
            return True, "owner"
        if self.tier == AccessTier.DELEGATE:
            return True, "delegate"
        if self.has_wildcard or code in self.permission_codes:
            return True, "permission_granted"
        return False, "no_permission"

    def check_module_access(self, module: str) -> tuple[bool, str]:
        """Module flag counterpart of check_permission_code."""
        if self.is_platform_admin or self.tier == AccessTier.PLATFORM_ADMIN:
            return True, "platform_admin"
        if self.tier in (AccessTier.OWNER, AccessTier.DELEGATE):
            return True, self.tier.value
        if self.module_flags and self.module_flags.get(module) is True:
            return True, "permission_granted"
        return False, "no_permission"

    def __repr__(self) -> str:
        return (
            f"<EffectivePermissionState(tier={self.tier.value}, organization_id={self.organization_id}, "
            f"codes={len(self.permission_codes)})>"
        )


def can_access_module(state: EffectivePermissionState, module: str) -> bool:
    """True when the module flag is exactly True; elevated tiers always pass."""
    if state.has_full_access:
        return True
    if not state.module_flags:
        return False
    return state.module_flags.get(module) is True


def has_permission_code(state: EffectivePermissionState, code: str) -> bool:
    """True for elevated tiers, a granted code, or the wildcard."""
    if state.has_full_access:
        return True
    return state.has_wildcard or code in state.permission_codes
