"""Result variants produced by tier lookup."""

from dataclasses import dataclass
from typing import Union

from app.models.role import AccessTier


@dataclass(frozen=True)
class OwnerMatch:
    record_id: int
    organization_id: int
    role_id: int | None = None

    tier = AccessTier.OWNER


@dataclass(frozen=True)
class DelegateMatch:
    record_id: int
    organization_id: int
    role_id: int | None = None

    tier = AccessTier.DELEGATE


@dataclass(frozen=True)
class MemberMatch:
    """Member row plus its role's default module flags (None when no role)"""

    member_id: int
    organization_id: int
    role_id: int | None = None
    default_permissions: dict[str, bool] | None = None

    tier = AccessTier.MEMBER


@dataclass(frozen=True)
class NoTierMatch:
    tier = None


TierMatch = Union[OwnerMatch, DelegateMatch, MemberMatch, NoTierMatch]
