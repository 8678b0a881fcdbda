from sqlalchemy.orm import Session

from app.models.tier_match import (
    TierMatch,
    OwnerMatch,
    DelegateMatch,
    MemberMatch,
    NoTierMatch,
)
from app.repositories.tier_repository import TierRepository


class TierLookup:
    """
    Finds the single highest-precedence tenant tier for a user.

    Checks run owner -> delegate -> member and stop at the first match.
    A data service error in any check propagates; it is never read as
    "tier absent".
    """

    def __init__(self, db: Session):
        self.repo = TierRepository(db)

    def is_platform_admin(self, user_id: str) -> bool:
        return self.repo.is_platform_admin(user_id)

    def lookup(self, user_id: str, organization_id: int) -> TierMatch:
        owner = self.repo.get_owner(user_id, organization_id)
        if owner is not None:
            return OwnerMatch(
                record_id=owner.id,
                organization_id=owner.organization_id,
                role_id=owner.role_id,
            )

        delegate = self.repo.get_active_delegate(user_id, organization_id)
        if delegate is not None:
            return DelegateMatch(
                record_id=delegate.id,
                organization_id=delegate.organization_id,
                role_id=delegate.role_id,
            )

        member = self.repo.get_member(user_id, organization_id)
        if member is not None:
            return MemberMatch(
                member_id=member.id,
                organization_id=member.organization_id,
                role_id=member.role_id,
                default_permissions=member.role.default_permissions if member.role is not None else None,
            )

        return NoTierMatch()
