import pytest
from sqlalchemy.exc import OperationalError

from app.core.exceptions import DataServiceException, ValidationException
from app.models.organization_owner import OrganizationDelegate, OrganizationOwner
from app.models.permission import Permission
from app.models.role import AccessTier, ALL_MODULES
from app.services.permission_resolver import PermissionResolver
from app.services.tier_lookup import TierLookup
from app.models.tier_match import OwnerMatch, DelegateMatch, MemberMatch, NoTierMatch
from tests.conftest import (
    OWNER_USER,
    DELEGATE_USER,
    MEMBER_USER,
    PLATFORM_ADMIN_USER,
    OUTSIDER_USER,
    add_member,
    add_group,
    assign,
)


def fail_queries(monkeypatch, db_session):
    """Make every query on the session raise a driver-level error"""

    def broken_query(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is unavailable"))

    monkeypatch.setattr(db_session, "query", broken_query)


class TestTierLookup:
    """Tests for the owner -> delegate -> member short-circuit"""

    def test_owner_match(self, db_session, organization, owner):
        match = TierLookup(db_session).lookup(OWNER_USER, organization.id)
        assert isinstance(match, OwnerMatch)
        assert match.record_id == owner.id
        assert match.tier == AccessTier.OWNER

    def test_delegate_match(self, db_session, organization, delegate):
        match = TierLookup(db_session).lookup(DELEGATE_USER, organization.id)
        assert isinstance(match, DelegateMatch)
        assert match.organization_id == organization.id

    def test_member_match_carries_role_flags(self, db_session, organization, member, finance_role):
        match = TierLookup(db_session).lookup(MEMBER_USER, organization.id)
        assert isinstance(match, MemberMatch)
        assert match.member_id == member.id
        assert match.role_id == finance_role.id
        assert match.default_permissions["finance"] is True

    def test_no_match(self, db_session, organization):
        assert isinstance(TierLookup(db_session).lookup(OUTSIDER_USER, organization.id), NoTierMatch)

    def test_owner_checked_before_member(self, db_session, organization, member):
        """A user holding both rows is matched as owner"""
        db_session.add(OrganizationOwner(organization_id=organization.id, user_id=MEMBER_USER))
        db_session.commit()

        assert isinstance(TierLookup(db_session).lookup(MEMBER_USER, organization.id), OwnerMatch)

    def test_inactive_delegate_is_skipped(self, db_session, organization):
        db_session.add(OrganizationDelegate(organization_id=organization.id, user_id=DELEGATE_USER, is_active=False))
        db_session.commit()
        add_member(db_session, organization.id, DELEGATE_USER)

        assert isinstance(TierLookup(db_session).lookup(DELEGATE_USER, organization.id), MemberMatch)

    def test_lookup_failure_is_not_absence(self, db_session, organization, monkeypatch):
        fail_queries(monkeypatch, db_session)
        with pytest.raises(DataServiceException):
            TierLookup(db_session).lookup(OWNER_USER, organization.id)


class TestResolveTiers:
    """Tests for tier precedence and the resulting decision"""

    def test_owner_gets_full_access(self, db_session, organization, owner):
        state = PermissionResolver(db_session).resolve(OWNER_USER, organization.id)

        assert state.tier == AccessTier.OWNER
        assert state.organization_id == organization.id
        assert state.module_flags == {m: True for m in ALL_MODULES}
        assert state.permission_codes == frozenset({"*"})
        assert state.is_platform_admin is False

    def test_delegate_gets_full_access(self, db_session, organization, delegate):
        state = PermissionResolver(db_session).resolve(DELEGATE_USER, organization.id)

        assert state.tier == AccessTier.DELEGATE
        assert state.permission_codes == frozenset({"*"})
        assert all(state.module_flags.values())

    def test_member_flags_come_from_role(self, db_session, organization, member):
        state = PermissionResolver(db_session).resolve(MEMBER_USER, organization.id)

        assert state.tier == AccessTier.MEMBER
        assert state.member_id == member.id
        assert state.module_flags["finance"] is True
        assert state.module_flags["education"] is False
        assert state.permission_codes == frozenset()

    def test_member_without_role_gets_all_false_flags(self, db_session, organization):
        add_member(db_session, organization.id, "no-role-user")

        state = PermissionResolver(db_session).resolve("no-role-user", organization.id)

        assert state.tier == AccessTier.MEMBER
        assert state.module_flags == {m: False for m in ALL_MODULES}

    def test_member_codes_are_union_of_groups(self, db_session, organization, member, catalog):
        cashiers = add_group(db_session, organization.id, "Cashiers", ["donations:view", "donations:create"], catalog)
        auditors = add_group(db_session, organization.id, "Auditors", ["donations:view", "reports:financial"], catalog)
        assign(db_session, cashiers, member)
        assign(db_session, auditors, member)

        state = PermissionResolver(db_session).resolve(MEMBER_USER, organization.id)

        assert state.permission_codes == frozenset({"donations:view", "donations:create", "reports:financial"})
        assert state.has_permission_code("reports:financial")
        assert not state.has_permission_code("donations:delete")

    def test_groups_of_other_organizations_are_ignored(
        self, db_session, organization, other_organization, member, catalog
    ):
        foreign = add_group(db_session, other_organization.id, "Foreign", ["settings:edit"], catalog)
        assign(db_session, foreign, member)

        state = PermissionResolver(db_session).resolve(MEMBER_USER, organization.id)

        assert "settings:edit" not in state.permission_codes

    def test_member_of_other_org_is_denied(self, db_session, organization, other_organization, member):
        state = PermissionResolver(db_session).resolve(MEMBER_USER, other_organization.id)

        assert state.tier == AccessTier.MEMBER
        assert state.organization_id is None
        assert state.module_flags == {m: False for m in ALL_MODULES}
        assert state.permission_codes == frozenset()

    def test_unknown_user_is_denied(self, db_session, organization):
        state = PermissionResolver(db_session).resolve(OUTSIDER_USER, organization.id)

        assert state.tier == AccessTier.MEMBER
        assert state.organization_id is None
        assert not state.can_access_module("dashboard")
        assert state.error is None

    def test_inactive_delegate_without_member_row_is_denied(self, db_session, organization):
        db_session.add(OrganizationDelegate(organization_id=organization.id, user_id=DELEGATE_USER, is_active=False))
        db_session.commit()

        state = PermissionResolver(db_session).resolve(DELEGATE_USER, organization.id)

        assert state.organization_id is None
        assert state.permission_codes == frozenset()

    def test_dangling_catalog_links_are_skipped(self, db_session, organization, member, catalog):
        group = add_group(db_session, organization.id, "Ushers", ["members:view", "members:export"], catalog)
        assign(db_session, group, member)
        db_session.query(Permission).filter(Permission.code == "members:export").delete()
        db_session.commit()

        state = PermissionResolver(db_session).resolve(MEMBER_USER, organization.id)

        assert state.permission_codes == frozenset({"members:view"})

    def test_empty_user_id_rejected(self, db_session, organization):
        with pytest.raises(ValidationException):
            PermissionResolver(db_session).resolve("", organization.id)


class TestPlatformAdmin:
    """Tests for the platform admin override"""

    def test_platform_admin_without_organization(self, db_session, platform_admin):
        state = PermissionResolver(db_session).resolve(PLATFORM_ADMIN_USER, None)

        assert state.tier == AccessTier.PLATFORM_ADMIN
        assert state.organization_id is None
        assert state.is_platform_admin is True
        assert state.permission_codes == frozenset({"*"})
        assert state.role_base_path == "platform"

    def test_platform_admin_without_tenant_tie(self, db_session, platform_admin, organization):
        state = PermissionResolver(db_session).resolve(PLATFORM_ADMIN_USER, organization.id)

        assert state.tier == AccessTier.PLATFORM_ADMIN
        assert state.organization_id is None
        assert state.tenant_tier is None

    def test_platform_admin_overrides_member_tier(self, db_session, platform_admin, organization):
        admin_member = add_member(db_session, organization.id, PLATFORM_ADMIN_USER)

        state = PermissionResolver(db_session).resolve(PLATFORM_ADMIN_USER, organization.id)

        assert state.tier == AccessTier.PLATFORM_ADMIN
        assert state.organization_id == organization.id
        assert state.tenant_tier == AccessTier.MEMBER
        assert state.member_id == admin_member.id
        assert state.module_flags == {m: True for m in ALL_MODULES}
        assert state.permission_codes == frozenset({"*"})

    def test_platform_admin_overrides_owner_tier(self, db_session, platform_admin, organization):
        db_session.add(OrganizationOwner(organization_id=organization.id, user_id=PLATFORM_ADMIN_USER))
        db_session.commit()

        state = PermissionResolver(db_session).resolve(PLATFORM_ADMIN_USER, organization.id)

        assert state.tier == AccessTier.PLATFORM_ADMIN
        assert state.tenant_tier == AccessTier.OWNER
        assert state.check_permission_code("anything:at_all") == (True, "platform_admin")

    def test_non_admin_without_organization_is_denied(self, db_session, owner):
        state = PermissionResolver(db_session).resolve(OWNER_USER, None)

        assert state.tier == AccessTier.MEMBER
        assert state.permission_codes == frozenset()


class TestResolverFailures:
    """Data service failures never turn into a grant or a silent denial"""

    def test_resolve_raises_on_data_failure(self, db_session, organization, monkeypatch):
        fail_queries(monkeypatch, db_session)

        with pytest.raises(DataServiceException):
            PermissionResolver(db_session).resolve(OWNER_USER, organization.id)

    def test_resolve_or_deny_returns_denied_state_with_error(self, db_session, organization, monkeypatch):
        fail_queries(monkeypatch, db_session)

        state = PermissionResolver(db_session).resolve_or_deny(OWNER_USER, organization.id)

        assert state.tier == AccessTier.MEMBER
        assert state.permission_codes == frozenset()
        assert state.error is not None
        assert "platform admin lookup" in state.error

    def test_failed_resolution_is_not_cached(self, db_session, organization, owner, cache, monkeypatch):
        resolver = PermissionResolver(db_session, cache)
        fail_queries(monkeypatch, db_session)

        with pytest.raises(DataServiceException):
            resolver.resolve(OWNER_USER, organization.id)
        assert len(cache) == 0

        monkeypatch.undo()
        state = resolver.resolve(OWNER_USER, organization.id)
        assert state.tier == AccessTier.OWNER
        assert len(cache) == 1


class TestResolverCaching:
    """Tests for cached resolution"""

    def test_cached_state_reused_within_window(self, db_session, organization, member, catalog, cache, clock):
        resolver = PermissionResolver(db_session, cache)
        first = resolver.resolve(MEMBER_USER, organization.id)

        # Assignment made behind the store's back: not visible until expiry
        group = add_group(db_session, organization.id, "Teachers", ["education:view"], catalog)
        assign(db_session, group, member)
        clock.advance(299)
        assert resolver.resolve(MEMBER_USER, organization.id) is first

        clock.advance(1)
        refreshed = resolver.resolve(MEMBER_USER, organization.id)
        assert "education:view" in refreshed.permission_codes

    def test_invalidate_forces_recompute(self, db_session, organization, member, catalog, cache):
        resolver = PermissionResolver(db_session, cache)
        resolver.resolve(MEMBER_USER, organization.id)

        group = add_group(db_session, organization.id, "Teachers", ["education:view"], catalog)
        assign(db_session, group, member)
        cache.invalidate(user_id=MEMBER_USER, organization_id=organization.id)

        assert "education:view" in resolver.resolve(MEMBER_USER, organization.id).permission_codes
