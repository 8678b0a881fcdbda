import dataclasses

import pytest

from app.models.permission_state import (
    EffectivePermissionState,
    can_access_module,
    has_permission_code,
)
from app.models.role import AccessTier, ALL_MODULES, full_module_flags, empty_module_flags


def member_state(flags=None, codes=()) -> EffectivePermissionState:
    return EffectivePermissionState(
        tier=AccessTier.MEMBER,
        organization_id=1,
        module_flags=flags,
        permission_codes=frozenset(codes),
        tenant_tier=AccessTier.MEMBER,
        member_id=7,
    )


def elevated_state(tier: AccessTier, is_platform_admin: bool = False) -> EffectivePermissionState:
    return EffectivePermissionState(
        tier=tier,
        organization_id=1,
        module_flags=full_module_flags(),
        permission_codes=frozenset({"*"}),
        is_platform_admin=is_platform_admin,
        tenant_tier=None if is_platform_admin else tier,
    )


class TestDeniedState:
    def test_denied_is_most_restrictive(self):
        state = EffectivePermissionState.denied()

        assert state.tier == AccessTier.MEMBER
        assert state.organization_id is None
        assert state.module_flags == empty_module_flags()
        assert state.permission_codes == frozenset()
        assert state.error is None

    def test_denied_carries_error(self):
        assert EffectivePermissionState.denied(error="store offline").error == "store offline"

    @pytest.mark.parametrize("module", ALL_MODULES)
    def test_denied_blocks_every_module(self, module):
        assert can_access_module(EffectivePermissionState.denied(), module) is False


class TestModuleAccess:
    """Legacy module flags"""

    def test_true_flag_grants(self):
        assert can_access_module(member_state({"finance": True}), "finance") is True

    @pytest.mark.parametrize("value", [False, None, 1, "true"])
    def test_only_exact_true_grants(self, value):
        assert can_access_module(member_state({"finance": value}), "finance") is False

    def test_missing_flag_denies(self):
        assert can_access_module(member_state({"finance": True}), "education") is False

    def test_no_flags_denies(self):
        assert can_access_module(member_state(None), "dashboard") is False

    @pytest.mark.parametrize("tier", [AccessTier.OWNER, AccessTier.DELEGATE, AccessTier.PLATFORM_ADMIN])
    def test_elevated_tiers_always_pass(self, tier):
        state = EffectivePermissionState(tier=tier, organization_id=1, module_flags=None)
        assert can_access_module(state, "settings") is True

    def test_codes_do_not_open_modules(self):
        """Permission codes and module flags are independent"""
        state = member_state(empty_module_flags(), codes=["education:view"])
        assert can_access_module(state, "education") is False


class TestPermissionCodes:
    def test_granted_code(self):
        assert has_permission_code(member_state(codes=["funds:view"]), "funds:view") is True

    def test_missing_code(self):
        assert has_permission_code(member_state(codes=["funds:view"]), "funds:edit") is False

    def test_wildcard_grants_any_code(self):
        assert has_permission_code(member_state(codes=["*"]), "settings:billing") is True

    def test_flags_do_not_grant_codes(self):
        state = member_state(full_module_flags())
        assert has_permission_code(state, "donations:view") is False

    def test_method_matches_function(self):
        state = member_state(codes=["funds:view"])
        assert state.has_permission_code("funds:view") == has_permission_code(state, "funds:view")
        assert state.can_access_module("finance") == can_access_module(state, "finance")


class TestCheckReasons:
    """Reason strings reported by permission checks"""

    @pytest.mark.parametrize(
        "state, reason",
        [
            (elevated_state(AccessTier.PLATFORM_ADMIN, is_platform_admin=True), "platform_admin"),
            (elevated_state(AccessTier.OWNER), "owner"),
            (elevated_state(AccessTier.DELEGATE), "delegate"),
        ],
    )
    def test_elevated_reasons(self, state, reason):
        assert state.check_permission_code("members:delete") == (True, reason)
        assert state.check_module_access("people") == (True, reason)

    def test_member_granted(self):
        state = member_state({"finance": True}, codes=["donations:view"])
        assert state.check_permission_code("donations:view") == (True, "permission_granted")
        assert state.check_module_access("finance") == (True, "permission_granted")

    def test_member_denied(self):
        state = member_state({"finance": False})
        assert state.check_permission_code("donations:view") == (False, "no_permission")
        assert state.check_module_access("finance") == (False, "no_permission")


class TestDerivedFlags:
    def test_is_admin_for_member_with_any_flag(self):
        assert member_state({"finance": True}).is_admin is True
        assert member_state(empty_module_flags()).is_admin is False
        assert member_state(None).is_admin is False

    def test_full_admin_excludes_delegates(self):
        assert elevated_state(AccessTier.OWNER).is_full_admin is True
        assert elevated_state(AccessTier.PLATFORM_ADMIN, is_platform_admin=True).is_full_admin is True
        assert elevated_state(AccessTier.DELEGATE).is_full_admin is False
        assert elevated_state(AccessTier.DELEGATE).is_admin is True

    @pytest.mark.parametrize(
        "state, path",
        [
            (elevated_state(AccessTier.PLATFORM_ADMIN, is_platform_admin=True), "platform"),
            (elevated_state(AccessTier.OWNER), "owner"),
            (elevated_state(AccessTier.DELEGATE), "delegate-owner"),
            (member_state({"finance": True}), "member"),
        ],
    )
    def test_role_base_path(self, state, path):
        assert state.role_base_path == path

    def test_state_is_immutable(self):
        state = member_state()
        with pytest.raises(dataclasses.FrozenInstanceError):
            state.tier = AccessTier.OWNER
