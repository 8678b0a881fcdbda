"""Access tiers and legacy module flags."""

from enum import Enum as PyEnum


class AccessTier(str, PyEnum):
    """
    Authority categories a user can hold, highest precedence first.

    - PLATFORM_ADMIN: global, every organization, overrides everything
    - OWNER: full access within one organization
    - DELEGATE: same authority as OWNER, separate for audit purposes
    - MEMBER: access governed by role module flags and permission groups
    """

    PLATFORM_ADMIN = "platform_admin"
    OWNER = "owner"
    DELEGATE = "delegate"
    MEMBER = "member"


class ModuleFlag(str, PyEnum):
    """Legacy coarse module gates stored on organization roles."""

    DASHBOARD = "dashboard"
    FINANCE = "finance"
    EDUCATION = "education"
    SERVICES = "services"
    UMRAH = "umrah"
    PEOPLE = "people"
    SETTINGS = "settings"


ALL_MODULES: tuple[str, ...] = tuple(m.value for m in ModuleFlag)


def full_module_flags() -> dict[str, bool]:
    return {module: True for module in ALL_MODULES}


def empty_module_flags() -> dict[str, bool]:
    return {module: False for module in ALL_MODULES}
