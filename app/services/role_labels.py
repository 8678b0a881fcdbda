"""
Legacy role labels derived from module flags.

The module-flag editor stores a single system_role label next to the
flags. The label is bucketed from the flags as follows:

- role type "member" -> ("member", {})
- all 7 flags selected -> "admin"
- no flag selected -> ("member", {})
- otherwise count only the 5 main modules (finance, education,
  services, umrah, people): exactly one selected -> "<module>_admin",
  anything else -> "admin"

Flags outside the main modules (dashboard, settings) do not influence
the bucket, so {"finance", "settings"} still yields "finance_admin"
and {"dashboard"} alone yields "admin".
"""

from typing import Mapping

from app.models.role import ALL_MODULES, ModuleFlag

MAIN_MODULES: tuple[str, ...] = (
    ModuleFlag.FINANCE.value,
    ModuleFlag.EDUCATION.value,
    ModuleFlag.SERVICES.value,
    ModuleFlag.UMRAH.value,
    ModuleFlag.PEOPLE.value,
)

ADMIN_ROLE_LABELS: frozenset[str] = frozenset(
    {"admin", "super_admin"} | {f"{module}_admin" for module in MAIN_MODULES}
)
FULL_ADMIN_ROLE_LABELS: frozenset[str] = frozenset({"admin", "super_admin"})


def derive_system_role(role_type: str, selected: Mapping[str, bool]) -> tuple[str, dict[str, bool]]:
    """
    Bucket a module-flag selection into a system role label.

    Args:
        role_type: "member" or "admin"
        selected: module name -> selected

    Returns:
        (system_role, stored_flags)
    """
    if role_type != "admin":
        return "member", {}

    flags = {module: bool(selected.get(module, False)) for module in ALL_MODULES}
    selected_count = sum(flags.values())

    if selected_count == len(ALL_MODULES):
        return "admin", flags
    if selected_count == 0:
        return "member", {}

    main_selected = [module for module in MAIN_MODULES if flags[module]]
    if len(main_selected) == 1:
        return f"{main_selected[0]}_admin", flags
    return "admin", flags


def default_flags_for_system_role(system_role: str | None) -> dict[str, bool]:
    """Module flags implied by a label when no flags were stored."""
    is_full_admin = system_role in FULL_ADMIN_ROLE_LABELS
    flags = {module: is_full_admin for module in ALL_MODULES}
    for module in MAIN_MODULES:
        if system_role == f"{module}_admin":
            flags[module] = True
    return flags


def is_admin_role(system_role: str | None) -> bool:
    return system_role in ADMIN_ROLE_LABELS
