"""Capability -> permission-code resolution and allow/deny decisions.

Pure: no I/O, never raises, identical inputs give identical outputs. Decision
order: loading -> admin bypass -> special-case table -> module.action
derivation (composite expansion, then PAGE-only VIEW->READ fallback) ->
literal code. Allowed when the resolved code set intersects snapshot.codes.
"""

from __future__ import annotations

from collections.abc import Iterable

from app.application.dtos.access import Resolution
from app.domain.entities.access import PermissionSnapshot, Role
from app.domain.enums import AccessContext, AdminMatchMode
from app.domain.value_objects.core import Capability

# Legacy action names that do not follow MODULE_ACTION.
SPECIAL_CAPABILITIES: dict[str, frozenset[str]] = {
    "inventory.import": frozenset({"WAREHOUSE_RECEIPTS_CREATE", "WAREHOUSE_RECEIPTS_READ"}),
    "inventory.export": frozenset({"EXPORT_SLIPS_READ", "EXPORT_SLIPS_CREATE"}),
    "inventory.approve": frozenset({"WAREHOUSE_RECEIPTS_UPDATE"}),
    "orders.approve": frozenset({"ORDERS_UPDATE"}),
    "revenue.export": frozenset({"REPORTS_CREATE", "REPORTS_UPDATE"}),
    "settings.manage": frozenset({"SETTINGS_MANAGE_ALL"}),
    "users.reset_password": frozenset({"SETTINGS_CHANGE_PASSWORD"}),
}

# Modules whose pages span several backend resources.
COMPOSITE_MODULES: dict[str, tuple[str, ...]] = {
    "inventory": ("PRODUCTS", "STOCK_LEVELS", "WAREHOUSES", "CATEGORIES", "INVENTORY"),
    "revenue": ("REPORTS", "REVENUE"),
    "settings": ("SETTINGS", "ROLES", "PERMISSIONS"),
    "roles": ("ROLES", "PERMISSIONS"),
}

ADMIN_KEYWORDS: tuple[str, ...] = ("admin", "administrator", "owner")
DEFAULT_ADMIN_ROLE_CODES: frozenset[str] = frozenset({"ADMIN", "ADMINISTRATOR", "OWNER"})

_VIEW = "VIEW"
_READ = "READ"


class PermissionResolver:
    """Answers allow/deny for a capability against a PermissionSnapshot."""

    def __init__(
        self,
        admin_match_mode: AdminMatchMode = AdminMatchMode.SUBSTRING,
        admin_role_codes: Iterable[str] = DEFAULT_ADMIN_ROLE_CODES,
    ) -> None:
        """Configure the admin bypass.

        Args:
            admin_match_mode: SUBSTRING matches name or code containing an admin
                keyword (legacy naming conventions); ALLOWLIST requires the role
                code to be in admin_role_codes.
            admin_role_codes: Exact codes treated as admin in ALLOWLIST mode.
        """
        self.admin_match_mode = AdminMatchMode(admin_match_mode)
        self.admin_role_codes = frozenset(c.upper() for c in admin_role_codes)

    def is_admin(self, role: Role | None) -> bool:
        """Return True when role gets unconditional access."""
        if role is None:
            return False
        if self.admin_match_mode == AdminMatchMode.ALLOWLIST:
            return bool(role.code) and role.code.upper() in self.admin_role_codes
        for value in (role.name, role.code):
            lowered = (value or "").lower()
            if any(keyword in lowered for keyword in ADMIN_KEYWORDS):
                return True
        return False

    def resolve(
        self,
        capability: str,
        context: AccessContext,
        snapshot: PermissionSnapshot | None,
    ) -> bool:
        """Return True if snapshot grants capability in context."""
        return self.explain(capability, context, snapshot).allowed

    def resolve_any(
        self,
        capabilities: Iterable[str],
        context: AccessContext,
        snapshot: PermissionSnapshot | None,
    ) -> bool:
        """True when at least one capability is granted."""
        return any(self.resolve(c, context, snapshot) for c in capabilities)

    def resolve_all(
        self,
        capabilities: Iterable[str],
        context: AccessContext,
        snapshot: PermissionSnapshot | None,
    ) -> bool:
        """True when every capability is granted (vacuously True for none, unless loading)."""
        if snapshot is None or snapshot.loading:
            return False
        return all(self.resolve(c, context, snapshot) for c in capabilities)

    def explain(
        self,
        capability: str,
        context: AccessContext,
        snapshot: PermissionSnapshot | None,
    ) -> Resolution:
        """Resolve capability and report the codes and rule that decided it."""
        raw = capability if isinstance(capability, str) else ""
        if snapshot is None or snapshot.loading:
            return Resolution(capability=raw, allowed=False, reason="loading")
        if self.is_admin(snapshot.role):
            return Resolution(capability=raw, allowed=True, reason="admin")

        parsed = Capability.parse(raw)
        if not parsed.raw:
            return Resolution(capability=raw, allowed=False, reason="invalid")

        codes = snapshot.codes
        special = SPECIAL_CAPABILITIES.get(parsed.key)
        if special is not None:
            return _decide(raw, special, codes, "special")

        if not parsed.is_descriptor:
            return _decide(raw, frozenset({parsed.raw}), codes, "literal")

        resolved = _expand(parsed, codes)
        if resolved & codes or context != AccessContext.PAGE:
            if context == AccessContext.PAGE and parsed.action_code == _VIEW:
                # VIEW matched: READ is sufficient for page access as well.
                resolved = resolved | _substitute(parsed, codes, _READ)
            return _decide(raw, resolved, codes, "descriptor")

        fallback = _page_fallback(parsed, codes)
        if fallback:
            return _decide(raw, resolved | fallback, codes, "fallback")
        return _decide(raw, resolved, codes, "descriptor")


def _decide(
    capability: str,
    resolved: frozenset[str],
    codes: frozenset[str],
    reason: str,
) -> Resolution:
    return Resolution(
        capability=capability,
        allowed=bool(resolved & codes),
        reason=reason,
        resolved_codes=resolved,
    )


def _module_prefixes(capability: Capability) -> tuple[str, ...]:
    """MODULE itself plus composite siblings, upper-case."""
    own = capability.module_code
    siblings = COMPOSITE_MODULES.get(capability.module or "", ())
    return tuple(dict.fromkeys((own,) + siblings))


def _expand(capability: Capability, codes: frozenset[str]) -> frozenset[str]:
    """Base MODULE_ACTION plus sibling codes with the same suffix the snapshot already holds."""
    suffix = capability.action_code
    resolved = {capability.base_code()}
    for prefix in COMPOSITE_MODULES.get(capability.module or "", ()):
        code = f"{prefix}_{suffix}"
        if code in codes:
            resolved.add(code)
    return frozenset(resolved)


def _substitute(capability: Capability, codes: frozenset[str], action: str) -> frozenset[str]:
    """Codes MODULE_<action> for the module and its siblings, limited to those held."""
    return frozenset(
        f"{prefix}_{action}"
        for prefix in _module_prefixes(capability)
        if f"{prefix}_{action}" in codes
    )


def _module_has_view_codes(capability: Capability, codes: frozenset[str]) -> bool:
    prefixes = _module_prefixes(capability)
    return any(
        code.endswith(f"_{_VIEW}") and any(code.startswith(f"{p}_") for p in prefixes)
        for code in codes
    )


def _page_fallback(capability: Capability, codes: frozenset[str]) -> frozenset[str]:
    """VIEW -> READ substitution for page checks (never READ -> VIEW).

    Modules without any _VIEW code may use _READ for every action; modules
    that have _VIEW codes may use _READ only for the view action.
    """
    is_view = capability.action_code == _VIEW
    if is_view or not _module_has_view_codes(capability, codes):
        return _substitute(capability, codes, _READ)
    return frozenset()
