"""Static fallback tables for degraded mode.

Used by RoleProfileLoader after repeated identity-fetch failures: role_id maps
to a role name, the role name maps (ordered, case-insensitive substring
keywords) to a curated permission set. Unknown roles get a minimal navigation
floor instead of zero permissions.
"""

from __future__ import annotations

from collections.abc import Mapping

from app.domain.entities.access import Role

UNKNOWN_ROLE_NAME = "Unknown Role"

ROLE_NAMES_BY_ID: dict[str, str] = {
    "1": "Administrator",
    "2": "Owner / Director",
    "3": "Chief Accountant",
    "4": "Accountant",
    "5": "Inventory Manager",
    "6": "Sales",
    "7": "Shipper",
}

MINIMAL_PERMISSIONS: tuple[str, ...] = (
    "DASHBOARD_VIEW",
    "NOTIFICATIONS_VIEW",
    "NOTIFICATIONS_READ",
)

_INVENTORY_PERMISSIONS: tuple[str, ...] = (
    "PRODUCTS_READ",
    "PRODUCTS_CREATE",
    "PRODUCTS_UPDATE",
    "CATEGORIES_READ",
    "STOCK_LEVELS_READ",
    "STOCK_LEVELS_UPDATE",
    "WAREHOUSES_READ",
    "WAREHOUSE_RECEIPTS_READ",
    "WAREHOUSE_RECEIPTS_CREATE",
    "WAREHOUSE_RECEIPTS_UPDATE",
    "EXPORT_SLIPS_READ",
    "EXPORT_SLIPS_CREATE",
    "EXPORT_SLIPS_UPDATE",
    "SUPPLIERS_READ",
)

_ACCOUNTANT_PERMISSIONS: tuple[str, ...] = (
    "ORDERS_READ",
    "CUSTOMERS_READ",
    "PAYMENTS_READ",
    "PAYMENTS_CREATE",
    "PAYMENTS_UPDATE",
    "QUOTATIONS_READ",
    "REPORTS_READ",
    "REVENUE_VIEW",
    "PRODUCTS_READ",
    "STOCK_LEVELS_READ",
)

_SALES_PERMISSIONS: tuple[str, ...] = (
    "ORDERS_READ",
    "ORDERS_CREATE",
    "ORDERS_UPDATE",
    "CUSTOMERS_READ",
    "CUSTOMERS_CREATE",
    "CUSTOMERS_UPDATE",
    "QUOTATIONS_READ",
    "QUOTATIONS_CREATE",
    "QUOTATIONS_UPDATE",
    "PRODUCTS_READ",
    "STOCK_LEVELS_READ",
    "PAYMENTS_READ",
)

_SHIPPER_PERMISSIONS: tuple[str, ...] = (
    "ORDERS_READ",
    "ORDERS_UPDATE_STATUS",
    "EXPORT_SLIPS_READ",
    "CUSTOMERS_READ",
)

_ADMIN_PERMISSIONS: tuple[str, ...] = tuple(
    dict.fromkeys(
        _INVENTORY_PERMISSIONS
        + _ACCOUNTANT_PERMISSIONS
        + _SALES_PERMISSIONS
        + _SHIPPER_PERMISSIONS
        + (
            "ORDERS_DELETE",
            "PRODUCTS_DELETE",
            "CUSTOMERS_DELETE",
            "REPORTS_CREATE",
            "REPORTS_UPDATE",
            "USERS_READ",
            "USERS_CREATE",
            "USERS_UPDATE",
            "USERS_DELETE",
            "ROLES_READ",
            "ROLES_UPDATE",
            "PERMISSIONS_READ",
            "SETTINGS_READ",
            "SETTINGS_MANAGE_ALL",
            "SETTINGS_CHANGE_PASSWORD",
        )
    )
)

# Ordered: "chief" must win over "accountant" for "Chief Accountant".
KEYWORD_PERMISSION_SETS: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (("admin", "administrator"), _ADMIN_PERMISSIONS),
    (("owner", "director"), _ADMIN_PERMISSIONS),
    (("chief",), _ACCOUNTANT_PERMISSIONS + ("REPORTS_CREATE", "REPORTS_UPDATE", "ORDERS_UPDATE")),
    (("accountant",), _ACCOUNTANT_PERMISSIONS),
    (("inventory",), _INVENTORY_PERMISSIONS),
    (("sales",), _SALES_PERMISSIONS),
    (("shipper",), _SHIPPER_PERMISSIONS),
)


def role_name_for_id(
    role_id: str | None,
    role_names: Mapping[str, str] | None = None,
) -> str:
    """Return the static role name for role_id, or UNKNOWN_ROLE_NAME."""
    table = ROLE_NAMES_BY_ID if role_names is None else role_names
    if role_id is None:
        return UNKNOWN_ROLE_NAME
    return table.get(str(role_id), UNKNOWN_ROLE_NAME)


def permissions_for_role_name(role_name: str) -> tuple[str, ...]:
    """Map a role name to its curated permission set (first keyword match wins)."""
    lowered = (role_name or "").lower()
    for keywords, permissions in KEYWORD_PERMISSION_SETS:
        if any(keyword in lowered for keyword in keywords):
            return MINIMAL_PERMISSIONS + tuple(
                code for code in permissions if code not in MINIMAL_PERMISSIONS
            )
    return MINIMAL_PERMISSIONS


def build_fallback_role(
    role_id: str | None,
    role_names: Mapping[str, str] | None = None,
) -> Role:
    """Build the degraded-mode role for role_id. Deterministic for a given table."""
    name = role_name_for_id(role_id, role_names)
    return Role(
        id=role_id,
        name=name,
        code=None,
        description="Offline fallback role",
        permissions=permissions_for_role_name(name),
    )
