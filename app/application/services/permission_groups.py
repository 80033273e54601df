"""Group catalog permissions by module for role-editing screens.

Module is derived from the code (MODULE_ACTION) with a few multi-word
prefixes and aliases folded together (EXPORT_* -> Export Slips, STOCK_* ->
Stock Levels, WAREHOUSE_* -> Warehouse Receipts). Warehouse-related groups
come first, the rest alphabetically.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from app.domain.entities.access import Permission

_MULTI_WORD_PREFIXES: tuple[tuple[str, str], ...] = (
    ("WAREHOUSE_RECEIPTS_", "WAREHOUSE_RECEIPTS"),
    ("EXPORT_SLIPS_", "EXPORT_SLIPS"),
    ("EXPORT_SLIP_", "EXPORT_SLIPS"),
    ("STOCK_LEVELS_", "STOCK_LEVELS"),
    ("STOCK_LEVEL_", "STOCK_LEVELS"),
)

_ALIASES: dict[str, str] = {
    "EXPORT": "EXPORT_SLIPS",
    "WAREHOUSE": "WAREHOUSE_RECEIPTS",
    "STOCK": "STOCK_LEVELS",
}

WAREHOUSE_GROUPS: tuple[str, ...] = ("Warehouses", "Warehouse Receipts", "Export Slips")
HIDDEN_GROUPS: frozenset[str] = frozenset({"Organizations", "Profiles"})
OTHER_GROUP = "Other"


def format_module_name(module: str) -> str:
    """WAREHOUSE_RECEIPTS -> 'Warehouse Receipts'."""
    words = [w for w in re.split(r"[\s_\-]+", module) if w]
    return " ".join(w[:1].upper() + w[1:].lower() for w in words)


def normalize_module_name(module: str) -> str:
    """Fold spelling variants (stock-level, EXPORT SLIP, ...) into one group label."""
    if not module:
        return module
    squashed = re.sub(r"[\s\-_]", "", module).upper()
    if squashed == "STOCK" or squashed.startswith("STOCKLEVEL"):
        return "Stock Levels"
    if squashed == "EXPORT" or squashed.startswith("EXPORTSLIP"):
        return "Export Slips"
    if squashed.startswith("WAREHOUSE") and not squashed.startswith("WAREHOUSES"):
        return "Warehouse Receipts"
    return format_module_name(module)


def module_for_permission(permission: Permission) -> str:
    """Return the group label for a permission."""
    code = (permission.code or "").upper()
    for prefix, module in _MULTI_WORD_PREFIXES:
        if code.startswith(prefix):
            return format_module_name(module)
    parts = code.split("_")
    if len(parts) >= 2 and parts[0]:
        return format_module_name(_ALIASES.get(parts[0], parts[0]))
    if permission.resource:
        return normalize_module_name(permission.resource)
    return OTHER_GROUP


def group_permissions(permissions: Iterable[Permission]) -> dict[str, list[Permission]]:
    """Group usable permissions by module label, warehouse groups first."""
    groups: dict[str, list[Permission]] = {}
    for permission in permissions:
        if not permission.is_usable:
            continue
        module = normalize_module_name(module_for_permission(permission))
        if module in HIDDEN_GROUPS:
            continue
        groups.setdefault(module, []).append(permission)

    ordered = [name for name in WAREHOUSE_GROUPS if name in groups]
    ordered += sorted(name for name in groups if name not in WAREHOUSE_GROUPS)
    return {name: groups[name] for name in ordered}
