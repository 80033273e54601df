"""Permission grouping for role-editing screens."""

from app.application.services.permission_groups import (
    group_permissions,
    module_for_permission,
    normalize_module_name,
)
from app.domain.entities.access import Permission


def _p(code: str, **kwargs) -> Permission:
    return Permission(code=code, name=code.title(), **kwargs)


def test_module_for_permission() -> None:
    assert module_for_permission(_p("WAREHOUSE_RECEIPTS_READ")) == "Warehouse Receipts"
    assert module_for_permission(_p("EXPORT_SLIP_CREATE")) == "Export Slips"
    assert module_for_permission(_p("STOCK_LEVEL_UPDATE")) == "Stock Levels"
    assert module_for_permission(_p("EXPORT_READ")) == "Export Slips"
    assert module_for_permission(_p("ORDERS_UPDATE_STATUS")) == "Orders"
    assert module_for_permission(Permission(code="ADMIN", resource="stock-levels")) == "Stock Levels"
    assert module_for_permission(Permission(code="ADMIN")) == "Other"


def test_normalize_module_name() -> None:
    assert normalize_module_name("stock level") == "Stock Levels"
    assert normalize_module_name("EXPORT-SLIPS") == "Export Slips"
    assert normalize_module_name("warehouses") == "Warehouses"
    assert normalize_module_name("customers") == "Customers"


def test_group_order_and_hidden_groups() -> None:
    groups = group_permissions(
        [
            _p("ORDERS_READ"),
            _p("EXPORT_SLIPS_READ"),
            _p("CUSTOMERS_READ"),
            _p("WAREHOUSES_READ"),
            _p("WAREHOUSE_RECEIPTS_CREATE"),
            _p("PROFILES_READ"),
            _p("ORGANIZATIONS_UPDATE"),
            _p("ORDERS_CREATE"),
        ]
    )
    assert list(groups) == [
        "Warehouses",
        "Warehouse Receipts",
        "Export Slips",
        "Customers",
        "Orders",
    ]
    assert [p.code for p in groups["Orders"]] == ["ORDERS_READ", "ORDERS_CREATE"]


def test_unusable_permissions_skipped() -> None:
    groups = group_permissions([_p("ORDERS_READ", is_active=False), _p("ORDERS_CREATE", is_deleted=True)])
    assert groups == {}
