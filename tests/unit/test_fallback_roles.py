"""Degraded-mode tables: role id -> name -> curated permission set."""

import pytest

from app.domain.fallback_roles import (
    MINIMAL_PERMISSIONS,
    UNKNOWN_ROLE_NAME,
    build_fallback_role,
    permissions_for_role_name,
    role_name_for_id,
)


def test_role_name_for_id() -> None:
    assert role_name_for_id("1") == "Administrator"
    assert role_name_for_id("7") == "Shipper"
    assert role_name_for_id("42") == UNKNOWN_ROLE_NAME
    assert role_name_for_id(None) == UNKNOWN_ROLE_NAME


def test_custom_role_table() -> None:
    assert role_name_for_id("9", {"9": "Sales Lead"}) == "Sales Lead"
    assert role_name_for_id("1", {"9": "Sales Lead"}) == UNKNOWN_ROLE_NAME


@pytest.mark.parametrize(
    ("name", "expected_code"),
    [
        ("Chief Accountant", "REPORTS_CREATE"),
        ("accountant", "PAYMENTS_CREATE"),
        ("Inventory Manager", "WAREHOUSE_RECEIPTS_CREATE"),
        ("SALES", "QUOTATIONS_CREATE"),
        ("Shipper", "ORDERS_UPDATE_STATUS"),
        ("Owner / Director", "SETTINGS_MANAGE_ALL"),
    ],
)
def test_keyword_sets(name: str, expected_code: str) -> None:
    codes = permissions_for_role_name(name)
    assert expected_code in codes
    assert codes[: len(MINIMAL_PERMISSIONS)] == MINIMAL_PERMISSIONS


def test_plain_accountant_lacks_chief_extras() -> None:
    assert "REPORTS_CREATE" not in permissions_for_role_name("Accountant")


def test_unmatched_name_gets_minimal_floor() -> None:
    assert permissions_for_role_name("Intern") == MINIMAL_PERMISSIONS
    assert permissions_for_role_name("") == MINIMAL_PERMISSIONS


def test_build_fallback_role_is_deterministic() -> None:
    first = build_fallback_role("5")
    second = build_fallback_role("5")
    assert first == second
    assert first.name == "Inventory Manager"
    assert len(first.permissions) == len(set(first.permissions))
