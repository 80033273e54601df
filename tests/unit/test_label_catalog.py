"""LabelCatalog: precedence, translation guard, enrichment coalescing and failure handling."""

import asyncio

from app.application.services.label_catalog import LabelCatalog
from app.domain.entities.access import Permission
from app.domain.exceptions import CatalogFetchException
from tests.fakes import FakeGateway


def test_fallback_formatting_without_data() -> None:
    catalog = LabelCatalog()
    assert catalog.display_name("DASHBOARD_VIEW") == "Dashboard View"
    assert catalog.display_name("") == ""
    assert catalog.labels_loaded is False


def test_latest_writer_wins_across_sources() -> None:
    catalog = LabelCatalog()
    catalog.ingest_role_permissions({"X": "A"})
    catalog.ingest_catalog([Permission(code="X", name="B")])
    assert catalog.display_name("X") == "B"

    catalog.ingest_role_permissions({"X": "C"})
    assert catalog.display_name("X") == "C"


def test_catalog_ignores_inactive_and_deleted_entries() -> None:
    catalog = LabelCatalog()
    catalog.ingest_catalog(
        [
            Permission(code="ORDERS_READ", name="Xem đơn hàng", is_active=False),
            Permission(code="ORDERS_CREATE", name="Tạo đơn hàng", is_deleted=True),
        ]
    )
    assert catalog.display_name("ORDERS_READ") == "Orders Read"
    assert catalog.display_name("ORDERS_CREATE") == "Orders Create"


def test_shared_map_beats_translations() -> None:
    catalog = LabelCatalog()
    catalog.ingest({"translations": {"ORDERS_READ": "Translated"}})
    catalog.ingest_role_permissions({"ORDERS_READ": "From role"})
    assert catalog.display_name("ORDERS_READ") == "From role"


def test_translation_used_when_shared_map_misses() -> None:
    catalog = LabelCatalog()
    catalog.ingest([{"key": "permissions.orders_read", "value": "Xem đơn hàng"}])
    assert catalog.display_name("ORDERS_READ") == "Xem đơn hàng"


def test_translation_echoing_the_fallback_is_ignored() -> None:
    catalog = LabelCatalog()
    catalog.ingest({"ORDERS_READ": "Orders Read", "ORDERS_CREATE": "ORDERS_CREATE"})
    assert catalog.resolve_label("ORDERS_READ") is None
    assert catalog.resolve_label("ORDERS_CREATE") is None
    assert catalog.display_name("ORDERS_READ") == "Orders Read"


def test_page_alias_preferred_for_dashboard() -> None:
    catalog = LabelCatalog()
    catalog.ingest({"DASHBOARD_VIEW": "Dashboard", "View Dashboard Page": "Trang tổng quan"})
    assert catalog.display_name("DASHBOARD_VIEW") == "Trang tổng quan"


def test_clear_drops_everything() -> None:
    catalog = LabelCatalog()
    catalog.ingest_role_permissions({"ORDERS_READ": "View Orders"})
    catalog.ingest({"translations": {"X_READ": "x"}})
    catalog.clear()
    assert catalog.labels_loaded is False
    assert catalog.display_name("ORDERS_READ") == "Orders Read"
    assert catalog.grouped_permissions() == {}


async def test_enrich_loads_catalog_and_translations(fake_gateway: FakeGateway) -> None:
    catalog = LabelCatalog(fake_gateway)
    await catalog.enrich()
    assert catalog.display_name("ORDERS_READ") == "Xem đơn hàng"
    assert catalog.display_name("DASHBOARD_VIEW") == "Bảng điều khiển"
    assert catalog.display_name("OLD_THING_READ") == "Old Thing Read"
    assert "Orders" in catalog.grouped_permissions()


async def test_concurrent_enrich_calls_are_coalesced(fake_gateway: FakeGateway) -> None:
    fake_gateway.catalog_gate = asyncio.Event()
    catalog = LabelCatalog(fake_gateway)

    calls = [asyncio.create_task(catalog.enrich()) for _ in range(4)]
    await asyncio.sleep(0)
    fake_gateway.catalog_gate.set()
    await asyncio.gather(*calls)

    assert fake_gateway.permission_calls == 1
    assert fake_gateway.translation_calls == 1

    await catalog.enrich()
    assert fake_gateway.permission_calls == 2


async def test_enrich_swallows_errors_and_keeps_labels() -> None:
    gateway = FakeGateway(
        permissions=CatalogFetchException("/permissions", "HTTP 500"),
        translations=CatalogFetchException("/public/translations", "timeout"),
    )
    catalog = LabelCatalog(gateway)
    catalog.ingest_role_permissions({"ORDERS_READ": "View Orders"})

    await catalog.enrich()

    assert catalog.display_name("ORDERS_READ") == "View Orders"


async def test_one_failing_source_does_not_block_the_other() -> None:
    gateway = FakeGateway(
        permissions=RuntimeError("unexpected"),
        translations={"translations": {"ORDERS_READ": "Xem đơn hàng"}},
    )
    catalog = LabelCatalog(gateway)
    await catalog.enrich()
    assert catalog.display_name("ORDERS_READ") == "Xem đơn hàng"


async def test_results_fetched_before_clear_are_discarded(fake_gateway: FakeGateway) -> None:
    fake_gateway.catalog_gate = asyncio.Event()
    catalog = LabelCatalog(fake_gateway)

    pending = asyncio.create_task(catalog.enrich())
    await asyncio.sleep(0)
    catalog.clear()
    fake_gateway.catalog_gate.set()
    await pending

    assert catalog.labels_loaded is False


async def test_enrich_after_clear_does_not_join_stale_fetch(fake_gateway: FakeGateway) -> None:
    fake_gateway.catalog_gate = asyncio.Event()
    catalog = LabelCatalog(fake_gateway)

    stale = asyncio.create_task(catalog.enrich())
    await asyncio.sleep(0)
    catalog.clear()
    fresh = asyncio.create_task(catalog.enrich())
    await asyncio.sleep(0)
    fake_gateway.catalog_gate.set()
    await asyncio.gather(stale, fresh)

    assert fake_gateway.permission_calls == 2
    assert fake_gateway.translation_calls == 2
    assert catalog.display_name("ORDERS_READ") == "Xem đơn hàng"
    assert catalog.display_name("DASHBOARD_VIEW") == "Bảng điều khiển"


async def test_enrich_without_gateway_is_noop() -> None:
    catalog = LabelCatalog()
    await catalog.enrich()
    assert catalog.labels_loaded is False
