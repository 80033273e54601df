"""RoleProfileLoader: coalescing, timeout, retry budget, degraded mode, identity changes."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.application.services.role_profile_loader import RoleProfileLoader
from app.domain.entities.access import Identity
from app.domain.enums import LoaderState
from app.domain.exceptions import IdentityFetchException, MalformedIdentityException
from app.domain.fallback_roles import MINIMAL_PERMISSIONS, UNKNOWN_ROLE_NAME
from tests.fakes import FakeGateway, failing, make_profile

USER = Identity(user_id="u1", role_id="6")


async def test_success_builds_snapshot_and_ingests_names() -> None:
    gateway = FakeGateway([make_profile(["ORDERS_READ"], names={"ORDERS_READ": "View Orders"})])
    store = MagicMock()
    loader = RoleProfileLoader(gateway, label_store=store)

    snapshot = await loader.load(USER)

    assert snapshot.codes == frozenset({"ORDERS_READ"})
    assert snapshot.loading is False
    assert snapshot.degraded is False
    assert loader.state == LoaderState.LOADED
    store.ingest_role_permissions.assert_called_once_with({"ORDERS_READ": "View Orders"})


async def test_initial_snapshot_is_pending() -> None:
    loader = RoleProfileLoader(FakeGateway())
    assert loader.snapshot.loading is True
    assert loader.state == LoaderState.IDLE
    assert (await loader.load(None)).loading is True


async def test_loaded_snapshot_is_reused() -> None:
    gateway = FakeGateway()
    loader = RoleProfileLoader(gateway)
    first = await loader.load(USER)
    second = await loader.load(USER)
    assert first is second
    assert gateway.identity_calls == 1


async def test_concurrent_loads_share_one_fetch() -> None:
    gateway = FakeGateway([make_profile(["ORDERS_READ"])])
    gateway.gate = asyncio.Event()
    loader = RoleProfileLoader(gateway)

    tasks = [asyncio.create_task(loader.load(USER)) for _ in range(5)]
    await asyncio.sleep(0)
    assert loader.state == LoaderState.LOADING
    assert loader.snapshot.loading is True
    gateway.gate.set()
    results = await asyncio.gather(*tasks)

    assert gateway.identity_calls == 1
    assert all(r.codes == frozenset({"ORDERS_READ"}) for r in results)


async def test_refresh_refetches_when_loaded() -> None:
    gateway = FakeGateway([make_profile(["ORDERS_READ"]), make_profile(["ORDERS_READ", "ORDERS_CREATE"])])
    loader = RoleProfileLoader(gateway)
    await loader.load(USER)
    snapshot = await loader.refresh(USER)
    assert gateway.identity_calls == 2
    assert "ORDERS_CREATE" in snapshot.codes


async def test_failure_below_budget_fails_closed_and_retries() -> None:
    gateway = FakeGateway([failing(), make_profile(["ORDERS_READ"])])
    loader = RoleProfileLoader(gateway)

    snapshot = await loader.load(USER)
    assert snapshot.codes == frozenset()
    assert snapshot.loading is False
    assert snapshot.degraded is False
    assert loader.attempt_count == 1
    assert loader.state == LoaderState.IDLE

    snapshot = await loader.load(USER)
    assert snapshot.codes == frozenset({"ORDERS_READ"})
    assert loader.attempt_count == 0


async def test_retry_state_is_a_copy() -> None:
    loader = RoleProfileLoader(FakeGateway([failing("boom")]))
    await loader.load(USER)

    state = loader.retry_state
    assert state.attempt_count == 1
    assert isinstance(state.last_error, IdentityFetchException)

    state.reset()
    assert loader.attempt_count == 1


async def test_timeout_counts_as_failure() -> None:
    async def never_returns():
        await asyncio.sleep(10)

    gateway = MagicMock()
    gateway.fetch_current_identity = AsyncMock(side_effect=never_returns)
    loader = RoleProfileLoader(gateway, timeout_seconds=0.01)

    snapshot = await loader.load(USER)

    assert snapshot.codes == frozenset()
    assert loader.attempt_count == 1
    assert isinstance(loader.last_error, IdentityFetchException)
    assert "timed out" in loader.last_error.message


async def test_malformed_payload_counts_toward_budget() -> None:
    gateway = FakeGateway([MalformedIdentityException()])
    loader = RoleProfileLoader(gateway)
    snapshot = await loader.load(USER)
    assert snapshot.codes == frozenset()
    assert loader.attempt_count == 1


async def test_unexpected_error_is_wrapped() -> None:
    gateway = FakeGateway([RuntimeError("boom")])
    loader = RoleProfileLoader(gateway)
    await loader.load(USER)
    assert isinstance(loader.last_error, IdentityFetchException)
    assert loader.attempt_count == 1


async def test_three_failures_enter_degraded_mode() -> None:
    gateway = FakeGateway([failing()])
    loader = RoleProfileLoader(gateway)

    for _ in range(3):
        snapshot = await loader.load(USER)

    assert loader.state == LoaderState.DEGRADED
    assert snapshot.degraded is True
    assert snapshot.role is not None
    assert snapshot.role.name == "Sales"
    assert "ORDERS_CREATE" in snapshot.codes
    assert set(MINIMAL_PERMISSIONS) <= snapshot.codes


async def test_degraded_mode_is_terminal_and_repeatable() -> None:
    gateway = FakeGateway([failing(), failing(), failing(), make_profile(["X_READ"])])
    loader = RoleProfileLoader(gateway)
    for _ in range(3):
        degraded = await loader.load(USER)

    again = await loader.load(USER)
    forced = await loader.refresh(USER)

    assert gateway.identity_calls == 3
    assert again == degraded
    assert forced == degraded

    other = RoleProfileLoader(FakeGateway([failing()]))
    for _ in range(3):
        replay = await other.load(USER)
    assert replay.codes == degraded.codes


async def test_unknown_role_id_gets_minimal_floor() -> None:
    loader = RoleProfileLoader(FakeGateway([failing()]), max_attempts=1)
    snapshot = await loader.load(Identity(user_id="u9", role_id="99"))
    assert snapshot.role.name == UNKNOWN_ROLE_NAME
    assert snapshot.codes == frozenset(MINIMAL_PERMISSIONS)


async def test_identity_change_resets_retry_and_refetches() -> None:
    gateway = FakeGateway([failing(), failing(), failing(), make_profile(["ORDERS_READ"])])
    loader = RoleProfileLoader(gateway)
    for _ in range(3):
        await loader.load(USER)
    assert loader.state == LoaderState.DEGRADED

    snapshot = await loader.load(Identity(user_id="u1", role_id="4"))

    assert loader.state == LoaderState.LOADED
    assert loader.attempt_count == 0
    assert snapshot.codes == frozenset({"ORDERS_READ"})


async def test_result_for_previous_identity_is_discarded() -> None:
    gateway = FakeGateway([make_profile(["OLD_READ"]), make_profile(["NEW_READ"])])
    gateway.gate = asyncio.Event()
    loader = RoleProfileLoader(gateway)

    stale = asyncio.create_task(loader.load(USER))
    await asyncio.sleep(0)
    fresh = asyncio.create_task(loader.load(Identity(user_id="u2", role_id="6")))
    await asyncio.sleep(0)
    gateway.gate.set()
    await asyncio.gather(stale, fresh)

    assert loader.identity.user_id == "u2"
    assert loader.snapshot.codes == frozenset({"NEW_READ"})


async def test_reset_forgets_everything() -> None:
    loader = RoleProfileLoader(FakeGateway([failing()]))
    await loader.load(USER)
    loader.reset()
    assert loader.identity is None
    assert loader.attempt_count == 0
    assert loader.snapshot.loading is True
    assert loader.state == LoaderState.IDLE


@pytest.mark.parametrize("max_attempts", [1, 2])
async def test_retry_budget_is_configurable(max_attempts: int) -> None:
    loader = RoleProfileLoader(FakeGateway([failing()]), max_attempts=max_attempts)
    for _ in range(max_attempts):
        snapshot = await loader.load(USER)
    assert snapshot.degraded is True


async def test_same_identity_with_new_token_keeps_snapshot() -> None:
    gateway = FakeGateway([make_profile(["ORDERS_READ"])])
    loader = RoleProfileLoader(gateway)
    await loader.load(Identity(user_id="u1", role_id="6", access_token="old"))

    snapshot = await loader.load(Identity(user_id="u1", role_id="6", access_token="new"))

    assert snapshot.codes == frozenset({"ORDERS_READ"})
    assert loader.identity.access_token == "new"
    assert gateway.identity_calls == 1
