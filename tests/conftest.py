"""Pytest configuration and fixtures for the access core.

HTTP tests build the app with create_app() and put an AccessSession on
app.state themselves (ASGITransport does not run the lifespan).
"""

import pytest
from httpx import ASGITransport, AsyncClient

from app.application.services.access_session import AccessSession
from app.domain.entities.access import Identity, Permission
from app.main import create_app
from tests.fakes import FakeGateway, make_profile


@pytest.fixture
def identity() -> Identity:
    return Identity(user_id="u1", role_id="6", access_token="token-1")


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway(
        identity_results=[
            make_profile(
                ["ORDERS_READ", "ORDERS_CREATE", "DASHBOARD_VIEW"],
                names={"ORDERS_READ": "View Orders"},
            )
        ],
        permissions=[
            Permission(code="ORDERS_READ", name="Xem đơn hàng", resource="orders"),
            Permission(code="ORDERS_CREATE", name="Tạo đơn hàng", resource="orders"),
            Permission(code="WAREHOUSE_RECEIPTS_READ", name="Xem phiếu nhập"),
            Permission(code="OLD_THING_READ", name="Old", is_deleted=True),
        ],
        translations={"translations": {"DASHBOARD_VIEW": "Bảng điều khiển"}},
    )


@pytest.fixture
def access_session(fake_gateway: FakeGateway) -> AccessSession:
    return AccessSession(fake_gateway, identity_timeout_seconds=1.0)


@pytest.fixture
def app(access_session: AccessSession):
    """FastAPI app with the fake-backed session on app.state."""
    application = create_app()
    application.state.access_session = access_session
    return application


@pytest.fixture
async def client(app) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
