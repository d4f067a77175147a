from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from portal_hub.gateway.base import Account, Gateway
from portal_hub.main import create_app
from tests.fakes import make_gateway

PASSWORD = "correct horse battery"


@pytest.fixture
def gateway() -> Gateway:
    return make_gateway()


@pytest.fixture
def account(gateway) -> Account:
    return gateway.identity.add_account("owner@example.com", PASSWORD)


@pytest.fixture
def other_account(gateway) -> Account:
    return gateway.identity.add_account("someone@example.com", "another password")


@pytest.fixture
def app(gateway):
    return create_app(gateway=gateway, instrument=False)


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c


@pytest.fixture
def auth_headers(gateway, account) -> dict[str, str]:
    return {"Authorization": f"Bearer {gateway.identity.token_for(account)}"}
