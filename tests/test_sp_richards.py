import asyncio

import httpx
import pytest

from conftest import envelope, json_response, make_transport, request_json
from connectors.base import ConfigurationError, VendorApiError
from connectors.distributors import SPRichardsConnector
from models.vendor import VendorConnectorConfig


class FakeSPRichards:
    """Serveur SP Richards minimal : émet des tokens numérotés."""

    def __init__(self, expires_in=3600):
        self.expires_in = expires_in
        self.issued = 0
        self.valid_tokens = set()
        self.auth_bodies = []
        self.data_auth_headers = []
        self.gate = None

    async def handler(self, request):
        if request.url.path.endswith("/auth/token"):
            self.auth_bodies.append(request_json(request))
            self.issued += 1
            token = f"token-{self.issued}"
            self.valid_tokens = {token}
            return json_response(200, {"access_token": token, "expires_in": self.expires_in})

        header = request.headers.get("Authorization", "")
        self.data_auth_headers.append(header)
        if self.gate is not None:
            await self.gate.wait()
        if header.removeprefix("Bearer ") not in self.valid_tokens:
            return json_response(401, {})
        if request.url.path.endswith("/products/MISSING"):
            return json_response(404, {})
        if "/products/" in request.url.path:
            return json_response(200, envelope({"sku": "SPR-1", "name": "Paper", "price": 4.5}))
        if request.url.path.endswith("/inventory"):
            return json_response(200, envelope([{"sku": "SPR-1", "quantity": 9}]))
        if request.url.path.endswith("/pricing"):
            return json_response(200, envelope(success=False, error="pricing unavailable"))
        return json_response(200, envelope([]))


@pytest.fixture
def server():
    return FakeSPRichards()


@pytest.fixture
def make_connector(make_vendor, sleep, clock, server):
    def _make(credentials=None, **kwargs):
        config = VendorConnectorConfig(credentials=credentials or {"apiKey": "client-id", "apiSecret": "client-secret"})
        return SPRichardsConnector(
            make_vendor("sp_richards"),
            config,
            sleep=sleep,
            clock=clock,
            http_transport=make_transport(server.handler),
            **kwargs,
        )

    return _make


async def test_client_credentials_exchange(make_connector, server):
    async with make_connector() as connector:
        assert await connector.validate_credentials()
    assert server.auth_bodies == [
        {"client_id": "client-id", "client_secret": "client-secret", "grant_type": "client_credentials"}
    ]


async def test_validate_without_secret_is_false(make_connector, server):
    connector = make_connector(credentials={"apiKey": "client-id"})
    assert await connector.validate_credentials() is False
    assert server.issued == 0


def test_requires_api_key_credentials(make_connector):
    with pytest.raises(ConfigurationError):
        make_connector(credentials={"accessToken": "tok"})


async def test_token_is_reused_while_fresh(make_connector, server, clock):
    async with make_connector() as connector:
        await connector.get_inventory(["SPR-1"])
        clock.advance(1000)
        await connector.get_inventory(["SPR-1"])
    assert server.issued == 1
    assert server.data_auth_headers == ["Bearer token-1", "Bearer token-1"]


async def test_token_about_to_expire_triggers_exactly_one_reauth(make_connector, server, clock):
    async with make_connector(token_refresh_skew=60) as connector:
        await connector.get_inventory()
        clock.advance(3600 - 30)
        inventory = await connector.get_inventory()

    assert inventory == {"SPR-1": 9}
    assert server.issued == 2
    assert server.data_auth_headers == ["Bearer token-1", "Bearer token-2"]


async def test_rejected_token_is_refreshed_and_request_replayed(make_connector, server):
    async with make_connector() as connector:
        await connector.get_inventory()
        server.valid_tokens = set()  # révocation côté fournisseur
        inventory = await connector.get_inventory()

    assert inventory == {"SPR-1": 9}
    assert server.issued == 2
    assert server.data_auth_headers[-2:] == ["Bearer token-1", "Bearer token-2"]


async def test_concurrent_401s_trigger_a_single_refresh(make_connector, server):
    async with make_connector() as connector:
        await connector.get_inventory()
        server.valid_tokens = set()
        server.gate = asyncio.Event()

        tasks = [asyncio.create_task(connector.get_inventory()) for _ in range(5)]
        await asyncio.sleep(0)
        server.gate.set()
        results = await asyncio.gather(*tasks)

    assert all(r == {"SPR-1": 9} for r in results)
    assert server.issued == 2


async def test_envelope_and_single_item_lookups(make_connector):
    async with make_connector() as connector:
        product = await connector.get_product("SPR-1")
        assert product.name == "Paper"
        assert product.price == 4.5
        assert await connector.get_product("MISSING") is None
        with pytest.raises(VendorApiError, match="pricing unavailable"):
            await connector.get_pricing()


async def test_non_json_token_response_fails_validation(make_vendor, sleep):
    def handler(request):
        return httpx.Response(200, text="<html>Gateway maintenance</html>")

    connector = SPRichardsConnector(
        make_vendor("sp_richards"),
        VendorConnectorConfig(credentials={"apiKey": "client-id", "apiSecret": "client-secret"}),
        sleep=sleep,
        http_transport=make_transport(handler),
    )
    assert await connector.validate_credentials() is False
    await connector.aclose()
