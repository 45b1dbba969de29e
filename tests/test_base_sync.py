import asyncio

import pytest

from connectors.base import (
    AuthenticationError,
    ConnectorError,
    VendorConnector,
    retryable,
)
from models.sync import VendorProductData
from models.vendor import VendorConnectorConfig


class FakeConnector(VendorConnector):
    CONNECTOR_NAME = "fake"
    CONNECTOR_CATEGORY = "test"

    def __init__(self, *args, fail_batches=(), inventory_error=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.fail_batches = set(fail_batches)
        self.inventory_error = inventory_error
        self.product_calls = []
        self.inventory_calls = 0

    async def validate_credentials(self):
        return True

    async def get_products(self, skus=None):
        self.product_calls.append(list(skus) if skus is not None else None)
        if skus and skus[0] in self.fail_batches:
            raise ConnectorError(self.CONNECTOR_NAME, f"batch starting {skus[0]} failed", recoverable=False)
        return [VendorProductData(sku=s) for s in (skus or ["ALL-1", "ALL-2"])]

    async def get_product(self, sku):
        return None

    @retryable
    async def get_inventory(self, skus=None):
        self.inventory_calls += 1
        if self.inventory_error is not None:
            raise self.inventory_error
        return {s: 1 for s in skus or []}

    async def get_pricing(self, skus=None):
        await asyncio.sleep(10)
        return {}

    async def create_order(self, order):
        raise NotImplementedError

    async def get_order(self, order_id):
        return None

    async def get_orders(self, status=None, limit=None):
        return []


@pytest.fixture
def make_connector(make_vendor, sleep):
    def _make(**kwargs):
        config = VendorConnectorConfig(credentials={"apiKey": "k"})
        kwargs.setdefault("sync_batch_size", 2)
        return FakeConnector(make_vendor("fake"), config, sleep=sleep, **kwargs)

    return _make


async def test_sync_without_skus_fetches_everything(make_connector):
    connector = make_connector()
    result = await connector.sync_products()
    assert result.success
    assert result.items_processed == result.items_total == 2
    assert connector.product_calls == [None]


async def test_sync_with_empty_sku_list_is_an_empty_success(make_connector):
    connector = make_connector()
    result = await connector.sync_products([])
    assert result.success
    assert result.items_processed == 0
    assert result.data == []
    assert connector.product_calls == []


async def test_sync_batches_skus(make_connector):
    connector = make_connector()
    result = await connector.sync_products(["A", "B", "C", "D", "E"])
    assert connector.product_calls == [["A", "B"], ["C", "D"], ["E"]]
    assert result.success
    assert result.items_processed == 5
    assert [p.sku for p in result.data] == ["A", "B", "C", "D", "E"]


async def test_failed_batch_gives_partial_result(make_connector):
    connector = make_connector(fail_batches={"C"})
    result = await connector.sync_products(["A", "B", "C", "D", "E"])
    assert result.success
    assert result.is_partial
    assert result.items_processed == 3
    assert result.items_total == 5
    assert len(result.errors) == 1
    assert "batch 2" in result.errors[0]


async def test_all_batches_failing_is_a_failure(make_connector):
    connector = make_connector(fail_batches={"A", "C"})
    result = await connector.sync_products(["A", "B", "C"])
    assert not result.success
    assert result.items_processed == 0
    assert len(result.errors) == 2


async def test_sync_never_raises_and_uses_retry(make_connector, sleep):
    connector = make_connector(inventory_error=ConnectorError("fake", "flaky upstream"))
    result = await connector.sync_inventory()
    assert not result.success
    assert "flaky upstream" in result.error
    assert connector.inventory_calls == 3
    assert sleep.delays == [2.0, 4.0]


async def test_non_recoverable_error_is_not_retried(make_connector, sleep):
    connector = make_connector(inventory_error=AuthenticationError("fake"))
    result = await connector.sync_inventory(["A"])
    assert not result.success
    assert connector.inventory_calls == 1
    assert sleep.delays == []


async def test_sync_timeout_is_reported_in_result(make_connector):
    connector = make_connector()
    result = await connector.sync_pricing(["A"], timeout=0.05)
    assert not result.success
    assert "timed out" in result.error


async def test_sync_orders(make_connector):
    result = await make_connector().sync_orders(status="open")
    assert result.success
    assert result.data == []


def test_validation_helpers():
    assert VendorConnector.validate_sku("ABC-1")
    assert not VendorConnector.validate_sku("   ")
    assert not VendorConnector.validate_sku("X" * 51)
    assert VendorConnector.validate_quantity(3)
    assert not VendorConnector.validate_quantity(0)
    assert not VendorConnector.validate_quantity(True)
    assert VendorConnector.validate_price(9.99)
    assert not VendorConnector.validate_price(float("nan"))
    assert not VendorConnector.validate_price(-1)


async def test_metadata_and_context_manager(make_connector):
    async with make_connector() as connector:
        assert connector.get_vendor_info().type == "fake"
        assert connector.get_capabilities()["real_time_sync"] is False
    assert FakeConnector.info() == {
        "name": "fake",
        "category": "test",
        "data_types": ["products", "inventory", "pricing", "orders"],
    }
