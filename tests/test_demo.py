import logging

import pytest

from conftest import json_response, make_transport
from connectors.demo import DEMO_ORDER_PREFIX, DemoFallbackConnector, supports_demo_data
from connectors.distributors import IngramMicroConnector, SPRichardsConnector, TDSynnexConnector
from models.vendor import VendorConnectorConfig


def build(connector_class, make_vendor, sleep, handler):
    return connector_class(
        make_vendor(connector_class.CONNECTOR_NAME),
        VendorConnectorConfig(credentials={"apiKey": "k", "apiSecret": "s"}, retry_attempts=1),
        sleep=sleep,
        http_transport=make_transport(handler),
    )


def test_only_catalogued_distributors_have_demo_data(make_vendor, sleep):
    assert supports_demo_data("ingram_micro")
    assert not supports_demo_data("sp_richards")
    with pytest.raises(ValueError):
        DemoFallbackConnector(build(SPRichardsConnector, make_vendor, sleep, lambda r: json_response(200, {})))


async def test_failures_fall_back_to_demo_data_with_a_warning(make_vendor, sleep, caplog):
    inner = build(IngramMicroConnector, make_vendor, sleep, lambda r: json_response(503, {}))
    connector = DemoFallbackConnector(inner)

    with caplog.at_level(logging.WARNING):
        products = await connector.get_products(["INGRAM-002"])
        inventory = await connector.get_inventory()
        pricing = await connector.get_pricing(["INGRAM-001"])

    assert [p.sku for p in products] == ["INGRAM-002"]
    assert inventory["INGRAM-003"] == 8
    assert pricing == {"INGRAM-001": 899.99}
    assert "serving demo data" in caplog.text
    await connector.aclose()


async def test_demo_orders(make_vendor, sleep):
    inner = build(TDSynnexConnector, make_vendor, sleep, lambda r: json_response(500, {}))
    connector = DemoFallbackConnector(inner)

    created = await connector.create_order({"items": [{"sku": "A", "quantity": 1, "price": 5, "total": 5}]})
    assert created.order_id.startswith(DEMO_ORDER_PREFIX["td_synnex"])
    assert created.total_amount == 5.0

    order = await connector.get_order("TDSYNNEX-ORDER-42")
    assert order.items[0].sku == "TDSYNNEX-001"
    assert await connector.get_order("OTHER-1") is None
    orders = await connector.get_orders()
    assert orders[0].order_id == "TDSYNNEX-ORDER-001"


async def test_successful_calls_are_not_replaced(make_vendor, sleep):
    inner = build(
        IngramMicroConnector,
        make_vendor,
        sleep,
        lambda r: json_response(200, {"inventory": [{"sku": "REAL", "quantity": 1}]}),
    )
    connector = DemoFallbackConnector(inner)
    assert await connector.get_inventory() == {"REAL": 1}
    assert connector.CONNECTOR_NAME == "ingram_micro"
    await connector.aclose()
