import httpx
import pytest

from conftest import envelope, json_response
from models.onboarding import VendorConnectionRequest
from models.registry_entry import IntegrationMethod, RegistryVendorType
from models.vendor_config import VendorEndpoints
from services.vendor_management import VendorManagementService, generate_vendor_id


class RecordingTransport(httpx.MockTransport):
    """MockTransport qui note les chemins appelés et sa fermeture."""

    def __init__(self, handler):
        self.paths = []
        self.closed = False

        def recording(request):
            self.paths.append(request.url.path)
            return handler(request)

        super().__init__(recording)

    async def aclose(self):
        self.closed = True


def healthy_vendor(request):
    path = request.url.path
    if path.endswith("/auth"):
        return json_response(200, {})
    if path.endswith("/inventory"):
        return json_response(200, envelope({"test": 3}))
    if path.endswith("/pricing"):
        return json_response(503, {})
    if path.endswith("/orders"):
        return json_response(200, envelope([]))
    return json_response(200, envelope([]))


def make_service(registry, handler, sleep):
    transport = RecordingTransport(handler)
    service = VendorManagementService(
        registry,
        connector_kwargs={"http_transport": transport, "sleep": sleep},
        clock_ms=lambda: 1718000000000,
    )
    return service, transport


def acme_request(**overrides):
    data = {
        "name": "Acme Corp",
        "description": "Regional supplier",
        "type": "api",
        "credentials": {"apiKey": "k"},
        "endpoints": {"base_url": "https://api.acme.test", "products": "/catalog"},
    }
    data.update(overrides)
    return data


def test_generate_vendor_id():
    assert generate_vendor_id("Acme Corp!", now_ms=42) == "acme-corp--42"


def test_build_vendor_config_fills_default_paths(empty_registry):
    service = VendorManagementService(empty_registry)
    config = service.build_vendor_config(
        VendorConnectionRequest.model_validate(acme_request())
    )
    assert config.endpoints == VendorEndpoints(
        base_url="https://api.acme.test",
        products="/catalog",
        inventory="/inventory",
        pricing="/pricing",
        orders="/orders",
        auth="/auth",
    )


async def test_connect_vendor_registers_what_the_test_proved(empty_registry, sleep):
    service, transport = make_service(empty_registry, healthy_vendor, sleep)

    result = await service.connect_vendor(acme_request())

    assert result.success
    assert result.message == "Vendor connected successfully"
    assert result.vendor_id == "acme-corp-1718000000000"
    assert "/catalog" in transport.paths
    assert transport.closed
    assert sleep.delays == []

    entry = empty_registry.get_vendor(result.vendor_id)
    assert entry.type == RegistryVendorType.CUSTOM
    assert entry.integration_methods == [IntegrationMethod.API]
    assert entry.capabilities.products and entry.capabilities.inventory
    assert entry.capabilities.orders
    assert entry.capabilities.pricing is False
    assert entry.capabilities.real_time_sync is False


async def test_failed_connection_registers_nothing(empty_registry, sleep):
    service, transport = make_service(empty_registry, lambda r: json_response(401, {}), sleep)

    result = await service.connect_vendor(acme_request())

    assert not result.success
    assert result.message == "Connection test failed"
    assert result.vendor_id == "acme-corp-1718000000000"
    assert "Authentication failed" in result.errors
    assert len(empty_registry) == 0
    assert transport.closed


async def test_invalid_request_is_reported(empty_registry, sleep):
    service, _ = make_service(empty_registry, healthy_vendor, sleep)
    result = await service.connect_vendor(acme_request(name="", type="custom"))
    assert not result.success
    assert result.message == "Invalid vendor connection request"
    assert result.errors


async def test_missing_base_url_fails_the_test(empty_registry, sleep):
    service, _ = make_service(empty_registry, healthy_vendor, sleep)
    result = await service.connect_vendor(acme_request(endpoints=None))
    assert not result.success
    assert result.message == "Connection test failed"
    assert len(empty_registry) == 0


async def test_reconnect_registered_vendor(empty_registry, sleep):
    service, _ = make_service(empty_registry, healthy_vendor, sleep)
    connected = await service.connect_vendor(acme_request())

    retest = await service.test_vendor_connection(connected.vendor_id, {"apiKey": "k"})
    assert retest.success
    assert retest.details.inventory

    missing = await service.test_vendor_connection("ghost", {"apiKey": "k"})
    assert not missing.success
    assert missing.errors == ["Vendor not found: ghost"]


async def test_edi_vendor_without_data_probes_is_not_registered(empty_registry):
    service = VendorManagementService(empty_registry)
    result = await service.connect_vendor(
        acme_request(
            type="edi",
            credentials={"ediPartnerId": "P", "ediSenderId": "S", "ediReceiverId": "R"},
        )
    )
    assert not result.success
    assert result.test_results.details.authentication
    assert len(empty_registry) == 0


def test_templates_are_copies(empty_registry):
    service = VendorManagementService(empty_registry)
    templates = service.get_vendor_templates()
    assert [t.id for t in templates] == ["rest-api", "oauth2-api", "sftp-files", "edi-x12", "webhook"]
    templates[0].template["type"] = "tampered"
    assert service.get_vendor_templates()[0].template["type"] == "api"


@pytest.mark.parametrize(
    "vendor_type, step_ids",
    [
        ("api", ["basic-info", "authentication", "endpoints"]),
        ("SFTP", ["basic-info", "sftp-config"]),
        ("edi", ["basic-info", "edi-config"]),
        ("webhook", ["basic-info", "webhook-config"]),
        ("carrier-pigeon", ["basic-info"]),
    ],
)
def test_wizard_steps(empty_registry, vendor_type, step_ids):
    service = VendorManagementService(empty_registry)
    assert [s.id for s in service.get_connection_wizard_steps(vendor_type)] == step_ids


def test_registry_passthroughs(registry):
    service = VendorManagementService(registry)
    assert service.get_vendor_stats()["total"] == 8
    assert [v.id for v in service.search_vendors("midwest")] == ["azerty"]
    assert service.update_vendor("azerty", {"description": "Updated"})
    assert registry.get_vendor("azerty").description == "Updated"
    assert service.remove_vendor("azerty")
    assert len(service.get_all_vendors()) == 7
