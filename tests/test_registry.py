import threading

import pytest

from connectors.base import RegistryNotInitializedError
from connectors.registry import VendorRegistry
from models.credentials import ApiKeyCredentials
from models.registry_entry import IntegrationMethod, RegistryStatus, VendorRegistryEntry
from models.vendor_config import ConnectorType, FieldMapping, VendorConfig

SEEDED = {"sp-richards", "newwave", "supplies-network", "asi", "bluestar", "azerty", "arbitech", "sed-int"}


def custom_entry(vendor_id="acme", **overrides):
    data = {
        "id": vendor_id,
        "name": "Acme Supplies",
        "description": "Regional office supplies wholesaler",
        "integration_methods": ["api"],
        "config": VendorConfig(name="Acme API"),
    }
    data.update(overrides)
    return VendorRegistryEntry(**data)


def test_registry_requires_a_logger():
    with pytest.raises(RegistryNotInitializedError, match="Registry not initialized"):
        VendorRegistry(logger=None)


def test_seeded_with_known_distributors(registry):
    assert {v.id for v in registry.get_all_vendors()} == SEEDED
    sp = registry.get_vendor("sp-richards")
    assert sp.config.endpoints.base_url == "https://api.sprichards.com/v1"
    assert sp.config.endpoints.auth == "/auth/token"
    assert sp.config.rate_limits.requests_per_minute == 60
    assert registry.get_vendor("newwave").config.features.webhooks is False


def test_register_then_get_returns_equal_entry(empty_registry):
    entry = custom_entry()
    empty_registry.register_vendor(entry)
    assert empty_registry.get_vendor("acme") == entry
    assert "acme" in empty_registry
    assert len(empty_registry) == 1


def test_register_accepts_a_plain_dict(empty_registry):
    entry = empty_registry.register_vendor(
        {"id": "dict-vendor", "name": "Dict", "config": {"name": "Dict API", "type": "sftp"}}
    )
    assert entry.config.type == ConnectorType.SFTP


def test_update_merges_and_never_moves_updated_at_backwards(empty_registry):
    original = empty_registry.register_vendor(custom_entry())
    assert empty_registry.update_vendor("acme", {"status": "inactive", "id": "hijack"})

    updated = empty_registry.get_vendor("acme")
    assert updated.status == RegistryStatus.INACTIVE
    assert updated.id == "acme"
    assert updated.created_at == original.created_at
    assert updated.updated_at >= original.updated_at
    assert empty_registry.update_vendor("unknown", {"status": "inactive"}) is False


def test_remove_vendor(registry):
    assert registry.remove_vendor("asi")
    assert registry.get_vendor("asi") is None
    assert registry.remove_vendor("asi") is False


def test_queries(registry):
    assert {v.id for v in registry.get_vendors_by_type("distributor")} == SEEDED
    realtime = {v.id for v in registry.get_vendors_by_capability("real_time_sync")}
    assert "supplies-network" not in realtime and "azerty" not in realtime
    assert "sp-richards" in realtime
    sftp = {v.id for v in registry.get_vendors_by_integration_method(IntegrationMethod.SFTP)}
    assert sftp == {"sp-richards", "newwave", "asi", "azerty", "sed-int"}
    with pytest.raises(ValueError):
        registry.get_vendors_by_capability("teleportation")


def test_search_is_case_insensitive(registry):
    assert [v.id for v in registry.search_vendors("OFFICE")] == ["sp-richards", "supplies-network"]
    assert {v.id for v in registry.search_vendors("point-of-sale")} == {"bluestar"}


def test_stats(registry):
    registry.register_vendor(custom_entry(status="testing", integration_methods=["webhook"]))
    stats = registry.get_vendor_stats()
    assert stats["total"] == 9
    assert stats["by_type"] == {"distributor": 8, "custom": 1}
    assert stats["by_status"] == {"active": 8, "testing": 1}
    assert stats["by_integration_method"]["api"] == 8
    assert stats["by_integration_method"]["webhook"] == 1


def test_find_for_vendor_type_tolerates_underscores(registry):
    assert registry.find_for_vendor_type("sp_richards").id == "sp-richards"
    assert registry.find_for_vendor_type("SED_INT").id == "sed-int"
    assert registry.find_for_vendor_type("ingram_micro") is None


def test_universal_config_for_unknown_vendor_is_none(registry):
    assert registry.create_universal_connector_config("nope", {"credentials": {"apiKey": "k"}}) is None


def test_universal_config_from_entry_and_overrides(registry):
    config = registry.create_universal_connector_config(
        "newwave",
        {"credentials": {"apiKey": "k"}, "mappings": FieldMapping(products={"sku": "code"})},
    )
    assert config.name == "Newwave"
    assert config.type == ConnectorType.API
    assert config.config.endpoints.inventory == "/stock"
    assert isinstance(config.credentials, ApiKeyCredentials)
    assert config.mappings.products == {"sku": "code"}

    bare = registry.create_universal_connector_config("newwave")
    assert bare.credentials is None


def test_concurrent_registrations_are_not_lost(empty_registry):
    def register(i):
        empty_registry.register_vendor(custom_entry(vendor_id=f"v-{i}"))

    threads = [threading.Thread(target=register, args=(i,)) for i in range(50)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(empty_registry) == 50
