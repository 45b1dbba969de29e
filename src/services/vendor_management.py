"""
VendorManagementService — Brancher un fournisseur inconnu sans code.

Flux connect_vendor() :
1. Compléter la demande avec les valeurs par défaut
2. Construire un UniversalConnector jetable
3. test_connection()
4. Succès → enregistrement dans le registry (type custom,
   capacités = ce que le test a prouvé). Échec → rien n'est écrit.

Le connecteur de test est TOUJOURS fermé, succès ou échec.
"""

from __future__ import annotations

import logging
import re
import time
from typing import Any, Callable, Optional, Union

from connectors.base import ConnectorError
from connectors.registry import VendorRegistry
from connectors.universal import UniversalConnector
from models.credentials import parse_credentials
from models.onboarding import (
    VendorConnectionRequest,
    VendorConnectionResult,
    VendorTemplate,
    WizardStep,
)
from models.registry_entry import (
    IntegrationMethod,
    RegistryStatus,
    RegistryVendorType,
    VendorCapabilities,
    VendorRegistryEntry,
)
from models.sync import VendorConnectionTest
from models.vendor import Vendor
from models.vendor_config import (
    FieldMapping,
    RateLimits,
    UniversalConnectorConfig,
    VendorConfig,
    VendorEndpoints,
    VendorFeatures,
)
from services.templates import get_vendor_templates, get_wizard_steps

DEFAULT_ENDPOINT_PATHS: dict[str, str] = {
    "products": "/products",
    "inventory": "/inventory",
    "pricing": "/pricing",
    "orders": "/orders",
    "auth": "/auth",
}

ONBOARDING_TENANT = "onboarding"


def generate_vendor_id(name: str, now_ms: Optional[int] = None) -> str:
    """slug(nom) + horodatage milliseconde : "Acme Corp" → "acme-corp-1718000000000"."""
    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    sanitized = re.sub(r"[^a-z0-9]", "-", name.lower())
    return f"{sanitized}-{timestamp}"


class VendorManagementService:
    """Onboarding et gestion des fournisseurs du registry.

    Usage :
        service = VendorManagementService(registry, logger)
        result = await service.connect_vendor(VendorConnectionRequest(...))
        if result.success:
            registry.get_vendor(result.vendor_id)
    """

    def __init__(
        self,
        registry: VendorRegistry,
        logger: Optional[logging.Logger] = None,
        connector_kwargs: Optional[dict[str, Any]] = None,
        clock_ms: Optional[Callable[[], int]] = None,
    ):
        self.registry = registry
        self.logger = logger or logging.getLogger("vendorlink.services.vendor_management")
        self._connector_kwargs = connector_kwargs or {}
        self._clock_ms = clock_ms

    # ── Onboarding ──

    def build_vendor_config(self, request: VendorConnectionRequest) -> VendorConfig:
        endpoints = request.endpoints or VendorEndpoints()
        filled = {
            field: getattr(endpoints, field) or default
            for field, default in DEFAULT_ENDPOINT_PATHS.items()
        }
        return VendorConfig(
            name=request.name,
            type=request.type,
            authentication=request.authentication,
            rate_limits=request.rate_limits or RateLimits(),
            endpoints=VendorEndpoints(base_url=endpoints.base_url, **filled),
            features=request.features or VendorFeatures(),
        )

    async def connect_vendor(
        self,
        request: Union[VendorConnectionRequest, dict[str, Any]],
    ) -> VendorConnectionResult:
        """Teste puis enregistre un nouveau fournisseur.

        Ne lève jamais : toute erreur est rapportée dans le résultat.
        """
        try:
            if not isinstance(request, VendorConnectionRequest):
                request = VendorConnectionRequest.model_validate(request)
        except ValueError as e:
            self.logger.error(f"Invalid vendor connection request: {e}")
            return VendorConnectionResult(
                success=False,
                message="Invalid vendor connection request",
                errors=[str(e)],
            )

        self.logger.info(f"Connecting new vendor: {request.name}")
        vendor_id = generate_vendor_id(
            request.name, self._clock_ms() if self._clock_ms else None
        )
        vendor_config = self.build_vendor_config(request)
        universal_config = UniversalConnectorConfig(
            type=request.type,
            name=request.name,
            description=request.description,
            credentials=request.credentials,
            config=vendor_config,
            mappings=request.mappings or FieldMapping(),
        )

        try:
            test_results = await self._run_test(vendor_id, request.name, universal_config)
        except (ConnectorError, ValueError) as e:
            self.logger.error(f"Failed to connect vendor {request.name}: {e}")
            return VendorConnectionResult(
                success=False,
                message="Failed to connect vendor",
                errors=[str(e)],
            )

        if not test_results.success:
            self.logger.warning(
                f"Connection test failed for {request.name}: {'; '.join(test_results.errors)}"
            )
            return VendorConnectionResult(
                success=False,
                vendor_id=vendor_id,
                message="Connection test failed",
                test_results=test_results,
                errors=test_results.errors,
            )

        details = test_results.details
        self.registry.register_vendor(
            VendorRegistryEntry(
                id=vendor_id,
                name=request.name,
                type=RegistryVendorType.CUSTOM,
                description=request.description,
                capabilities=VendorCapabilities(
                    products=details.products,
                    inventory=details.inventory,
                    pricing=details.pricing,
                    orders=details.orders,
                    real_time_sync=False,
                ),
                integration_methods=[IntegrationMethod(request.type.value)],
                config=vendor_config,
                status=RegistryStatus.ACTIVE,
            )
        )
        self.logger.info(f"Successfully connected vendor: {request.name} ({vendor_id})")
        return VendorConnectionResult(
            success=True,
            vendor_id=vendor_id,
            message="Vendor connected successfully",
            test_results=test_results,
        )

    async def test_vendor_connection(
        self,
        vendor_id: str,
        credentials: Any,
    ) -> VendorConnectionTest:
        """Rejoue le test de connexion d'un fournisseur déjà enregistré."""
        entry = self.registry.get_vendor(vendor_id)
        if entry is None:
            return VendorConnectionTest(
                success=False,
                message="Connection test failed",
                errors=[f"Vendor not found: {vendor_id}"],
            )
        try:
            universal_config = self.registry.create_universal_connector_config(
                vendor_id, {"credentials": parse_credentials(credentials)}
            )
            if universal_config is None:
                raise ValueError(f"Vendor removed during test: {vendor_id}")
            return await self._run_test(vendor_id, entry.name, universal_config)
        except (ConnectorError, ValueError, TypeError) as e:
            self.logger.error(f"Failed to test vendor connection {vendor_id}: {e}")
            return VendorConnectionTest(
                success=False,
                message="Connection test failed",
                errors=[str(e)],
            )

    async def _run_test(
        self,
        vendor_id: str,
        name: str,
        universal_config: UniversalConnectorConfig,
    ) -> VendorConnectionTest:
        vendor = Vendor(
            id=vendor_id,
            tenant_id=ONBOARDING_TENANT,
            name=name,
            type=vendor_id,
        )
        connector = UniversalConnector(
            vendor=vendor,
            universal_config=universal_config,
            logger=self.logger,
            **self._connector_kwargs,
        )
        async with connector:
            return await connector.test_connection()

    # ── Assistant ──

    def get_vendor_templates(self) -> list[VendorTemplate]:
        return get_vendor_templates()

    def get_connection_wizard_steps(self, vendor_type: str) -> list[WizardStep]:
        return get_wizard_steps(vendor_type)

    # ── Registry ──

    def get_all_vendors(self) -> list[VendorRegistryEntry]:
        return self.registry.get_all_vendors()

    def search_vendors(self, query: str) -> list[VendorRegistryEntry]:
        return self.registry.search_vendors(query)

    def get_vendor_stats(self) -> dict[str, Any]:
        return self.registry.get_vendor_stats()

    def update_vendor(self, vendor_id: str, updates: dict[str, Any]) -> bool:
        return self.registry.update_vendor(vendor_id, updates)

    def remove_vendor(self, vendor_id: str) -> bool:
        return self.registry.remove_vendor(vendor_id)
