"""
UniversalConnector — Un seul connecteur pour tout fournisseur décrit par config.

Le protocole (api, sftp, edi, webhook) est choisi UNE fois, à la
construction, depuis config.type. Ajouter un protocole = ajouter
une entrée dans PROTOCOL_STRATEGIES, rien d'autre.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from connectors.base import ConfigurationError, VendorConnector, retryable
from connectors.mapping import FieldMapper
from connectors.universal.api import ApiStrategy
from connectors.universal.edi import EdiStrategy
from connectors.universal.sftp import SftpStrategy
from connectors.universal.strategy import ProtocolStrategy
from connectors.universal.webhook import WebhookStrategy
from models.credentials import BaseCredentials, CustomCredentials
from models.sync import (
    ConnectionTestDetails,
    VendorConnectionTest,
    VendorOrderData,
    VendorProductData,
)
from models.vendor import Vendor, VendorConnectorConfig
from models.vendor_config import ConnectorType, UniversalConnectorConfig

PROTOCOL_STRATEGIES: dict[ConnectorType, type[ProtocolStrategy]] = {
    ConnectorType.API: ApiStrategy,
    ConnectorType.SFTP: SftpStrategy,
    ConnectorType.EDI: EdiStrategy,
    ConnectorType.WEBHOOK: WebhookStrategy,
}


class UniversalConnector(VendorConnector):
    """Connecteur piloté par UniversalConnectorConfig."""

    CONNECTOR_NAME = "universal"
    CONNECTOR_CATEGORY = "universal"

    def __init__(
        self,
        vendor: Vendor,
        universal_config: UniversalConnectorConfig,
        config: Optional[VendorConnectorConfig] = None,
        logger: Optional[logging.Logger] = None,
        strategy_options: Optional[dict[ConnectorType, dict[str, Any]]] = None,
        **kwargs: Any,
    ):
        if config is None:
            config = VendorConnectorConfig(
                credentials=universal_config.credentials or CustomCredentials(),
            )
        super().__init__(vendor=vendor, config=config, logger=logger, **kwargs)
        self.universal_config = universal_config
        self.credentials: BaseCredentials = universal_config.credentials or config.credentials
        self.mapper = FieldMapper(universal_config.mappings, universal_config.transformations)

        strategy_cls = PROTOCOL_STRATEGIES.get(universal_config.type)
        if strategy_cls is None:
            raise ConfigurationError(
                connector_name=universal_config.name,
                message=f"No protocol strategy for connector type '{universal_config.type.value}'",
            )
        options = (strategy_options or {}).get(universal_config.type, {})
        self._strategy: ProtocolStrategy = strategy_cls(self, **options)

    @property
    def protocol(self) -> ConnectorType:
        return self.universal_config.type

    @property
    def strategy(self) -> ProtocolStrategy:
        return self._strategy

    # ── Contrat ──

    async def validate_credentials(self) -> bool:
        return await self._strategy.validate_credentials()

    @retryable
    async def get_products(
        self, skus: Optional[Sequence[str]] = None
    ) -> list[VendorProductData]:
        return await self._strategy.get_products(skus)

    async def get_product(self, sku: str) -> Optional[VendorProductData]:
        products = await self.get_products([sku])
        return products[0] if products else None

    @retryable
    async def get_inventory(
        self, skus: Optional[Sequence[str]] = None
    ) -> dict[str, int]:
        return await self._strategy.get_inventory(skus)

    @retryable
    async def get_pricing(
        self, skus: Optional[Sequence[str]] = None
    ) -> dict[str, float]:
        return await self._strategy.get_pricing(skus)

    async def create_order(self, order: dict[str, Any]) -> VendorOrderData:
        return await self._strategy.create_order(order)

    @retryable
    async def get_order(self, order_id: str) -> Optional[VendorOrderData]:
        return await self._strategy.get_order(order_id)

    @retryable
    async def get_orders(
        self,
        status: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[VendorOrderData]:
        return await self._strategy.get_orders(status, limit)

    async def aclose(self) -> None:
        await self._strategy.aclose()
        await super().aclose()

    # ── Diagnostic ──

    async def test_connection(self) -> VendorConnectionTest:
        """Auth, puis chaque domaine sondé indépendamment.

        Succès = auth OK ET au moins un domaine OK. Sans retry :
        un diagnostic doit rester rapide. Rejouable sans effet de bord.
        """
        details = ConnectionTestDetails()
        errors: list[str] = []

        try:
            details.authentication = await self.validate_credentials()
        except Exception as e:
            errors.append(f"Authentication error: {e}")
        if not details.authentication:
            errors.append("Authentication failed")
            return VendorConnectionTest(
                success=False,
                message="Authentication failed",
                details=details,
                errors=errors,
            )

        probes = (
            ("products", "Products", lambda: self._strategy.get_products(["test"])),
            ("inventory", "Inventory", lambda: self._strategy.get_inventory(["test"])),
            ("pricing", "Pricing", lambda: self._strategy.get_pricing(["test"])),
            ("orders", "Orders", lambda: self._strategy.get_orders(None, 1)),
        )
        for field, label, probe in probes:
            try:
                await probe()
                setattr(details, field, True)
            except Exception as e:
                errors.append(f"{label} test failed: {e}")

        success = details.authentication and details.any_data_capability
        self.logger.info(
            f"Connection test for {self.universal_config.name}: "
            f"{'ok' if success else 'failed'} ({len(errors)} errors)"
        )
        return VendorConnectionTest(
            success=success,
            message="Connection test successful" if success else "Connection test failed",
            details=details,
            errors=errors,
        )

    # ── Metadata ──

    def get_capabilities(self) -> dict[str, bool]:
        features = self.universal_config.config.features
        data = self._strategy.SUPPORTS_DATA
        return {
            "products": data and features.product_catalog,
            "inventory": data,
            "pricing": data,
            "orders": data and features.order_management,
            "real_time_sync": features.webhooks
            or (data and (features.real_time_inventory or features.real_time_pricing)),
        }

    def get_universal_config(self) -> UniversalConnectorConfig:
        return self.universal_config

    def __repr__(self) -> str:
        return (
            f"<UniversalConnector vendor={self.vendor.id} "
            f"name={self.universal_config.name} protocol={self.protocol.value}>"
        )
