"""
ConnectorFactory — Choisit et instancie le connecteur d'un Vendor.

Ordre de résolution :
1. Profil présent dans le registry        → UniversalConnector
2. Connecteur dédié (table _CONNECTOR_MAP) → import paresseux
3. "universal" / "other"                  → UniversalConnector ad hoc
   construit depuis les settings du vendor (base_url obligatoire)
4. Sinon                                  → ConfigurationError

Design decisions :
- Lazy import pour ne pas charger tous les connecteurs au boot
- Le mode démo n'est JAMAIS implicite (voir connectors/demo.py)
- Retry, timeout et batch viennent des Settings, une seule source
"""

from __future__ import annotations

import importlib
import logging
from typing import Any, Optional

from connectors.base import ConfigurationError, VendorConnector
from connectors.demo import DemoFallbackConnector, supports_demo_data
from connectors.registry import VendorRegistry
from connectors.universal import UniversalConnector
from models.credentials import BaseCredentials
from models.vendor import Vendor, VendorConnectorConfig, VendorType
from models.vendor_config import (
    ConnectorType,
    FieldMapping,
    RateLimits,
    UniversalConnectorConfig,
    VendorConfig,
    VendorEndpoints,
    VendorFeatures,
)
from services.config import Settings, get_settings

# Mapping complet : vendor type → (module_path, class_name)
_CONNECTOR_MAP: dict[str, tuple[str, str]] = {
    VendorType.INGRAM_MICRO.value: ("connectors.distributors.ingram_micro", "IngramMicroConnector"),
    VendorType.TD_SYNNEX.value: ("connectors.distributors.td_synnex", "TDSynnexConnector"),
    VendorType.DH_DISTRIBUTING.value: ("connectors.distributors.dh_distributing", "DHConnector"),
    VendorType.SP_RICHARDS.value: ("connectors.distributors.sp_richards", "SPRichardsConnector"),
}

_UNIVERSAL_TYPES = {VendorType.UNIVERSAL.value, VendorType.OTHER.value}

_DISPLAY_NAMES: dict[str, str] = {
    VendorType.INGRAM_MICRO.value: "Ingram Micro",
    VendorType.TD_SYNNEX.value: "TD Synnex",
    VendorType.DH_DISTRIBUTING.value: "D&H Distributing",
    VendorType.SP_RICHARDS.value: "SP Richards",
    VendorType.WYNIT.value: "Wynit",
    VendorType.UNIVERSAL.value: "Universal",
    VendorType.OTHER.value: "Other",
}

_DESCRIPTIONS: dict[str, str] = {
    VendorType.INGRAM_MICRO.value: "Global technology distributor with comprehensive product catalog",
    VendorType.TD_SYNNEX.value: (
        "Technology solutions aggregator with extensive partner network "
        "(merged Tech Data and Synnex)"
    ),
    VendorType.DH_DISTRIBUTING.value: (
        "Specialized distributor focusing on consumer electronics and accessories"
    ),
    VendorType.SP_RICHARDS.value: "Wholesale distributor of office products and supplies",
    VendorType.WYNIT.value: "Consumer electronics and accessories distributor",
    VendorType.UNIVERSAL.value: "Configuration-driven integration (API, SFTP, EDI, webhook)",
    VendorType.OTHER.value: "Custom vendor integration",
}


class ConnectorFactory:
    """Fabrique de connecteurs.

    Usage :
        factory = ConnectorFactory(registry)
        connector = factory.create_connector(vendor, {"apiKey": "..."})
        async with connector:
            result = await connector.sync_inventory(["SKU-1"])
    """

    def __init__(
        self,
        registry: VendorRegistry,
        settings: Optional[Settings] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.registry = registry
        self._settings = settings or get_settings()
        self.logger = logger or logging.getLogger("vendorlink.connectors.factory")

    # ── Création ──

    def create_connector(
        self,
        vendor: Vendor,
        credentials: Any,
        settings: Optional[dict[str, Any]] = None,
        **connector_kwargs: Any,
    ) -> VendorConnector:
        """Instancie le connecteur du vendor.

        Args:
            vendor: Enregistrement fournisseur (vendor.type décide)
            credentials: Variante typée ou dict (camelCase historique accepté)
            settings: Réglages du connecteur, prioritaires sur vendor.settings
            connector_kwargs: Transmis au constructeur (sleep, http_transport, ...)

        Raises:
            ConfigurationError: type non supporté ou config incomplète
        """
        config = self._connector_config(vendor, credentials, settings)
        connector_kwargs.setdefault("sync_batch_size", self._settings.sync_batch_size)
        vendor_type = vendor.type

        entry = self.registry.find_for_vendor_type(vendor_type)
        if entry is not None:
            universal_config = self.registry.create_universal_connector_config(
                entry.id, {"credentials": config.credentials}
            )
            self.logger.info(f"Vendor {vendor.id}: universal connector from registry '{entry.id}'")
            return self._universal(vendor, universal_config, config, connector_kwargs)

        if vendor_type == VendorType.WYNIT.value:
            raise ConfigurationError(
                connector_name=vendor_type,
                message="Wynit connector not yet implemented",
            )

        if vendor_type in _CONNECTOR_MAP:
            connector = self._dedicated(vendor_type, vendor, config, connector_kwargs)
            self.logger.info(f"Vendor {vendor.id}: dedicated connector {connector.CONNECTOR_NAME}")
            return self._maybe_demo(connector, config)

        if vendor_type in _UNIVERSAL_TYPES:
            universal_config = self._adhoc_universal_config(vendor, config)
            self.logger.info(f"Vendor {vendor.id}: ad hoc universal connector")
            return self._universal(vendor, universal_config, config, connector_kwargs)

        raise ConfigurationError(
            connector_name=vendor_type,
            message=f"Unsupported vendor type: {vendor_type}",
        )

    def _connector_config(
        self,
        vendor: Vendor,
        credentials: Any,
        settings: Optional[dict[str, Any]],
    ) -> VendorConnectorConfig:
        return VendorConnectorConfig(
            credentials=credentials,
            settings={**vendor.settings, **(settings or {})},
            timeout=self._settings.http_timeout_seconds,
            retry_attempts=self._settings.retry_attempts,
            retry_base_delay=self._settings.retry_base_delay_seconds,
        )

    def _dedicated(
        self,
        vendor_type: str,
        vendor: Vendor,
        config: VendorConnectorConfig,
        connector_kwargs: dict[str, Any],
    ) -> VendorConnector:
        module_path, class_name = _CONNECTOR_MAP[vendor_type]
        try:
            module = importlib.import_module(module_path)
            connector_class = getattr(module, class_name)
        except (ImportError, AttributeError) as e:
            raise ConfigurationError(
                connector_name=vendor_type,
                message=f"Cannot load {module_path}.{class_name}: {e}",
                raw_error=e,
            )
        if vendor_type == VendorType.SP_RICHARDS.value:
            connector_kwargs.setdefault(
                "token_refresh_skew", self._settings.token_refresh_skew_seconds
            )
        return connector_class(vendor=vendor, config=config, **connector_kwargs)

    def _universal(
        self,
        vendor: Vendor,
        universal_config: UniversalConnectorConfig,
        config: VendorConnectorConfig,
        connector_kwargs: dict[str, Any],
    ) -> UniversalConnector:
        connector_kwargs.setdefault(
            "strategy_options",
            {
                ConnectorType.API: {
                    "token_refresh_skew": self._settings.token_refresh_skew_seconds,
                },
                ConnectorType.SFTP: {
                    "connect_timeout": self._settings.sftp_connect_timeout_seconds,
                },
            },
        )
        return UniversalConnector(
            vendor=vendor,
            universal_config=universal_config,
            config=config,
            **connector_kwargs,
        )

    def _adhoc_universal_config(
        self,
        vendor: Vendor,
        config: VendorConnectorConfig,
    ) -> UniversalConnectorConfig:
        """Config universelle décrite entièrement par vendor.settings."""
        options = config.settings
        connector_type = ConnectorType(options.get("connector_type", ConnectorType.API.value))
        base_url = options.get("base_url") or config.credentials.endpoint
        if connector_type == ConnectorType.API and not base_url:
            raise ConfigurationError(
                connector_name=vendor.type,
                message="Universal API vendor requires settings['base_url']",
            )

        vendor_config = VendorConfig(
            name=options.get("name", vendor.name),
            type=connector_type,
            rate_limits=RateLimits(**options.get("rate_limits", {})),
            endpoints=VendorEndpoints(**{**options.get("endpoints", {}), "base_url": base_url or ""}),
            features=VendorFeatures(**options.get("features", {})),
        )
        return UniversalConnectorConfig(
            type=connector_type,
            name=vendor_config.name,
            description=options.get("description", ""),
            credentials=config.credentials,
            config=vendor_config,
            mappings=FieldMapping(**options.get("mappings", {})),
        )

    def _maybe_demo(
        self,
        connector: VendorConnector,
        config: VendorConnectorConfig,
    ) -> VendorConnector:
        enabled = config.settings.get("demo_fallback", self._settings.demo_fallback_enabled)
        if not enabled:
            return connector
        if not supports_demo_data(connector.CONNECTOR_NAME):
            self.logger.warning(f"Demo fallback requested but no demo data for {connector.CONNECTOR_NAME}")
            return connector
        self.logger.warning(f"Demo fallback ENABLED for {connector.CONNECTOR_NAME}")
        return DemoFallbackConnector(connector)

    # ── Metadata ──

    def get_supported_vendor_types(self) -> list[str]:
        """Types instanciables : connecteurs dédiés + universel + profils du registry."""
        supported = list(_CONNECTOR_MAP) + sorted(_UNIVERSAL_TYPES)
        supported += [v.id for v in self.registry.get_all_vendors() if v.id not in supported]
        return supported

    def is_vendor_type_supported(self, vendor_type: str) -> bool:
        key = vendor_type.strip().lower()
        return (
            key in _CONNECTOR_MAP
            or key in _UNIVERSAL_TYPES
            or self.registry.find_for_vendor_type(key) is not None
        )

    def get_vendor_type_display_name(self, vendor_type: str) -> str:
        if vendor_type in _DISPLAY_NAMES:
            return _DISPLAY_NAMES[vendor_type]
        entry = self.registry.find_for_vendor_type(vendor_type)
        return entry.name if entry else vendor_type

    def get_vendor_type_description(self, vendor_type: str) -> str:
        if vendor_type in _DESCRIPTIONS:
            return _DESCRIPTIONS[vendor_type]
        entry = self.registry.find_for_vendor_type(vendor_type)
        return entry.description if entry else "Vendor integration"
