"""
VendorRegistry — Catalogue en mémoire des profils fournisseurs.

Permet à la factory et à l'onboarding de :
1. Retrouver le profil d'un fournisseur connu
2. Construire une UniversalConnectorConfig prête à l'emploi
3. Enregistrer dynamiquement un fournisseur custom

Design decisions :
- Objet construit explicitement et injecté (pas de singleton global)
- Logger obligatoire à la construction
- Écritures sérialisées par un verrou, lectures sur des snapshots
- Entrées immuables : update = remplacement, updated_at jamais en arrière
- Rien n'est persisté ici
"""

from __future__ import annotations

import logging
import threading
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Optional, Union

from connectors.base import RegistryNotInitializedError
from connectors.catalog import default_entries
from models.credentials import parse_credentials
from models.registry_entry import (
    IntegrationMethod,
    VendorCapabilities,
    VendorRegistryEntry,
)
from models.vendor_config import FieldMapping, UniversalConnectorConfig

_IMMUTABLE_FIELDS = {"id", "created_at"}


class VendorRegistry:
    """Registre des fournisseurs.

    Usage :
        registry = VendorRegistry(logger=logging.getLogger("vendorlink.registry"))

        registry.get_vendor("sp-richards")
        registry.search_vendors("office")
        registry.create_universal_connector_config(
            "newwave", {"credentials": {"apiKey": "..."}}
        )
    """

    def __init__(
        self,
        logger: Optional[logging.Logger],
        seed_defaults: bool = True,
    ):
        if logger is None:
            raise RegistryNotInitializedError()
        self.logger = logger
        self._vendors: dict[str, VendorRegistryEntry] = {}
        self._lock = threading.Lock()
        if seed_defaults:
            for entry in default_entries():
                self.register_vendor(entry)

    # ── Écritures ──

    def register_vendor(
        self,
        vendor: Union[VendorRegistryEntry, dict[str, Any]],
    ) -> VendorRegistryEntry:
        entry = (
            vendor
            if isinstance(vendor, VendorRegistryEntry)
            else VendorRegistryEntry.model_validate(vendor)
        )
        with self._lock:
            self._vendors[entry.id] = entry
        self.logger.info(f"Registered vendor: {entry.name} ({entry.id})")
        return entry

    def update_vendor(self, vendor_id: str, updates: dict[str, Any]) -> bool:
        """Fusionne `updates` dans l'entrée. False si l'id est inconnu."""
        with self._lock:
            current = self._vendors.get(vendor_id)
            if current is None:
                return False
            data = current.model_dump()
            data.update(
                {k: v for k, v in updates.items() if k not in _IMMUTABLE_FIELDS}
            )
            now = datetime.now(tz=timezone.utc)
            data["updated_at"] = max(now, current.updated_at)
            updated = VendorRegistryEntry.model_validate(data)
            self._vendors[vendor_id] = updated
        self.logger.info(f"Updated vendor: {updated.name} ({vendor_id})")
        return True

    def remove_vendor(self, vendor_id: str) -> bool:
        with self._lock:
            removed = self._vendors.pop(vendor_id, None)
        if removed is None:
            return False
        self.logger.info(f"Removed vendor: {removed.name} ({vendor_id})")
        return True

    # ── Lectures ──

    def _snapshot(self) -> list[VendorRegistryEntry]:
        return list(self._vendors.values())

    def get_vendor(self, vendor_id: str) -> Optional[VendorRegistryEntry]:
        return self._vendors.get(vendor_id)

    def get_all_vendors(self) -> list[VendorRegistryEntry]:
        return self._snapshot()

    def get_vendors_by_type(self, vendor_type: str) -> list[VendorRegistryEntry]:
        wanted = getattr(vendor_type, "value", vendor_type)
        return [v for v in self._snapshot() if v.type.value == wanted]

    def get_vendors_by_capability(self, capability: str) -> list[VendorRegistryEntry]:
        if capability not in VendorCapabilities.model_fields:
            raise ValueError(
                f"Unknown capability '{capability}'. "
                f"Known: {sorted(VendorCapabilities.model_fields)}"
            )
        return [v for v in self._snapshot() if v.capabilities.supports(capability)]

    def get_vendors_by_integration_method(
        self, method: Union[str, IntegrationMethod]
    ) -> list[VendorRegistryEntry]:
        wanted = IntegrationMethod(method)
        return [v for v in self._snapshot() if wanted in v.integration_methods]

    def search_vendors(self, query: str) -> list[VendorRegistryEntry]:
        return [v for v in self._snapshot() if v.matches(query)]

    def find_for_vendor_type(self, vendor_type: str) -> Optional[VendorRegistryEntry]:
        """Profil correspondant à un type de Vendor ("sp_richards" → "sp-richards")."""
        key = vendor_type.strip().lower()
        return self.get_vendor(key) or self.get_vendor(key.replace("_", "-"))

    def get_vendor_stats(self) -> dict[str, Any]:
        """Résumé pour le dashboard."""
        vendors = self._snapshot()
        by_method: Counter[str] = Counter()
        for vendor in vendors:
            by_method.update(m.value for m in vendor.integration_methods)
        return {
            "total": len(vendors),
            "by_type": dict(Counter(v.type.value for v in vendors)),
            "by_status": dict(Counter(v.status.value for v in vendors)),
            "by_integration_method": dict(by_method),
        }

    # ── Config universelle ──

    def create_universal_connector_config(
        self,
        vendor_id: str,
        overrides: Optional[dict[str, Any]] = None,
    ) -> Optional[UniversalConnectorConfig]:
        """Config du connecteur universel pour un fournisseur enregistré.

        Returns:
            None si l'id est inconnu (jamais d'objet par défaut).
        """
        entry = self.get_vendor(vendor_id)
        if entry is None:
            return None

        data: dict[str, Any] = {
            "type": entry.config.type,
            "name": entry.name,
            "description": entry.description,
            "credentials": None,
            "config": entry.config,
            "mappings": FieldMapping(),
        }
        data.update(overrides or {})
        if data.get("credentials") is not None:
            data["credentials"] = parse_credentials(data["credentials"])
        return UniversalConnectorConfig(**data)

    def __len__(self) -> int:
        return len(self._vendors)

    def __contains__(self, vendor_id: object) -> bool:
        return vendor_id in self._vendors
