"""
VendorRegistryEntry — Profil fournisseur réutilisable du registry.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from models.vendor_config import VendorConfig


class RegistryVendorType(str, Enum):
    DISTRIBUTOR = "distributor"
    MANUFACTURER = "manufacturer"
    WHOLESALER = "wholesaler"
    CUSTOM = "custom"


class RegistryStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    TESTING = "testing"


class IntegrationMethod(str, Enum):
    API = "api"
    SFTP = "sftp"
    EDI = "edi"
    WEBHOOK = "webhook"


class VendorCapabilities(BaseModel):
    model_config = ConfigDict(frozen=True)

    products: bool = False
    inventory: bool = False
    pricing: bool = False
    orders: bool = False
    real_time_sync: bool = False

    def supports(self, capability: str) -> bool:
        return bool(getattr(self, capability, False))


class VendorContact(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class VendorRegistryEntry(BaseModel):
    """Entrée du registry. Immuable : une mise à jour remplace l'entrée."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    type: RegistryVendorType = RegistryVendorType.CUSTOM
    description: str = ""
    website: Optional[str] = None
    contact: VendorContact = Field(default_factory=VendorContact)
    capabilities: VendorCapabilities = Field(default_factory=VendorCapabilities)
    integration_methods: list[IntegrationMethod] = Field(default_factory=list)
    config: VendorConfig
    status: RegistryStatus = RegistryStatus.ACTIVE
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    def matches(self, query: str) -> bool:
        """Recherche plein texte, insensible à la casse."""
        needle = query.lower()
        return (
            needle in self.name.lower()
            or needle in self.description.lower()
            or needle in self.type.value.lower()
        )
