"""
Vendor — L'enregistrement fournisseur fourni par le service propriétaire.

Ce module ne persiste rien : il reçoit un Vendor (déjà isolé par tenant
côté persistance) et les réglages du connecteur.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.credentials import BaseCredentials, parse_credentials


class VendorType(str, Enum):
    """Types de fournisseurs connus du service."""

    INGRAM_MICRO = "ingram_micro"
    TD_SYNNEX = "td_synnex"
    DH_DISTRIBUTING = "dh_distributing"
    SP_RICHARDS = "sp_richards"
    WYNIT = "wynit"
    UNIVERSAL = "universal"
    OTHER = "other"


class VendorStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class Vendor(BaseModel):
    """Enregistrement fournisseur d'un tenant.

    `type` reste une string libre : un fournisseur inconnu du
    service doit pouvoir arriver jusqu'à la factory, qui décide.
    """

    id: str
    tenant_id: str
    vendor_id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=100)
    type: str
    status: VendorStatus = VendorStatus.ACTIVE
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    settings: dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("type")
    @classmethod
    def normalize_type(cls, v: str) -> str:
        return v.strip().lower()


class VendorConnectorConfig(BaseModel):
    """Réglages d'une instance de connecteur."""

    model_config = ConfigDict(frozen=True)

    credentials: BaseCredentials
    settings: dict[str, Any] = Field(default_factory=dict)
    timeout: float = Field(default=30.0, gt=0, description="Timeout HTTP (s)")
    retry_attempts: int = Field(default=3, ge=1, le=10)
    retry_base_delay: float = Field(
        default=1.0,
        ge=0,
        description="Délai de base du backoff : base * 2^tentative",
    )

    @field_validator("credentials", mode="before")
    @classmethod
    def coerce_credentials(cls, v: Any) -> BaseCredentials:
        return parse_credentials(v)
