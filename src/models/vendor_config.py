"""
VendorConfig — Forme d'intégration d'un fournisseur.

Décrit COMMENT joindre un fournisseur : protocole, mode d'auth,
rate limits, endpoints, features, formats de données.
Aucun comportement ici, seulement de la donnée validée.

Design decisions :
- Modèles immuables : un connecteur construit sur une config
  ne la voit jamais changer
- FieldMapping = canonique → chemin vendor (dot-path)
- Les transformations custom remplacent le mapping par domaine
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.credentials import VendorCredentials


class ConnectorType(str, Enum):
    """Protocole d'intégration."""

    API = "api"
    SFTP = "sftp"
    EDI = "edi"
    WEBHOOK = "webhook"
    CUSTOM = "custom"


class AuthenticationMode(str, Enum):
    OAUTH2 = "oauth2"
    API_KEY = "api_key"
    BASIC = "basic"
    SFTP_KEY = "sftp_key"
    EDI = "edi"
    CUSTOM = "custom"


class DataFormat(str, Enum):
    JSON = "json"
    XML = "xml"
    CSV = "csv"
    EDI = "edi"


class DataDomain(str, Enum):
    """Les 4 domaines synchronisables, traités indépendamment."""

    PRODUCTS = "products"
    INVENTORY = "inventory"
    PRICING = "pricing"
    ORDERS = "orders"


# ──────────────────────────────────────────────
# BLOCS DE CONFIG
# ──────────────────────────────────────────────


class RateLimits(BaseModel):
    model_config = ConfigDict(frozen=True)

    requests_per_minute: int = Field(default=30, ge=1)
    requests_per_hour: int = Field(default=500, ge=1)
    requests_per_day: int = Field(default=5000, ge=1)


class VendorEndpoints(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_url: str = ""
    products: Optional[str] = None
    inventory: Optional[str] = None
    pricing: Optional[str] = None
    orders: Optional[str] = None
    auth: Optional[str] = None

    def path_for(self, domain: DataDomain, default: str) -> str:
        return getattr(self, domain.value) or default


class VendorFeatures(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_catalog: bool = True
    real_time_inventory: bool = False
    real_time_pricing: bool = True
    order_management: bool = True
    bulk_operations: bool = False
    webhooks: bool = False


class DataFormats(BaseModel):
    model_config = ConfigDict(frozen=True)

    products: DataFormat = DataFormat.JSON
    inventory: DataFormat = DataFormat.JSON
    pricing: DataFormat = DataFormat.JSON
    orders: DataFormat = DataFormat.JSON


class VendorConfig(BaseModel):
    """Configuration complète d'un fournisseur."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: ConnectorType = ConnectorType.API
    authentication: AuthenticationMode = AuthenticationMode.API_KEY
    rate_limits: RateLimits = Field(default_factory=RateLimits)
    endpoints: VendorEndpoints = Field(default_factory=VendorEndpoints)
    features: VendorFeatures = Field(default_factory=VendorFeatures)
    data_formats: DataFormats = Field(default_factory=DataFormats)


# ──────────────────────────────────────────────
# MAPPING
# ──────────────────────────────────────────────

DEFAULT_PRODUCT_MAPPING: dict[str, str] = {
    "sku": "sku",
    "name": "name",
    "price": "price",
    "cost": "cost",
    "quantity": "quantity",
    "description": "description",
}

DEFAULT_INVENTORY_MAPPING: dict[str, str] = {
    "sku": "sku",
    "quantity": "quantity",
}

DEFAULT_PRICING_MAPPING: dict[str, str] = {
    "sku": "sku",
    "price": "price",
}

DEFAULT_ORDER_MAPPING: dict[str, str] = {
    "order_id": "orderId",
    "sku": "sku",
    "name": "name",
    "quantity": "quantity",
    "price": "price",
    "total": "total",
    "total_amount": "totalAmount",
}


class FieldMapping(BaseModel):
    """Nom canonique → chemin du champ chez le fournisseur ("item.code")."""

    model_config = ConfigDict(frozen=True)

    products: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_PRODUCT_MAPPING)
    )
    inventory: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_INVENTORY_MAPPING)
    )
    pricing: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_PRICING_MAPPING)
    )
    orders: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_ORDER_MAPPING)
    )


class Transformations(BaseModel):
    """Transformations custom par domaine.

    products / orders : appelées sur chaque record brut.
    inventory / pricing : appelées sur le payload complet,
    doivent retourner un dict sku → valeur.
    """

    model_config = ConfigDict(frozen=True)

    products: Optional[Callable[[Any], Any]] = None
    inventory: Optional[Callable[[Any], Any]] = None
    pricing: Optional[Callable[[Any], Any]] = None
    orders: Optional[Callable[[Any], Any]] = None


class UniversalConnectorConfig(BaseModel):
    """Tout ce qu'il faut au connecteur universel pour servir un fournisseur."""

    model_config = ConfigDict(frozen=True)

    type: ConnectorType = ConnectorType.API
    name: str
    description: str = ""
    credentials: Optional[VendorCredentials] = None
    config: VendorConfig
    mappings: FieldMapping = Field(default_factory=FieldMapping)
    transformations: Optional[Transformations] = None
