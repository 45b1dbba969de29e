"""
Formes canoniques retournées au service propriétaire.

Les connecteurs ne laissent JAMAIS sortir du JSON fournisseur brut :
tout passe par ces modèles.

Design decisions :
- Un champ mappé absent vaut None (jamais d'exception au mapping)
- Les montants/quantités sont convertis en amont, par la couche de mapping
- SyncResult est figé une fois construit
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _to_optional_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    return str(v)


# ──────────────────────────────────────────────
# PRODUITS
# ──────────────────────────────────────────────


class VendorProductData(BaseModel):
    sku: Optional[str] = None
    name: Optional[str] = None
    price: Optional[float] = None
    cost: Optional[float] = None
    quantity: Optional[int] = None
    description: Optional[str] = None
    attributes: dict[str, Any] = Field(default_factory=dict)

    @field_validator("sku", "name", "description", mode="before")
    @classmethod
    def coerce_str(cls, v: Any) -> Optional[str]:
        return _to_optional_str(v)

    @field_validator("attributes", mode="before")
    @classmethod
    def coerce_attributes(cls, v: Any) -> dict[str, Any]:
        return v if isinstance(v, dict) else {}


# ──────────────────────────────────────────────
# COMMANDES
# ──────────────────────────────────────────────


class VendorOrderItem(BaseModel):
    sku: Optional[str] = None
    name: Optional[str] = None
    quantity: Optional[int] = None
    price: Optional[float] = None
    total: Optional[float] = None

    @field_validator("sku", "name", mode="before")
    @classmethod
    def coerce_str(cls, v: Any) -> Optional[str]:
        return _to_optional_str(v)


class VendorOrderData(BaseModel):
    order_id: Optional[str] = None
    items: list[VendorOrderItem] = Field(default_factory=list)
    total_amount: Optional[float] = None

    @field_validator("order_id", mode="before")
    @classmethod
    def coerce_order_id(cls, v: Any) -> Optional[str]:
        return _to_optional_str(v)

    @field_validator("items", mode="before")
    @classmethod
    def coerce_items(cls, v: Any) -> list[Any]:
        return v if isinstance(v, list) else []

    @property
    def computed_total(self) -> float:
        """Somme des lignes, quand le fournisseur n'envoie pas de total."""
        return round(sum(item.total or 0.0 for item in self.items), 2)


# ──────────────────────────────────────────────
# RÉSULTATS
# ──────────────────────────────────────────────


class SyncResult(BaseModel):
    """Résultat d'une synchro d'un domaine.

    items_processed < items_total = résultat partiel
    (certains lots de SKUs ont échoué).
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    items_processed: int = Field(default=0, ge=0)
    items_total: int = Field(default=0, ge=0)
    error: Optional[str] = None
    errors: list[str] = Field(default_factory=list)
    data: Any = None
    completed_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=timezone.utc)
    )

    @property
    def is_partial(self) -> bool:
        return self.success and self.items_processed < self.items_total

    @classmethod
    def failed(cls, error: str) -> "SyncResult":
        return cls(success=False, error=error, errors=[error])


class ConnectionTestDetails(BaseModel):
    authentication: bool = False
    products: bool = False
    inventory: bool = False
    pricing: bool = False
    orders: bool = False

    @property
    def any_data_capability(self) -> bool:
        return self.products or self.inventory or self.pricing or self.orders


class VendorConnectionTest(BaseModel):
    """Diagnostic multi-capacités, utilisé à l'onboarding uniquement."""

    success: bool = False
    message: str = ""
    details: ConnectionTestDetails = Field(default_factory=ConnectionTestDetails)
    errors: list[str] = Field(default_factory=list)
