"""
FieldMapper — Normalisation des payloads fournisseurs.

Chaque fournisseur nomme ses champs comme il veut ("item.code",
"ItemNumber", "qty_on_hand"...). Le FieldMapper traduit vers les
formes canoniques à partir d'un FieldMapping déclaratif.

Design decisions :
- Lookup par dot-path, chemin absent → None (jamais d'exception)
- Une transformation custom REMPLACE le mapping du domaine
- Inventaire/prix : le fournisseur peut renvoyer soit un dict
  sku → valeur, soit une liste de records à mapper
"""

from __future__ import annotations

from typing import Any, Optional

from connectors.utils import get_path, safe_float, safe_int
from models.sync import VendorOrderData, VendorOrderItem, VendorProductData
from models.vendor_config import FieldMapping, Transformations


class FieldMapper:
    """Applique un FieldMapping (et d'éventuelles transformations)."""

    def __init__(
        self,
        mappings: Optional[FieldMapping] = None,
        transformations: Optional[Transformations] = None,
    ):
        self.mappings = mappings or FieldMapping()
        self.transformations = transformations or Transformations()

    # ── Produits ──

    def map_product(self, raw: Any) -> VendorProductData:
        if self.transformations.products is not None:
            return self._as_product(self.transformations.products(raw))

        m = self.mappings.products
        return VendorProductData(
            sku=self._field(raw, m, "sku"),
            name=self._field(raw, m, "name"),
            price=safe_float(self._field(raw, m, "price"), None),
            cost=safe_float(self._field(raw, m, "cost"), None),
            quantity=safe_int(self._field(raw, m, "quantity"), None),
            description=self._field(raw, m, "description"),
            attributes=raw if isinstance(raw, dict) else {},
        )

    def map_products(self, records: Any) -> list[VendorProductData]:
        return [self.map_product(r) for r in _as_list(records)]

    # ── Inventaire / prix ──

    def map_inventory(self, payload: Any) -> dict[str, int]:
        if self.transformations.inventory is not None:
            payload = self.transformations.inventory(payload)
            return _coerce_table(payload, safe_int)
        return self._map_table(payload, self.mappings.inventory, "quantity", safe_int)

    def map_pricing(self, payload: Any) -> dict[str, float]:
        if self.transformations.pricing is not None:
            payload = self.transformations.pricing(payload)
            return _coerce_table(payload, safe_float)
        return self._map_table(payload, self.mappings.pricing, "price", safe_float)

    # ── Commandes ──

    def map_order(self, raw: Any) -> VendorOrderData:
        if self.transformations.orders is not None:
            return self._as_order(self.transformations.orders(raw))

        m = self.mappings.orders
        items = get_path(raw, "items") if isinstance(raw, dict) else None
        return VendorOrderData(
            order_id=self._field(raw, m, "order_id"),
            items=[
                VendorOrderItem(
                    sku=self._field(item, m, "sku"),
                    name=self._field(item, m, "name"),
                    quantity=safe_int(self._field(item, m, "quantity"), None),
                    price=safe_float(self._field(item, m, "price"), None),
                    total=safe_float(self._field(item, m, "total"), None),
                )
                for item in _as_list(items)
            ],
            total_amount=safe_float(self._field(raw, m, "total_amount"), None),
        )

    def map_orders(self, records: Any) -> list[VendorOrderData]:
        return [self.map_order(r) for r in _as_list(records)]

    # ── Internes ──

    @staticmethod
    def _field(raw: Any, mapping: dict[str, str], canonical: str) -> Any:
        return get_path(raw, mapping.get(canonical) or canonical)

    def _map_table(self, payload: Any, mapping: dict[str, str], value_field: str, coerce) -> dict:
        if isinstance(payload, dict):
            return _coerce_table(payload, coerce)
        table = {}
        for record in _as_list(payload):
            sku = self._field(record, mapping, "sku")
            if sku is None:
                continue
            value = coerce(self._field(record, mapping, value_field), None)
            if value is not None:
                table[str(sku)] = value
        return table

    def _as_product(self, value: Any) -> VendorProductData:
        if isinstance(value, VendorProductData):
            return value
        return VendorProductData.model_validate(_canonical_numbers(value, ("price", "cost"), ("quantity",)))

    def _as_order(self, value: Any) -> VendorOrderData:
        if isinstance(value, VendorOrderData):
            return value
        return VendorOrderData.model_validate(value)


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, list):
        return value
    return []


def _coerce_table(payload: Any, coerce) -> dict:
    if not isinstance(payload, dict):
        return {}
    table = {}
    for sku, raw_value in payload.items():
        value = coerce(raw_value, None)
        if value is not None:
            table[str(sku)] = value
    return table


def _canonical_numbers(value: Any, floats: tuple, ints: tuple) -> dict[str, Any]:
    data = dict(value) if isinstance(value, dict) else {}
    for key in floats:
        if key in data:
            data[key] = safe_float(data[key], None)
    for key in ints:
        if key in data:
            data[key] = safe_int(data[key], None)
    return data
