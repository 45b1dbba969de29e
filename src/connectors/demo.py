"""
DemoFallbackConnector — Mode démo EXPLICITE pour les grossistes.

Enveloppe un connecteur réel : si l'appel échoue, renvoie un jeu
d'échantillons au lieu de propager l'erreur. Utile en dev local
ou en démo commerciale, JAMAIS actif par défaut.

Activation :
- par fournisseur : vendor.settings["demo_fallback"] = True
- globalement     : VENDORLINK_DEMO_FALLBACK_ENABLED=true

Chaque repli est loggé en WARNING.
"""

from __future__ import annotations

import time
from typing import Any, Awaitable, Callable, Optional, Sequence, TypeVar

from connectors.base import VendorConnector
from models.sync import VendorOrderData, VendorOrderItem, VendorProductData

T = TypeVar("T")


# ──────────────────────────────────────────────
# ÉCHANTILLONS
# ──────────────────────────────────────────────


def _product(sku, name, price, cost, quantity, description, brand, category, weight, dimensions):
    return VendorProductData(
        sku=sku,
        name=name,
        price=price,
        cost=cost,
        quantity=quantity,
        description=description,
        attributes={
            "brand": brand,
            "category": category,
            "weight": weight,
            "dimensions": dimensions,
        },
    )


DEMO_PRODUCTS: dict[str, list[VendorProductData]] = {
    "ingram_micro": [
        _product("INGRAM-001", "Dell Latitude 5520 Laptop", 899.99, 750.00, 25,
                 '15.6" FHD Business Laptop', "Dell", "Laptops", "1.8kg", '14.2" x 9.3" x 0.7"'),
        _product("INGRAM-002", "HP EliteDesk 800 G5 Desktop", 649.99, 520.00, 15,
                 "SFF Business Desktop", "HP", "Desktops", "3.2kg", '9.7" x 3.9" x 9.7"'),
    ],
    "td_synnex": [
        _product("TDSYNNEX-001", "Lenovo ThinkPad X1 Carbon", 1299.99, 1100.00, 18,
                 '14" Ultrabook Business Laptop', "Lenovo", "Laptops", "1.1kg", '12.7" x 8.5" x 0.6"'),
        _product("TDSYNNEX-002", "Cisco Catalyst 9300 Switch", 2499.99, 2000.00, 5,
                 "48-Port PoE+ Network Switch", "Cisco", "Networking", "8.5kg", '17.3" x 1.7" x 19.1"'),
    ],
    "dh_distributing": [
        _product("DH-001", "Microsoft Surface Pro 8", 1099.99, 900.00, 22,
                 '13" 2-in-1 Tablet/Laptop', "Microsoft", "Tablets", "0.9kg", '11.3" x 8.2" x 0.3"'),
        _product("DH-002", "Samsung Galaxy Tab S9", 799.99, 650.00, 30,
                 '11" Android Tablet', "Samsung", "Tablets", "0.5kg", '10.0" x 6.5" x 0.2"'),
    ],
}

DEMO_INVENTORY: dict[str, dict[str, int]] = {
    "ingram_micro": {"INGRAM-001": 25, "INGRAM-002": 15, "INGRAM-003": 8},
    "td_synnex": {"TDSYNNEX-001": 18, "TDSYNNEX-002": 5, "TDSYNNEX-003": 12},
    "dh_distributing": {"DH-001": 22, "DH-002": 30, "DH-003": 15},
}

DEMO_PRICING: dict[str, dict[str, float]] = {
    "ingram_micro": {"INGRAM-001": 899.99, "INGRAM-002": 649.99, "INGRAM-003": 1299.99},
    "td_synnex": {"TDSYNNEX-001": 1299.99, "TDSYNNEX-002": 2499.99, "TDSYNNEX-003": 899.99},
    "dh_distributing": {"DH-001": 1099.99, "DH-002": 799.99, "DH-003": 599.99},
}

DEMO_ORDER_PREFIX: dict[str, str] = {
    "ingram_micro": "INGRAM-ORDER-",
    "td_synnex": "TDSYNNEX-ORDER-",
    "dh_distributing": "DH-ORDER-",
}

_DEMO_ORDER_QUANTITY: dict[str, int] = {
    "ingram_micro": 2,
    "td_synnex": 1,
    "dh_distributing": 1,
}


def _demo_order(vendor_key: str, order_id: str) -> VendorOrderData:
    product = DEMO_PRODUCTS[vendor_key][0]
    quantity = _DEMO_ORDER_QUANTITY[vendor_key]
    total = round(product.price * quantity, 2)
    return VendorOrderData(
        order_id=order_id,
        items=[
            VendorOrderItem(
                sku=product.sku,
                name=product.name,
                quantity=quantity,
                price=product.price,
                total=total,
            )
        ],
        total_amount=total,
    )


def supports_demo_data(connector_name: str) -> bool:
    return connector_name in DEMO_PRODUCTS


# ──────────────────────────────────────────────
# CONNECTEUR
# ──────────────────────────────────────────────


class DemoFallbackConnector(VendorConnector):
    """Délègue au connecteur réel, replie sur les échantillons en cas d'échec."""

    CONNECTOR_CATEGORY = "demo"

    def __init__(self, inner: VendorConnector):
        if not supports_demo_data(inner.CONNECTOR_NAME):
            raise ValueError(f"No demo data for connector '{inner.CONNECTOR_NAME}'")
        self.CONNECTOR_NAME = inner.CONNECTOR_NAME
        super().__init__(
            vendor=inner.vendor,
            config=inner.config,
            logger=inner.logger,
            sync_batch_size=inner.sync_batch_size,
        )
        self.inner = inner
        self._key = inner.CONNECTOR_NAME

    async def _or_demo(
        self,
        operation: str,
        call: Callable[[], Awaitable[T]],
        demo: Callable[[], T],
    ) -> T:
        try:
            return await call()
        except Exception as e:
            self.logger.warning(
                f"{operation} failed ({e}); serving demo data for {self._key}"
            )
            return demo()

    async def validate_credentials(self) -> bool:
        return await self.inner.validate_credentials()

    async def get_products(
        self, skus: Optional[Sequence[str]] = None
    ) -> list[VendorProductData]:
        def demo() -> list[VendorProductData]:
            products = DEMO_PRODUCTS[self._key]
            if skus:
                return [p for p in products if p.sku in skus]
            return list(products)

        return await self._or_demo("get_products", lambda: self.inner.get_products(skus), demo)

    async def get_product(self, sku: str) -> Optional[VendorProductData]:
        def demo() -> Optional[VendorProductData]:
            return next((p for p in DEMO_PRODUCTS[self._key] if p.sku == sku), None)

        return await self._or_demo("get_product", lambda: self.inner.get_product(sku), demo)

    async def get_inventory(
        self, skus: Optional[Sequence[str]] = None
    ) -> dict[str, int]:
        def demo() -> dict[str, int]:
            table = DEMO_INVENTORY[self._key]
            return {k: v for k, v in table.items() if not skus or k in skus}

        return await self._or_demo("get_inventory", lambda: self.inner.get_inventory(skus), demo)

    async def get_pricing(
        self, skus: Optional[Sequence[str]] = None
    ) -> dict[str, float]:
        def demo() -> dict[str, float]:
            table = DEMO_PRICING[self._key]
            return {k: v for k, v in table.items() if not skus or k in skus}

        return await self._or_demo("get_pricing", lambda: self.inner.get_pricing(skus), demo)

    async def create_order(self, order: dict[str, Any]) -> VendorOrderData:
        def demo() -> VendorOrderData:
            placed = VendorOrderData.model_validate(
                {
                    "order_id": f"{DEMO_ORDER_PREFIX[self._key]}{int(time.time() * 1000)}",
                    "items": order.get("items", []),
                    "total_amount": order.get("totalAmount", order.get("total_amount")),
                }
            )
            if placed.total_amount is None:
                placed = placed.model_copy(update={"total_amount": placed.computed_total})
            return placed

        return await self._or_demo("create_order", lambda: self.inner.create_order(order), demo)

    async def get_order(self, order_id: str) -> Optional[VendorOrderData]:
        def demo() -> Optional[VendorOrderData]:
            if order_id.startswith(DEMO_ORDER_PREFIX[self._key]):
                return _demo_order(self._key, order_id)
            return None

        return await self._or_demo("get_order", lambda: self.inner.get_order(order_id), demo)

    async def get_orders(
        self,
        status: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[VendorOrderData]:
        def demo() -> list[VendorOrderData]:
            return [_demo_order(self._key, f"{DEMO_ORDER_PREFIX[self._key]}001")]

        return await self._or_demo(
            "get_orders", lambda: self.inner.get_orders(status, limit), demo
        )

    def get_capabilities(self) -> dict[str, bool]:
        return self.inner.get_capabilities()

    async def aclose(self) -> None:
        await self.inner.aclose()
