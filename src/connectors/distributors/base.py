"""
DistributorConnector — Socle des connecteurs API dédiés aux grossistes.

Ingram Micro, TD Synnex et D&H exposent la même forme d'API :
- POST /auth/validate      → {"valid": true}
- GET  <produits>?skus=... → {"products": [...]}
- GET  /inventory          → {"inventory": [{"sku", "quantity"}]}
- GET  /pricing            → {"pricing": [{"sku", "price"}]}
- GET/POST /orders         → {"orders": [...]} / commande créée

Chaque sous-classe ne déclare que ses constantes (URL, chemins).

Design decisions :
- Les échecs PROPAGENT (pas de données de démo silencieuses,
  voir connectors/demo.py pour le mode démo explicite)
- 404 sur un lookup unitaire → None
- Pas de retry sur create_order (non idempotent)
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

import httpx

from connectors.base import (
    ConfigurationError,
    ConnectorError,
    VendorConnector,
    check_response,
    decode_json,
    retryable,
)
from connectors.utils import join_skus, safe_float, safe_int
from models.credentials import ApiKeyCredentials, BaseCredentials, OAuth2Credentials
from models.sync import VendorOrderData, VendorOrderItem, VendorProductData


class DistributorConnector(VendorConnector):
    """Connecteur REST d'un grossiste nommé."""

    CONNECTOR_CATEGORY = "distributor"

    DEFAULT_BASE_URL: str = ""
    PRODUCTS_PATH: str = "/products"
    INVENTORY_PATH: str = "/inventory"
    PRICING_PATH: str = "/pricing"
    ORDERS_PATH: str = "/orders"
    AUTH_VALIDATE_PATH: str = "/auth/validate"
    DEFAULT_ORDERS_LIMIT: Optional[int] = 50

    PRODUCT_ATTRIBUTES: tuple[str, ...] = ("brand", "category", "weight", "dimensions")

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.credentials = self._check_credentials(self.config.credentials)
        self._client: Optional[httpx.AsyncClient] = None

    # ── Credentials / client ──

    def _check_credentials(self, credentials: BaseCredentials) -> BaseCredentials:
        if isinstance(credentials, ApiKeyCredentials):
            return credentials
        if isinstance(credentials, OAuth2Credentials) and credentials.access_token:
            return credentials
        raise ConfigurationError(
            connector_name=self.CONNECTOR_NAME,
            message=(
                f"{type(credentials).__name__} not accepted: "
                "an API key or an OAuth access token is required"
            ),
        )

    @property
    def base_url(self) -> str:
        return self.credentials.endpoint or self.DEFAULT_BASE_URL

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if isinstance(self.credentials, ApiKeyCredentials):
            headers["X-API-Key"] = self.credentials.api_key
        elif isinstance(self.credentials, OAuth2Credentials):
            headers["Authorization"] = f"Bearer {self.credentials.access_token}"
        headers.update(self.credentials.custom_headers)
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = self._build_client(self.base_url, self._headers())
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        await super().aclose()

    # ── HTTP ──

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        return await self._get_client().request(method, path, **kwargs)

    async def _api_call(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json_body: Any = None,
        allow_not_found: bool = False,
    ) -> Any:
        """Toutes les requêtes passent par ici.

        Returns:
            Le JSON décodé, ou None si 404 et allow_not_found.
        """
        kwargs: dict[str, Any] = {}
        if params:
            kwargs["params"] = {**self.credentials.custom_params, **params}
        elif self.credentials.custom_params:
            kwargs["params"] = dict(self.credentials.custom_params)
        if json_body is not None:
            kwargs["json"] = json_body

        try:
            response = await self._send(method, path, **kwargs)
        except httpx.RequestError as e:
            raise ConnectorError(
                connector_name=self.CONNECTOR_NAME,
                message=f"Network error on {method} {path}: {e}",
                raw_error=e,
            )

        if allow_not_found and response.status_code == 404:
            return None
        check_response(self.CONNECTOR_NAME, response)
        return decode_json(self.CONNECTOR_NAME, response)

    def _unwrap(self, payload: Any, key: Optional[str] = None) -> Any:
        """Extrait la donnée utile de la réponse."""
        if key is None:
            return payload
        if isinstance(payload, dict):
            return payload.get(key)
        return None

    @staticmethod
    def _sku_params(skus: Optional[Sequence[str]]) -> dict[str, Any]:
        joined = join_skus(skus)
        return {"skus": joined} if joined else {}

    # ── Contrat ──

    async def validate_credentials(self) -> bool:
        body = {
            "apiKey": getattr(self.credentials, "api_key", None),
            "apiSecret": getattr(self.credentials, "api_secret", None),
        }
        try:
            payload = await self._api_call("POST", self.AUTH_VALIDATE_PATH, json_body=body)
        except ConnectorError as e:
            self.logger.warning(f"Credential validation failed: {e.message}")
            return False
        valid = isinstance(payload, dict) and payload.get("valid") is True
        if valid:
            self.logger.info("Credentials validated")
        return valid

    @retryable
    async def get_products(
        self, skus: Optional[Sequence[str]] = None
    ) -> list[VendorProductData]:
        payload = await self._api_call("GET", self.PRODUCTS_PATH, params=self._sku_params(skus))
        records = self._unwrap(payload, "products") or []
        return [self._normalize_product(r) for r in records]

    @retryable
    async def get_product(self, sku: str) -> Optional[VendorProductData]:
        payload = await self._api_call(
            "GET", f"{self.PRODUCTS_PATH}/{sku}", allow_not_found=True
        )
        if payload is None:
            return None
        record = self._unwrap(payload)
        if not record:
            return None
        return self._normalize_product(record)

    @retryable
    async def get_inventory(
        self, skus: Optional[Sequence[str]] = None
    ) -> dict[str, int]:
        payload = await self._api_call("GET", self.INVENTORY_PATH, params=self._sku_params(skus))
        return self._to_table(self._unwrap(payload, "inventory"), "quantity", safe_int)

    @retryable
    async def get_pricing(
        self, skus: Optional[Sequence[str]] = None
    ) -> dict[str, float]:
        payload = await self._api_call("GET", self.PRICING_PATH, params=self._sku_params(skus))
        return self._to_table(self._unwrap(payload, "pricing"), "price", safe_float)

    async def create_order(self, order: dict[str, Any]) -> VendorOrderData:
        payload = await self._api_call("POST", self.ORDERS_PATH, json_body=self._order_body(order))
        created = self._normalize_order(self._unwrap(payload) or {})
        self.logger.info(f"Order created: {created.order_id}")
        return created

    @retryable
    async def get_order(self, order_id: str) -> Optional[VendorOrderData]:
        payload = await self._api_call(
            "GET", f"{self.ORDERS_PATH}/{order_id}", allow_not_found=True
        )
        if payload is None:
            return None
        record = self._unwrap(payload)
        if not record:
            return None
        return self._normalize_order(record)

    @retryable
    async def get_orders(
        self,
        status: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[VendorOrderData]:
        params: dict[str, Any] = {}
        if status:
            params["status"] = status
        limit = limit or self.DEFAULT_ORDERS_LIMIT
        if limit:
            params["limit"] = limit
        payload = await self._api_call("GET", self.ORDERS_PATH, params=params)
        records = self._unwrap(payload, "orders") or []
        return [self._normalize_order(r) for r in records]

    # ── Normalisation ──

    def _order_body(self, order: dict[str, Any]) -> dict[str, Any]:
        return {
            "items": order.get("items", []),
            "totalAmount": order.get("totalAmount", order.get("total_amount")),
        }

    def _normalize_product(self, raw: dict[str, Any]) -> VendorProductData:
        attributes = {key: raw.get(key) for key in self.PRODUCT_ATTRIBUTES}
        if isinstance(raw.get("attributes"), dict):
            attributes.update(raw["attributes"])
        return VendorProductData(
            sku=raw.get("sku"),
            name=raw.get("name"),
            price=safe_float(raw.get("price"), None),
            cost=safe_float(raw.get("cost"), None),
            quantity=safe_int(raw.get("quantity"), 0),
            description=raw.get("description"),
            attributes=attributes,
        )

    @staticmethod
    def _normalize_order(raw: dict[str, Any]) -> VendorOrderData:
        items = raw.get("items") if isinstance(raw.get("items"), list) else []
        return VendorOrderData(
            order_id=raw.get("orderId", raw.get("order_id")),
            items=[
                VendorOrderItem(
                    sku=item.get("sku"),
                    name=item.get("name"),
                    quantity=safe_int(item.get("quantity"), None),
                    price=safe_float(item.get("price"), None),
                    total=safe_float(item.get("total"), None),
                )
                for item in items
            ],
            total_amount=safe_float(raw.get("totalAmount", raw.get("total_amount")), None),
        )

    @staticmethod
    def _to_table(records: Any, value_field: str, coerce) -> dict:
        if isinstance(records, dict):
            return {
                str(sku): coerce(value, 0) for sku, value in records.items()
            }
        table = {}
        for record in records or []:
            sku = record.get("sku") if isinstance(record, dict) else None
            if sku is not None:
                table[str(sku)] = coerce(record.get(value_field), 0)
        return table
