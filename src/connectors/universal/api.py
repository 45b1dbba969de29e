"""
ApiStrategy — Fournisseurs joignables par une API REST générique.

    GET  {base_url}{endpoints.products}?skus=A,B → {"success", "data", "error"}
    GET  {base_url}{endpoints.inventory}
    GET  {base_url}{endpoints.pricing}
    GET/POST {base_url}{endpoints.orders}

Headers : JSON + UN header d'auth dérivé de la variante de credentials
(X-API-Key, Bearer, ou Basic). Les custom headers ne remplacent
jamais le header d'auth.

Design decisions :
- Pas de client tant que validate_credentials() n'a pas réussi
- Échange client credentials (POST endpoints.auth) quand le fournisseur
  est déclaré OAUTH2 avec un couple clé/secret, ou pour des credentials
  OAuth2 sans access token. Le token est suivi par ClientCredentialsToken,
  envoyé en Bearer, renouvelé avant expiration et sur un 401 (une seule
  relance par requête)
- Toutes les requêtes passent par le RequestThrottle (rate limits déclarés)
"""

from __future__ import annotations

import base64
import time
from typing import Any, Callable, Optional, Sequence

import httpx

from connectors.base import (
    ClientNotInitializedError,
    ConnectorError,
    RateLimitError,
    VendorApiError,
    check_response,
    decode_json,
)
from connectors.oauth import (
    DEFAULT_REFRESH_SKEW,
    ClientCredentialsToken,
    client_credentials_body,
)
from connectors.universal.strategy import ProtocolStrategy
from connectors.utils import RateLimitExceeded, RequestThrottle, join_skus
from models.credentials import (
    ApiKeyCredentials,
    BasicAuthCredentials,
    OAuth2Credentials,
)
from models.sync import VendorOrderData, VendorProductData
from models.vendor_config import AuthenticationMode, ConnectorType, DataDomain


class ApiStrategy(ProtocolStrategy):
    PROTOCOL = ConnectorType.API.value
    SUPPORTS_DATA = True

    DEFAULT_AUTH_TEST_PATH = "/auth/test"
    DEFAULT_TOKEN_PATH = "/oauth/token"

    def __init__(
        self,
        connector,
        token_refresh_skew: float = DEFAULT_REFRESH_SKEW,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(connector)
        self._client: Optional[httpx.AsyncClient] = None
        limits = self.vendor_config.rate_limits
        self._throttle = RequestThrottle(
            per_minute=limits.requests_per_minute,
            per_hour=limits.requests_per_hour,
            per_day=limits.requests_per_day,
            sleep=connector._sleep,
        )
        self._token = ClientCredentialsToken(
            self.name,
            fetch=self._fetch_token,
            refresh_skew=token_refresh_skew,
            clock=clock,
            logger=self.logger,
        )

    # ── Client ──

    @property
    def base_url(self) -> str:
        return self.credentials.endpoint or self.vendor_config.endpoints.base_url

    def client_credentials(self) -> Optional[tuple[str, str]]:
        """Couple (client_id, client_secret) à échanger, s'il y en a un."""
        creds = self.credentials
        if isinstance(creds, OAuth2Credentials) and not creds.access_token:
            return creds.client_id, creds.client_secret
        if (
            self.vendor_config.authentication == AuthenticationMode.OAUTH2
            and isinstance(creds, ApiKeyCredentials)
            and creds.api_secret
        ):
            return creds.api_key, creds.api_secret
        return None

    @property
    def uses_token_exchange(self) -> bool:
        return self.client_credentials() is not None

    @property
    def access_token(self) -> Optional[str]:
        return self._token.access_token

    def build_headers(self, access_token: Optional[str] = None) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        headers.update(self.credentials.custom_headers)

        creds = self.credentials
        if isinstance(creds, OAuth2Credentials) and not access_token:
            access_token = creds.access_token
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        elif isinstance(creds, ApiKeyCredentials) and not self.uses_token_exchange:
            headers["X-API-Key"] = creds.api_key
        elif isinstance(creds, BasicAuthCredentials):
            digest = base64.b64encode(
                f"{creds.username}:{creds.password}".encode("utf-8")
            ).decode("ascii")
            headers["Authorization"] = f"Basic {digest}"
        return headers

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise ClientNotInitializedError(connector_name=self.name)
        return self._client

    def _has_bearer_source(self) -> bool:
        creds = self.credentials
        return self.uses_token_exchange or (
            isinstance(creds, OAuth2Credentials) and bool(creds.access_token)
        )

    async def validate_credentials(self) -> bool:
        if not self.base_url:
            self.logger.error("No base URL configured for API vendor")
            return False
        if (
            self.vendor_config.authentication == AuthenticationMode.OAUTH2
            and not self._has_bearer_source()
        ):
            self.logger.error("OAuth2 vendor requires a client id/secret pair or an access token")
            return False

        client = self.connector._build_client(self.base_url, self.build_headers())
        ready = False
        try:
            if self.uses_token_exchange:
                await self._token.renew(lambda: self._exchange_client_credentials(client))
            else:
                path = self.vendor_config.endpoints.auth or self.DEFAULT_AUTH_TEST_PATH
                response = await self._send(client, "GET", path)
                check_response(self.name, response)
            ready = True
        except ConnectorError as e:
            self.logger.error(f"API authentication failed: {e.message}")
            return False
        finally:
            if not ready:
                await client.aclose()

        if self._client is not None:
            await self._client.aclose()
        self._client = client
        self.logger.info(f"API client ready for {self.base_url}")
        return True

    async def _fetch_token(self) -> Any:
        return await self._exchange_client_credentials(self._require_client())

    async def _exchange_client_credentials(self, client: httpx.AsyncClient) -> Any:
        client_id, client_secret = self.client_credentials()
        path = self.vendor_config.endpoints.auth or self.DEFAULT_TOKEN_PATH
        response = await self._send(
            client,
            "POST",
            path,
            json=client_credentials_body(client_id, client_secret),
        )
        check_response(self.name, response)
        return decode_json(self.name, response)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # ── HTTP ──

    async def _send(
        self,
        client: httpx.AsyncClient,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            await self._throttle.acquire()
        except RateLimitExceeded as e:
            raise RateLimitError(
                connector_name=self.name,
                retry_after_seconds=e.retry_after_seconds,
                raw_error=e,
            )
        try:
            return await client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            raise ConnectorError(
                connector_name=self.name,
                message=f"Network error on {method} {path}: {e}",
                raw_error=e,
            )

    async def _authorized_send(
        self,
        client: httpx.AsyncClient,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """_send + Bearer courant ; un 401 renouvelle le token et rejoue une fois."""
        if not self.uses_token_exchange:
            return await self._send(client, method, path, **kwargs)

        token = await self._token.ensure()
        response = await self._send(
            client, method, path, headers={"Authorization": f"Bearer {token}"}, **kwargs
        )
        if response.status_code == 401:
            token = await self._token.refresh(stale=token)
            response = await self._send(
                client, method, path, headers={"Authorization": f"Bearer {token}"}, **kwargs
            )
        return response

    async def _call(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json_body: Any = None,
        allow_not_found: bool = False,
    ) -> Any:
        """Requête + déballage de l'enveloppe {success, data, error}.

        Avec allow_not_found, un 404 ou une enveloppe success=false → None.
        """
        client = self._require_client()
        kwargs: dict[str, Any] = {}
        merged_params = {**self.credentials.custom_params, **(params or {})}
        if merged_params:
            kwargs["params"] = merged_params
        if json_body is not None:
            kwargs["json"] = json_body

        response = await self._authorized_send(client, method, path, **kwargs)
        if allow_not_found and response.status_code == 404:
            return None
        check_response(self.name, response)
        payload = decode_json(self.name, response)
        if allow_not_found and isinstance(payload, dict) and payload.get("success") is False:
            self.logger.info(
                f"{method} {path}: vendor reported failure: {payload.get('error')}"
            )
            return None
        return self._unwrap(payload, f"{method} {path}")

    def _unwrap(self, payload: Any, operation: str) -> Any:
        if not isinstance(payload, dict) or "success" not in payload:
            raise VendorApiError(
                connector_name=self.name,
                message=f"{operation}: unexpected response shape (missing envelope)",
            )
        if not payload["success"]:
            raise VendorApiError(
                connector_name=self.name,
                message=payload.get("error") or f"{operation} failed",
            )
        return payload.get("data")

    def _path(self, domain: DataDomain) -> str:
        return self.vendor_config.endpoints.path_for(domain, f"/{domain.value}")

    @staticmethod
    def _sku_params(skus: Optional[Sequence[str]]) -> dict[str, Any]:
        joined = join_skus(skus)
        return {"skus": joined} if joined else {}

    # ── Données ──

    async def get_products(self, skus: Optional[Sequence[str]] = None) -> list[VendorProductData]:
        data = await self._call("GET", self._path(DataDomain.PRODUCTS), params=self._sku_params(skus))
        return self.mapper.map_products(data or [])

    async def get_inventory(self, skus: Optional[Sequence[str]] = None) -> dict[str, int]:
        data = await self._call("GET", self._path(DataDomain.INVENTORY), params=self._sku_params(skus))
        return self.mapper.map_inventory(data or {})

    async def get_pricing(self, skus: Optional[Sequence[str]] = None) -> dict[str, float]:
        data = await self._call("GET", self._path(DataDomain.PRICING), params=self._sku_params(skus))
        return self.mapper.map_pricing(data or {})

    async def create_order(self, order: dict[str, Any]) -> VendorOrderData:
        data = await self._call("POST", self._path(DataDomain.ORDERS), json_body=order)
        return self.mapper.map_order(data or {})

    async def get_order(self, order_id: str) -> Optional[VendorOrderData]:
        data = await self._call(
            "GET",
            f"{self._path(DataDomain.ORDERS)}/{order_id}",
            allow_not_found=True,
        )
        if not data:
            return None
        return self.mapper.map_order(data)

    async def get_orders(
        self,
        status: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[VendorOrderData]:
        params: dict[str, Any] = {}
        if status:
            params["status"] = status
        if limit:
            params["limit"] = limit
        data = await self._call("GET", self._path(DataDomain.ORDERS), params=params)
        return self.mapper.map_orders(data or [])
