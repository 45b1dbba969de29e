"""
SP Richards Connector — Grossiste fournitures de bureau.

Authentification : OAuth2 client credentials.
La clé API sert de client_id, le secret de client_secret :
    POST /auth/token → {"access_token": ..., "expires_in": 3600}

Les réponses sont enveloppées : {"success": bool, "data": ..., "error": ...}

Design decisions :
- Cycle de vie du token délégué à ClientCredentialsToken
  (single-flight, renouvellement `token_refresh_skew` secondes avant expiration)
- Une requête en 401 est rejouée une seule fois avec le nouveau token
"""

from __future__ import annotations

import time
from typing import Any, Callable, Optional

import httpx

from connectors.base import (
    ConfigurationError,
    ConnectorError,
    VendorApiError,
    check_response,
    decode_json,
)
from connectors.distributors.base import DistributorConnector
from connectors.oauth import (
    DEFAULT_REFRESH_SKEW,
    ClientCredentialsToken,
    client_credentials_body,
)
from models.credentials import ApiKeyCredentials, BaseCredentials


class SPRichardsConnector(DistributorConnector):
    CONNECTOR_NAME = "sp_richards"
    DEFAULT_BASE_URL = "https://api.sprichards.com/v1"
    PRODUCTS_PATH = "/products"
    TOKEN_PATH = "/auth/token"
    DEFAULT_ORDERS_LIMIT = None

    DEFAULT_TOKEN_REFRESH_SKEW: float = DEFAULT_REFRESH_SKEW

    def __init__(
        self,
        *args: Any,
        token_refresh_skew: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.token_refresh_skew = (
            self.DEFAULT_TOKEN_REFRESH_SKEW
            if token_refresh_skew is None
            else token_refresh_skew
        )
        self._token = ClientCredentialsToken(
            self.CONNECTOR_NAME,
            fetch=self._request_token,
            refresh_skew=self.token_refresh_skew,
            clock=clock,
            logger=self.logger,
        )

    def _check_credentials(self, credentials: BaseCredentials) -> BaseCredentials:
        if isinstance(credentials, ApiKeyCredentials):
            return credentials
        raise ConfigurationError(
            connector_name=self.CONNECTOR_NAME,
            message="SP Richards requires api_key/api_secret client credentials",
        )

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        headers.update(self.credentials.custom_headers)
        return headers

    # ── Token ──

    async def _request_token(self) -> Any:
        """Échange client id/secret contre un access token."""
        body = client_credentials_body(self.credentials.api_key, self.credentials.api_secret)
        try:
            response = await self._get_client().post(self.TOKEN_PATH, json=body)
        except httpx.RequestError as e:
            raise ConnectorError(
                connector_name=self.CONNECTOR_NAME,
                message=f"Network error during authentication: {e}",
                raw_error=e,
            )
        check_response(self.CONNECTOR_NAME, response)
        return decode_json(self.CONNECTOR_NAME, response)

    # ── HTTP ──

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        client = self._get_client()
        token = await self._token.ensure()
        response = await client.request(
            method, path, headers={"Authorization": f"Bearer {token}"}, **kwargs
        )
        if response.status_code == 401:
            token = await self._token.refresh(stale=token)
            response = await client.request(
                method, path, headers={"Authorization": f"Bearer {token}"}, **kwargs
            )
        return response

    def _unwrap(self, payload: Any, key: Optional[str] = None) -> Any:
        if not isinstance(payload, dict) or "success" not in payload:
            raise VendorApiError(
                connector_name=self.CONNECTOR_NAME,
                message="Unexpected response shape (missing envelope)",
            )
        if not payload["success"]:
            raise VendorApiError(
                connector_name=self.CONNECTOR_NAME,
                message=payload.get("error") or "Vendor reported failure",
            )
        return payload.get("data")

    def _order_body(self, order: dict[str, Any]) -> dict[str, Any]:
        return order

    # ── Contrat ──

    async def validate_credentials(self) -> bool:
        if not self.credentials.api_key or not self.credentials.api_secret:
            self.logger.warning("Missing api_key or api_secret")
            return False
        try:
            await self._token.ensure()
        except ConnectorError as e:
            self.logger.warning(f"Credential validation failed: {e.message}")
            return False
        return True
