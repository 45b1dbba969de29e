"""
Access token OAuth2 client credentials, partagé par les connecteurs.

    POST {token_path} {"grant_type": "client_credentials", ...}
        → {"access_token": ..., "expires_in": 3600}

Design decisions :
- Single-flight : un asyncio.Lock garde l'acquisition, N requêtes
  concurrentes en 401 → UNE seule ré-authentification
- Un token qui expire dans moins de `refresh_skew` secondes est
  renouvelé avant usage
- Sans expires_in, le token est considéré valide une heure
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Optional

from connectors.base import AuthenticationError
from connectors.utils import safe_float

DEFAULT_TOKEN_LIFETIME = 3600.0
DEFAULT_REFRESH_SKEW = 60.0

TokenFetcher = Callable[[], Awaitable[Any]]


def client_credentials_body(client_id: str, client_secret: str) -> dict[str, str]:
    return {
        "grant_type": "client_credentials",
        "client_id": client_id,
        "client_secret": client_secret,
    }


class ClientCredentialsToken:
    """Cycle de vie d'un access token.

    `fetch` poste l'échange et retourne le JSON décodé de l'endpoint
    token ; cette classe en extrait le token et l'expiration.
    """

    def __init__(
        self,
        connector_name: str,
        fetch: TokenFetcher,
        refresh_skew: float = DEFAULT_REFRESH_SKEW,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[logging.Logger] = None,
    ):
        self.connector_name = connector_name
        self.refresh_skew = refresh_skew
        self._fetch = fetch
        self._clock = clock
        self._logger = logger or logging.getLogger(f"vendorlink.connectors.{connector_name}")
        self._access_token: Optional[str] = None
        self._expires_at: Optional[float] = None
        self._lock = asyncio.Lock()

    @property
    def access_token(self) -> Optional[str]:
        return self._access_token

    @property
    def expires_at(self) -> Optional[float]:
        return self._expires_at

    def is_fresh(self) -> bool:
        if not self._access_token or self._expires_at is None:
            return False
        return self._clock() < self._expires_at - self.refresh_skew

    async def ensure(self) -> str:
        if self.is_fresh():
            return self._access_token
        async with self._lock:
            if self.is_fresh():
                return self._access_token
            return await self._acquire(self._fetch)

    async def refresh(self, stale: str) -> str:
        """Renouvelle un token refusé en 401.

        Si un autre appelant l'a déjà remplacé, on réutilise le sien.
        """
        async with self._lock:
            if self._access_token and self._access_token != stale:
                return self._access_token
            self._logger.info("Access token rejected, re-authenticating")
            return await self._acquire(self._fetch)

    async def renew(self, fetch: Optional[TokenFetcher] = None) -> str:
        """Acquisition inconditionnelle (validation des credentials)."""
        async with self._lock:
            return await self._acquire(fetch or self._fetch)

    def clear(self) -> None:
        self._access_token = None
        self._expires_at = None

    async def _acquire(self, fetch: TokenFetcher) -> str:
        payload = await fetch()
        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise AuthenticationError(
                connector_name=self.connector_name,
                message="Token endpoint returned no access_token",
            )
        lifetime = safe_float(payload.get("expires_in"), DEFAULT_TOKEN_LIFETIME)
        self._access_token = token
        self._expires_at = self._clock() + lifetime
        self._logger.info("Access token acquired")
        return token
