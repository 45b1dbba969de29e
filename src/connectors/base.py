"""
VendorConnector — Contrat commun à tous les connecteurs fournisseurs.

Chaque connecteur, quel que soit le protocole derrière (API REST,
SFTP, EDI, webhook), expose les mêmes opérations :
- fetch : get_products, get_inventory, get_pricing, get_orders, ...
- sync  : sync_products, sync_inventory, ... → toujours un SyncResult

Design decisions :
- Les fetch LÈVENT (erreur de protocole ou de config)
- Les sync ne lèvent JAMAIS : l'échec est capturé dans le SyncResult
- Lookup unitaire : valeur, None (introuvable) ou exception
- Retry exponentiel borné sur les méthodes marquées @retryable
- Un deadline par opération de haut niveau, propagé au retry
"""

from __future__ import annotations

import asyncio
import contextvars
import functools
import logging
import math
import time
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional, Sequence

import httpx

from connectors.utils import chunk_list, retry_operation, safe_int
from models.sync import SyncResult, VendorOrderData, VendorProductData
from models.vendor import Vendor, VendorConnectorConfig
from models.vendor_config import DataDomain


# ──────────────────────────────────────────────
# EXCEPTIONS
# ──────────────────────────────────────────────


class ConnectorError(Exception):
    def __init__(
        self,
        connector_name: str,
        message: str,
        recoverable: bool = True,
        raw_error: Optional[Exception] = None,
    ):
        self.connector_name = connector_name
        self.message = message
        self.recoverable = recoverable
        self.raw_error = raw_error
        super().__init__(f"[{connector_name}] {message}")


class RateLimitError(ConnectorError):
    def __init__(
        self,
        connector_name: str,
        retry_after_seconds: int = 60,
        raw_error: Optional[Exception] = None,
    ):
        self.retry_after_seconds = retry_after_seconds
        super().__init__(
            connector_name=connector_name,
            message=f"Rate limit hit. Retry after {retry_after_seconds}s.",
            recoverable=True,
            raw_error=raw_error,
        )


class AuthenticationError(ConnectorError):
    def __init__(
        self,
        connector_name: str,
        message: str = "Authentication failed",
        raw_error: Optional[Exception] = None,
    ):
        super().__init__(
            connector_name=connector_name,
            message=message,
            recoverable=False,
            raw_error=raw_error,
        )


class ConfigurationError(ConnectorError):
    """Config ou credentials inutilisables. Jamais retenté."""

    def __init__(
        self,
        connector_name: str,
        message: str,
        raw_error: Optional[Exception] = None,
    ):
        super().__init__(
            connector_name=connector_name,
            message=message,
            recoverable=False,
            raw_error=raw_error,
        )


class RegistryNotInitializedError(ConfigurationError):
    def __init__(self) -> None:
        super().__init__(
            connector_name="registry",
            message="Registry not initialized",
        )


class UnsupportedOperationError(ConnectorError):
    """Capacité absente pour ce protocole (données SFTP/EDI, pull webhook)."""

    def __init__(self, connector_name: str, operation: str, protocol: str):
        self.operation = operation
        self.protocol = protocol
        super().__init__(
            connector_name=connector_name,
            message=f"{operation} is not supported over {protocol}",
            recoverable=False,
        )


class ClientNotInitializedError(ConnectorError):
    def __init__(self, connector_name: str):
        super().__init__(
            connector_name=connector_name,
            message="API client not initialized. Call validate_credentials() first.",
            recoverable=False,
        )


class VendorApiError(ConnectorError):
    """Réponse d'erreur du fournisseur (HTTP non-2xx ou enveloppe success=false).

    Seules les erreurs serveur (5xx) sont retentées.
    """

    def __init__(
        self,
        connector_name: str,
        message: str,
        status_code: Optional[int] = None,
        raw_error: Optional[Exception] = None,
    ):
        self.status_code = status_code
        super().__init__(
            connector_name=connector_name,
            message=message,
            recoverable=status_code is not None and status_code >= 500,
            raw_error=raw_error,
        )


def check_response(connector_name: str, response: httpx.Response) -> None:
    """Traduit un statut HTTP en exception du connecteur."""
    if response.is_success:
        return
    if response.status_code == 429:
        retry_after = safe_int(
            response.headers.get("Retry-After", "60"), default=60
        )
        raise RateLimitError(
            connector_name=connector_name,
            retry_after_seconds=retry_after,
        )
    if response.status_code in (401, 403):
        raise AuthenticationError(
            connector_name=connector_name,
            message=f"Vendor rejected credentials (HTTP {response.status_code})",
        )
    raise VendorApiError(
        connector_name=connector_name,
        message=f"HTTP {response.status_code}: {response.reason_phrase}",
        status_code=response.status_code,
    )


def decode_json(connector_name: str, response: httpx.Response) -> Any:
    """Corps JSON d'une réponse. Une page HTML de proxy → VendorApiError."""
    try:
        return response.json()
    except ValueError as e:
        raise VendorApiError(
            connector_name=connector_name,
            message=f"Invalid JSON response (HTTP {response.status_code})",
            status_code=response.status_code,
            raw_error=e,
        )


# ──────────────────────────────────────────────
# RETRY
# ──────────────────────────────────────────────

# Instant limite (time.monotonic) de l'opération de haut niveau en cours.
_operation_deadline: contextvars.ContextVar[Optional[float]] = contextvars.ContextVar(
    "vendorlink_operation_deadline", default=None
)


def retryable(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
    """Marque une méthode de connecteur comme retentable.

    Tentatives et délai de base viennent de la config de l'instance.
    """

    @functools.wraps(func)
    async def wrapper(self: "VendorConnector", *args: Any, **kwargs: Any) -> Any:
        return await retry_operation(
            lambda: func(self, *args, **kwargs),
            max_attempts=self.config.retry_attempts,
            base_delay=self.config.retry_base_delay,
            deadline=_operation_deadline.get(),
            sleep=self._sleep,
            operation_name=f"{self.CONNECTOR_NAME}.{func.__name__}",
        )

    return wrapper


# ──────────────────────────────────────────────
# VENDOR CONNECTOR
# ──────────────────────────────────────────────


class VendorConnector(ABC):
    """Classe abstraite pour tous les connecteurs fournisseurs.

    Chaque connecteur DOIT définir :
    - CONNECTOR_NAME     : identifiant unique ("ingram_micro", "universal", ...)
    - CONNECTOR_CATEGORY : famille ("distributor", "universal")
    - DATA_TYPES         : domaines synchronisables
    """

    CONNECTOR_NAME: str = "base"
    CONNECTOR_CATEGORY: str = "base"
    DATA_TYPES: list[str] = [d.value for d in DataDomain]

    DEFAULT_SYNC_BATCH_SIZE: int = 100

    def __init__(
        self,
        vendor: Vendor,
        config: VendorConnectorConfig,
        logger: Optional[logging.Logger] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        sync_batch_size: Optional[int] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.vendor = vendor
        self.config = config
        self.logger = logger or logging.getLogger(
            f"vendorlink.connectors.{self.CONNECTOR_CATEGORY}.{self.CONNECTOR_NAME}"
        )
        self.sync_batch_size = sync_batch_size or self.DEFAULT_SYNC_BATCH_SIZE
        self._sleep = sleep
        self._http_transport = http_transport

    async def __aenter__(self) -> "VendorConnector":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    # ── Contrat ──

    @abstractmethod
    async def validate_credentials(self) -> bool:
        ...

    @abstractmethod
    async def get_products(
        self, skus: Optional[Sequence[str]] = None
    ) -> list[VendorProductData]:
        ...

    @abstractmethod
    async def get_product(self, sku: str) -> Optional[VendorProductData]:
        ...

    @abstractmethod
    async def get_inventory(
        self, skus: Optional[Sequence[str]] = None
    ) -> dict[str, int]:
        ...

    @abstractmethod
    async def get_pricing(
        self, skus: Optional[Sequence[str]] = None
    ) -> dict[str, float]:
        ...

    @abstractmethod
    async def create_order(self, order: dict[str, Any]) -> VendorOrderData:
        ...

    @abstractmethod
    async def get_order(self, order_id: str) -> Optional[VendorOrderData]:
        ...

    @abstractmethod
    async def get_orders(
        self,
        status: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[VendorOrderData]:
        ...

    async def aclose(self) -> None:
        self.logger.debug("Connector closed")

    # ── Sync ──

    async def sync_products(
        self,
        skus: Optional[Sequence[str]] = None,
        *,
        timeout: Optional[float] = None,
    ) -> SyncResult:
        return await self._run_sync(DataDomain.PRODUCTS, self.get_products, skus, timeout)

    async def sync_inventory(
        self,
        skus: Optional[Sequence[str]] = None,
        *,
        timeout: Optional[float] = None,
    ) -> SyncResult:
        return await self._run_sync(DataDomain.INVENTORY, self.get_inventory, skus, timeout)

    async def sync_pricing(
        self,
        skus: Optional[Sequence[str]] = None,
        *,
        timeout: Optional[float] = None,
    ) -> SyncResult:
        return await self._run_sync(DataDomain.PRICING, self.get_pricing, skus, timeout)

    async def sync_orders(
        self,
        status: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
    ) -> SyncResult:
        async def fetch_orders(_: Optional[Sequence[str]]) -> list[VendorOrderData]:
            return await self.get_orders(status=status)

        return await self._run_sync(DataDomain.ORDERS, fetch_orders, None, timeout)

    async def _run_sync(
        self,
        domain: DataDomain,
        fetch: Callable[[Optional[Sequence[str]]], Awaitable[Any]],
        skus: Optional[Sequence[str]],
        timeout: Optional[float],
    ) -> SyncResult:
        """Pilote un fetch et capture TOUT échec dans le SyncResult."""
        started = time.monotonic()
        token = _operation_deadline.set(
            started + timeout if timeout is not None else None
        )
        try:
            collect = self._collect(domain, fetch, skus)
            if timeout is not None:
                result = await asyncio.wait_for(collect, timeout)
            else:
                result = await collect
        except asyncio.TimeoutError:
            message = f"{domain.value} sync timed out after {timeout}s"
            self.logger.error(message)
            return SyncResult.failed(message)
        except Exception as e:
            self.logger.error(f"{domain.value} sync failed: {e}")
            return SyncResult.failed(str(e))
        finally:
            _operation_deadline.reset(token)

        self.logger.info(
            f"{domain.value} sync: {result.items_processed}/{result.items_total} "
            f"items in {time.monotonic() - started:.2f}s"
        )
        return result

    async def _collect(
        self,
        domain: DataDomain,
        fetch: Callable[[Optional[Sequence[str]]], Awaitable[Any]],
        skus: Optional[Sequence[str]],
    ) -> SyncResult:
        if skus is not None and len(skus) == 0:
            return SyncResult(success=True, data=[] if domain == DataDomain.PRODUCTS else {})
        if skus is None:
            data = await fetch(None)
            return SyncResult(
                success=True,
                items_processed=len(data),
                items_total=len(data),
                data=data,
            )

        batches = chunk_list(list(skus), self.sync_batch_size)
        merged: Any = {} if domain in (DataDomain.INVENTORY, DataDomain.PRICING) else []
        errors: list[str] = []
        processed = 0

        for index, batch in enumerate(batches, start=1):
            try:
                part = await fetch(batch)
            except Exception as e:
                self.logger.warning(
                    f"{domain.value} batch {index}/{len(batches)} failed: {e}"
                )
                errors.append(f"batch {index}: {e}")
                continue
            processed += len(part)
            if isinstance(merged, dict):
                merged.update(part)
            else:
                merged.extend(part)

        if len(errors) == len(batches):
            return SyncResult(
                success=False,
                items_total=len(skus),
                error=errors[-1],
                errors=errors,
            )
        return SyncResult(
            success=True,
            items_processed=min(processed, len(skus)),
            items_total=len(skus),
            error=f"{len(errors)}/{len(batches)} batches failed" if errors else None,
            errors=errors,
            data=merged,
        )

    # ── Metadata ──

    def get_capabilities(self) -> dict[str, bool]:
        return {
            "products": True,
            "inventory": True,
            "pricing": True,
            "orders": True,
            "real_time_sync": False,
        }

    def get_vendor_info(self) -> Vendor:
        return self.vendor

    @classmethod
    def info(cls) -> dict[str, Any]:
        """Metadata du connecteur pour la factory et le dashboard."""
        return {
            "name": cls.CONNECTOR_NAME,
            "category": cls.CONNECTOR_CATEGORY,
            "data_types": cls.DATA_TYPES,
        }

    # ── Helpers ──

    def _build_client(
        self,
        base_url: str,
        headers: dict[str, str],
    ) -> httpx.AsyncClient:
        kwargs: dict[str, Any] = {
            "base_url": base_url,
            "headers": headers,
            "timeout": httpx.Timeout(self.config.timeout, connect=10.0),
        }
        if self._http_transport is not None:
            kwargs["transport"] = self._http_transport
        return httpx.AsyncClient(**kwargs)

    @staticmethod
    def validate_sku(sku: Optional[str]) -> bool:
        return bool(sku) and 0 < len(sku.strip()) <= 50

    @staticmethod
    def validate_quantity(quantity: Any) -> bool:
        return (
            isinstance(quantity, int)
            and not isinstance(quantity, bool)
            and quantity > 0
        )

    @staticmethod
    def validate_price(price: Any) -> bool:
        return (
            isinstance(price, (int, float))
            and not isinstance(price, bool)
            and not math.isnan(price)
            and price > 0
        )

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} vendor={self.vendor.id} "
            f"tenant={self.vendor.tenant_id}>"
        )
