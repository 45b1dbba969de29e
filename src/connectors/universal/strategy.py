"""
ProtocolStrategy — Ce que le connecteur universel délègue par protocole.

Par défaut, toute opération de données échoue explicitement
(UnsupportedOperationError) : un protocole n'implémente que ce
qu'il sait vraiment faire.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional, Sequence

from connectors.base import UnsupportedOperationError
from connectors.mapping import FieldMapper
from models.credentials import BaseCredentials
from models.sync import VendorOrderData, VendorProductData
from models.vendor_config import VendorConfig

if TYPE_CHECKING:
    from connectors.universal.connector import UniversalConnector


class ProtocolStrategy(ABC):
    PROTOCOL: str = "custom"
    SUPPORTS_DATA: bool = False

    def __init__(self, connector: "UniversalConnector"):
        self.connector = connector

    @property
    def name(self) -> str:
        return self.connector.universal_config.name

    @property
    def logger(self) -> logging.Logger:
        return self.connector.logger

    @property
    def credentials(self) -> BaseCredentials:
        return self.connector.credentials

    @property
    def vendor_config(self) -> VendorConfig:
        return self.connector.universal_config.config

    @property
    def mapper(self) -> FieldMapper:
        return self.connector.mapper

    @abstractmethod
    async def validate_credentials(self) -> bool:
        ...

    def _unsupported(self, operation: str) -> UnsupportedOperationError:
        return UnsupportedOperationError(
            connector_name=self.name,
            operation=operation,
            protocol=self.PROTOCOL,
        )

    async def get_products(self, skus: Optional[Sequence[str]] = None) -> list[VendorProductData]:
        raise self._unsupported("get_products")

    async def get_inventory(self, skus: Optional[Sequence[str]] = None) -> dict[str, int]:
        raise self._unsupported("get_inventory")

    async def get_pricing(self, skus: Optional[Sequence[str]] = None) -> dict[str, float]:
        raise self._unsupported("get_pricing")

    async def create_order(self, order: dict[str, Any]) -> VendorOrderData:
        raise self._unsupported("create_order")

    async def get_order(self, order_id: str) -> Optional[VendorOrderData]:
        raise self._unsupported("get_order")

    async def get_orders(
        self,
        status: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[VendorOrderData]:
        raise self._unsupported("get_orders")

    async def aclose(self) -> None:
        return None
