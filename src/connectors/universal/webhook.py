"""
WebhookStrategy — Fournisseurs qui POUSSENT leurs données.

Pas d'opération de pull : la validation vérifie seulement
qu'un endpoint est configuré.
"""

from __future__ import annotations

from connectors.universal.strategy import ProtocolStrategy
from models.vendor_config import ConnectorType


class WebhookStrategy(ProtocolStrategy):
    PROTOCOL = ConnectorType.WEBHOOK.value

    async def validate_credentials(self) -> bool:
        endpoint = self.credentials.endpoint or self.vendor_config.endpoints.base_url
        if not endpoint:
            self.logger.warning("No webhook endpoint configured")
            return False
        return True
