"""
EdiStrategy — Échanges EDI (X12 / EDIFACT) avec un partenaire.

Validation = présence des identifiants partenaire/émetteur/récepteur.
Aucun format de fil n'est implémenté : les opérations de données
échouent explicitement.
"""

from __future__ import annotations

from connectors.universal.strategy import ProtocolStrategy
from models.credentials import EdiCredentials
from models.vendor_config import ConnectorType


class EdiStrategy(ProtocolStrategy):
    PROTOCOL = ConnectorType.EDI.value

    async def validate_credentials(self) -> bool:
        creds = self.credentials
        if not isinstance(creds, EdiCredentials):
            self.logger.error(
                f"EDI vendor needs edi credentials, got {type(creds).__name__}"
            )
            return False
        if not creds.is_complete:
            missing = [
                field
                for field in ("partner_id", "sender_id", "receiver_id")
                if not getattr(creds, field)
            ]
            self.logger.warning(f"EDI identifiers missing: {', '.join(missing)}")
            return False
        return True
