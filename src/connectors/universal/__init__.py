"""
Connecteur universel : un contrat, quatre protocoles.
"""

from connectors.universal.strategy import ProtocolStrategy
from connectors.universal.api import ApiStrategy
from connectors.universal.sftp import SftpStrategy, load_private_key
from connectors.universal.edi import EdiStrategy
from connectors.universal.webhook import WebhookStrategy
from connectors.universal.connector import PROTOCOL_STRATEGIES, UniversalConnector

__all__ = [
    "ProtocolStrategy",
    "ApiStrategy",
    "SftpStrategy",
    "load_private_key",
    "EdiStrategy",
    "WebhookStrategy",
    "PROTOCOL_STRATEGIES",
    "UniversalConnector",
]
