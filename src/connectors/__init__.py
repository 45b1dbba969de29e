"""
VendorLink Connectors — Un contrat, plusieurs façons de joindre un fournisseur.

Chaque connecteur hérite de VendorConnector.
Chaque connecteur normalise vers les structures canoniques (models.sync).
L'appelant ne sait JAMAIS quel protocole est derrière.

Le ConnectorFactory permet de :
- Résoudre un Vendor vers le bon connecteur (registry d'abord)
- Instancier les connecteurs dédiés à la demande
- Décrire les types de fournisseurs supportés
"""

from connectors.base import (
    VendorConnector,
    ConnectorError,
    RateLimitError,
    AuthenticationError,
    ConfigurationError,
    RegistryNotInitializedError,
    UnsupportedOperationError,
    ClientNotInitializedError,
    VendorApiError,
)
from connectors.mapping import FieldMapper
from connectors.registry import VendorRegistry
from connectors.universal import UniversalConnector
from connectors.demo import DemoFallbackConnector
from connectors.factory import ConnectorFactory

__all__ = [
    "VendorConnector",
    "ConnectorError",
    "RateLimitError",
    "AuthenticationError",
    "ConfigurationError",
    "RegistryNotInitializedError",
    "UnsupportedOperationError",
    "ClientNotInitializedError",
    "VendorApiError",
    "FieldMapper",
    "VendorRegistry",
    "UniversalConnector",
    "DemoFallbackConnector",
    "ConnectorFactory",
]
