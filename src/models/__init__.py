"""
VendorLink Models — Données validées, aucun comportement I/O.

  Credentials            → matériel d'auth, union taguée par mode
  VendorConfig           → forme d'intégration d'un fournisseur
  UniversalConnectorConfig → config complète du connecteur universel
  VendorRegistryEntry    → profil réutilisable du registry
  VendorProductData / VendorOrderData / SyncResult → sorties canoniques
"""

from models.credentials import (
    AuthType,
    BaseCredentials,
    ApiKeyCredentials,
    OAuth2Credentials,
    BasicAuthCredentials,
    SftpCredentials,
    EdiCredentials,
    CustomCredentials,
    VendorCredentials,
    parse_credentials,
)
from models.vendor_config import (
    ConnectorType,
    AuthenticationMode,
    DataFormat,
    DataDomain,
    RateLimits,
    VendorEndpoints,
    VendorFeatures,
    DataFormats,
    VendorConfig,
    FieldMapping,
    Transformations,
    UniversalConnectorConfig,
)
from models.vendor import Vendor, VendorType, VendorStatus, VendorConnectorConfig
from models.registry_entry import (
    RegistryVendorType,
    RegistryStatus,
    IntegrationMethod,
    VendorCapabilities,
    VendorContact,
    VendorRegistryEntry,
)
from models.sync import (
    VendorProductData,
    VendorOrderItem,
    VendorOrderData,
    SyncResult,
    ConnectionTestDetails,
    VendorConnectionTest,
)
from models.onboarding import (
    VendorConnectionRequest,
    VendorConnectionResult,
    VendorTemplate,
    WizardFieldOption,
    WizardField,
    WizardStep,
)

__all__ = [
    # Credentials
    "AuthType",
    "BaseCredentials",
    "ApiKeyCredentials",
    "OAuth2Credentials",
    "BasicAuthCredentials",
    "SftpCredentials",
    "EdiCredentials",
    "CustomCredentials",
    "VendorCredentials",
    "parse_credentials",
    # Config
    "ConnectorType",
    "AuthenticationMode",
    "DataFormat",
    "DataDomain",
    "RateLimits",
    "VendorEndpoints",
    "VendorFeatures",
    "DataFormats",
    "VendorConfig",
    "FieldMapping",
    "Transformations",
    "UniversalConnectorConfig",
    # Vendor
    "Vendor",
    "VendorType",
    "VendorStatus",
    "VendorConnectorConfig",
    # Registry
    "RegistryVendorType",
    "RegistryStatus",
    "IntegrationMethod",
    "VendorCapabilities",
    "VendorContact",
    "VendorRegistryEntry",
    # Outputs
    "VendorProductData",
    "VendorOrderItem",
    "VendorOrderData",
    "SyncResult",
    "ConnectionTestDetails",
    "VendorConnectionTest",
    # Onboarding
    "VendorConnectionRequest",
    "VendorConnectionResult",
    "VendorTemplate",
    "WizardFieldOption",
    "WizardField",
    "WizardStep",
]
