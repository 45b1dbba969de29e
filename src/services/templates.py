"""
Templates d'onboarding et étapes de l'assistant de connexion.

Pure donnée : le dashboard affiche, l'utilisateur complète,
VendorManagementService.connect_vendor() reçoit la demande.
"""

from __future__ import annotations

from models.onboarding import VendorTemplate, WizardField, WizardFieldOption, WizardStep
from models.vendor_config import ConnectorType

_CRUD_PATHS = {
    "products": "/products",
    "inventory": "/inventory",
    "pricing": "/pricing",
    "orders": "/orders",
}


VENDOR_TEMPLATES: list[VendorTemplate] = [
    VendorTemplate(
        id="rest-api",
        name="REST API",
        description="Standard REST API with JSON responses",
        type=ConnectorType.API,
        template={
            "type": "api",
            "authentication": "api_key",
            "endpoints": {"base_url": "", **_CRUD_PATHS},
            "rate_limits": {
                "requests_per_minute": 30,
                "requests_per_hour": 500,
                "requests_per_day": 5000,
            },
            "features": {
                "product_catalog": True,
                "real_time_inventory": True,
                "real_time_pricing": True,
                "order_management": True,
                "bulk_operations": False,
                "webhooks": False,
            },
        },
    ),
    VendorTemplate(
        id="oauth2-api",
        name="OAuth 2.0 API",
        description="REST API with OAuth 2.0 authentication",
        type=ConnectorType.API,
        template={
            "type": "api",
            "authentication": "oauth2",
            "endpoints": {"base_url": "", **_CRUD_PATHS, "auth": "/oauth/token"},
            "rate_limits": {
                "requests_per_minute": 60,
                "requests_per_hour": 1000,
                "requests_per_day": 10000,
            },
            "features": {
                "product_catalog": True,
                "real_time_inventory": True,
                "real_time_pricing": True,
                "order_management": True,
                "bulk_operations": True,
                "webhooks": True,
            },
        },
    ),
    VendorTemplate(
        id="sftp-files",
        name="SFTP File Transfer",
        description="File-based integration via SFTP",
        type=ConnectorType.SFTP,
        template={
            "type": "sftp",
            "authentication": "sftp_key",
            "features": {
                "product_catalog": True,
                "real_time_inventory": False,
                "real_time_pricing": True,
                "order_management": False,
                "bulk_operations": True,
                "webhooks": False,
            },
        },
    ),
    VendorTemplate(
        id="edi-x12",
        name="EDI X12",
        description="Electronic Data Interchange using X12 format",
        type=ConnectorType.EDI,
        template={
            "type": "edi",
            "authentication": "edi",
            "features": {
                "product_catalog": True,
                "real_time_inventory": False,
                "real_time_pricing": True,
                "order_management": True,
                "bulk_operations": True,
                "webhooks": False,
            },
        },
    ),
    VendorTemplate(
        id="webhook",
        name="Webhook Integration",
        description="Real-time integration via webhooks",
        type=ConnectorType.WEBHOOK,
        template={
            "type": "webhook",
            "authentication": "api_key",
            "features": {
                "product_catalog": False,
                "real_time_inventory": True,
                "real_time_pricing": True,
                "order_management": True,
                "bulk_operations": False,
                "webhooks": True,
            },
        },
    ),
]


# ──────────────────────────────────────────────
# ASSISTANT
# ──────────────────────────────────────────────

BASIC_INFO_STEP = WizardStep(
    id="basic-info",
    title="Basic Information",
    description="Enter the vendor name and description",
    fields=[
        WizardField(name="name", label="Vendor Name", required=True,
                    placeholder="Enter vendor name"),
        WizardField(name="description", label="Description",
                    placeholder="Brief description of the vendor"),
    ],
)

_API_STEPS = [
    WizardStep(
        id="authentication",
        title="Authentication",
        description="Configure API authentication",
        fields=[
            WizardField(
                name="authentication",
                label="Authentication Type",
                type="select",
                required=True,
                options=[
                    WizardFieldOption(value="api_key", label="API Key"),
                    WizardFieldOption(value="oauth2", label="OAuth 2.0"),
                    WizardFieldOption(value="basic", label="Basic Auth"),
                ],
            ),
            WizardField(name="apiKey", label="API Key", required=True,
                        placeholder="Enter API key"),
            WizardField(name="apiSecret", label="API Secret", type="password",
                        placeholder="Enter API secret (if required)"),
        ],
    ),
    WizardStep(
        id="endpoints",
        title="API Endpoints",
        description="Configure API endpoints",
        fields=[
            WizardField(name="baseUrl", label="Base URL", type="url", required=True,
                        placeholder="https://api.vendor.com/v1"),
            WizardField(name="productsEndpoint", label="Products Endpoint",
                        placeholder="/products", help="Leave empty to use default"),
            WizardField(name="inventoryEndpoint", label="Inventory Endpoint",
                        placeholder="/inventory"),
            WizardField(name="pricingEndpoint", label="Pricing Endpoint",
                        placeholder="/pricing"),
            WizardField(name="ordersEndpoint", label="Orders Endpoint",
                        placeholder="/orders"),
        ],
    ),
]

_SFTP_STEPS = [
    WizardStep(
        id="sftp-config",
        title="SFTP Configuration",
        description="Configure SFTP connection details",
        fields=[
            WizardField(name="sftpHost", label="SFTP Host", required=True,
                        placeholder="sftp.vendor.com"),
            WizardField(name="sftpPort", label="SFTP Port", type="number",
                        placeholder="22"),
            WizardField(name="sftpUsername", label="Username", required=True,
                        placeholder="Enter SFTP username"),
            WizardField(name="sftpPassword", label="Password", type="password",
                        placeholder="Enter SFTP password"),
            WizardField(
                name="sftpPrivateKey",
                label="Private Key",
                placeholder="/path/to/private/key",
                help="Path to a private key file, or the PEM content itself",
            ),
        ],
    ),
]

_EDI_STEPS = [
    WizardStep(
        id="edi-config",
        title="EDI Configuration",
        description="Configure EDI partner details",
        fields=[
            WizardField(name="ediPartnerId", label="Partner ID", required=True,
                        placeholder="Enter EDI partner ID"),
            WizardField(name="ediSenderId", label="Sender ID", required=True,
                        placeholder="Enter sender ID"),
            WizardField(name="ediReceiverId", label="Receiver ID", required=True,
                        placeholder="Enter receiver ID"),
        ],
    ),
]

_WEBHOOK_STEPS = [
    WizardStep(
        id="webhook-config",
        title="Webhook Configuration",
        description="Where the vendor pushes its events",
        fields=[
            WizardField(name="endpoint", label="Webhook URL", type="url", required=True,
                        placeholder="https://hooks.vendor.com/events"),
            WizardField(name="apiKey", label="Signing Key", type="password",
                        placeholder="Shared secret (if required)"),
        ],
    ),
]

WIZARD_STEPS: dict[str, list[WizardStep]] = {
    ConnectorType.API.value: _API_STEPS,
    ConnectorType.SFTP.value: _SFTP_STEPS,
    ConnectorType.EDI.value: _EDI_STEPS,
    ConnectorType.WEBHOOK.value: _WEBHOOK_STEPS,
}


def get_vendor_templates() -> list[VendorTemplate]:
    return [t.model_copy(deep=True) for t in VENDOR_TEMPLATES]


def get_wizard_steps(vendor_type: str) -> list[WizardStep]:
    """Étapes pour un type d'intégration. Type inconnu → infos de base seules."""
    key = vendor_type.strip().lower()
    return [BASIC_INFO_STEP, *WIZARD_STEPS.get(key, [])]
