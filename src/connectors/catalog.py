"""
Catalogue des distributeurs connus, chargé dans le registry au démarrage.

C'est le CATALOGUE de tout ce que VendorLink sait joindre sans
onboarding : chaque entrée suffit à construire un connecteur universel.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from models.registry_entry import (
    IntegrationMethod,
    RegistryStatus,
    RegistryVendorType,
    VendorCapabilities,
    VendorContact,
    VendorRegistryEntry,
)
from models.vendor_config import (
    AuthenticationMode,
    ConnectorType,
    RateLimits,
    VendorConfig,
    VendorEndpoints,
    VendorFeatures,
)

_FULL_FEATURES = VendorFeatures(
    product_catalog=True,
    real_time_inventory=True,
    real_time_pricing=True,
    order_management=True,
    bulk_operations=True,
    webhooks=True,
)

_BATCH_FEATURES = VendorFeatures(
    product_catalog=True,
    real_time_inventory=False,
    real_time_pricing=True,
    order_management=True,
    bulk_operations=False,
    webhooks=False,
)


def _entry(
    id: str,
    name: str,
    description: str,
    website: str,
    contact: tuple[str, str, str],
    methods: list[str],
    authentication: AuthenticationMode,
    rate_limits: tuple[int, int, int],
    base_url: str,
    paths: tuple[str, str, str, str],
    features: VendorFeatures,
    auth_path: Optional[str] = None,
    real_time_sync: bool = True,
) -> dict[str, Any]:
    email, phone, address = contact
    per_minute, per_hour, per_day = rate_limits
    products, inventory, pricing, orders = paths
    return {
        "id": id,
        "name": name,
        "type": RegistryVendorType.DISTRIBUTOR,
        "description": description,
        "website": website,
        "contact": VendorContact(email=email, phone=phone, address=address),
        "capabilities": VendorCapabilities(
            products=True,
            inventory=True,
            pricing=True,
            orders=True,
            real_time_sync=real_time_sync,
        ),
        "integration_methods": [IntegrationMethod(m) for m in methods],
        "config": VendorConfig(
            name=f"{name} API",
            type=ConnectorType.API,
            authentication=authentication,
            rate_limits=RateLimits(
                requests_per_minute=per_minute,
                requests_per_hour=per_hour,
                requests_per_day=per_day,
            ),
            endpoints=VendorEndpoints(
                base_url=base_url,
                products=products,
                inventory=inventory,
                pricing=pricing,
                orders=orders,
                auth=auth_path,
            ),
            features=features,
        ),
        "status": RegistryStatus.ACTIVE,
    }


DEFAULT_VENDORS: list[dict[str, Any]] = [
    _entry(
        "sp-richards", "SP Richards",
        "SP Richards is a leading wholesale distributor of office products and supplies",
        "https://www.sprichards.com",
        ("support@sprichards.com", "1-800-SPRICHARDS",
         "SP Richards Co., 1000 Richards Blvd, Atlanta, GA 30319"),
        ["api", "sftp", "edi"],
        AuthenticationMode.OAUTH2, (60, 1000, 10000),
        "https://api.sprichards.com/v1",
        ("/products", "/inventory", "/pricing", "/orders"),
        _FULL_FEATURES,
        auth_path="/auth/token",
    ),
    _entry(
        "newwave", "Newwave",
        "Newwave is a technology distributor specializing in IT products and solutions",
        "https://www.newwave.com",
        ("support@newwave.com", "1-800-NEWWAVE",
         "Newwave, 2000 Tech Drive, San Jose, CA 95110"),
        ["api", "sftp"],
        AuthenticationMode.API_KEY, (30, 500, 5000),
        "https://api.newwave.com/v2",
        ("/catalog", "/stock", "/prices", "/orders"),
        _FULL_FEATURES.model_copy(update={"webhooks": False}),
    ),
    _entry(
        "supplies-network", "SuppliesNetwork",
        "SuppliesNetwork is a B2B marketplace for office supplies and equipment",
        "https://www.suppliesnetwork.com",
        ("support@suppliesnetwork.com", "1-800-SUPPLIES",
         "SuppliesNetwork, 3000 Supply Ave, Chicago, IL 60601"),
        ["api", "edi"],
        AuthenticationMode.BASIC, (20, 300, 3000),
        "https://api.suppliesnetwork.com/v1",
        ("/items", "/availability", "/costs", "/purchase-orders"),
        _BATCH_FEATURES,
        real_time_sync=False,
    ),
    _entry(
        "asi", "ASI",
        "ASI is a promotional products distributor with extensive catalog",
        "https://www.asicentral.com",
        ("support@asicentral.com", "1-800-ASI-HELP",
         "ASI, 4000 Promo Way, Trevose, PA 19053"),
        ["api", "edi", "sftp"],
        AuthenticationMode.OAUTH2, (40, 600, 6000),
        "https://api.asicentral.com/v3",
        ("/catalog", "/availability", "/pricing", "/orders"),
        _FULL_FEATURES,
        auth_path="/oauth/token",
    ),
    _entry(
        "bluestar", "BlueStar",
        "BlueStar is a technology distributor specializing in point-of-sale and payment solutions",
        "https://www.bluestarinc.com",
        ("support@bluestarinc.com", "1-800-BLUESTAR",
         "BlueStar, 5000 Tech Blvd, Charlotte, NC 28202"),
        ["api", "edi"],
        AuthenticationMode.API_KEY, (50, 800, 8000),
        "https://api.bluestarinc.com/v2",
        ("/products", "/inventory", "/pricing", "/orders"),
        _FULL_FEATURES,
    ),
    _entry(
        "azerty", "Azerty",
        "Azerty is a technology distributor serving the Midwest region",
        "https://www.azerty.com",
        ("support@azerty.com", "1-800-AZERTY",
         "Azerty, 6000 Midwest Ave, Minneapolis, MN 55401"),
        ["api", "sftp"],
        AuthenticationMode.BASIC, (25, 400, 4000),
        "https://api.azerty.com/v1",
        ("/catalog", "/stock", "/prices", "/orders"),
        _BATCH_FEATURES,
        real_time_sync=False,
    ),
    _entry(
        "arbitech", "Arbitech",
        "Arbitech is a technology distributor specializing in networking and security solutions",
        "https://www.arbitech.com",
        ("support@arbitech.com", "1-800-ARBITECH",
         "Arbitech, 7000 Network Dr, Irvine, CA 92618"),
        ["api", "edi"],
        AuthenticationMode.OAUTH2, (35, 550, 5500),
        "https://api.arbitech.com/v2",
        ("/products", "/availability", "/pricing", "/orders"),
        _FULL_FEATURES,
        auth_path="/oauth/token",
    ),
    _entry(
        "sed-int", "SED International",
        "SED International is a global technology distributor",
        "https://www.sedintl.com",
        ("support@sedintl.com", "1-800-SED-INTL",
         "SED International, 8000 Global Way, Atlanta, GA 30328"),
        ["api", "edi", "sftp"],
        AuthenticationMode.API_KEY, (45, 700, 7000),
        "https://api.sedintl.com/v2",
        ("/catalog", "/inventory", "/pricing", "/orders"),
        _FULL_FEATURES,
    ),
]


def default_entries() -> list[VendorRegistryEntry]:
    """Entrées fraîches (horodatées maintenant) pour un nouveau registry."""
    now = datetime.now(tz=timezone.utc)
    return [
        VendorRegistryEntry(**data, created_at=now, updated_at=now)
        for data in DEFAULT_VENDORS
    ]
