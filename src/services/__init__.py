"""
VendorLink Services — Config partagée et onboarding.

UNE config, partagée partout.

Modules :
  - config.py             → Settings centralisés (.env → Pydantic)
  - logging_config.py     → Bootstrap du logging (JSON ou texte)
  - templates.py          → Templates d'intégration + assistant de connexion
  - vendor_management.py  → Onboarding d'un fournisseur (test → registry)

vendor_management s'importe explicitement : il dépend de connectors,
qui dépend lui-même de services.config.
"""

from services.config import Settings, get_settings
from services.logging_config import configure_logging

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
]
