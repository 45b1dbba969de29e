"""
D&H Distributing — Catalogue sous /catalog.
"""

from __future__ import annotations

from connectors.distributors.base import DistributorConnector


class DHConnector(DistributorConnector):
    CONNECTOR_NAME = "dh_distributing"
    DEFAULT_BASE_URL = "https://api.dh.com/v1"
    PRODUCTS_PATH = "/catalog"
