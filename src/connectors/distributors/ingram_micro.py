"""
Ingram Micro — Catalogue sous /catalog/products.
"""

from __future__ import annotations

from connectors.distributors.base import DistributorConnector


class IngramMicroConnector(DistributorConnector):
    CONNECTOR_NAME = "ingram_micro"
    DEFAULT_BASE_URL = "https://api.ingrammicro.com/v1"
    PRODUCTS_PATH = "/catalog/products"
