"""
TD Synnex — API v2, catalogue sous /products.
"""

from __future__ import annotations

from connectors.distributors.base import DistributorConnector


class TDSynnexConnector(DistributorConnector):
    CONNECTOR_NAME = "td_synnex"
    DEFAULT_BASE_URL = "https://api.tdsynnex.com/v2"
    PRODUCTS_PATH = "/products"
