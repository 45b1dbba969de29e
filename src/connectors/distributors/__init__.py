"""
Connecteurs dédiés aux grossistes (API REST).
"""

from connectors.distributors.base import DistributorConnector
from connectors.distributors.ingram_micro import IngramMicroConnector
from connectors.distributors.td_synnex import TDSynnexConnector
from connectors.distributors.dh_distributing import DHConnector
from connectors.distributors.sp_richards import SPRichardsConnector

__all__ = [
    "DistributorConnector",
    "IngramMicroConnector",
    "TDSynnexConnector",
    "DHConnector",
    "SPRichardsConnector",
]
