"""
Onboarding — Demande de connexion d'un nouveau fournisseur et résultat.

Plus les formes décrivant les templates et l'assistant de connexion
affichés par le dashboard.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from models.credentials import BaseCredentials, parse_credentials
from models.sync import VendorConnectionTest
from models.vendor_config import (
    AuthenticationMode,
    ConnectorType,
    FieldMapping,
    RateLimits,
    VendorEndpoints,
    VendorFeatures,
)


class VendorConnectionRequest(BaseModel):
    """Ce que l'utilisateur saisit pour brancher un fournisseur inconnu."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    type: ConnectorType = ConnectorType.API
    authentication: AuthenticationMode = AuthenticationMode.API_KEY
    credentials: BaseCredentials
    endpoints: Optional[VendorEndpoints] = None
    mappings: Optional[FieldMapping] = None
    rate_limits: Optional[RateLimits] = None
    features: Optional[VendorFeatures] = None

    @field_validator("credentials", mode="before")
    @classmethod
    def coerce_credentials(cls, v: Any) -> BaseCredentials:
        return parse_credentials(v)

    @field_validator("type")
    @classmethod
    def reject_custom(cls, v: ConnectorType) -> ConnectorType:
        if v == ConnectorType.CUSTOM:
            raise ValueError("type must be one of api, sftp, edi, webhook")
        return v


class VendorConnectionResult(BaseModel):
    success: bool
    vendor_id: str = ""
    message: str
    test_results: Optional[VendorConnectionTest] = None
    errors: list[str] = Field(default_factory=list)


# ──────────────────────────────────────────────
# TEMPLATES / ASSISTANT
# ──────────────────────────────────────────────


class VendorTemplate(BaseModel):
    """Préréglage de VendorConnectionRequest (hors nom et credentials)."""

    id: str
    name: str
    description: str
    type: ConnectorType
    template: dict[str, Any] = Field(default_factory=dict)


class WizardFieldOption(BaseModel):
    value: str
    label: str


class WizardField(BaseModel):
    name: str
    label: str
    type: Literal["text", "password", "url", "number", "select"] = "text"
    required: bool = False
    options: Optional[list[WizardFieldOption]] = None
    placeholder: Optional[str] = None
    help: Optional[str] = None


class WizardStep(BaseModel):
    id: str
    title: str
    description: str
    fields: list[WizardField] = Field(default_factory=list)
