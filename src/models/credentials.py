"""
VendorCredentials — Matériel d'authentification d'un fournisseur.

Une union taguée par mode d'auth (discriminant `auth_type`) :
un connecteur n'accepte que les champs que son protocole utilise.

Design decisions :
- Pydantic v2, modèles immuables
- Champs communs (endpoint, headers, params) dans une base partagée
- parse_credentials() convertit l'ancien "sac" plat (apiKey, sftpHost, ...)
  venant de la persistance vers la bonne variante
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator


class AuthType(str, Enum):
    """Variantes de credentials supportées."""

    API_KEY = "api_key"
    OAUTH2 = "oauth2"
    BASIC = "basic"
    SFTP = "sftp"
    EDI = "edi"
    CUSTOM = "custom"


# ──────────────────────────────────────────────
# VARIANTES
# ──────────────────────────────────────────────


class BaseCredentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    endpoint: Optional[str] = Field(
        default=None,
        description="Override de l'URL de base du fournisseur",
    )
    custom_headers: dict[str, str] = Field(default_factory=dict)
    custom_params: dict[str, Any] = Field(default_factory=dict)


class ApiKeyCredentials(BaseCredentials):
    auth_type: Literal["api_key"] = "api_key"
    api_key: str = Field(..., min_length=1)
    api_secret: Optional[str] = None


class OAuth2Credentials(BaseCredentials):
    """Soit un access token déjà obtenu, soit un couple client id/secret
    échangé contre un token (client credentials)."""

    auth_type: Literal["oauth2"] = "oauth2"
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None

    @model_validator(mode="after")
    def check_token_or_client(self) -> "OAuth2Credentials":
        if not self.access_token and not (self.client_id and self.client_secret):
            raise ValueError(
                "oauth2 credentials need an access_token or a client_id/client_secret pair"
            )
        return self

    @property
    def has_client_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret)


class BasicAuthCredentials(BaseCredentials):
    auth_type: Literal["basic"] = "basic"
    username: str = Field(..., min_length=1)
    password: str


class SftpCredentials(BaseCredentials):
    auth_type: Literal["sftp"] = "sftp"
    host: str = Field(..., min_length=1)
    port: int = Field(default=22, ge=1, le=65535)
    username: str = Field(..., min_length=1)
    password: Optional[str] = None
    private_key: Optional[str] = Field(
        default=None,
        description="Chemin vers la clé privée, ou contenu PEM",
    )
    passphrase: Optional[str] = None

    @model_validator(mode="after")
    def check_secret(self) -> "SftpCredentials":
        if not self.password and not self.private_key:
            raise ValueError("sftp credentials need a password or a private_key")
        return self


class EdiCredentials(BaseCredentials):
    auth_type: Literal["edi"] = "edi"
    partner_id: Optional[str] = None
    sender_id: Optional[str] = None
    receiver_id: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.partner_id and self.sender_id and self.receiver_id)


class CustomCredentials(BaseCredentials):
    """Auth entièrement portée par custom_headers / custom_params."""

    auth_type: Literal["custom"] = "custom"


VendorCredentials = Annotated[
    Union[
        ApiKeyCredentials,
        OAuth2Credentials,
        BasicAuthCredentials,
        SftpCredentials,
        EdiCredentials,
        CustomCredentials,
    ],
    Field(discriminator="auth_type"),
]

_credentials_adapter: TypeAdapter = TypeAdapter(VendorCredentials)


# ──────────────────────────────────────────────
# PARSING
# ──────────────────────────────────────────────


def parse_credentials(data: Any) -> BaseCredentials:
    """Construit la bonne variante à partir d'un dict.

    Accepte soit un dict déjà tagué (`auth_type`), soit le sac plat
    historique en camelCase. L'ordre de détection suit la précédence
    des headers : clé API, puis OAuth, puis basic, puis SFTP, puis EDI.
    """
    if isinstance(data, BaseCredentials):
        return data
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise TypeError(f"Cannot parse credentials from {type(data).__name__}")

    if "auth_type" in data:
        return _credentials_adapter.validate_python(data)

    common: dict[str, Any] = {
        "endpoint": data.get("endpoint"),
        "custom_headers": data.get("customHeaders") or data.get("custom_headers") or {},
        "custom_params": data.get("customParams") or data.get("custom_params") or {},
    }

    def pick(*keys: str) -> Any:
        for key in keys:
            if data.get(key) not in (None, ""):
                return data[key]
        return None

    api_key = pick("apiKey", "api_key")
    access_token = pick("accessToken", "access_token")
    client_id = pick("clientId", "client_id")
    client_secret = pick("clientSecret", "client_secret")
    username = pick("username")
    password = pick("password")
    sftp_host = pick("sftpHost", "host")
    partner_id = pick("ediPartnerId", "partner_id")

    if api_key:
        return ApiKeyCredentials(
            api_key=api_key,
            api_secret=pick("apiSecret", "api_secret"),
            **common,
        )
    if access_token or (client_id and client_secret):
        return OAuth2Credentials(
            access_token=access_token,
            refresh_token=pick("refreshToken", "refresh_token"),
            client_id=client_id,
            client_secret=client_secret,
            **common,
        )
    if sftp_host:
        return SftpCredentials(
            host=sftp_host,
            port=pick("sftpPort", "port") or 22,
            username=pick("sftpUsername", "username"),
            password=pick("sftpPassword", "password"),
            private_key=pick("sftpPrivateKey", "private_key"),
            passphrase=pick("passphrase"),
            **common,
        )
    if username and password:
        return BasicAuthCredentials(username=username, password=password, **common)
    if partner_id or pick("ediSenderId", "ediReceiverId"):
        return EdiCredentials(
            partner_id=partner_id,
            sender_id=pick("ediSenderId", "sender_id"),
            receiver_id=pick("ediReceiverId", "receiver_id"),
            **common,
        )
    return CustomCredentials(**common)
