"""
Settings — Configuration centralisée.

Toutes les variables d'environnement sont validées ICI.
Aucun os.getenv() ailleurs dans le code.

Usage :
    from services.config import get_settings

    settings = get_settings()
    settings.retry_attempts
    settings.http_timeout_seconds
    settings.demo_fallback_enabled
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Environnement d'exécution."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """
    Configuration centralisée de VendorLink.

    Charge depuis .env ou variables d'environnement (préfixe VENDORLINK_).
    Chaque champ a une valeur par défaut raisonnable pour le dev.
    """

    # ── Environnement ──
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False
    app_name: str = "vendorlink"
    app_version: str = "0.1.0"

    # ── HTTP / retry ──
    http_timeout_seconds: float = Field(default=30.0, gt=0, le=600)
    retry_attempts: int = Field(default=3, ge=1, le=10)
    retry_base_delay_seconds: float = Field(
        default=1.0,
        ge=0,
        le=30.0,
        description="Délai de base du backoff (base * 2^tentative)",
    )

    # ── Sync ──
    sync_batch_size: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Nombre de SKUs par appel fournisseur pendant une sync",
    )

    # ── SP Richards ──
    token_refresh_skew_seconds: float = Field(
        default=60.0,
        ge=0,
        description="Un token qui expire dans moins que ça est renouvelé avant usage",
    )

    # ── SFTP ──
    default_sftp_port: int = Field(default=22, ge=1, le=65535)
    sftp_connect_timeout_seconds: float = Field(default=10.0, gt=0, le=120)

    # ── Registry / démo ──
    demo_fallback_enabled: bool = Field(
        default=False,
        description="Replie sur les données de démo si un grossiste échoue (jamais en prod)",
    )
    seed_default_vendors: bool = Field(
        default=True,
        description="Charge le catalogue des distributeurs connus au démarrage",
    )

    # ── Logging ──
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    # ── Validators ──

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v_lower = v.lower()
        if v_lower not in {"json", "text"}:
            raise ValueError("log_format must be 'json' or 'text'")
        return v_lower

    # ── Properties ──

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    @property
    def json_logs(self) -> bool:
        return self.log_format == "json"

    model_config = SettingsConfigDict(
        env_prefix="VENDORLINK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Singleton des settings.

    Chargé une seule fois, mis en cache.
    Usage : from services.config import get_settings
    """
    return Settings()
