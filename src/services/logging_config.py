"""
Logging — Configuration au démarrage du process.

Les modules loggent via logging.getLogger("vendorlink.<...>") et ne
configurent JAMAIS de handler eux-mêmes. Seul le point d'entrée
appelle configure_logging().
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from services.config import Settings, get_settings

_EXTRA_FIELDS = ("vendor_id", "tenant_id", "connector")


class JSONFormatter(logging.Formatter):
    """Une ligne JSON par record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["error"] = str(record.exc_info[1])
            log_data["traceback"] = self.formatException(record.exc_info)
        for field in _EXTRA_FIELDS:
            if hasattr(record, field):
                log_data[field] = str(getattr(record, field))
        return json.dumps(log_data)


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    stream=None,
) -> None:
    """Configure le logger racine "vendorlink".

    Args:
        level: DEBUG, INFO, WARNING, ERROR, CRITICAL
        json_format: JSON (prod) ou texte lisible (dev)
        stream: Flux de sortie, stdout par défaut
    """
    numeric_level = getattr(logging, level.upper())
    logger = logging.getLogger("vendorlink")
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(numeric_level)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s")
        )
    logger.addHandler(handler)

    # paramiko logge chaque handshake en INFO
    logging.getLogger("paramiko").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def configure_from_settings(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.json_logs)
