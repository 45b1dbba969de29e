"""
SftpStrategy — Fournisseurs qui déposent des fichiers sur un SFTP.

Seule la validation est implémentée : handshake SSH + ouverture
d'une session SFTP, puis fermeture. Le téléchargement et le parsing
des fichiers produits/stock/prix ne sont pas supportés et échouent
explicitement.

paramiko est bloquant : le handshake tourne dans un thread
(asyncio.to_thread) pour ne pas geler la boucle.
"""

from __future__ import annotations

import asyncio
import io
import os
from typing import Any, Callable, Optional

import paramiko

from connectors.universal.strategy import ProtocolStrategy
from models.credentials import SftpCredentials
from models.vendor_config import ConnectorType

_KEY_CLASSES = (paramiko.RSAKey, paramiko.ECDSAKey, paramiko.Ed25519Key)


def load_private_key(value: str, passphrase: Optional[str] = None) -> paramiko.PKey:
    """Charge une clé privée depuis un chemin de fichier ou un contenu PEM."""
    is_path = "\n" not in value and os.path.isfile(value)
    last_error: Optional[Exception] = None
    for key_class in _KEY_CLASSES:
        try:
            if is_path:
                return key_class.from_private_key_file(value, password=passphrase)
            return key_class.from_private_key(io.StringIO(value), password=passphrase)
        except paramiko.SSHException as e:
            last_error = e
    raise paramiko.SSHException(f"Unsupported private key format: {last_error}")


class SftpStrategy(ProtocolStrategy):
    PROTOCOL = ConnectorType.SFTP.value

    DEFAULT_CONNECT_TIMEOUT = 10.0

    def __init__(
        self,
        connector,
        client_factory: Callable[[], Any] = paramiko.SSHClient,
        connect_timeout: Optional[float] = None,
    ):
        super().__init__(connector)
        self._client_factory = client_factory
        self.connect_timeout = connect_timeout or self.DEFAULT_CONNECT_TIMEOUT

    async def validate_credentials(self) -> bool:
        creds = self.credentials
        if not isinstance(creds, SftpCredentials):
            self.logger.error(
                f"SFTP vendor needs sftp credentials, got {type(creds).__name__}"
            )
            return False
        try:
            await asyncio.to_thread(self._handshake, creds)
        except (paramiko.SSHException, OSError) as e:
            self.logger.error(f"SFTP connection to {creds.host}:{creds.port} failed: {e}")
            return False
        self.logger.info(f"SFTP connection to {creds.host}:{creds.port} verified")
        return True

    def _handshake(self, creds: SftpCredentials) -> None:
        """Ouvre puis referme la connexion, succès ou échec."""
        client = self._client_factory()
        try:
            client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
            connect_kwargs: dict[str, Any] = {
                "hostname": creds.host,
                "port": creds.port,
                "username": creds.username,
                "timeout": self.connect_timeout,
                "look_for_keys": False,
                "allow_agent": False,
            }
            if creds.private_key:
                connect_kwargs["pkey"] = load_private_key(creds.private_key, creds.passphrase)
            else:
                connect_kwargs["password"] = creds.password
            client.connect(**connect_kwargs)
            sftp = client.open_sftp()
            sftp.close()
        finally:
            client.close()
