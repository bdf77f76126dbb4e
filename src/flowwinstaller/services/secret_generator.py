"""Secret generation for flowwinstaller."""

import base64
import secrets
from typing import Dict, Tuple

from flowwinstaller.models import InstallSecrets

# field name -> (encoding, raw byte length)
SECRET_SPECS: Dict[str, Tuple[str, int]] = {
    "db_password": ("hex", 16),
    "centrifugo_api_key": ("hex", 32),
    "session_secret_key": ("hex", 64),
    "encryption_key": ("base64", 32),
    "workflow_jwt_secret": ("hex", 64),
    "centrifugo_jwt_secret": ("hex", 64),
    "registry_random_secret": ("hex", 32),
}


class SecretGeneratorService:
    """Draws every installation secret independently from the OS CSPRNG."""

    def __init__(self, logger, console, token_bytes=secrets.token_bytes):
        self.logger = logger
        self.console = console
        self.token_bytes = token_bytes

    def generate(self) -> InstallSecrets:
        self.console.print("[blue]ℹ[/blue] Generating secure secrets...")
        values = {
            name: self._encode(self.token_bytes(size), encoding)
            for name, (encoding, size) in SECRET_SPECS.items()
        }
        self.console.print("[green]✓[/green] Secrets generated")
        self.logger.info("Generated %s secrets", len(values))
        return InstallSecrets(**values)

    @staticmethod
    def _encode(raw: bytes, encoding: str) -> str:
        if encoding == "hex":
            return raw.hex()
        if encoding == "base64":
            return base64.b64encode(raw).decode("ascii")
        raise ValueError(f"Unsupported secret encoding: {encoding}")
