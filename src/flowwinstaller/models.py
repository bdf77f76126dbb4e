"""Shared domain models for flowwinstaller."""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from .constants import AUTH_TYPE, LOCAL_DOMAINS


def is_local_domain(domain: str) -> bool:
    return domain in LOCAL_DOMAINS


def derive_protocols(domain: str) -> Tuple[str, str]:
    """Return ``(protocol, ws_protocol)`` for a domain.

    Local domains are served over plain HTTP; every other domain gets TLS.
    """
    if is_local_domain(domain):
        return "http", "ws"
    return "https", "wss"


@dataclass(frozen=True)
class InstallSecrets:
    """Random secrets embedded into the generated environment file."""

    db_password: str = field(repr=False)
    centrifugo_api_key: str = field(repr=False)
    session_secret_key: str = field(repr=False)
    encryption_key: str = field(repr=False)
    workflow_jwt_secret: str = field(repr=False)
    centrifugo_jwt_secret: str = field(repr=False)
    registry_random_secret: str = field(repr=False)

    def env_items(self) -> List[Tuple[str, str]]:
        return [
            ("DB_PASSWORD", self.db_password),
            ("CENTRIFUGO_API_KEY", self.centrifugo_api_key),
            ("SESSION_SECRET_KEY", self.session_secret_key),
            ("ENCRYPTION_KEY", self.encryption_key),
            ("WORKFLOW_JWT_SECRET", self.workflow_jwt_secret),
            ("CENTRIFUGO_JWT_SECRET", self.centrifugo_jwt_secret),
            ("REGISTRY_RANDOM_SECRET", self.registry_random_secret),
        ]


@dataclass(frozen=True)
class InstallationConfig:
    """Values collected for a single installer run."""

    domain: str = "localhost"
    admin_email: str = ""
    org_name: str = "default"
    org_display_name: str = "My Organization"
    registry_enabled: bool = False
    registry_user: str = ""
    registry_password: str = field(default="", repr=False)
    auth_type: str = AUTH_TYPE
    secrets: Optional[InstallSecrets] = field(default=None, repr=False)

    def __post_init__(self):
        if not self.admin_email:
            object.__setattr__(self, "admin_email", f"admin@{self.domain}")

    @property
    def is_local(self) -> bool:
        return is_local_domain(self.domain)

    @property
    def protocol(self) -> str:
        return derive_protocols(self.domain)[0]

    @property
    def ws_protocol(self) -> str:
        return derive_protocols(self.domain)[1]

    @property
    def proxy_domain(self) -> str:
        # An explicit scheme keeps Caddy from requesting certificates for local hosts.
        if self.is_local:
            return f"http://{self.domain}"
        return self.domain

    def with_secrets(self, secrets: InstallSecrets) -> "InstallationConfig":
        return replace(self, secrets=secrets)
