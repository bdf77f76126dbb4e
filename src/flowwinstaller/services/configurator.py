"""Interactive configuration collection for flowwinstaller."""

from typing import Iterable

import requests
from rich.markup import escape
from rich.panel import Panel

from flowwinstaller.constants import AUTH_TYPE, PUBLIC_IP_ENDPOINTS, UNKNOWN_IP
from flowwinstaller.models import InstallationConfig, is_local_domain

SECTION_RULE = "━" * 39


class ConfiguratorService:
    """Prompts the operator for every installation value and applies defaults."""

    def __init__(
        self,
        logger,
        console,
        prompts,
        requests_module=requests,
        ip_endpoints: Iterable[str] = PUBLIC_IP_ENDPOINTS,
        ip_lookup_timeout: float = 5.0,
    ):
        self.logger = logger
        self.console = console
        self.prompts = prompts
        self.requests = requests_module
        self.ip_endpoints = tuple(ip_endpoints)
        self.ip_lookup_timeout = ip_lookup_timeout

    def collect(self) -> InstallationConfig:
        self.console.print("[blue]ℹ[/blue] Starting interactive setup...")
        self.console.print()

        self._section("1. Domain Configuration")
        self.console.print("Enter your domain (e.g., floww.example.com)")
        self.console.print("Or press Enter to use 'localhost' for testing")
        domain = self.prompts.ask("Domain", default="localhost") or "localhost"

        if not is_local_domain(domain):
            self._show_dns_instructions(domain, self.get_server_ip())
            self.prompts.pause("Press Enter once DNS is configured (or continue anyway)...")

        self.console.print()
        default_email = f"admin@{domain}"
        admin_email = (
            self.prompts.ask("Admin email (for SSL certificates)", default=default_email)
            or default_email
        )

        self.console.print()
        self._section("2. Organization Details")
        org_name = self.prompts.ask("Organization name (slug)", default="default") or "default"
        org_display_name = (
            self.prompts.ask("Organization display name", default="My Organization")
            or "My Organization"
        )

        self.console.print()
        self._section("3. Docker Registry (Optional)")
        registry_enabled = self.prompts.confirm(
            "Enable private Docker registry authentication?", default=False
        )
        registry_user = ""
        registry_password = ""
        if registry_enabled:
            registry_user = self.prompts.ask("Registry username")
            registry_password = self.prompts.ask("Registry password", password=True)

        config = InstallationConfig(
            domain=domain,
            admin_email=admin_email,
            org_name=org_name,
            org_display_name=org_display_name,
            registry_enabled=registry_enabled,
            registry_user=registry_user,
            registry_password=registry_password,
            auth_type=AUTH_TYPE,
        )
        self.logger.debug("Collected configuration: %r", config)
        return config

    def get_server_ip(self) -> str:
        """Best-effort public IP lookup; returns ``unknown`` when every endpoint fails."""
        for endpoint in self.ip_endpoints:
            try:
                response = self.requests.get(endpoint, timeout=self.ip_lookup_timeout)
                response.raise_for_status()
            except self.requests.RequestException as exc:
                self.logger.debug("Public IP lookup via %s failed: %s", endpoint, exc)
                continue

            address = (response.text or "").strip()
            if address:
                return address

        return UNKNOWN_IP

    def _section(self, title: str):
        self.console.print(SECTION_RULE)
        self.console.print(title)
        self.console.print(SECTION_RULE)
        self.console.print()

    def _show_dns_instructions(self, domain: str, server_ip: str):
        self.console.print()
        self.console.print("[yellow]⚠[/yellow] DNS Configuration Required:")
        self.console.print()
        self.console.print("  Add this A record to your DNS provider:")
        record = "\n".join(
            [
                "Type: A",
                f"Name: {escape(domain)}",
                f"Value: {escape(server_ip)}",
                "TTL: 3600",
            ]
        )
        self.console.print(Panel(record, expand=False))
        self.console.print()
