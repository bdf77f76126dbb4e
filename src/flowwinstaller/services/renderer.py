"""Template rendering and environment file generation for flowwinstaller."""

import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from flowwinstaller.constants import (
    COMPOSE_FILE,
    COMPOSE_TEMPLATE,
    ENV_FILE,
    LOGS_DIR,
    PROXY_FILE,
    PROXY_TEMPLATE,
)
from flowwinstaller.errors import InstallerError
from flowwinstaller.errors_catalog import actionable_error
from flowwinstaller.models import InstallationConfig

PLACEHOLDER_PATTERN = re.compile(r"\{\{([A-Za-z_][A-Za-z0-9_]*)\}\}")


@dataclass(frozen=True)
class RenderedArtifacts:
    compose_file: Path
    proxy_file: Path
    env_file: Path
    logs_dir: Path


class TemplateRendererService:
    """Substitutes ``{{NAME}}`` placeholders and writes the deployable configuration."""

    def __init__(self, logger, console, strict_placeholders: bool = False):
        self.logger = logger
        self.console = console
        self.strict_placeholders = strict_placeholders

    def substitute(self, text: str, values: Mapping[str, Optional[str]], name: str = "template") -> str:
        """Replace known placeholders; unset values become empty strings.

        Placeholders outside ``values`` are kept verbatim, or rejected when
        strict placeholder checking is enabled.
        """
        unknown: List[str] = []

        def _replace(match):
            key = match.group(1)
            if key in values:
                value = values[key]
                return "" if value is None else str(value)
            if key not in unknown:
                unknown.append(key)
            return match.group(0)

        rendered = PLACEHOLDER_PATTERN.sub(_replace, text)

        if unknown:
            if self.strict_placeholders:
                raise InstallerError(
                    actionable_error("unknown_placeholders", name=name, names=", ".join(unknown))
                )
            self.logger.warning(
                "Leaving unknown placeholders in %s untouched: %s", name, ", ".join(unknown)
            )

        return rendered

    @staticmethod
    def compose_values(config: InstallationConfig) -> Dict[str, str]:
        return {
            "DOMAIN": config.domain,
            "PROTOCOL": config.protocol,
            "WS_PROTOCOL": config.ws_protocol,
            "AUTH_TYPE": config.auth_type,
            "ORG_NAME": config.org_name,
            "ORG_DISPLAY_NAME": config.org_display_name,
        }

    @staticmethod
    def proxy_values(config: InstallationConfig) -> Dict[str, str]:
        return {
            "DOMAIN": config.proxy_domain,
            "ADMIN_EMAIL": config.admin_email,
        }

    def build_env_file(self, config: InstallationConfig, generated_at: datetime) -> str:
        if config.secrets is None:
            raise InstallerError("Secrets must be generated before writing the environment file.")

        timestamp = generated_at.strftime("%Y-%m-%d %H:%M:%S UTC")
        lines = [
            "# Floww Configuration",
            f"# Generated: {timestamp}",
            "",
            "# Domain and Protocol",
            f"DOMAIN={config.domain}",
            f"PROTOCOL={config.protocol}",
            f"WS_PROTOCOL={config.ws_protocol}",
            "",
            "# Authentication (password-based for self-hosting)",
            f"AUTH_TYPE={config.auth_type}",
            "",
            "# Organization",
            f"ORG_NAME={config.org_name}",
            f"ORG_DISPLAY_NAME={config.org_display_name}",
            "",
            "# Security Secrets",
        ]
        lines.extend(f"{key}={value}" for key, value in config.secrets.env_items())
        lines.extend(
            [
                "",
                "# Docker Registry (Optional)",
                f"DOCKER_REGISTRY_USER={config.registry_user}",
                f"DOCKER_REGISTRY_PASSWORD={config.registry_password}",
                "",
                "# Admin",
                f"ADMIN_EMAIL={config.admin_email}",
            ]
        )
        return "\n".join(lines) + "\n"

    def render(self, config: InstallationConfig, install_dir: Path, generated_at: datetime) -> RenderedArtifacts:
        self.console.print("[blue]ℹ[/blue] Processing templates...")
        install_dir = Path(install_dir)

        compose_template = install_dir / COMPOSE_TEMPLATE[1]
        proxy_template = install_dir / PROXY_TEMPLATE[1]

        compose_file = install_dir / COMPOSE_FILE
        self._write(
            compose_file,
            self.substitute(
                self._read(compose_template),
                self.compose_values(config),
                name=COMPOSE_FILE,
            ),
        )

        proxy_file = install_dir / PROXY_FILE
        self._write(
            proxy_file,
            self.substitute(
                self._read(proxy_template),
                self.proxy_values(config),
                name=PROXY_FILE,
            ),
        )

        env_file = install_dir / ENV_FILE
        self._write(env_file, self.build_env_file(config, generated_at))

        logs_dir = install_dir / LOGS_DIR
        logs_dir.mkdir(parents=True, exist_ok=True)

        for template in (compose_template, proxy_template):
            template.unlink()
            self.logger.debug("Removed template: %s", template)

        self.console.print("[green]✓[/green] Configuration files created")
        return RenderedArtifacts(
            compose_file=compose_file,
            proxy_file=proxy_file,
            env_file=env_file,
            logs_dir=logs_dir,
        )

    @staticmethod
    def _read(path: Path) -> str:
        # Bytes outside UTF-8 and CRLF line endings pass through untouched.
        try:
            with open(path, encoding="utf-8", errors="surrogateescape", newline="") as file_obj:
                return file_obj.read()
        except OSError as exc:
            raise InstallerError(f"Could not read template {path}: {exc}") from exc

    @staticmethod
    def _write(path: Path, content: str):
        with open(path, "w", encoding="utf-8", errors="surrogateescape", newline="") as file_obj:
            file_obj.write(content)
