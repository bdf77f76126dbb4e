import logging
import os

import click
from rich.logging import RichHandler

from .constants import READINESS_ATTEMPTS, READINESS_INTERVAL_SECONDS, REQUIRED_TOOLS
from .core import FlowwInstaller, InstallerError
from .services.config_loader import ConfigLoader


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


# Console progress is printed by the installer itself; the handler only surfaces problems.
_console_handler = RichHandler(rich_tracebacks=True, show_level=False, show_path=False)
_console_handler.setLevel(logging.WARNING)

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[_console_handler],
)


@click.command()
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help="Path to a YAML configuration file. Defaults to .flowwinstaller.yml if present.",
)
@click.option(
    "--install-dir",
    required=False,
    type=click.Path(),
    help="Installation directory (default: ./floww).",
)
@click.option(
    "--templates-url",
    required=False,
    envvar="TEMPLATES_URL",
    help="Base location of the templates: https:// or http:// URL, file:// URL, or local directory.",
)
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
@click.option(
    "--skip-start",
    is_flag=True,
    default=None,
    help="Only generate configuration files; do not pull or start services.",
)
@click.option(
    "--strict-placeholders",
    is_flag=True,
    default=None,
    help="Fail when a template contains placeholders the installer does not know.",
)
def main(config, install_dir, templates_url, verbose, log_file, skip_start, strict_placeholders):
    """Install a self-hosted Floww stack with Docker Compose."""
    logger = logging.getLogger("flowwinstaller")

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), ".flowwinstaller.yml")
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
    except InstallerError as exc:
        raise click.ClickException(str(exc)) from exc

    install_dir = _resolve_option(install_dir, config_values, "install_dir")
    templates_url = _resolve_option(templates_url, config_values, "templates_url")
    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    log_file = _resolve_option(log_file, config_values, "log_file")
    skip_start = bool(_resolve_option(skip_start, config_values, "skip_start", default=False))
    strict_placeholders = bool(
        _resolve_option(strict_placeholders, config_values, "strict_placeholders", default=False)
    )
    required_tools = tuple(config_values.get("required_tools") or REQUIRED_TOOLS)
    readiness_attempts = config_values.get("readiness_attempts", READINESS_ATTEMPTS)
    readiness_interval_seconds = config_values.get(
        "readiness_interval_seconds", READINESS_INTERVAL_SECONDS
    )

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        _console_handler.setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    try:
        installer = FlowwInstaller(
            install_dir=install_dir,
            templates_url=templates_url,
            skip_start=skip_start,
            strict_placeholders=strict_placeholders,
            required_tools=required_tools,
            readiness_attempts=readiness_attempts,
            readiness_interval_seconds=readiness_interval_seconds,
        )
    except InstallerError as exc:
        raise click.ClickException(str(exc)) from exc

    raise SystemExit(installer.run())


if __name__ == "__main__":
    main()
