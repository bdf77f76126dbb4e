"""Actionable error catalog for flowwinstaller."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "docker_not_installed": {
        "what": "Docker is not installed.",
        "next": "Install Docker first: `curl -fsSL https://get.docker.com | sh`.",
    },
    "docker_daemon_not_running": {
        "what": "Docker daemon is not running.",
        "next": "Start the Docker service (e.g. `sudo systemctl start docker`) and retry.",
    },
    "compose_not_installed": {
        "what": "Docker Compose is not installed.",
        "next": "Install Docker Compose v2 (`docker compose`) or v1 (`docker-compose`) and retry.",
    },
    "tool_not_installed": {
        "what": "{tool} is not installed.",
        "next": "Install `{tool}` and make sure it is on your PATH.",
    },
    "template_not_found": {
        "what": "Template not found: {path}",
        "next": "Check TEMPLATES_URL points at a directory containing the installer templates.",
    },
    "template_download_failed": {
        "what": "Download failed for {name}: {reason}",
        "next": "Check your network connection and the TEMPLATES_URL value, then retry.",
    },
    "unsupported_template_location": {
        "what": "Unsupported template location: {location}",
        "next": "Use an `https://`, `http://` or `file://` URL, or a local directory path.",
    },
    "install_dir_not_directory": {
        "what": "Installation path exists and is not a directory: {path}",
        "next": "Remove the file or choose another `--install-dir`.",
    },
    "install_cancelled": {
        "what": "Installation cancelled.",
        "next": "Re-run and confirm the overwrite, or choose another `--install-dir`.",
    },
    "unknown_placeholders": {
        "what": "Template {name} contains unknown placeholders: {names}",
        "next": "Update the templates or run without `--strict-placeholders`.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
