"""YAML defaults for the flowwinstaller command line."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from flowwinstaller.errors import InstallerError

PATH_KEYS = ("install_dir", "templates_url", "log_file")
FLAG_KEYS = ("verbose", "skip_start", "strict_placeholders")


class ConfigLoader:
    """Reads ``.flowwinstaller.yml`` and checks every value before the CLI uses it."""

    SUPPORTED_KEYS = set(PATH_KEYS) | set(FLAG_KEYS) | {
        "required_tools",
        "readiness_attempts",
        "readiness_interval_seconds",
    }

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise InstallerError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise InstallerError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise InstallerError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            raise InstallerError(f"Unknown configuration keys: {', '.join(unknown)}")

        return self._validate(parsed)

    def _validate(self, values: Dict[str, Any]) -> Dict[str, Any]:
        for key in PATH_KEYS:
            if key in values and not (isinstance(values[key], str) and values[key]):
                raise InstallerError(f"'{key}' must be a non-empty string.")

        for key in FLAG_KEYS:
            if key in values and not isinstance(values[key], bool):
                raise InstallerError(f"'{key}' must be true or false.")

        tools = values.get("required_tools")
        if tools is not None and (
            not isinstance(tools, list) or not all(isinstance(tool, str) and tool for tool in tools)
        ):
            raise InstallerError("'required_tools' must be a list of executable names.")

        # YAML booleans are ints in Python; reject them explicitly.
        attempts = values.get("readiness_attempts")
        if attempts is not None and (
            isinstance(attempts, bool) or not isinstance(attempts, int) or attempts < 1
        ):
            raise InstallerError("'readiness_attempts' must be a whole number of at least 1.")

        interval = values.get("readiness_interval_seconds")
        if interval is not None:
            if isinstance(interval, bool) or not isinstance(interval, (int, float)) or interval < 0:
                raise InstallerError("'readiness_interval_seconds' must be a non-negative number.")
            values["readiness_interval_seconds"] = float(interval)

        return values
