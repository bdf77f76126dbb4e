"""Host prerequisite checks for flowwinstaller."""

import shutil
from typing import Callable, Iterable, List, Optional

from flowwinstaller.constants import REQUIRED_TOOLS
from flowwinstaller.errors import InstallerError
from flowwinstaller.errors_catalog import actionable_error


class PrerequisiteService:
    """Verifies Docker, its daemon, Docker Compose and extra host tools.

    Only read-only status commands are executed, so the check can be repeated
    safely.
    """

    def __init__(
        self,
        logger,
        console,
        run_cmd: Callable,
        which: Callable[[str], Optional[str]] = shutil.which,
        required_tools: Iterable[str] = REQUIRED_TOOLS,
    ):
        self.logger = logger
        self.console = console
        self.run_cmd = run_cmd
        self.which = which
        self.required_tools = tuple(required_tools)

    def check(self) -> List[str]:
        self.console.print("[blue]ℹ[/blue] Checking prerequisites...")

        if self.which("docker") is None:
            raise InstallerError(actionable_error("docker_not_installed"))
        self.console.print("[green]✓[/green] Docker found")

        result = self.run_cmd(["docker", "ps"], check=False, capture_output=True)
        if result.returncode != 0:
            raise InstallerError(actionable_error("docker_daemon_not_running"))
        self.console.print("[green]✓[/green] Docker daemon is running")

        compose_cmd = self.get_docker_compose_cmd()
        self.console.print(f"[green]✓[/green] Docker Compose found ({' '.join(compose_cmd)})")

        for tool in self.required_tools:
            if self.which(tool) is None:
                raise InstallerError(actionable_error("tool_not_installed", tool=tool))

        self.console.print("[green]✓[/green] All prerequisites met")
        self.logger.info("Prerequisites satisfied; compose command: %s", " ".join(compose_cmd))
        return compose_cmd

    def get_docker_compose_cmd(self) -> List[str]:
        result = self.run_cmd(["docker", "compose", "version"], check=False, capture_output=True)
        if result.returncode == 0:
            return ["docker", "compose"]

        if self.which("docker-compose") is not None:
            result = self.run_cmd(["docker-compose", "--version"], check=False, capture_output=True)
            if result.returncode == 0:
                return ["docker-compose"]

        raise InstallerError(actionable_error("compose_not_installed"))
