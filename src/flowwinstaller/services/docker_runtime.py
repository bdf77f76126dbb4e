"""Docker Compose runtime services for flowwinstaller."""

import subprocess
import time
from pathlib import Path
from typing import Callable, List, Optional

from rich.markup import escape

from flowwinstaller.constants import (
    HEALTH_CHECK_SCRIPT,
    HEALTH_SERVICE,
    READINESS_COMMAND_TIMEOUT_SECONDS,
    READINESS_ATTEMPTS,
    READINESS_INTERVAL_SECONDS,
)
from flowwinstaller.errors import InstallerError


class DockerRuntimeService:
    """Starts the rendered stack and waits for it to report healthy."""

    def __init__(
        self,
        logger,
        console,
        max_attempts: int = READINESS_ATTEMPTS,
        interval_seconds: float = READINESS_INTERVAL_SECONDS,
        command_timeout_seconds: float = READINESS_COMMAND_TIMEOUT_SECONDS,
    ):
        self.logger = logger
        self.console = console
        self.max_attempts = max_attempts
        self.interval_seconds = interval_seconds
        self.command_timeout_seconds = command_timeout_seconds

    @staticmethod
    def compose_base(compose_cmd: List[str], compose_file: Path) -> List[str]:
        return list(compose_cmd) + ["-f", str(compose_file)]

    def start_services(self, compose_cmd: List[str], compose_file: Path, run_cmd: Callable):
        self.console.print("[blue]ℹ[/blue] Starting Floww services...")
        self.console.print()
        base = self.compose_base(compose_cmd, compose_file)

        run_cmd(base + ["pull"], check=True)
        run_cmd(base + ["up", "-d"], check=True)

        self.console.print("[green]✓[/green] Services started")

    def wait_for_services(self, compose_cmd: List[str], compose_file: Path, run_cmd: Callable) -> bool:
        """Poll until the backend answers its health check.

        Returns ``False`` after the attempt budget is spent; a slow start is
        reported but never fails the installation.
        """
        self.console.print("[blue]ℹ[/blue] Waiting for services to become healthy...")
        base = self.compose_base(compose_cmd, compose_file)
        health_cmd = base + ["exec", "-T", HEALTH_SERVICE, "python3", "-c", HEALTH_CHECK_SCRIPT]

        for attempt in range(1, self.max_attempts + 1):
            status = self._poll(base + ["ps"], run_cmd)
            if status is None:
                self.logger.debug("Service status unavailable (attempt %s/%s)", attempt, self.max_attempts)
            elif "unhealthy" in (status.stdout or ""):
                self.logger.debug("Unhealthy services reported (attempt %s/%s)", attempt, self.max_attempts)
            else:
                health = self._poll(health_cmd, run_cmd)
                if health is not None and health.returncode == 0:
                    self.console.print("[green]✓[/green] All services are healthy")
                    self.logger.info("Services healthy after %s attempt(s)", attempt)
                    return True
                self.logger.debug("Health check failed (attempt %s/%s)", attempt, self.max_attempts)

            time.sleep(self.interval_seconds)

        self.console.print("[yellow]⚠[/yellow] Services are taking longer than expected to start")
        self.console.print(
            f"[blue]ℹ[/blue] Check logs with: {escape(' '.join(compose_cmd))} logs -f"
        )
        self.logger.warning("Readiness polling gave up after %s attempts", self.max_attempts)
        return False

    def _poll(self, cmd: List[str], run_cmd: Callable) -> Optional[subprocess.CompletedProcess]:
        # A hung compose call counts as a failed attempt so the poll stays bounded.
        try:
            return run_cmd(cmd, check=False, capture_output=True, timeout=self.command_timeout_seconds)
        except InstallerError as exc:
            self.logger.debug("Readiness command did not complete: %s", exc)
            return None
