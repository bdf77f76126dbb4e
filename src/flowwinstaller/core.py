import logging
import os
import shutil
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterable, List, Optional

import requests
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from .constants import (
    DEFAULT_INSTALL_DIRNAME,
    DEFAULT_TEMPLATES_URL,
    READINESS_ATTEMPTS,
    READINESS_INTERVAL_SECONDS,
    REQUIRED_TOOLS,
)
from .errors import InstallerError
from .services.command_runner import CommandRunner
from .services.configurator import ConfiguratorService
from .services.docker_runtime import DockerRuntimeService
from .services.download import TemplateDownloadService
from .services.prerequisites import PrerequisiteService
from .services.prompts import PromptService
from .services.renderer import TemplateRendererService
from .services.secret_generator import SecretGeneratorService
from .services.summary import SummaryService
from .services.workspace import WorkspaceService

console = Console()
logger = logging.getLogger("flowwinstaller")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FlowwInstaller:
    def __init__(
        self,
        install_dir: Optional[str] = None,
        templates_url: Optional[str] = None,
        skip_start: bool = False,
        strict_placeholders: bool = False,
        required_tools: Iterable[str] = REQUIRED_TOOLS,
        readiness_attempts: int = READINESS_ATTEMPTS,
        readiness_interval_seconds: float = READINESS_INTERVAL_SECONDS,
        prompts=None,
        requests_module=requests,
        which: Callable[[str], Optional[str]] = shutil.which,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if readiness_attempts < 1:
            raise InstallerError("readiness_attempts must be at least 1.")
        if readiness_interval_seconds < 0:
            raise InstallerError("readiness_interval_seconds must not be negative.")

        self.install_dir = install_dir or os.path.join(os.getcwd(), DEFAULT_INSTALL_DIRNAME)
        self.templates_url = templates_url or DEFAULT_TEMPLATES_URL
        self.skip_start = skip_start
        self.clock = clock
        self.current_step_name: Optional[str] = None

        self.prompts = prompts or PromptService(console=console)
        self.command_runner = CommandRunner(logger=logger)
        self.prerequisite_service = PrerequisiteService(
            logger=logger,
            console=console,
            run_cmd=self._run_cmd,
            which=which,
            required_tools=required_tools,
        )
        self.configurator_service = ConfiguratorService(
            logger=logger,
            console=console,
            prompts=self.prompts,
            requests_module=requests_module,
        )
        self.secret_generator_service = SecretGeneratorService(logger=logger, console=console)
        self.workspace_service = WorkspaceService(logger=logger, console=console, prompts=self.prompts)
        self.download_service = TemplateDownloadService(
            logger=logger,
            console=console,
            requests_module=requests_module,
        )
        self.renderer_service = TemplateRendererService(
            logger=logger,
            console=console,
            strict_placeholders=strict_placeholders,
        )
        self.docker_runtime_service = DockerRuntimeService(
            logger=logger,
            console=console,
            max_attempts=readiness_attempts,
            interval_seconds=readiness_interval_seconds,
        )
        self.summary_service = SummaryService(console=console)

    def _run_cmd(
        self,
        cmd: List[str],
        check: bool = True,
        capture_output: bool = False,
        timeout: Optional[float] = None,
    ) -> subprocess.CompletedProcess:
        return self.command_runner.run(
            cmd, check=check, capture_output=capture_output, timeout=timeout
        )

    def _run_step(self, name: str, callback, *args, **kwargs):
        self.current_step_name = name
        logger.debug("Step started: %s", name)
        result = callback(*args, **kwargs)
        logger.debug("Step finished: %s", name)
        self.current_step_name = None
        return result

    def print_banner(self):
        console.print()
        console.print(
            Panel("[bold]Floww Self-Hosting Setup[/bold]", expand=False, padding=(1, 7)),
        )
        console.print()

    def run(self) -> int:
        try:
            logger.info("Starting flowwinstaller...")
            self.print_banner()

            compose_cmd = self._run_step("check_prerequisites", self.prerequisite_service.check)
            console.print()

            config = self._run_step("interactive_setup", self.configurator_service.collect)
            secrets = self._run_step("generate_secrets", self.secret_generator_service.generate)
            config = config.with_secrets(secrets)

            install_dir = self._run_step(
                "create_install_dir",
                self.workspace_service.prepare,
                self.install_dir,
            )
            self._run_step(
                "download_templates",
                self.download_service.fetch_templates,
                self.templates_url,
                str(install_dir),
            )
            artifacts = self._run_step(
                "process_templates",
                self.renderer_service.render,
                config,
                install_dir,
                self.clock(),
            )

            if self.skip_start:
                console.print(
                    "[blue]ℹ[/blue] Skipping service start; configuration is ready in "
                    f"{escape(str(install_dir))}"
                )
            else:
                self._run_step(
                    "start_services",
                    self.docker_runtime_service.start_services,
                    compose_cmd,
                    artifacts.compose_file,
                    self._run_cmd,
                )
                self._run_step(
                    "wait_for_services",
                    self.docker_runtime_service.wait_for_services,
                    compose_cmd,
                    artifacts.compose_file,
                    self._run_cmd,
                )

            self.summary_service.print_summary(config, Path(install_dir), compose_cmd)
            return 0

        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            return 1
        except InstallerError as exc:
            console.print(f"[bold red]✗ Error:[/bold red] {escape(str(exc))}")
            logger.error("Step %s failed: %s", self.current_step_name or "run", exc)
            return 1
        except Exception as exc:
            console.print(f"[bold red]Unexpected error:[/bold red] {escape(str(exc))}")
            logger.exception("Unexpected error")
            return 1
