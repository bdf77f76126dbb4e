"""Installation directory handling for flowwinstaller."""

import logging
import shutil
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from flowwinstaller.errors import InstallerError
from flowwinstaller.errors_catalog import actionable_error


class WorkspaceService:
    """Encapsulates creation and guarded replacement of the install directory."""

    def __init__(self, logger: logging.Logger, console: Console, prompts):
        self.logger = logger
        self.console = console
        self.prompts = prompts

    def prepare(self, install_dir: str) -> Path:
        self.console.print("[blue]ℹ[/blue] Creating installation directory...")
        path = Path(install_dir).expanduser().resolve()

        if path.exists():
            if not path.is_dir():
                raise InstallerError(actionable_error("install_dir_not_directory", path=str(path)))

            self.console.print(f"[yellow]⚠[/yellow] Directory {escape(str(path))} already exists")
            if not self.prompts.confirm("Overwrite?", default=False):
                raise InstallerError(actionable_error("install_cancelled"))

            shutil.rmtree(path)
            self.logger.debug("Removed directory: %s", path)

        path.mkdir(parents=True, exist_ok=True)
        self.console.print(f"[green]✓[/green] Installation directory created: {escape(str(path))}")
        self.logger.info("Installation directory: %s", path)
        return path
