"""Template retrieval service with progress reporting."""

import os
import re
import shutil
from pathlib import Path
from typing import Dict, Iterable, Tuple
from urllib.parse import urlparse
from urllib.request import url2pathname

from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from flowwinstaller.constants import COMPOSE_TEMPLATE, PROXY_TEMPLATE
from flowwinstaller.errors import InstallerError
from flowwinstaller.errors_catalog import actionable_error

_WINDOWS_DRIVE = re.compile(r"^[A-Za-z]:[\\/]")


class TemplateDownloadService:
    """Fetches installer templates from an HTTP(S) URL, a file URL or a local directory."""

    def __init__(
        self,
        logger,
        console,
        requests_module,
        timeout: float = 60.0,
        templates: Iterable[Tuple[str, str]] = (COMPOSE_TEMPLATE, PROXY_TEMPLATE),
    ):
        self.logger = logger
        self.console = console
        self.requests = requests_module
        self.timeout = timeout
        self.templates = tuple(templates)

    def fetch_templates(self, base_location: str, dest_dir: str) -> Dict[str, str]:
        """Retrieve every template into ``dest_dir``; returns resource name -> saved path."""
        self.console.print("[blue]ℹ[/blue] Downloading configuration templates...")
        saved = {}
        for name, target_name in self.templates:
            target_path = os.path.join(dest_dir, target_name)
            self.fetch(self.join_location(base_location, name), name, target_path)
            saved[name] = target_path
        self.console.print("[green]✓[/green] Templates downloaded")
        return saved

    @staticmethod
    def join_location(base_location: str, name: str) -> str:
        return f"{base_location.rstrip('/')}/{name}"

    def location_kind(self, location: str) -> str:
        if _WINDOWS_DRIVE.match(location):
            return "path"

        scheme = urlparse(location).scheme.lower()
        if scheme in {"http", "https"}:
            return "http"
        if scheme == "file":
            return "file"
        if scheme == "":
            return "path"
        raise InstallerError(actionable_error("unsupported_template_location", location=location))

    def fetch(self, location: str, name: str, dest_path: str):
        self.logger.info("Fetching %s from %s", name, location)
        kind = self.location_kind(location)

        if kind == "http":
            self.download_file(location, dest_path, name)
            return

        if kind == "file":
            parsed = urlparse(location)
            local_path = url2pathname(parsed.path)
            if parsed.netloc and parsed.netloc != "localhost":
                local_path = f"//{parsed.netloc}{local_path}"
        else:
            local_path = location

        self.copy_file(local_path, dest_path)

    def copy_file(self, source_path: str, dest_path: str):
        source = Path(source_path).expanduser()
        if not source.is_file():
            raise InstallerError(actionable_error("template_not_found", path=str(source)))

        os.makedirs(os.path.dirname(dest_path) or ".", exist_ok=True)
        try:
            shutil.copyfile(source, dest_path)
        except OSError as exc:
            raise InstallerError(f"Could not copy template {source}: {exc}") from exc

    def download_file(self, url: str, dest_path: str, description: str):
        try:
            with self.requests.get(url, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                total_size = int(response.headers.get("Content-Length", 0))

                os.makedirs(os.path.dirname(dest_path) or ".", exist_ok=True)

                with Progress(
                    SpinnerColumn(),
                    TextColumn("[progress.description]{task.description}"),
                    BarColumn(),
                    TaskProgressColumn(),
                    "•",
                    TimeElapsedColumn(),
                    console=self.console,
                    transient=True,
                ) as progress:
                    task = progress.add_task(f"[cyan]{description}", total=total_size or None)
                    with open(dest_path, "wb") as file_obj:
                        for chunk in response.iter_content(chunk_size=8192):
                            if not chunk:
                                continue
                            file_obj.write(chunk)
                            progress.update(task, advance=len(chunk))

        except self.requests.RequestException as exc:
            raise InstallerError(
                actionable_error("template_download_failed", name=description, reason=str(exc))
            ) from exc
