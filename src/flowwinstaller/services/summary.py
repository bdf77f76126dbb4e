"""Post-install summary output."""

from pathlib import Path
from typing import List

from rich.markup import escape

from flowwinstaller.models import InstallationConfig


class SummaryService:
    def __init__(self, console):
        self.console = console

    def print_summary(self, config: InstallationConfig, install_dir: Path, compose_cmd: List[str]):
        compose = escape(" ".join(compose_cmd))
        domain = escape(config.domain)
        location = escape(str(install_dir))
        base_url = f"{config.protocol}://{domain}"

        self.console.print()
        self.console.print("[green]✓[/green] [bold]Floww Installation Complete![/bold]")
        self.console.print()
        self.console.print(f"📂 Installation: {location}")
        self.console.print()
        self.console.print("🌐 Access URLs:")
        self.console.print(f"  Dashboard:  {base_url}")
        self.console.print(f"  API:        {base_url}/api")
        self.console.print(f"  WebSocket:  {config.ws_protocol}://{domain}/ws")
        self.console.print()
        self.console.print("💡 You'll create your admin account on first visit")
        self.console.print()
        self.console.print("🛠️ Commands:")
        self.console.print(f"  Start:   cd {location} && {compose} up -d")
        self.console.print(f"  Logs:    {compose} logs -f")
        self.console.print(f"  Stop:    {compose} down")
        self.console.print(f"  Update:  {compose} pull && {compose} up -d")
        self.console.print()
