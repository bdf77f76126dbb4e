"""Terminal prompt helpers for flowwinstaller."""

from rich.console import Console
from rich.prompt import Confirm, Prompt


class PromptService:
    """Thin wrapper over rich prompts so stages can be driven by fakes in tests."""

    def __init__(self, console: Console):
        self.console = console

    def ask(self, text: str, default: str = "", password: bool = False) -> str:
        answer = Prompt.ask(
            text,
            console=self.console,
            default=default,
            password=password,
            show_default=bool(default) and not password,
        )
        return (answer or "").strip()

    def confirm(self, text: str, default: bool = False) -> bool:
        return Confirm.ask(text, console=self.console, default=default)

    def pause(self, text: str):
        Prompt.ask(text, console=self.console, default="", show_default=False)
