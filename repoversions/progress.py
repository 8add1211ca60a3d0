"""
Status messages for CLI commands.

Everything here goes to stderr so stdout carries only records. Messages
are shown when stderr is a terminal or when --verbose forces them;
errors are always shown.
"""

from typing import Optional

from rich.console import Console
from rich.markup import escape


class ProgressReporter:
    """Prints status lines to stderr through a rich console."""

    def __init__(self, enabled: Optional[bool] = None, console: Optional[Console] = None):
        self.console = console or Console(stderr=True, highlight=False)
        self.enabled = self.console.is_terminal if enabled is None else enabled

    def _emit(self, text: str, style: Optional[str] = None) -> None:
        self.console.print(text, style=style, soft_wrap=True)

    def __call__(self, message: str, force: bool = False) -> None:
        if force or self.enabled:
            self._emit(escape(message), style="dim")

    def success(self, message: str) -> None:
        if self.enabled:
            self._emit(f"✓ {escape(message)}", style="green")

    def warning(self, message: str) -> None:
        if self.enabled:
            self._emit(f"WARNING: {escape(message)}", style="yellow")

    def error(self, message: str) -> None:
        self._emit(f"ERROR: {escape(message)}", style="red")


_progress: Optional[ProgressReporter] = None


def get_progress(enabled: Optional[bool] = None) -> ProgressReporter:
    """
    Return the shared reporter.

    Passing ``enabled`` replaces it, which is how --verbose takes effect.
    """
    global _progress
    if _progress is None or enabled is not None:
        _progress = ProgressReporter(enabled)
    return _progress
