"""Console output with theme support.

Wraps a rich Console with a small set of retro terminal themes and
status-line helpers used by the command-line interface.
"""

import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn
from rich.text import Text
from rich.theme import Theme


class StatusType(Enum):
    """Standard status types with associated symbols."""
    SUCCESS = ("[✓]", "success", "green")
    ERROR = ("[x]", "error", "red")
    WARNING = ("[!]", "warning", "yellow")
    INFO = ("[!]", "info", "cyan")
    RUNNING = ("[~]", "running", "blue")


@dataclass
class ThemeColors:
    """Color definitions for a theme."""
    info: str
    warning: str
    error: str
    success: str
    highlight: str
    path: str
    number: str
    dim: str
    token_count: str


THEMES = {
    'manhattan': ThemeColors(
        info='cyan',
        warning='yellow',
        error='red',
        success='green',
        highlight='bright_cyan',
        path='white',
        number='bright_blue',
        dim='bright_black',
        token_count='bright_blue',
    ),
    'green': ThemeColors(
        info='green',
        warning='yellow',
        error='red',
        success='bright_green',
        highlight='bold green',
        path='bright_green',
        number='green',
        dim='green',
        token_count='bright_white',
    ),
    'matrix': ThemeColors(
        info='bright_green',
        warning='yellow',
        error='red',
        success='green',
        highlight='bold bright_green',
        path='green',
        number='bright_green',
        dim='green',
        token_count='bright_white',
    ),
    'sunset': ThemeColors(
        info='orange3',
        warning='yellow',
        error='red3',
        success='green',
        highlight='bold orange1',
        path='wheat1',
        number='orange1',
        dim='grey50',
        token_count='orange1',
    ),
}


class ConsoleManager:
    """Themed console used by the CLI."""

    def __init__(self, theme: str = "manhattan", file: Optional[Any] = None):
        """Initialize the console.

        Args:
            theme: Theme name from THEMES
            file: Output file (defaults to sys.stdout)
        """
        self.theme_name = theme
        self.theme_colors = THEMES.get(theme, THEMES['manhattan'])
        self.file = file or sys.stdout
        self.console = Console(theme=self._create_rich_theme(), file=self.file, highlight=False)

    def _create_rich_theme(self) -> Theme:
        """Create Rich theme from our theme colors."""
        return Theme({
            'info': self.theme_colors.info,
            'warning': self.theme_colors.warning,
            'error': self.theme_colors.error,
            'success': self.theme_colors.success,
            'highlight': self.theme_colors.highlight,
            'path': self.theme_colors.path,
            'number': self.theme_colors.number,
            'dim': self.theme_colors.dim,
            'token_count': self.theme_colors.token_count,
        })

    def print(self, *args, **kwargs):
        self.console.print(*args, **kwargs)

    def print_status(self, status: StatusType, message: str, prefix: str = ""):
        """Print a status line with icon."""
        icon, _, color = status.value
        status_text = Text()
        if prefix:
            status_text.append(prefix + " ")
        status_text.append(f"{icon} ", style=color)
        status_text.append(message)
        self.console.print(status_text)

    def print_error(self, message: str):
        self.print_status(StatusType.ERROR, message)

    def print_success(self, message: str):
        self.print_status(StatusType.SUCCESS, message)

    def print_info(self, message: str):
        self.print_status(StatusType.INFO, message)

    def print_warning(self, message: str):
        self.print_status(StatusType.WARNING, message)

    def print_separator(self, char: str = "═", width: int = 60):
        self.console.print(char * width, style="dim")

    def print_exception(self):
        self.console.print_exception()

    def progress(self) -> Progress:
        """Progress bar bound to this console; use as a context manager."""
        return Progress(
            TextColumn("[info]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        )
