"""Console telemetry: status lines for the CLI, rendered with rich."""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.text import Text

from qml_alias_linter.domain.constants import LINTER_BANNER
from qml_alias_linter.domain.protocols import TelemetryPort

logger = logging.getLogger(__name__)


class ProjectTelemetry(TelemetryPort):
    """Prefixed step/warning/error lines on stderr so stdout stays clean for reports."""

    def __init__(self, project_name: str, color: str, welcome: str, console: Optional[Console] = None) -> None:
        self.project_name = project_name
        self.color = color
        self.welcome = welcome
        self.console = console or Console(stderr=True, no_color=bool(os.getenv("NO_COLOR")))

    @property
    def _label(self) -> str:
        return escape(f"[{self.project_name}]")

    def handshake(self) -> None:
        if self.console.is_terminal and not self.console.no_color:
            self.console.print(Text.from_ansi(LINTER_BANNER))
        self.console.print(f"[{self.color}]{self._label}[/] {escape(self.welcome)}")

    def step(self, message: str) -> None:
        logger.info(message)
        self.console.print(f"[{self.color}]{self._label}[/] {escape(message)}", highlight=False)

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]{self._label} WARNING:[/] {escape(message)}", highlight=False)

    def error(self, message: str) -> None:
        self.console.print(f"[bold red]{self._label} ERROR:[/] {escape(message)}", highlight=False)
