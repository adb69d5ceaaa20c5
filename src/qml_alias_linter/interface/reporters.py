"""Interface for diagnostic reporting."""

import json
from typing import TYPE_CHECKING, Optional, Protocol

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from qml_alias_linter.domain.entities import LintReport, SourceSpan
    from qml_alias_linter.domain.protocols import FileSystemProtocol


class DiagnosticReporter(Protocol):
    """Protocol for reporting lint results."""

    def report(self, reports: list["LintReport"]) -> None:
        """Report lint results to the user."""
        ...


class TerminalDiagnosticReporter:
    """Terminal reporter rendering one rich table per run."""

    def __init__(self, filesystem: "FileSystemProtocol", console: Optional[Console] = None) -> None:
        self.filesystem = filesystem
        self.console = console or Console()

    def _position(self, source_path: Optional[str], span: "SourceSpan", cache: dict[str, str]) -> str:
        """Render a span as line:column when the source is readable, else as an offset."""
        if source_path is None:
            return f"@{span.offset}"
        if source_path not in cache:
            try:
                cache[source_path] = self.filesystem.read_text(source_path)
            except (OSError, UnicodeDecodeError):
                cache[source_path] = ""
        text = cache[source_path]
        if not text or span.offset > len(text):
            return f"@{span.offset}"
        line = text.count("\n", 0, span.offset) + 1
        column = span.offset - (text.rfind("\n", 0, span.offset) + 1) + 1
        return f"{line}:{column}"

    def report(self, reports: list["LintReport"]) -> None:
        total = sum(len(r.diagnostics) for r in reports)
        if not total:
            self.console.print(f"\n✅ No C++ object bindings detected in {len(reports)} document(s).")
            return

        table = Table(title=escape("[QML-ALIAS] C++ Object Binding Audit"), header_style="bold cyan")
        table.add_column("File", style="cyan")
        table.add_column("Position", style="bold")
        table.add_column("Rule ID", style="#C41E3A")
        table.add_column("Fix?")
        table.add_column("Message")
        cache: dict[str, str] = {}
        for report in reports:
            for diagnostic in report.diagnostics:
                table.add_row(
                    escape(report.source_path or report.model_path),
                    self._position(report.source_path, diagnostic.location, cache),
                    str(diagnostic.tag),
                    "✅ Auto" if diagnostic.fixable else "⚠️ Manual",
                    diagnostic.fix.hint if diagnostic.fix else diagnostic.message,
                )
        self.console.print(table)
        self.console.print(f"\n{total} diagnostic(s) in {len(reports)} document(s).")


class JsonDiagnosticReporter:
    """Machine-readable reporter; one JSON document with every report and its fix edits."""

    def report(self, reports: list["LintReport"]) -> None:
        payload = {
            "documents": [r.to_dict() for r in reports],
            "total": sum(len(r.diagnostics) for r in reports),
        }
        print(json.dumps(payload, indent=2))
