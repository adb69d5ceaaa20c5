from typing import TYPE_CHECKING, Optional, Protocol

from qml_alias_linter.domain.registry_types import RuleRegistryEntry

if TYPE_CHECKING:
    from qml_alias_linter.domain.entities import (
        DiagnosticTag,
        ElementTree,
        FixDescriptor,
        SourceSpan,
    )


class DiagnosticSink(Protocol):
    """The only capability a pass needs from its host: reporting a warning."""

    def emit_warning(
        self,
        message: str,
        tag: "DiagnosticTag",
        location: "SourceSpan",
        fix: Optional["FixDescriptor"] = None,
    ) -> None: ...


class TelemetryPort(Protocol):
    """Protocol for telemetry/UI updates."""

    def step(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...
    def handshake(self) -> None: ...


class FileSystemProtocol(Protocol):
    """Protocol for filesystem operations - abstracts Path usage."""

    def glob_model_files(self, path: str) -> list[str]:
        """Get all element-model files in path (recursive if directory)."""
        ...

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Read text content from a file."""
        ...

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file."""
        ...

    def join_path(self, *paths: str) -> str:
        """Join path components into a single path string."""
        ...

    def parent_directory(self, path: str) -> str:
        """Return the directory containing path."""
        ...


class ElementModelProtocol(Protocol):
    """Protocol for loading element-model documents produced by a QML front end."""

    def load(self, model_path: str) -> tuple["ElementTree", Optional[str]]:
        """Return the element tree and the resolved QML source path (if the model names one)."""
        ...


class GuidanceServiceProtocol(Protocol):
    """Protocol for rule registry and manual guidance. Implemented by GuidanceService in infrastructure."""

    def get_entry(self, rule_code: str) -> Optional[RuleRegistryEntry]:
        """Return the registry entry for a rule code or symbol, or None."""
        ...

    def get_manual_instructions(self, rule_code: str) -> str:
        """Return manual fix instructions for the given rule code."""
        ...

    def iter_entries(self) -> list[tuple[str, RuleRegistryEntry]]:
        """Return (rule_code, entry) pairs in registry order."""
        ...
