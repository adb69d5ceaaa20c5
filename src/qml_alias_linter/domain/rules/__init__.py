"""Domain models for passes."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from qml_alias_linter.domain.entities import DiagnosticTag, Element


class ElementPass(Protocol):
    """A rule the pass manager offers every element of a tree to."""

    tag: "DiagnosticTag"
    description: str

    def should_run(self, element: "Element") -> bool:
        """Cheap pre-filter deciding whether run() is worth calling."""
        ...

    def run(self, element: "Element") -> None:
        """Inspect the element and report findings to the pass's sink."""
        ...
