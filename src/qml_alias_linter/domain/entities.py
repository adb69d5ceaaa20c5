from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional


@dataclass(frozen=True)
class SourceSpan:
    """Offset and length into the original document text."""

    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length

    def overlaps(self, other: "SourceSpan") -> bool:
        """Return True if the two spans share at least one character."""
        return self.offset < other.end and other.offset < self.end

    def to_dict(self) -> dict[str, int]:
        return {"offset": self.offset, "length": self.length}


@dataclass(frozen=True)
class Binding:
    """A property assignment inside an element. The span covers the right-hand side."""

    property_name: str
    expression: str
    span: SourceSpan
    element_index: int

    def containing_element(self, tree: "ElementTree") -> "Element":
        return tree.element(self.element_index)


@dataclass(frozen=True)
class ElementRecord:
    """Arena slot for one declared object. Children and parent are indices."""

    index: int
    base_type_name: str
    span: SourceSpan
    id: Optional[str] = None
    parent_index: Optional[int] = None
    child_indices: tuple[int, ...] = ()
    bindings: tuple[Binding, ...] = ()


@dataclass(frozen=True)
class Element:
    """
    Read-only handle on an arena slot.

    Exposes the query surface passes work against: id, base type, source span,
    bindings, parent scope and child scopes.
    """

    tree: "ElementTree" = field(repr=False, compare=False)
    index: int

    @property
    def _record(self) -> ElementRecord:
        return self.tree.record(self.index)

    @property
    def id(self) -> Optional[str]:
        return self._record.id

    @property
    def base_type_name(self) -> str:
        return self._record.base_type_name

    @property
    def source_span(self) -> SourceSpan:
        return self._record.span

    @property
    def bindings(self) -> tuple[Binding, ...]:
        return self._record.bindings

    def parent_scope(self) -> Optional["Element"]:
        parent_index = self._record.parent_index
        if parent_index is None:
            return None
        return self.tree.element(parent_index)

    def child_scopes(self) -> tuple["Element", ...]:
        return tuple(self.tree.element(i) for i in self._record.child_indices)


class ElementTree:
    """
    Arena of declared objects addressed by index.

    Index 0 is the declaration root. Every other slot has a parent whose index
    is strictly smaller, so following parent links always ends at the root.
    Build instances with ElementTreeBuilder.
    """

    def __init__(self, records: tuple[ElementRecord, ...]) -> None:
        if not records:
            raise ValueError("An element tree needs at least a root element")
        self._records = records

    def __len__(self) -> int:
        return len(self._records)

    def record(self, index: int) -> ElementRecord:
        return self._records[index]

    def element(self, index: int) -> Element:
        if not 0 <= index < len(self._records):
            raise IndexError(f"No element at index {index}")
        return Element(self, index)

    @property
    def root(self) -> Element:
        return Element(self, 0)

    def walk(self) -> Iterator[Element]:
        """Yield elements in document (pre-)order starting at the root."""
        stack = [0]
        while stack:
            index = stack.pop()
            yield Element(self, index)
            stack.extend(reversed(self._records[index].child_indices))


class ElementTreeBuilder:
    """Collects elements top-down and freezes them into an ElementTree."""

    def __init__(self) -> None:
        self._slots: list[dict] = []

    def add_element(
        self,
        base_type_name: str,
        span: SourceSpan,
        element_id: Optional[str] = None,
        parent: Optional[int] = None,
    ) -> int:
        """Add an element and return its index. Only the first element may omit a parent."""
        if parent is None and self._slots:
            raise ValueError("Only the root element may be added without a parent")
        if parent is not None and not 0 <= parent < len(self._slots):
            raise ValueError(f"Parent index {parent} does not refer to an existing element")
        index = len(self._slots)
        self._slots.append(
            {
                "base_type_name": base_type_name,
                "span": span,
                "id": element_id,
                "parent_index": parent,
                "children": [],
                "bindings": [],
            }
        )
        if parent is not None:
            self._slots[parent]["children"].append(index)
        return index

    def add_binding(self, element: int, property_name: str, expression: str, span: SourceSpan) -> Binding:
        if not 0 <= element < len(self._slots):
            raise ValueError(f"Element index {element} does not refer to an existing element")
        binding = Binding(
            property_name=property_name,
            expression=expression,
            span=span,
            element_index=element,
        )
        self._slots[element]["bindings"].append(binding)
        return binding

    def build(self) -> ElementTree:
        records = tuple(
            ElementRecord(
                index=index,
                base_type_name=slot["base_type_name"],
                span=slot["span"],
                id=slot["id"],
                parent_index=slot["parent_index"],
                child_indices=tuple(slot["children"]),
                bindings=tuple(slot["bindings"]),
            )
            for index, slot in enumerate(self._slots)
        )
        return ElementTree(records)


@dataclass(frozen=True)
class CandidateReference:
    """Leading `object.property` pair of a binding expression."""

    object_id: str
    property_name: str


class EditKind(Enum):
    """Kinds of text edits a fix can carry."""
    INSERTION = "insertion"
    REPLACEMENT = "replacement"


@dataclass(frozen=True)
class TextEdit:
    """
    Pure data describing one substitution on the original source text.

    Insertions carry a zero-length span at the insertion point.
    """
    kind: EditKind
    span: SourceSpan
    text: str
    expected: Optional[str] = None

    @classmethod
    def insertion(cls, offset: int, text: str) -> "TextEdit":
        """Create an edit that inserts text before offset."""
        return cls(kind=EditKind.INSERTION, span=SourceSpan(offset, 0), text=text)

    @classmethod
    def replacement(cls, span: SourceSpan, text: str, expected: Optional[str] = None) -> "TextEdit":
        """
        Create an edit that replaces the characters covered by span.

        expected is the text the span must still hold when the edit is applied.
        """
        return cls(kind=EditKind.REPLACEMENT, span=span, text=text, expected=expected)

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {"kind": self.kind.value, **self.span.to_dict(), "text": self.text}
        if self.expected is not None:
            data["expected"] = self.expected
        return data


@dataclass(frozen=True)
class DiagnosticTag:
    """Stable machine-readable identity of a rule (code plus symbolic name)."""

    code: str
    symbol: str

    def __str__(self) -> str:
        return f"{self.code}({self.symbol})"


@dataclass(frozen=True)
class FixDescriptor:
    """A complete, independently applicable fix for one flagged binding."""

    message: str
    tag: DiagnosticTag
    edits: tuple[TextEdit, ...]
    hint: str

    def to_dict(self) -> dict[str, object]:
        return {
            "message": self.message,
            "tag": self.tag.symbol,
            "hint": self.hint,
            "edits": [edit.to_dict() for edit in self.edits],
        }


@dataclass(frozen=True)
class Diagnostic:
    """A warning recorded by a diagnostic sink."""

    message: str
    tag: DiagnosticTag
    location: SourceSpan
    fix: Optional[FixDescriptor] = None

    @property
    def fixable(self) -> bool:
        return self.fix is not None

    def to_dict(self) -> dict[str, object]:
        return {
            "code": self.tag.code,
            "symbol": self.tag.symbol,
            "message": self.message,
            "location": self.location.to_dict(),
            "fix": self.fix.to_dict() if self.fix else None,
        }


@dataclass(frozen=True)
class LintReport:
    """Result of running the passes over one element-model document."""

    model_path: str
    source_path: Optional[str]
    diagnostics: tuple[Diagnostic, ...] = ()

    def has_violations(self) -> bool:
        return bool(self.diagnostics)

    def to_dict(self) -> dict[str, object]:
        return {
            "model": self.model_path,
            "source": self.source_path,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }
