"""Use Case: Apply Fixes to Source Code."""

from dataclasses import dataclass
from typing import Optional

from qml_alias_linter.domain.entities import EditKind, LintReport, TextEdit
from qml_alias_linter.domain.exceptions import FixApplicationError
from qml_alias_linter.domain.protocols import FileSystemProtocol, TelemetryPort


@dataclass(frozen=True)
class FixOutcome:
    """What applying a report's fixes did (or would do, on a dry run)."""

    source_path: Optional[str]
    applied_fixes: int
    skipped_diagnostics: int
    new_text: Optional[str] = None

    @property
    def modified(self) -> bool:
        return self.applied_fixes > 0


class ApplyFixesUseCase:
    """Rewrite QML sources with the alias fixes attached to lint diagnostics."""

    def __init__(self, filesystem: FileSystemProtocol, telemetry: TelemetryPort) -> None:
        self.filesystem = filesystem
        self.telemetry = telemetry

    @staticmethod
    def collect_edits(report: LintReport) -> list[TextEdit]:
        """
        Gather the edits of every fix in diagnostic order.

        Identical alias declarations at the same point (two bindings reading the
        same object property) are kept once.
        """
        edits: list[TextEdit] = []
        seen_insertions: set[TextEdit] = set()
        for diagnostic in report.diagnostics:
            if diagnostic.fix is None:
                continue
            for edit in diagnostic.fix.edits:
                if edit.kind is EditKind.INSERTION:
                    if edit in seen_insertions:
                        continue
                    seen_insertions.add(edit)
                edits.append(edit)
        return edits

    @staticmethod
    def apply_edits(text: str, edits: list[TextEdit]) -> str:
        """
        Apply independent edits to text in one pass.

        Edits are applied from the highest offset down so every span still
        refers to the original text. Insertions sharing a point keep their
        input order.

        Raises:
            FixApplicationError: If an edit falls outside text, edits overlap, or a
                replaced span no longer holds the text it was computed from.
        """
        for edit in edits:
            if edit.span.offset < 0 or edit.span.end > len(text):
                raise FixApplicationError(
                    f"Edit at {edit.span.offset}+{edit.span.length} is outside the source ({len(text)} chars)"
                )
            # Whitespace around the expression may fall inside the span.
            if edit.expected is not None and text[edit.span.offset: edit.span.end].strip() != edit.expected.strip():
                raise FixApplicationError(
                    f"Source at {edit.span.offset} no longer reads {edit.expected!r}; "
                    "the element model is out of date with its QML source"
                )
        replacements = [e for e in edits if e.kind is EditKind.REPLACEMENT]
        for i, first in enumerate(replacements):
            for second in replacements[i + 1:]:
                if first.span.overlaps(second.span) or first.span == second.span:
                    raise FixApplicationError(
                        f"Overlapping edits at {first.span.offset} and {second.span.offset}"
                    )
        for insertion in (e for e in edits if e.kind is EditKind.INSERTION):
            for replacement in replacements:
                if replacement.span.offset < insertion.span.offset < replacement.span.end:
                    raise FixApplicationError(
                        f"Insertion at {insertion.span.offset} falls inside a replaced span"
                    )

        # At one offset the replacement is applied before the insertions, and
        # later insertions before earlier ones, so the first ends up leftmost.
        ordered = sorted(
            enumerate(edits),
            key=lambda item: (item[1].span.offset, item[1].kind is EditKind.REPLACEMENT, item[0]),
            reverse=True,
        )
        result = text
        for _, edit in ordered:
            result = result[: edit.span.offset] + edit.text + result[edit.span.end:]
        return result

    def execute(self, report: LintReport, dry_run: bool = False) -> FixOutcome:
        """Apply the report's fixes to its QML source, writing the file unless dry_run."""
        fixable = [d for d in report.diagnostics if d.fix is not None]
        skipped = len(report.diagnostics) - len(fixable)
        if not fixable:
            return FixOutcome(source_path=report.source_path, applied_fixes=0, skipped_diagnostics=skipped)
        if report.source_path is None:
            self.telemetry.warning(f"{report.model_path}: model names no QML source; fixes not applied.")
            return FixOutcome(source_path=None, applied_fixes=0, skipped_diagnostics=len(report.diagnostics))

        original = self.filesystem.read_text(report.source_path)
        new_text = self.apply_edits(original, self.collect_edits(report))
        if dry_run:
            self.telemetry.step(f"Would apply {len(fixable)} fix(es) to {report.source_path}")
        else:
            self.filesystem.write_text(report.source_path, new_text)
            self.telemetry.step(f"Applied {len(fixable)} fix(es) to {report.source_path}")
        return FixOutcome(
            source_path=report.source_path,
            applied_fixes=len(fixable),
            skipped_diagnostics=skipped,
            new_text=new_text,
        )
