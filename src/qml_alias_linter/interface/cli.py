"""CLI entry points for qml-alias-lint - Thin Controller using Typer."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

import typer

from qml_alias_linter.domain.config import ConfigurationLoader
from qml_alias_linter.domain.constants import LINTER_BANNER, MODEL_FILE_SUFFIXES
from qml_alias_linter.domain.entities import LintReport
from qml_alias_linter.domain.exceptions import ElementModelError, FixApplicationError
from qml_alias_linter.domain.protocols import (
    ElementModelProtocol,
    FileSystemProtocol,
    GuidanceServiceProtocol,
    TelemetryPort,
)
from qml_alias_linter.use_cases.apply_fixes import ApplyFixesUseCase
from qml_alias_linter.use_cases.run_passes import LintDocumentUseCase

if TYPE_CHECKING:
    from qml_alias_linter.interface.reporters import DiagnosticReporter

EXIT_CLEAN = 0
EXIT_VIOLATIONS = 1
EXIT_USAGE_ERROR = 2

# B008: avoid function call in default; use module-level singleton for Typer Argument
_PATHS_ARGUMENT = typer.Argument(
    None, help=f"Element-model files ({', '.join(MODEL_FILE_SUFFIXES)}) or directories (default: .)")


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    config_loader: ConfigurationLoader
    telemetry: TelemetryPort
    filesystem: FileSystemProtocol
    element_model: ElementModelProtocol
    guidance_service: GuidanceServiceProtocol
    reporter_for: Callable[[str], "DiagnosticReporter"]
    config_path: Optional[str] = None


class CLIAppFactory:
    """Creates the Typer app."""

    @staticmethod
    def collect_model_files(deps: CLIDependencies, paths: Optional[list[Path]]) -> list[str]:
        """Expand the given paths (default: current directory) into model files, warning on empty ones."""
        files: list[str] = []
        for path in paths or [Path(".")]:
            found = deps.filesystem.glob_model_files(str(path))
            if not found:
                deps.telemetry.warning(f"No element-model files found at {path}")
            files.extend(f for f in found if f not in files)
        return files

    @staticmethod
    def lint_files(deps: CLIDependencies, files: list[str]) -> tuple[list[LintReport], int]:
        """Lint every file; returns (reports, number of files that failed to load)."""
        use_case = LintDocumentUseCase(
            element_model=deps.element_model,
            config_loader=deps.config_loader,
            guidance_service=deps.guidance_service,
            telemetry=deps.telemetry,
        )
        reports: list[LintReport] = []
        failures = 0
        for model_file in files:
            try:
                reports.append(use_case.execute(model_file))
            except ElementModelError as exc:
                deps.telemetry.error(str(exc))
                failures += 1
        return reports, failures

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies."""
        app = typer.Typer(
            name="qml-alias-lint",
            help=f"{LINTER_BANNER}\nqml-alias-lint: flag QML bindings that read C++ object properties directly",
            add_completion=False,
        )

        @app.callback()
        def main(
            verbose: bool = typer.Option(False, "--verbose", "-v", help="Log classification decisions (DEBUG)."),
        ) -> None:
            """Configure logging for every command."""
            logging.basicConfig(
                level=logging.DEBUG if verbose else logging.WARNING,
                format="%(levelname)s %(name)s: %(message)s",
            )

        @app.command()
        def check(
            paths: Optional[list[Path]] = _PATHS_ARGUMENT,
            output_format: str = typer.Option("table", "--format", "-f", help="Report format: table or json"),
            exit_zero: bool = typer.Option(False, "--exit-zero", help="Exit 0 even when diagnostics are found"),
        ) -> None:
            """Report bindings that read properties of C++ objects directly."""
            if output_format not in ("table", "json"):
                deps.telemetry.error(f"Unknown format '{output_format}'; use 'table' or 'json'.")
                raise typer.Exit(EXIT_USAGE_ERROR)
            deps.telemetry.handshake()
            if deps.config_path:
                deps.telemetry.step(f"Configuration: {deps.config_path}")
            files = CLIAppFactory.collect_model_files(deps, paths)
            reports, failures = CLIAppFactory.lint_files(deps, files)
            deps.reporter_for(output_format).report(reports)
            if failures:
                raise typer.Exit(EXIT_USAGE_ERROR)
            if any(r.has_violations() for r in reports) and not exit_zero:
                raise typer.Exit(EXIT_VIOLATIONS)

        @app.command()
        def fix(
            paths: Optional[list[Path]] = _PATHS_ARGUMENT,
            dry_run: bool = typer.Option(False, "--dry-run", help="Print rewritten sources instead of writing them"),
        ) -> None:
            """Declare alias properties on the root element and rebind flagged bindings to them."""
            deps.telemetry.handshake()
            files = CLIAppFactory.collect_model_files(deps, paths)
            reports, failures = CLIAppFactory.lint_files(deps, files)
            use_case = ApplyFixesUseCase(filesystem=deps.filesystem, telemetry=deps.telemetry)
            applied = 0
            for report in reports:
                try:
                    outcome = use_case.execute(report, dry_run=dry_run)
                except (FixApplicationError, OSError, UnicodeDecodeError) as exc:
                    deps.telemetry.error(f"{report.source_path or report.model_path}: {exc}")
                    failures += 1
                    continue
                applied += outcome.applied_fixes
                if outcome.skipped_diagnostics:
                    deps.telemetry.warning(
                        f"{outcome.source_path or report.model_path}: "
                        f"{outcome.skipped_diagnostics} diagnostic(s) need a manual fix")
                if dry_run and outcome.new_text is not None:
                    print(f"--- {outcome.source_path}")
                    print(outcome.new_text)
            deps.telemetry.step(f"{applied} fix(es) {'planned' if dry_run else 'applied'}.")
            if failures:
                raise typer.Exit(EXIT_USAGE_ERROR)

        @app.command()
        def explain(
            rule: Optional[str] = typer.Argument(
                None, help="Rule code or symbol, e.g. D03 or cpp-binding-anti-pattern (default: list rules)"),
        ) -> None:
            """Show the registry entry and manual fix instructions for a rule."""
            if rule is None:
                for code, listed in deps.guidance_service.iter_entries():
                    print(f"{code}  {listed.get('symbol', '')}  {listed.get('short_description', '')}")
                return
            entry = deps.guidance_service.get_entry(rule)
            if entry is None:
                deps.telemetry.error(f"Unknown rule '{rule}'.")
                raise typer.Exit(EXIT_USAGE_ERROR)
            print(f"{entry.get('display_name', rule)} ({entry.get('symbol', rule)})")
            if entry.get("short_description"):
                print(f"  {entry['short_description']}")
            print(f"  Auto-fix: {'yes' if entry.get('fixable') else 'no'}")
            print(f"  How to fix: {deps.guidance_service.get_manual_instructions(rule)}")
            for reference in entry.get("references", []):
                print(f"  See: {reference}")

        return app


def create_app(deps: CLIDependencies) -> typer.Typer:
    """Create the Typer app (public entry for composition root)."""
    return CLIAppFactory.create_app(deps)
