"""Use Case: Run element passes over an element-model document."""

import logging
from typing import TYPE_CHECKING, Optional

from qml_alias_linter.domain.entities import (
    Diagnostic,
    DiagnosticTag,
    ElementTree,
    FixDescriptor,
    LintReport,
    SourceSpan,
)
from qml_alias_linter.domain.protocols import (
    ElementModelProtocol,
    GuidanceServiceProtocol,
    TelemetryPort,
)
from qml_alias_linter.domain.rules import ElementPass
from qml_alias_linter.domain.rules.native_binding import CppObjectBindingRule

if TYPE_CHECKING:
    from qml_alias_linter.domain.config import ConfigurationLoader

logger = logging.getLogger(__name__)


class PassManager:
    """
    Offers every element of a tree to the registered passes.

    Also acts as the diagnostic sink the passes report into; warnings are kept
    in emission order and handed back by run().
    """

    def __init__(self) -> None:
        self._passes: list[ElementPass] = []
        self._diagnostics: list[Diagnostic] = []

    @property
    def passes(self) -> tuple[ElementPass, ...]:
        return tuple(self._passes)

    def register(self, element_pass: ElementPass) -> None:
        self._passes.append(element_pass)

    def emit_warning(
        self,
        message: str,
        tag: DiagnosticTag,
        location: SourceSpan,
        fix: Optional[FixDescriptor] = None,
    ) -> None:
        self._diagnostics.append(Diagnostic(message=message, tag=tag, location=location, fix=fix))

    def run(self, tree: ElementTree) -> tuple[Diagnostic, ...]:
        """Walk the tree in document order and return what the passes reported."""
        self._diagnostics = []
        for element in tree.walk():
            for element_pass in self._passes:
                if element_pass.should_run(element):
                    element_pass.run(element)
        return tuple(self._diagnostics)


class LintDocumentUseCase:
    """Load an element-model document, run the enabled rules, return a LintReport."""

    def __init__(
        self,
        element_model: ElementModelProtocol,
        config_loader: "ConfigurationLoader",
        guidance_service: GuidanceServiceProtocol,
        telemetry: TelemetryPort,
    ) -> None:
        self.element_model = element_model
        self.config_loader = config_loader
        self.guidance_service = guidance_service
        self.telemetry = telemetry

    def create_pass_manager(self) -> PassManager:
        """Build a fresh manager with every rule that is not disabled in configuration."""
        manager = PassManager()
        disabled = self.config_loader.disabled_rules
        tag = CppObjectBindingRule.tag
        if tag.code in disabled or tag.symbol in disabled:
            logger.info("Rule %s disabled by configuration", tag)
            return manager
        manager.register(
            CppObjectBindingRule(
                manager,
                settings=self.config_loader.rule_settings(),
                registry_entry=self.guidance_service.get_entry(tag.code),
            )
        )
        return manager

    def execute(self, model_path: str) -> LintReport:
        """
        Lint one document.

        Raises:
            ElementModelError: If the model document is malformed.
        """
        self.telemetry.step(f"Linting {model_path}")
        tree, source_path = self.element_model.load(model_path)
        diagnostics = self.create_pass_manager().run(tree)
        logger.debug("%s: %d element(s), %d diagnostic(s)", model_path, len(tree), len(diagnostics))
        return LintReport(model_path=model_path, source_path=source_path, diagnostics=diagnostics)
