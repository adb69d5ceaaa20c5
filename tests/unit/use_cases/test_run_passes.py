"""Unit tests for PassManager and LintDocumentUseCase."""

from unittest.mock import MagicMock

import pytest

from qml_alias_linter.domain.config import ConfigurationLoader
from qml_alias_linter.domain.entities import DiagnosticTag, SourceSpan
from qml_alias_linter.domain.exceptions import ElementModelError
from qml_alias_linter.domain.rules.native_binding import CppObjectBindingRule
from qml_alias_linter.use_cases.run_passes import LintDocumentUseCase, PassManager


class TestPassManager:
    """Test the element walk and the collecting sink."""

    def test_run_only_calls_passes_that_should_run(self, timer_document) -> None:
        element_pass = MagicMock()
        element_pass.should_run.side_effect = lambda element: element.index == 2
        manager = PassManager()
        manager.register(element_pass)

        manager.run(timer_document.tree)

        assert element_pass.should_run.call_count == len(timer_document.tree)
        element_pass.run.assert_called_once_with(timer_document.tree.element(2))

    def test_emit_warning_records_diagnostics_in_order(self) -> None:
        manager = PassManager()
        tag = DiagnosticTag("D03", "cpp-binding-anti-pattern")
        element_pass = MagicMock()
        element_pass.should_run.return_value = True
        element_pass.run.side_effect = lambda element: manager.emit_warning("m", tag, SourceSpan(element.index, 1))
        manager.register(element_pass)

        fake_tree = MagicMock()
        fake_tree.walk.return_value = [MagicMock(index=3), MagicMock(index=1)]
        diagnostics = manager.run(fake_tree)

        assert [d.location.offset for d in diagnostics] == [3, 1]
        assert all(d.fix is None for d in diagnostics)

    def test_run_resets_between_documents(self, timer_document) -> None:
        manager = PassManager()
        manager.register(CppObjectBindingRule(manager))

        first = manager.run(timer_document.tree)
        second = manager.run(timer_document.tree)

        assert len(first) == 1
        assert first == second

    def test_end_to_end_with_real_rule(self, timer_document) -> None:
        manager = PassManager()
        manager.register(CppObjectBindingRule(manager))
        (diagnostic,) = manager.run(timer_document.tree)
        assert diagnostic.fixable
        assert diagnostic.fix.edits[1].text == "als_cppObj_interval"


class TestLintDocumentUseCase:
    """Test the lint use case wiring."""

    def _use_case(self, timer_document, config=None, telemetry=None) -> LintDocumentUseCase:
        element_model = MagicMock()
        element_model.load.return_value = (timer_document.tree, "Main.qml")
        guidance = MagicMock()
        guidance.get_entry.return_value = None
        return LintDocumentUseCase(
            element_model=element_model,
            config_loader=ConfigurationLoader(config or {}),
            guidance_service=guidance,
            telemetry=telemetry or MagicMock(),
        )

    def test_execute_returns_report(self, timer_document, telemetry) -> None:
        report = self._use_case(timer_document, telemetry=telemetry).execute("Main.qml.yaml")
        assert report.model_path == "Main.qml.yaml"
        assert report.source_path == "Main.qml"
        assert len(report.diagnostics) == 1
        assert report.has_violations()
        telemetry.step.assert_called_once()

    @pytest.mark.parametrize("disabled", ["D03", "cpp-binding-anti-pattern"])
    def test_disabled_rule_is_not_registered(self, timer_document, disabled: str) -> None:
        use_case = self._use_case(timer_document, config={"disabled_rules": [disabled]})
        assert use_case.create_pass_manager().passes == ()
        assert not use_case.execute("Main.qml.yaml").has_violations()

    def test_configured_vocabulary_reaches_rule(self, timer_document) -> None:
        use_case = self._use_case(timer_document, config={"enum_exemption_terms": ["interval"]})
        assert not use_case.execute("Main.qml.yaml").has_violations()

    def test_model_errors_propagate(self, timer_document) -> None:
        use_case = self._use_case(timer_document)
        use_case.element_model.load.side_effect = ElementModelError("bad.qml.yaml", "broken")
        with pytest.raises(ElementModelError):
            use_case.execute("bad.qml.yaml")
