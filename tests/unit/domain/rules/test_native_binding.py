"""Tests for the C++ object binding rule (D03)."""

import logging
from unittest.mock import MagicMock, patch

import pytest

from qml_alias_linter.domain.config import RuleSettings
from qml_alias_linter.domain.entities import (
    CandidateReference,
    EditKind,
    ElementTreeBuilder,
    FixDescriptor,
    SourceSpan,
)
from qml_alias_linter.domain.rules.native_binding import BindingVerdict, CppObjectBindingRule


def _flagged_fix(sink: MagicMock) -> FixDescriptor:
    sink.emit_warning.assert_called_once()
    message, tag, location, fix = sink.emit_warning.call_args.args
    assert fix is not None
    return fix


class TestRuleAttributes:
    """Test rule identity."""

    def test_tag(self, sink) -> None:
        rule = CppObjectBindingRule(sink)
        assert rule.tag.code == "D03"
        assert rule.tag.symbol == "cpp-binding-anti-pattern"
        assert "alias" in rule.description


class TestShouldRun:
    """Test the bindingless pre-filter."""

    def test_false_without_bindings(self, sink, timer_document) -> None:
        rule = CppObjectBindingRule(sink)
        assert not rule.should_run(timer_document.tree.root)
        assert not rule.should_run(timer_document.tree.element(1))

    def test_true_with_bindings(self, sink, timer_document) -> None:
        assert CppObjectBindingRule(sink).should_run(timer_document.tree.element(2))


class TestExtractReference:
    """Test the leading identifier.identifier match."""

    @pytest.mark.parametrize(
        "expression, expected",
        [
            ("cppObj.interval", ("cppObj", "interval")),
            ("  cppObj . interval", ("cppObj", "interval")),
            ("a.b.c", ("a", "b")),
            ("_private.value + 1", ("_private", "value")),
            ("cppObj.running ? 1 : 0", ("cppObj", "running")),
        ],
    )
    def test_matches(self, expression: str, expected: tuple[str, str]) -> None:
        candidate = CppObjectBindingRule.extract_reference(expression)
        assert candidate == CandidateReference(*expected)

    @pytest.mark.parametrize(
        "expression",
        ["42", "cppObj", "\"text.value\"", "1 + cppObj.interval", "cppObj[0].x", "9abc.value", ""],
    )
    def test_no_match(self, expression: str) -> None:
        assert CppObjectBindingRule.extract_reference(expression) is None


class TestIsEnumAccess:
    """Test the enum exemption vocabulary."""

    @pytest.mark.parametrize("property_name", ["currentState", "STATE", "fillMode", "sourceType", "updatePolicy", "state"])
    def test_enum_like_properties_are_exempt(self, sink, property_name: str) -> None:
        rule = CppObjectBindingRule(sink)
        candidate = CandidateReference("cppObj", property_name)
        assert rule.is_enum_access(f"cppObj.{property_name}", candidate)

    def test_qualified_access_is_exempt_regardless_of_property(self, sink) -> None:
        rule = CppObjectBindingRule(sink)
        candidate = CandidateReference("Namespace", "value")
        assert rule.is_enum_access("Namespace.value == Qt::AlignLeft", candidate)

    def test_plain_property_is_not_exempt(self, sink) -> None:
        rule = CppObjectBindingRule(sink)
        assert not rule.is_enum_access("cppObj.interval", CandidateReference("cppObj", "interval"))

    def test_vocabulary_is_injected(self, sink) -> None:
        """An alternate vocabulary replaces the built-in terms."""
        rule = CppObjectBindingRule(sink, settings=RuleSettings(enum_exemption_terms=("Kind",)))
        assert rule.is_enum_access("cppObj.itemKind", CandidateReference("cppObj", "itemKind"))
        assert not rule.is_enum_access("cppObj.currentState", CandidateReference("cppObj", "currentState"))


class TestClassify:
    """Test the per-binding verdicts."""

    @pytest.mark.parametrize(
        "expression, declared_type, verdict",
        [
            ("cppObj.interval", "QTimer", BindingVerdict.FLAGGED),
            ("cppObj.currentState", "QTimer", BindingVerdict.EXEMPT),
            ("cppObj.interval", "LocalVariable", BindingVerdict.NOT_NATIVE),
            ("missing.interval", "QTimer", BindingVerdict.NOT_NATIVE),
            ("100", "QTimer", BindingVerdict.NO_CANDIDATE),
        ],
    )
    def test_verdicts(self, sink, document_factory, expression, declared_type, verdict) -> None:
        document = document_factory(expression=expression, declared_type=declared_type)
        element = document.tree.element(2)
        rule = CppObjectBindingRule(sink)
        assert rule.classify(element.bindings[0], element) is verdict
        sink.emit_warning.assert_not_called()

    def test_is_anti_pattern_matches_flagged_verdict(self, sink, timer_document) -> None:
        element = timer_document.tree.element(2)
        binding = element.bindings[0]
        rule = CppObjectBindingRule(sink)
        candidate = rule.extract_reference(binding.expression)
        assert rule.is_anti_pattern(binding, candidate, element)


class TestRun:
    """Test diagnostics and fixes emitted by run()."""

    def test_native_property_binding_emits_one_diagnostic(self, sink, timer_document) -> None:
        element = timer_document.tree.element(2)
        rule = CppObjectBindingRule(sink)
        rule.run(element)

        message, tag, location, fix = sink.emit_warning.call_args.args
        sink.emit_warning.assert_called_once()
        assert message == "Property binding to C++ object detected. Consider using property alias instead."
        assert tag == rule.tag
        assert location == element.bindings[0].span
        assert fix.tag == rule.tag
        assert fix.hint == "Add property alias: property alias als_cppObj_interval: cppObj.interval"

    def test_fix_edits(self, sink, timer_document) -> None:
        """Alias declaration goes before the root's closing brace; the binding becomes the alias."""
        element = timer_document.tree.element(2)
        CppObjectBindingRule(sink).run(element)
        fix = _flagged_fix(sink)

        insertion, replacement = fix.edits
        source = timer_document.source
        assert insertion.kind is EditKind.INSERTION
        assert insertion.span.offset == len(source) - 1
        assert source[insertion.span.offset] == "}"
        assert insertion.text == "\n    property alias als_cppObj_interval: cppObj.interval"
        assert "alias als_cppObj_interval: cppObj.interval" in insertion.text
        assert replacement.kind is EditKind.REPLACEMENT
        assert replacement.span == element.bindings[0].span
        assert replacement.text == "als_cppObj_interval"
        assert replacement.expected == "cppObj.interval"
        assert not insertion.span.overlaps(replacement.span)

    def test_insertion_offset_not_before_root_start(self, sink) -> None:
        builder = ElementTreeBuilder()
        root = builder.add_element("Item", SourceSpan(30, 1))
        builder.add_element("QTimer", SourceSpan(30, 1), element_id="t", parent=root)
        inner = builder.add_element("Item", SourceSpan(30, 1), parent=root)
        builder.add_binding(inner, "x", "t.interval", SourceSpan(30, 0))
        tree = builder.build()

        CppObjectBindingRule(sink).run(tree.element(inner))
        fix = _flagged_fix(sink)
        assert fix.edits[0].span.offset >= tree.root.source_span.offset

    def test_enum_binding_is_silent(self, sink, document_factory) -> None:
        document = document_factory(expression="cppObj.currentState")
        CppObjectBindingRule(sink).run(document.tree.element(2))
        sink.emit_warning.assert_not_called()

    def test_qualified_enum_is_silent(self, sink, document_factory) -> None:
        document = document_factory(expression="cppObj.alignment === Qt::AlignLeft")
        CppObjectBindingRule(sink).run(document.tree.element(2))
        sink.emit_warning.assert_not_called()

    def test_user_type_is_silent(self, sink, document_factory) -> None:
        document = document_factory(expression="cppObj.value", declared_type="LocalVariable")
        CppObjectBindingRule(sink).run(document.tree.element(2))
        sink.emit_warning.assert_not_called()

    def test_empty_root_span_reports_without_fix(self, sink) -> None:
        """No valid insertion point: the diagnostic is still emitted, minus the fix."""
        builder = ElementTreeBuilder()
        root = builder.add_element("Item", SourceSpan(0, 0))
        builder.add_element("QTimer", SourceSpan(0, 0), element_id="t", parent=root)
        inner = builder.add_element("Item", SourceSpan(0, 0), parent=root)
        builder.add_binding(inner, "x", "t.interval", SourceSpan(0, 0))
        tree = builder.build()

        CppObjectBindingRule(sink).run(tree.element(inner))
        sink.emit_warning.assert_called_once()
        assert sink.emit_warning.call_args.args[3] is None

    def test_one_diagnostic_per_flagged_binding(self, sink) -> None:
        builder = ElementTreeBuilder()
        root = builder.add_element("Item", SourceSpan(0, 100))
        builder.add_element("QSettings", SourceSpan(5, 10), element_id="settings", parent=root)
        inner = builder.add_element("Item", SourceSpan(20, 60), parent=root)
        builder.add_binding(inner, "width", "settings.width", SourceSpan(30, 14))
        builder.add_binding(inner, "height", "settings.height", SourceSpan(50, 15))
        builder.add_binding(inner, "fillMode", "settings.fillMode", SourceSpan(70, 5))
        tree = builder.build()

        CppObjectBindingRule(sink).run(tree.element(inner))
        assert sink.emit_warning.call_count == 2

    def test_classification_is_idempotent(self, timer_document) -> None:
        """Running twice on the same binding yields identical fixes."""
        first, second = MagicMock(), MagicMock()
        element = timer_document.tree.element(2)
        CppObjectBindingRule(first).run(element)
        CppObjectBindingRule(second).run(element)
        assert first.emit_warning.call_args == second.emit_warning.call_args

    def test_custom_alias_settings(self, sink, timer_document) -> None:
        settings = RuleSettings(alias_prefix="cpp", alias_keyword="alias", alias_indent="\t")
        CppObjectBindingRule(sink, settings=settings).run(timer_document.tree.element(2))
        fix = _flagged_fix(sink)
        assert fix.edits[0].text == "\n\talias cpp_cppObj_interval: cppObj.interval"
        assert fix.edits[1].text == "cpp_cppObj_interval"

    def test_registry_entry_overrides_message(self, sink, timer_document) -> None:
        entry = {"message_template": "Use an alias.", "hint_template": "alias {alias}"}
        CppObjectBindingRule(sink, registry_entry=entry).run(timer_document.tree.element(2))
        assert sink.emit_warning.call_args.args[0] == "Use an alias."
        assert _flagged_fix(sink).hint == "alias als_cppObj_interval"


class TestFixInstructions:
    """Test manual instructions."""

    def test_mentions_alias_and_target(self, sink) -> None:
        text = CppObjectBindingRule(sink).get_fix_instructions(CandidateReference("timer", "interval"))
        assert "property alias als_timer_interval: timer.interval" in text


class TestVerdictLogging:
    """Test that run() goes through classify()."""

    def test_run_logs_each_verdict(self, sink, document_factory, caplog) -> None:
        element = document_factory(expression="cppObj.currentState").tree.element(2)
        with caplog.at_level(logging.DEBUG, logger="qml_alias_linter.domain.rules.native_binding"):
            CppObjectBindingRule(sink).run(element)
        assert "-> exempt" in caplog.text
        sink.emit_warning.assert_not_called()

    def test_run_reports_only_flagged_verdicts(self, sink, timer_document) -> None:
        rule = CppObjectBindingRule(sink)
        element = timer_document.tree.element(2)
        with patch.object(rule, "classify", wraps=rule.classify) as classify:
            rule.run(element)
        classify.assert_called_once_with(element.bindings[0], element)
        sink.emit_warning.assert_called_once()
