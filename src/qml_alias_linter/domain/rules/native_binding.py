"""C++ Object Binding Rule (D03) - Suggest alias properties for native object bindings."""

import logging
import re
from enum import Enum
from typing import TYPE_CHECKING, Optional

from qml_alias_linter.domain.config import RuleSettings
from qml_alias_linter.domain.constants import (
    CPP_BINDING_HINT_TEMPLATE,
    CPP_BINDING_MESSAGE,
    CPP_BINDING_RULE_CODE,
    CPP_BINDING_RULE_SYMBOL,
    QUALIFIED_ACCESS_TOKEN,
)
from qml_alias_linter.domain.entities import (
    Binding,
    CandidateReference,
    DiagnosticTag,
    Element,
    FixDescriptor,
    TextEdit,
)
from qml_alias_linter.domain.rules.scope_resolver import ScopeResolver

if TYPE_CHECKING:
    from qml_alias_linter.domain.protocols import DiagnosticSink
    from qml_alias_linter.domain.registry_types import RuleRegistryEntry

logger = logging.getLogger(__name__)

_REFERENCE_PATTERN = re.compile(r"\s*([A-Za-z_][A-Za-z0-9_]*)\s*\.\s*([A-Za-z_][A-Za-z0-9_]*)")


class BindingVerdict(Enum):
    """Terminal outcome of classifying one binding."""
    NO_CANDIDATE = "no_candidate"
    NOT_NATIVE = "not_native"
    EXEMPT = "exempt"
    FLAGGED = "flagged"


class CppObjectBindingRule:
    """
    Rule for D03: bindings that read a property straight off a C++ object.

    A binding such as `interval: cppObj.interval`, where `cppObj` is declared
    in an enclosing scope with a natively registered base type, is reported
    together with a fix that declares `property alias als_cppObj_interval:
    cppObj.interval` on the document root and binds to the alias instead.
    Enum-like accesses are exempt.
    """

    tag: DiagnosticTag = DiagnosticTag(CPP_BINDING_RULE_CODE, CPP_BINDING_RULE_SYMBOL)
    description: str = (
        "C++ Object Binding: bind to an alias property instead of a native object's property. "
        "Auto-fix: declares the alias on the root element."
    )

    def __init__(
        self,
        sink: "DiagnosticSink",
        settings: Optional[RuleSettings] = None,
        registry_entry: Optional["RuleRegistryEntry"] = None,
    ) -> None:
        self._sink = sink
        self._settings = settings or RuleSettings()
        self._resolver = ScopeResolver(self._settings)
        self._exemption_terms = tuple(t.casefold() for t in self._settings.enum_exemption_terms)
        entry = registry_entry or {}
        self._message = entry.get("message_template") or CPP_BINDING_MESSAGE
        self._hint_template = entry.get("hint_template") or CPP_BINDING_HINT_TEMPLATE

    def should_run(self, element: Element) -> bool:
        return bool(element.bindings)

    def run(self, element: Element) -> None:
        for binding in element.bindings:
            candidate = self.extract_reference(binding.expression)
            if candidate is None or self.classify(binding, element) is not BindingVerdict.FLAGGED:
                continue
            fix = self.build_fix(binding, candidate, element)
            self._sink.emit_warning(self._message, self.tag, binding.span, fix)

    @staticmethod
    def extract_reference(expression: str) -> Optional[CandidateReference]:
        """Return the leading `object.property` pair, ignoring any deeper segments."""
        match = _REFERENCE_PATTERN.match(expression)
        if match is None:
            return None
        return CandidateReference(object_id=match.group(1), property_name=match.group(2))

    def is_anti_pattern(self, binding: Binding, candidate: CandidateReference, element: Element) -> bool:
        if not self._resolver.is_native_object_reference(candidate.object_id, element):
            return False
        return not self.is_enum_access(binding.expression, candidate)

    def is_enum_access(self, expression: str, candidate: CandidateReference) -> bool:
        if QUALIFIED_ACCESS_TOKEN in expression:
            return True
        property_name = candidate.property_name.casefold()
        return any(term in property_name for term in self._exemption_terms)

    def classify(self, binding: Binding, element: Element) -> BindingVerdict:
        """Run the per-binding decision without reporting anything."""
        candidate = self.extract_reference(binding.expression)
        if candidate is None:
            verdict = BindingVerdict.NO_CANDIDATE
        elif self.is_anti_pattern(binding, candidate, element):
            verdict = BindingVerdict.FLAGGED
        elif self._resolver.is_native_object_reference(candidate.object_id, element):
            verdict = BindingVerdict.EXEMPT
        else:
            verdict = BindingVerdict.NOT_NATIVE
        logger.debug("%s on %s: %r -> %s", self.tag.code, binding.property_name, binding.expression, verdict.value)
        return verdict

    def alias_name(self, candidate: CandidateReference) -> str:
        return f"{self._settings.alias_prefix}_{candidate.object_id}_{candidate.property_name}"

    def build_fix(self, binding: Binding, candidate: CandidateReference, element: Element) -> Optional[FixDescriptor]:
        """
        Build the alias fix for a flagged binding.

        The declaration is inserted just before the root element's closing
        brace. Returns None when the root has an empty span, since no valid
        insertion point exists then.
        """
        root = ScopeResolver.root_of(element)
        root_span = root.source_span
        if root_span.length <= 0:
            logger.debug("Root element has an empty span; reporting %s without a fix", self.tag.code)
            return None

        insert_at = root_span.offset + root_span.length - 1
        if binding.span.offset < insert_at < binding.span.end:
            logger.debug("Root closing position falls inside the binding; reporting %s without a fix", self.tag.code)
            return None

        alias = self.alias_name(candidate)
        target = f"{candidate.object_id}.{candidate.property_name}"
        declaration = f"\n{self._settings.alias_indent}{self._settings.alias_keyword} {alias}: {target}"
        hint = self._hint_template.format(
            keyword=self._settings.alias_keyword,
            alias=alias,
            object_id=candidate.object_id,
            property_name=candidate.property_name,
        )
        return FixDescriptor(
            message=self._message,
            tag=self.tag,
            edits=(
                TextEdit.insertion(insert_at, declaration),
                TextEdit.replacement(binding.span, alias, expected=binding.expression),
            ),
            hint=hint,
        )

    def get_fix_instructions(self, candidate: CandidateReference) -> str:
        """Provide human instructions for a manual fix."""
        alias = self.alias_name(candidate)
        return (
            f"1. Declare '{self._settings.alias_keyword} {alias}: "
            f"{candidate.object_id}.{candidate.property_name}' on the root element\n"
            f"2. Bind to '{alias}' instead of '{candidate.object_id}.{candidate.property_name}'"
        )
