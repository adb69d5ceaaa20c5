"""Identifier resolution over the enclosing-scope chain of a declared element."""

from typing import Optional

from qml_alias_linter.domain.config import RuleSettings
from qml_alias_linter.domain.entities import Element


class ScopeResolver:
    """
    Answers "is this id a natively registered object?" for a given element.

    Resolution walks outward from the element's enclosing scope, checking each
    scope's direct children; the nearest declaration of the id wins, so an
    inner declaration shadows an outer one. Results are never cached.

    Whether a type is native is decided by a naming-convention prefix or a fixed
    allow-list. This is a heuristic: a native type with an unconventional name
    is missed and a prefixed user type is flagged.
    """

    def __init__(self, settings: RuleSettings) -> None:
        self._prefix = settings.native_type_prefix
        self._native_types = settings.native_base_types

    def is_native_type(self, type_name: str) -> bool:
        if self._prefix and type_name.startswith(self._prefix):
            return True
        return type_name in self._native_types

    def find_declaration(self, object_id: str, element: Element) -> Optional[Element]:
        """Return the nearest enclosing declaration of object_id, or None."""
        scope = element.parent_scope()
        while scope is not None:
            for child in scope.child_scopes():
                if child.id == object_id:
                    return child
            scope = scope.parent_scope()
        return None

    def is_native_object_reference(self, object_id: str, element: Element) -> bool:
        declaration = self.find_declaration(object_id, element)
        if declaration is None:
            return False
        return self.is_native_type(declaration.base_type_name)

    @staticmethod
    def root_of(element: Element) -> Element:
        """Follow parent links up to the declaration root."""
        current = element
        parent = current.parent_scope()
        while parent is not None:
            current = parent
            parent = current.parent_scope()
        return current
