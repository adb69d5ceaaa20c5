"""Element Model Gateway - read element-model documents (YAML or JSON) into an ElementTree."""

import json
from typing import Any, Optional

import yaml

from qml_alias_linter.domain.entities import ElementTree, ElementTreeBuilder, SourceSpan
from qml_alias_linter.domain.exceptions import ElementModelError
from qml_alias_linter.domain.protocols import ElementModelProtocol, FileSystemProtocol


class ElementModelGateway(ElementModelProtocol):
    """
    Loads the element tree a QML front end exported for one document.

    Expected shape::

        source: Main.qml            # optional, relative to the model file
        root:
          type: Item
          id: root                  # optional
          span: [0, 240]            # or {offset: 0, length: 240}
          bindings:
            - {property: interval, expression: cppObj.interval, span: [120, 15]}
          children: [...]
    """

    def __init__(self, filesystem: FileSystemProtocol) -> None:
        self.filesystem = filesystem

    def load(self, model_path: str) -> tuple[ElementTree, Optional[str]]:
        data = self._read_document(model_path)
        if not isinstance(data, dict) or "root" not in data:
            raise ElementModelError(model_path, "document must be a mapping with a 'root' element")
        tree = self.build_tree(data["root"], model_path)
        return tree, self._resolve_source(data.get("source"), model_path)

    def _read_document(self, model_path: str) -> Any:
        try:
            text = self.filesystem.read_text(model_path)
        except OSError as exc:
            raise ElementModelError(model_path, f"cannot read file ({exc.strerror or exc})") from exc
        except UnicodeDecodeError as exc:
            raise ElementModelError(model_path, f"not valid UTF-8 text ({exc.reason} at byte {exc.start})") from exc
        try:
            if model_path.endswith(".json"):
                return json.loads(text)
            return yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise ElementModelError(model_path, f"not valid {'JSON' if model_path.endswith('.json') else 'YAML'}: {exc}") from exc

    def _resolve_source(self, source: object, model_path: str) -> Optional[str]:
        if source is None:
            return None
        if not isinstance(source, str) or not source:
            raise ElementModelError(model_path, "'source' must be a non-empty string", "source")
        return self.filesystem.join_path(self.filesystem.parent_directory(model_path), source)

    @staticmethod
    def build_tree(root: object, model_path: str = "<model>") -> ElementTree:
        """Build an ElementTree from the 'root' mapping of a model document."""
        builder = ElementTreeBuilder()
        # (node, parent index, location) in pre-order so parents get smaller indices
        stack: list[tuple[object, Optional[int], str]] = [(root, None, "root")]
        # YAML anchors can make one mapping appear at several places, even inside itself
        seen: set[int] = set()
        while stack:
            node, parent, location = stack.pop()
            if not isinstance(node, dict):
                raise ElementModelError(model_path, "element must be a mapping", location)
            if id(node) in seen:
                raise ElementModelError(model_path, "element appears more than once (recursive anchor)", location)
            seen.add(id(node))
            type_name = node.get("type")
            if not isinstance(type_name, str) or not type_name:
                raise ElementModelError(model_path, "element needs a non-empty 'type'", location)
            element_id = node.get("id")
            if element_id is not None and not isinstance(element_id, str):
                raise ElementModelError(model_path, "'id' must be a string", location)
            span = ElementModelGateway._parse_span(node.get("span"), model_path, f"{location}.span")
            index = builder.add_element(type_name, span, element_id=element_id, parent=parent)

            bindings = node.get("bindings") or []
            if not isinstance(bindings, list):
                raise ElementModelError(model_path, "'bindings' must be a list", location)
            for i, binding in enumerate(bindings):
                where = f"{location}.bindings[{i}]"
                if not isinstance(binding, dict):
                    raise ElementModelError(model_path, "binding must be a mapping", where)
                prop = binding.get("property")
                expression = binding.get("expression")
                if not isinstance(prop, str) or not isinstance(expression, str):
                    raise ElementModelError(model_path, "binding needs string 'property' and 'expression'", where)
                builder.add_binding(
                    index, prop, expression, ElementModelGateway._parse_span(binding.get("span"), model_path, f"{where}.span")
                )

            children = node.get("children") or []
            if not isinstance(children, list):
                raise ElementModelError(model_path, "'children' must be a list", location)
            for i in reversed(range(len(children))):
                stack.append((children[i], index, f"{location}.children[{i}]"))
        return builder.build()

    @staticmethod
    def _parse_span(raw: object, model_path: str, location: str) -> SourceSpan:
        if isinstance(raw, dict):
            offset, length = raw.get("offset"), raw.get("length")
        elif isinstance(raw, (list, tuple)) and len(raw) == 2:
            offset, length = raw
        else:
            raise ElementModelError(model_path, "span must be [offset, length] or {offset, length}", location)
        if isinstance(offset, bool) or isinstance(length, bool) or not isinstance(offset, int) or not isinstance(length, int):
            raise ElementModelError(model_path, "span offset and length must be integers", location)
        if offset < 0 or length < 0:
            raise ElementModelError(model_path, "span offset and length must not be negative", location)
        return SourceSpan(offset, length)
