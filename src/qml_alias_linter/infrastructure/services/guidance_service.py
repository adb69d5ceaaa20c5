"""GuidanceService: loads the rule registry and provides messages and manual instructions."""

from pathlib import Path
from typing import Optional, cast

import yaml

from qml_alias_linter.domain.protocols import GuidanceServiceProtocol
from qml_alias_linter.domain.registry_types import RuleRegistryEntry


class GuidanceService(GuidanceServiceProtocol):
    """Loads rule_registry.yaml and resolves entries by rule code or symbol."""

    def __init__(self, registry_path: Optional[str] = None) -> None:
        if registry_path is not None:
            self._path = Path(registry_path)
        else:
            # Default: packaged resource next to this package
            _base = Path(__file__).resolve().parent.parent.parent
            self._path = _base / "resources" / "rule_registry.yaml"
        self._registry: dict[str, RuleRegistryEntry] = {}
        self._load()

    def _load(self) -> None:
        if self._path.exists():
            with open(self._path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
                self._registry = (
                    cast(dict[str, RuleRegistryEntry], data) if isinstance(data, dict) else {}
                )
        else:
            self._registry = {}

    def get_registry(self) -> dict[str, RuleRegistryEntry]:
        """Return a shallow copy of the loaded registry."""
        return dict(self._registry)

    def get_entry(self, rule_code: str) -> Optional[RuleRegistryEntry]:
        """Return the registry entry for a rule by code or symbol."""
        entry = self._registry.get(rule_code)
        if entry:
            return cast(RuleRegistryEntry, dict(entry))
        for e in self._registry.values():
            if e.get("symbol") == rule_code:
                return cast(RuleRegistryEntry, dict(e))
        return None

    def get_manual_instructions(self, rule_code: str) -> str:
        entry = self.get_entry(rule_code)
        if entry and "manual_instructions" in entry:
            return str(entry["manual_instructions"])
        return "See project docs. Fix the binding at the reported location."

    def iter_entries(self) -> list[tuple[str, RuleRegistryEntry]]:
        return [(code, cast(RuleRegistryEntry, dict(entry))) for code, entry in self._registry.items()]
