"""Configuration for linter settings. Immutable value object created by Infrastructure."""

import logging
from dataclasses import dataclass

from qml_alias_linter.domain.constants import (
    DEFAULT_ALIAS_INDENT,
    DEFAULT_ALIAS_KEYWORD,
    DEFAULT_ALIAS_PREFIX,
    DEFAULT_ENUM_EXEMPTION_TERMS,
    DEFAULT_NATIVE_BASE_TYPES,
    DEFAULT_NATIVE_TYPE_PREFIX,
)

logger = logging.getLogger(__name__)

KNOWN_KEYS: frozenset[str] = frozenset(
    {
        "native_type_prefix",
        "native_base_types",
        "enum_exemption_terms",
        "alias_prefix",
        "alias_keyword",
        "alias_indent",
        "disabled_rules",
    }
)


@dataclass(frozen=True)
class RuleSettings:
    """Read-only vocabulary and formatting settings handed to rules at construction."""

    native_type_prefix: str = DEFAULT_NATIVE_TYPE_PREFIX
    native_base_types: frozenset[str] = DEFAULT_NATIVE_BASE_TYPES
    enum_exemption_terms: tuple[str, ...] = DEFAULT_ENUM_EXEMPTION_TERMS
    alias_prefix: str = DEFAULT_ALIAS_PREFIX
    alias_keyword: str = DEFAULT_ALIAS_KEYWORD
    alias_indent: str = DEFAULT_ALIAS_INDENT


class ConfigurationLoader:
    """
    Immutable configuration for linter settings.

    Created by Infrastructure from the [tool.qml-alias-lint] table. Domain does not
    read the filesystem; Infrastructure calls ConfigFileLoader.load_config_from_fs()
    and constructs ConfigurationLoader(config_dict) at composition root.
    """

    def __init__(self, config_dict: dict[str, object]) -> None:
        self._config = config_dict
        if config_dict:
            self.validate_config(config_dict)

    def validate_config(self, config: dict[str, object]) -> None:
        """Warn about unknown keys. Badly typed values fall back to defaults when read."""
        for key in sorted(set(config) - KNOWN_KEYS):
            logger.warning("Configuration Warning: unknown key '%s' in [tool.qml-alias-lint] is ignored.", key)

    @property
    def config(self) -> dict[str, object]:
        """Return the loaded configuration."""
        return self._config

    def _get_str(self, key: str, default: str) -> str:
        raw = self._config.get(key, default)
        if isinstance(raw, str):
            return raw
        logger.warning("Configuration Warning: '%s' must be a string; using %r.", key, default)
        return default

    def _get_list(self, key: str) -> list[str]:
        """Helper to safely get a list of strings from config."""
        raw = self._config.get(key, [])
        if not isinstance(raw, (list, tuple, set)):
            logger.warning("Configuration Warning: '%s' must be a list of strings; ignoring it.", key)
            return []
        return [item for item in raw if isinstance(item, str) and item]

    @property
    def native_type_prefix(self) -> str:
        return self._get_str("native_type_prefix", DEFAULT_NATIVE_TYPE_PREFIX)

    @property
    def native_base_types(self) -> frozenset[str]:
        """Known native base types, merged with the built-in allow-list."""
        return DEFAULT_NATIVE_BASE_TYPES.union(self._get_list("native_base_types"))

    @property
    def enum_exemption_terms(self) -> tuple[str, ...]:
        """Enum-like property terms, built-ins first, duplicates dropped."""
        terms = list(DEFAULT_ENUM_EXEMPTION_TERMS)
        for term in self._get_list("enum_exemption_terms"):
            if term not in terms:
                terms.append(term)
        return tuple(terms)

    @property
    def alias_prefix(self) -> str:
        return self._get_str("alias_prefix", DEFAULT_ALIAS_PREFIX)

    @property
    def alias_keyword(self) -> str:
        return self._get_str("alias_keyword", DEFAULT_ALIAS_KEYWORD)

    @property
    def alias_indent(self) -> str:
        return self._get_str("alias_indent", DEFAULT_ALIAS_INDENT)

    @property
    def disabled_rules(self) -> frozenset[str]:
        """Rule codes or symbols the pass manager must not run."""
        return frozenset(self._get_list("disabled_rules"))

    def rule_settings(self) -> RuleSettings:
        return RuleSettings(
            native_type_prefix=self.native_type_prefix,
            native_base_types=self.native_base_types,
            enum_exemption_terms=self.enum_exemption_terms,
            alias_prefix=self.alias_prefix,
            alias_keyword=self.alias_keyword,
            alias_indent=self.alias_indent,
        )
