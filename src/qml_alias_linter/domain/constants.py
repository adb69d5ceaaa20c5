"""
Alias Lint: Rule Constants
"""

# QML-ALIAS-LINT: ANSI Cyan (\033[36m)
_CYAN: str = "\033[36m"
_RESET: str = "\033[0m"
_BANNER_ART: str = r"""
   ____  __  _____       ___    ___
  / __ \/  |/  / /      /   |  / (_)___ ______
 / / / / /|_/ / /      / /| | / / / __ `/ ___/
/ /_/ / /  / / /___   / ___ |/ / / /_/ (__  )
\___\_\_/  /_/_____/  /_/  |_/_/_/\__,_/____/   lint
"""
LINTER_BANNER = _CYAN + _BANNER_ART + _RESET

TOOL_SECTION: str = "qml-alias-lint"

# Qt convention: natively registered classes carry a leading "Q".
DEFAULT_NATIVE_TYPE_PREFIX: str = "Q"

DEFAULT_NATIVE_BASE_TYPES: frozenset[str] = frozenset(
    {
        "QObject",
        "QQuickItem",
        "QAbstractListModel",
        "QSortFilterProxyModel",
        "QTimer",
        "QSettings",
        "QFileSystemWatcher",
        "QNetworkAccessManager",
    }
)

# Enum-valued properties are compile-time constants on the C++ side.
DEFAULT_ENUM_EXEMPTION_TERMS: tuple[str, ...] = ("State", "Mode", "Type", "Policy")

QUALIFIED_ACCESS_TOKEN: str = "::"

DEFAULT_ALIAS_PREFIX: str = "als"
DEFAULT_ALIAS_KEYWORD: str = "property alias"
DEFAULT_ALIAS_INDENT: str = "    "

CPP_BINDING_RULE_CODE: str = "D03"
CPP_BINDING_RULE_SYMBOL: str = "cpp-binding-anti-pattern"
CPP_BINDING_MESSAGE: str = (
    "Property binding to C++ object detected. Consider using property alias instead."
)
CPP_BINDING_HINT_TEMPLATE: str = "Add property alias: {keyword} {alias}: {object_id}.{property_name}"

MODEL_FILE_SUFFIXES: tuple[str, ...] = (".qml.yaml", ".qml.yml", ".qml.json")
