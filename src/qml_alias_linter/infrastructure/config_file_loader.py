"""Load [tool.qml-alias-lint] from pyproject.toml. Infrastructure I/O only."""

import logging
import sys
from pathlib import Path
from typing import Optional

if sys.version_info >= (3, 11):
    import tomllib as toml_lib
else:
    import tomli as toml_lib

from qml_alias_linter.domain.constants import TOOL_SECTION

logger = logging.getLogger(__name__)


class ConfigFileLoader:
    """
    Loads config from the nearest pyproject.toml, walking up from the start directory.
    """

    @staticmethod
    def load_config_from_fs(start: Optional[Path] = None) -> tuple[dict[str, object], Optional[str]]:
        """Return ([tool.qml-alias-lint] table, path of the pyproject.toml it came from)."""
        current_path = (start or Path.cwd()).resolve()
        empty: dict[str, object] = {}
        for directory in (current_path, *current_path.parents):
            config_file = directory / "pyproject.toml"
            if not config_file.is_file():
                continue
            try:
                with config_file.open("rb") as f:
                    data = toml_lib.load(f)
            except (OSError, toml_lib.TOMLDecodeError) as exc:
                logger.warning("Could not read %s: %s", config_file, exc)
                continue
            tool_section = data.get("tool")
            if not isinstance(tool_section, dict):
                continue
            config_dict = tool_section.get(TOOL_SECTION)
            if isinstance(config_dict, dict):
                return (config_dict, str(config_file))
        return (empty, None)
