from typing import TYPE_CHECKING, Any, Optional, cast

from qml_alias_linter.domain.config import ConfigurationLoader
from qml_alias_linter.infrastructure.config_file_loader import ConfigFileLoader
from qml_alias_linter.infrastructure.gateways.element_model_gateway import ElementModelGateway
from qml_alias_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from qml_alias_linter.infrastructure.services.guidance_service import GuidanceService
from qml_alias_linter.interface.reporters import JsonDiagnosticReporter, TerminalDiagnosticReporter
from qml_alias_linter.interface.telemetry import ProjectTelemetry

if TYPE_CHECKING:
    from qml_alias_linter.domain.protocols import (
        ElementModelProtocol,
        FileSystemProtocol,
        GuidanceServiceProtocol,
        TelemetryPort,
    )
    from qml_alias_linter.interface.reporters import DiagnosticReporter


class LinterContainer:
    """Dependency Injection Container for the QML alias linter."""

    _instance: Optional["LinterContainer"] = None

    def __init__(self) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        """Register default implementations for protocols."""
        config_dict, config_path = ConfigFileLoader.load_config_from_fs()
        self.register_singleton("ConfigurationLoader", ConfigurationLoader(config_dict))
        self.register_singleton("ConfigPath", config_path)

        self.register_singleton(
            "TelemetryPort", ProjectTelemetry("QML-ALIAS", "cyan", "Scanning bindings for C++ object access"))
        filesystem = FileSystemGateway()
        self.register_singleton("FileSystemGateway", filesystem)
        self.register_singleton("ElementModelGateway", ElementModelGateway(filesystem))
        self.register_singleton("GuidanceService", GuidanceService())
        self.register_singleton("TerminalReporter", TerminalDiagnosticReporter(filesystem))
        self.register_singleton("JsonReporter", JsonDiagnosticReporter())

    @classmethod
    def get_instance(cls) -> "LinterContainer":
        """Get or create global container instance."""
        if cls._instance is None:
            cls._instance = LinterContainer()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (primarily for testing)."""
        cls._instance = None

    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_config_loader(self) -> ConfigurationLoader:
        return cast(ConfigurationLoader, self.get("ConfigurationLoader"))

    def get_config_path(self) -> Optional[str]:
        return cast(Optional[str], self.get("ConfigPath"))

    def get_telemetry_port(self) -> "TelemetryPort":
        return cast("TelemetryPort", self.get("TelemetryPort"))

    def get_filesystem_gateway(self) -> "FileSystemProtocol":
        return cast("FileSystemProtocol", self.get("FileSystemGateway"))

    def get_element_model_gateway(self) -> "ElementModelProtocol":
        return cast("ElementModelProtocol", self.get("ElementModelGateway"))

    def get_guidance_service(self) -> "GuidanceServiceProtocol":
        return cast("GuidanceServiceProtocol", self.get("GuidanceService"))

    def get_reporter(self, output_format: str) -> "DiagnosticReporter":
        key = "JsonReporter" if output_format == "json" else "TerminalReporter"
        return cast("DiagnosticReporter", self.get(key))
