"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from qml_alias_linter.infrastructure.di.container import LinterContainer
from qml_alias_linter.interface.cli import CLIDependencies, create_app


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = LinterContainer.get_instance()

    deps = CLIDependencies(
        config_loader=container.get_config_loader(),
        telemetry=container.get_telemetry_port(),
        filesystem=container.get_filesystem_gateway(),
        element_model=container.get_element_model_gateway(),
        guidance_service=container.get_guidance_service(),
        reporter_for=container.get_reporter,
        config_path=container.get_config_path(),
    )

    app = create_app(deps)
    app()


if __name__ == "__main__":
    main()
