"""qml-alias-lint: suggest alias properties for QML bindings to C++ object properties."""

__version__ = "0.1.0"
