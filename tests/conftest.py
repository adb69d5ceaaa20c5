"""Shared fixtures. Run pytest from the project root (see [tool.pytest.ini_options])."""

from typing import Callable
from unittest.mock import MagicMock

import pytest

from tests.qml_test_utils import QmlDocument, make_timer_document


@pytest.fixture
def timer_document() -> QmlDocument:
    return make_timer_document()


@pytest.fixture
def document_factory() -> Callable[..., QmlDocument]:
    return make_timer_document


@pytest.fixture
def sink() -> MagicMock:
    """Diagnostic sink double recording emit_warning calls."""
    return MagicMock()


@pytest.fixture
def telemetry() -> MagicMock:
    return MagicMock()
