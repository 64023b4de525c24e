"""Shared pytest fixtures for constparser tests."""

import pytest

from constparser.core.errors import Diagnostics
from constparser.core.expression_lang.variables import VariableEnvironment


@pytest.fixture
def diagnostics() -> Diagnostics:
    """Return an empty diagnostics collector."""
    return Diagnostics()


@pytest.fixture
def variables() -> VariableEnvironment:
    """Return an empty variable environment."""
    return VariableEnvironment()
