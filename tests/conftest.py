"""
Shared fixtures.

The default registry and configuration are process-wide; every test
gets fresh ones so registrations and config changes never leak.
"""

from typing import Any

import pytest

import validex.core.config as config_module
import validex.validation.registry as registry_module
from validex.validation.registry import RuleRegistry
from validex.validation.rules import Rule


class Positive(Rule):
    """Number greater than zero."""

    message = "The {attribute} must be positive"

    def is_valid(self, value: Any) -> bool:
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            return self.violate("type")
        return value > 0


class Recorder(Rule):
    """Always passes; keeps its constructor arguments."""

    def __init__(self, *arguments: str) -> None:
        self.arguments = list(arguments)

    def is_valid(self, value: Any) -> bool:
        return True


@pytest.fixture(autouse=True)
def isolated_globals(monkeypatch):
    monkeypatch.setattr(registry_module, "_registry", None)
    monkeypatch.setattr(config_module, "_config", config_module.Config(environ={}))
    yield


@pytest.fixture
def registry():
    """Registry with the built-in rules."""
    return RuleRegistry()


@pytest.fixture
def empty_registry():
    """Registry without any rules."""
    return RuleRegistry(load_defaults=False)
