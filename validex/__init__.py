"""
Validex - Declarative Validation for Python Mappings
====================================================

Validate named input values against per-attribute rules and get back
either success or human-readable error messages.

Quick Start:
    from validex import Validator

    validator = Validator(
        {"email": "john@example.com", "age": 17},
        {"email": "required|email", "age": "required|integer|min:18"},
    )

    validator.validate()      # False
    validator.get_errors()    # {"age": ["The age must be at least 18"]}
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

from typing import TYPE_CHECKING

# Core imports (always available)
from validex.validation.exceptions import (
    InvalidRuleError,
    MalformedRuleStringError,
    RuleError,
    UnknownRuleError,
)
from validex.validation.registry import RuleRegistry, extend_available_rules, get_registry
from validex.validation.rules import MISSING, Rule
from validex.validation.validator import (
    ValidationError,
    ValidationResult,
    Validator,
    validate,
    validate_or_fail,
)

if TYPE_CHECKING:
    from validex.core.config import Config, get_config
    from validex.utils.logger import Logger, configure_logging, get_logger


def __getattr__(name: str):
    """Lazy loading of the ambient modules."""
    _imports = {
        "Config": "validex.core.config",
        "get_config": "validex.core.config",
        "Logger": "validex.utils.logger",
        "get_logger": "validex.utils.logger",
        "configure_logging": "validex.utils.logger",
    }

    if name in _imports:
        import importlib
        module = importlib.import_module(_imports[name])
        return getattr(module, name)

    raise AttributeError(f"module 'validex' has no attribute '{name}'")


__all__ = [
    # Metadata
    "__version__",
    "__license__",
    # Validation
    "Validator",
    "ValidationError",
    "ValidationResult",
    "validate",
    "validate_or_fail",
    "Rule",
    "MISSING",
    "RuleRegistry",
    "get_registry",
    "extend_available_rules",
    # Errors
    "RuleError",
    "UnknownRuleError",
    "InvalidRuleError",
    "MalformedRuleStringError",
    # Config and logging (lazy)
    "Config",
    "get_config",
    "Logger",
    "get_logger",
    "configure_logging",
]
