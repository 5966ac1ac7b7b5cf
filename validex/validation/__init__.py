"""
Validex Validation
==================

Rule-based validation of data mappings.

Features:
- Pipe-delimited rule strings (``"required|length:3,20"``)
- Rule instances and callable rules
- Named rule registry with custom rules
- Bypass of optional empty attributes (``sometimes``)
- Stop-on-first-failure mode
- Violation-aware error message overrides
"""

from validex.validation.exceptions import (
    InvalidRuleError,
    MalformedRuleStringError,
    RuleError,
    UnknownRuleError,
)
from validex.validation.messages import MessageResolver
from validex.validation.normalizer import (
    BoundRule,
    CallableFactory,
    RuleNormalizer,
)
from validex.validation.parser import ParsedRule, RuleStringParser
from validex.validation.registry import (
    RuleRegistry,
    extend_available_rules,
    get_registry,
)
from validex.validation.rules import (
    MISSING,
    Alpha,
    AlphaNumeric,
    Array,
    Boolean,
    CallableRuleWrapper,
    Date,
    Email,
    In,
    Integer,
    Json,
    Length,
    Max,
    Min,
    NotIn,
    Numeric,
    Regex,
    Required,
    Rule,
    Sometimes,
    Url,
    Uuid,
)
from validex.validation.validator import (
    ValidationError,
    ValidationResult,
    Validator,
    validate,
    validate_or_fail,
)

__all__ = [
    # Core
    "Validator",
    "ValidationError",
    "ValidationResult",
    "validate",
    "validate_or_fail",
    # Registry and parsing
    "RuleRegistry",
    "RuleStringParser",
    "ParsedRule",
    "RuleNormalizer",
    "BoundRule",
    "CallableFactory",
    "MessageResolver",
    "get_registry",
    "extend_available_rules",
    # Errors
    "RuleError",
    "UnknownRuleError",
    "InvalidRuleError",
    "MalformedRuleStringError",
    # Rules
    "MISSING",
    "Rule",
    "CallableRuleWrapper",
    "Sometimes",
    "Required",
    "Email",
    "Url",
    "Min",
    "Max",
    "Length",
    "Regex",
    "In",
    "NotIn",
    "Numeric",
    "Integer",
    "Alpha",
    "AlphaNumeric",
    "Date",
    "Uuid",
    "Json",
    "Array",
    "Boolean",
]
