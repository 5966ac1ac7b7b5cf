"""
Validex Validator
=================

Core validation engine.

Walks the rule table attribute by attribute, rule by rule, and
collects error messages for the rules that fail.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import orjson

from validex.core.config import get_config
from validex.utils.logger import get_logger
from validex.validation.messages import MessageResolver
from validex.validation.normalizer import RawRules, RuleNormalizer, RuleTable
from validex.validation.registry import (
    RuleEntries,
    RuleRegistry,
    extend_available_rules as _extend_available_rules,
    get_registry,
)
from validex.validation.rules import MISSING, Rule, Sometimes, is_empty

logger = get_logger(__name__)

ErrorCollection = Dict[str, List[str]]


class ValidationError(Exception):
    """
    Validation failed exception.

    Contains all validation errors.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[ErrorCollection] = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or {}

    def __str__(self) -> str:
        if self.errors:
            error_list = []
            for attribute, messages in self.errors.items():
                for msg in messages:
                    error_list.append(f"  - {attribute}: {msg}")
            return "Validation failed:\n" + "\n".join(error_list)
        return "Validation failed"

    def first(self, attribute: Optional[str] = None) -> Optional[str]:
        """Get first error message."""
        if attribute:
            messages = self.errors.get(attribute, [])
            return messages[0] if messages else None
        for messages in self.errors.values():
            if messages:
                return messages[0]
        return None


@dataclass
class ValidationResult:
    """
    Result of validation.

    Contains the values that passed and any errors.
    """

    valid: bool
    data: Dict[str, Any] = field(default_factory=dict)
    errors: ErrorCollection = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.valid

    def failed(self) -> bool:
        return not self.valid

    def has_error(self, attribute: str) -> bool:
        return attribute in self.errors

    def get_errors(self, attribute: str) -> List[str]:
        return self.errors.get(attribute, [])

    def first_error(self, attribute: Optional[str] = None) -> Optional[str]:
        """Get first error message."""
        if attribute:
            messages = self.errors.get(attribute, [])
            return messages[0] if messages else None
        for messages in self.errors.values():
            if messages:
                return messages[0]
        return None

    def all_errors(self) -> List[str]:
        """Get all error messages as flat list."""
        return [msg for messages in self.errors.values() for msg in messages]

    def raise_if_invalid(self) -> None:
        if not self.valid:
            raise ValidationError(errors=self.errors)

    def to_json(self) -> bytes:
        """Serialize validity and errors (not the data) to JSON."""
        return orjson.dumps({"valid": self.valid, "errors": self.errors})


class Validator:
    """
    Main validation class.

    Validates a data mapping against per-attribute rules.

    Example:
        validator = Validator(
            {"email": "john@example", "age": "17"},
            {
                "email": "required|email",
                "age": [Integer(), Min(18)],
                "nickname": "sometimes|length:3,20",
            },
            {"email.email.format": "That does not look like an email"},
        )

        if not validator.validate():
            print(validator.get_errors())
            # {"email": ["That does not look like an email"],
            #  "age": ["The age must be at least 18"]}
    """

    def __init__(
        self,
        data: Mapping[str, Any],
        rules: Mapping[str, RawRules],
        messages: Optional[Mapping[str, str]] = None,
        registry: Optional[RuleRegistry] = None,
    ) -> None:
        """
        Initialize validator.

        Args:
            data: Values to validate, by attribute
            rules: Rules per attribute (string, rule, callable or sequence)
            messages: Error message overrides
            registry: Rule registry (process-wide registry by default)

        Raises:
            UnknownRuleError: If a rule string names an unknown rule
            InvalidRuleError: If a rule breaks the rule contract
            MalformedRuleStringError: If a rule string is malformed
        """
        self._data = data
        self._messages: Dict[str, str] = dict(messages or {})
        self._registry = registry if registry is not None else get_registry()
        self._normalizer = RuleNormalizer(self._registry.parser)
        self._resolver = MessageResolver(self._messages, self._registry)
        self._errors: ErrorCollection = {}
        self._should_stop = get_config().get_bool("validation.stop_on_first_failure")
        self._rules: RuleTable = {}

        self.set_rules(rules)

    @classmethod
    def extend_available_rules(cls, rules: Optional[RuleEntries] = None) -> RuleRegistry:
        """Merge rules into the process-wide registry."""
        return _extend_available_rules(rules)

    def get_data(self) -> Mapping[str, Any]:
        return self._data

    def get_rules(self) -> RuleTable:
        return dict(self._rules)

    def set_rules(self, rules: Mapping[str, RawRules]) -> RuleTable:
        """Normalize and replace the active rule table."""
        self._rules = self._normalizer.normalize(rules)
        return self.get_rules()

    def get_messages(self) -> Dict[str, str]:
        return dict(self._messages)

    def should_stop_on_first_failure(self, stop: bool = True) -> Validator:
        """Abort the whole run as soon as any attribute fails."""
        self._should_stop = stop
        return self

    def validate(self) -> bool:
        """
        Validate the data.

        Every call starts from an empty error collection.

        Returns:
            True if no rule failed
        """
        self._errors = {}

        for attribute, entries in self._rules.items():
            value = self._get_value(attribute)

            for entry in entries:
                rule = entry.resolve(value)

                if isinstance(rule, Sometimes) and is_empty(value):
                    logger.debug("Attribute bypassed", attribute=attribute)
                    break

                if not self._passes(rule, value):
                    self._add_error(attribute, rule)

                if self._should_stop_on_failure(attribute):
                    logger.debug("Validation stopped", attribute=attribute)
                    return False

        logger.debug(
            "Validation finished",
            attributes=len(self._rules),
            failed=len(self._errors),
        )
        return not self._errors

    def _get_value(self, attribute: str) -> Any:
        return self._data.get(attribute, MISSING)

    @staticmethod
    def _passes(rule: Rule, value: Any) -> bool:
        return (
            rule.can_skip_validation(value)
            or (rule.empty_value_allowed() and is_empty(value))
            or rule.check(value)
        )

    def _add_error(self, attribute: str, rule: Rule) -> None:
        recorded = len(self._errors.get(attribute, []))
        messages = self._resolver.resolve(attribute, rule, recorded)
        self._errors.setdefault(attribute, []).extend(messages)

    def _should_stop_on_failure(self, attribute: str) -> bool:
        return self._should_stop and attribute in self._errors

    def has_errors(self) -> bool:
        return bool(self._errors)

    def get_errors(self) -> ErrorCollection:
        return {attribute: list(messages) for attribute, messages in self._errors.items()}

    def result(self) -> ValidationResult:
        """Validate and wrap the outcome with the values that passed."""
        valid = self.validate()
        errors = self.get_errors()

        return ValidationResult(
            valid=valid,
            data={
                attribute: self._data[attribute]
                for attribute in self._rules
                if attribute in self._data and attribute not in errors
            },
            errors=errors,
        )


# Convenience functions

def validate(
    data: Mapping[str, Any],
    rules: Mapping[str, RawRules],
    messages: Optional[Mapping[str, str]] = None,
    stop_on_first_failure: Optional[bool] = None,
) -> ValidationResult:
    """
    Validate data with rules.

    Example:
        result = validate(
            {"email": "test@example.com"},
            {"email": "required|email"},
        )
    """
    validator = Validator(data, rules, messages)
    if stop_on_first_failure is not None:
        validator.should_stop_on_first_failure(stop_on_first_failure)
    return validator.result()


def validate_or_fail(
    data: Mapping[str, Any],
    rules: Mapping[str, RawRules],
    messages: Optional[Mapping[str, str]] = None,
    stop_on_first_failure: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Validate data and raise on failure.

    Returns the validated values if successful.

    Example:
        try:
            data = validate_or_fail(payload, {"email": "required|email"})
        except ValidationError as e:
            return {"errors": e.errors}
    """
    result = validate(data, rules, messages, stop_on_first_failure)
    result.raise_if_invalid()
    return result.data
