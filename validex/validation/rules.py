"""
Validex Validation Rules
========================

Rule interface and the built-in rules shipped with the default
registry.

Every rule exposes the same capability set:

- ``is_valid(value)``: the actual check (wrapped by ``check``)
- ``can_skip_validation(value)``: skip flag
- ``empty_value_allowed()``: empty values always pass
- ``get_violations()``: reason codes recorded by the last check
- ``get_name()``: stable identifier used for message lookup

Built-in rules accept string constructor arguments so they can be
built straight from rule strings such as ``"length:3,20"``.
"""

from __future__ import annotations

import json
import re
import uuid as uuid_module
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, List, Mapping, Optional, Pattern, Union


class _Missing:
    """Marker for attributes absent from the data mapping."""

    _instance: Optional[_Missing] = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


def is_empty(value: Any) -> bool:
    """Exact emptiness: ``None``, ``""`` or an absent attribute. No trimming."""
    if value is None or value is MISSING:
        return True
    return isinstance(value, str) and value == ""


def snake_case(name: str) -> str:
    """Convert a class name to its rule identifier (``MinLength`` -> ``min_length``)."""
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    return name.lower()


class _Placeholders(dict):
    """Leaves unknown template fields as written."""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def _to_number(value: Union[int, float, str]) -> Union[int, float]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    number = float(value)
    return int(number) if number.is_integer() else number


class Rule(ABC):
    """
    Abstract validation rule.

    Implement `is_valid` to create custom rules. Call `violate` to
    record why a value failed; the codes select the most specific
    error message.

    Example:
        class Positive(Rule):
            message = "The {attribute} must be positive"

            def is_valid(self, value: Any) -> bool:
                if not isinstance(value, (int, float)):
                    return self.violate("type")
                return value > 0
    """

    # Identifier used for messages and registration (snake_case class name if unset)
    name: Optional[str] = None
    message: str = "The {attribute} is invalid"

    violations = ()
    _empty_allowed = False
    _skip = False

    @abstractmethod
    def is_valid(self, value: Any) -> bool:
        """
        Check the value.

        Args:
            value: Value to check (may be MISSING)

        Returns:
            True if valid, False otherwise
        """
        ...

    def check(self, value: Any) -> bool:
        """Run `is_valid` against fresh violation state."""
        self.violations = []
        return bool(self.is_valid(value))

    def violate(self, code: str) -> bool:
        """Record a violation code. Always returns False."""
        self.violations = [*self.violations, code]
        return False

    def get_violations(self) -> List[str]:
        return list(self.violations)

    def can_skip_validation(self, value: Any = None) -> bool:
        return self._skip

    def empty_value_allowed(self) -> bool:
        return self._empty_allowed

    def allowing_empty_value(self, allowed: bool = True) -> Rule:
        """Let empty values pass this rule."""
        self._empty_allowed = allowed
        return self

    def skipping(self, condition: bool = True) -> Rule:
        """Skip this rule entirely when the condition holds."""
        self._skip = bool(condition)
        return self

    def get_name(self) -> str:
        if self.name is not None:
            return self.name
        return snake_case(type(self).__name__)

    def get_message(self, attribute: str, **params: Any) -> str:
        """
        Default error message when no override matches.

        Unknown placeholders are kept as written, and a template that
        cannot be formatted is returned unchanged.
        """
        try:
            return self.message.format_map(_Placeholders(params, attribute=attribute))
        except (AttributeError, IndexError, ValueError):
            return self.message

    def __call__(self, value: Any) -> bool:
        """Allow rule to be called directly."""
        return self.check(value)


class CallableRuleWrapper(Rule):
    """
    Adapts the result of a callable rule.

    A callable rule receives the value and returns either a truthy/falsy
    result or a mapping with ``valid``, ``name``, ``violations``,
    ``empty_allowed`` and ``skip`` keys.
    """

    def __init__(self, result: Any) -> None:
        if isinstance(result, Mapping):
            self._valid = bool(result.get("valid", False))
            self._name = str(result.get("name") or "")
            self._declared = [str(code) for code in result.get("violations", ())]
            self._empty_allowed = bool(result.get("empty_allowed", False))
            self._skip = bool(result.get("skip", False))
        else:
            self._valid = bool(result)
            self._name = ""
            self._declared = []

    def is_valid(self, value: Any) -> bool:
        if self._valid:
            return True
        for code in self._declared:
            self.violate(code)
        return False

    def get_name(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"CallableRuleWrapper(valid={self._valid!r}, name={self._name!r})"


@dataclass
class Sometimes(Rule):
    """Run the remaining rules of an attribute only when it has a value."""

    name = "sometimes"

    def is_valid(self, value: Any) -> bool:
        return True


@dataclass
class Required(Rule):
    """Require field to be present and not empty."""

    name = "required"
    message = "The {attribute} field is required"

    def is_valid(self, value: Any) -> bool:
        if value is None or value is MISSING:
            return False
        if isinstance(value, str) and not value.strip():
            return False
        if isinstance(value, (list, dict, tuple, set)) and len(value) == 0:
            return False
        return True


@dataclass
class Email(Rule):
    """Validate email format."""

    name = "email"
    message = "The {attribute} must be a valid email address"

    _pattern = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

    def is_valid(self, value: Any) -> bool:
        if not isinstance(value, str):
            return self.violate("type")
        if not self._pattern.match(value):
            return self.violate("format")
        return True


@dataclass
class Url(Rule):
    """Validate URL format."""

    name = "url"
    message = "The {attribute} must be a valid URL"

    _pattern = re.compile(
        r"^https?://"
        r"(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+[A-Z]{2,6}\.?|"
        r"localhost|"
        r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})"
        r"(?::\d+)?"
        r"(?:/?|[/?]\S+)$",
        re.IGNORECASE,
    )

    def is_valid(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        return bool(self._pattern.match(value))


@dataclass
class Min(Rule):
    """Minimum value for numbers, length for strings/arrays."""

    minimum: Union[int, float, str]

    name = "min"
    message = "The {attribute} must be at least {min}"

    def __post_init__(self) -> None:
        self.minimum = _to_number(self.minimum)

    def is_valid(self, value: Any) -> bool:
        if isinstance(value, bool):
            return False
        if isinstance(value, (int, float)):
            return value >= self.minimum
        if isinstance(value, (str, list, dict)):
            return len(value) >= self.minimum
        return False

    def get_message(self, attribute: str, **params: Any) -> str:
        return super().get_message(attribute, min=self.minimum)


@dataclass
class Max(Rule):
    """Maximum value for numbers, length for strings/arrays."""

    maximum: Union[int, float, str]

    name = "max"
    message = "The {attribute} must not exceed {max}"

    def __post_init__(self) -> None:
        self.maximum = _to_number(self.maximum)

    def is_valid(self, value: Any) -> bool:
        if isinstance(value, bool):
            return False
        if isinstance(value, (int, float)):
            return value <= self.maximum
        if isinstance(value, (str, list, dict)):
            return len(value) <= self.maximum
        return False

    def get_message(self, attribute: str, **params: Any) -> str:
        return super().get_message(attribute, max=self.maximum)


@dataclass
class Length(Rule):
    """Exact string length or range. Violations: ``too_short``, ``too_long``."""

    min_length: Union[int, str]
    max_length: Optional[Union[int, str]] = None

    name = "length"
    message = "The {attribute} must be between {min} and {max} characters"

    def __post_init__(self) -> None:
        self.min_length = int(self.min_length)
        if self.max_length is None:
            self.max_length = self.min_length
            self.message = "The {attribute} must be exactly {min} characters"
        else:
            self.max_length = int(self.max_length)

    def is_valid(self, value: Any) -> bool:
        if not isinstance(value, str):
            return self.violate("type")
        if len(value) < self.min_length:
            return self.violate("too_short")
        if len(value) > self.max_length:
            return self.violate("too_long")
        return True

    def get_message(self, attribute: str, **params: Any) -> str:
        return super().get_message(
            attribute,
            min=self.min_length,
            max=self.max_length,
        )


@dataclass
class Regex(Rule):
    """Match regular expression."""

    pattern: Union[str, Pattern]

    name = "regex"
    message = "The {attribute} format is invalid"

    def __post_init__(self) -> None:
        if isinstance(self.pattern, str):
            self.pattern = re.compile(self.pattern)

    def is_valid(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        return bool(self.pattern.match(value))


class In(Rule):
    """Value must be one of the allowed values."""

    name = "in"
    message = "The selected {attribute} is invalid"

    def __init__(self, *allowed: Any) -> None:
        self.allowed = list(allowed)

    def is_valid(self, value: Any) -> bool:
        return value in self.allowed

    def __repr__(self) -> str:
        return f"In(allowed={self.allowed!r})"


class NotIn(Rule):
    """Value must not be one of the disallowed values."""

    name = "not_in"
    message = "The selected {attribute} is invalid"

    def __init__(self, *disallowed: Any) -> None:
        self.disallowed = list(disallowed)

    def is_valid(self, value: Any) -> bool:
        return value not in self.disallowed

    def __repr__(self) -> str:
        return f"NotIn(disallowed={self.disallowed!r})"


@dataclass
class Numeric(Rule):
    """Value must be numeric."""

    name = "numeric"
    message = "The {attribute} must be a number"

    def is_valid(self, value: Any) -> bool:
        if isinstance(value, bool):
            return False
        if isinstance(value, (int, float)):
            return True
        if isinstance(value, str):
            try:
                float(value)
                return True
            except ValueError:
                return False
        return False


@dataclass
class Integer(Rule):
    """Value must be an integer."""

    name = "integer"
    message = "The {attribute} must be an integer"

    def is_valid(self, value: Any) -> bool:
        if isinstance(value, bool):
            return False
        if isinstance(value, int):
            return True
        if isinstance(value, str):
            try:
                int(value)
                return True
            except ValueError:
                return False
        return False


@dataclass
class Alpha(Rule):
    """Value must contain only letters."""

    name = "alpha"
    message = "The {attribute} must only contain letters"

    def is_valid(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        return value.isalpha()


@dataclass
class AlphaNumeric(Rule):
    """Value must contain only letters and numbers."""

    name = "alpha_numeric"
    message = "The {attribute} must only contain letters and numbers"

    def is_valid(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        return value.isalnum()


@dataclass
class Date(Rule):
    """Value must be a date or a string in the given format."""

    format: str = "%Y-%m-%d"

    name = "date"
    message = "The {attribute} is not a valid date"

    def is_valid(self, value: Any) -> bool:
        if isinstance(value, date):
            return True
        if not isinstance(value, str):
            return self.violate("type")
        try:
            datetime.strptime(value, self.format)
        except ValueError:
            return self.violate("format")
        return True


@dataclass
class Uuid(Rule):
    """Value must be a valid UUID, optionally of a given version."""

    version: Optional[Union[int, str]] = None

    name = "uuid"
    message = "The {attribute} must be a valid UUID"

    def __post_init__(self) -> None:
        if self.version is not None:
            self.version = int(self.version)

    def is_valid(self, value: Any) -> bool:
        if is_empty(value):
            return self.violate("format")
        try:
            parsed = uuid_module.UUID(str(value))
        except (ValueError, AttributeError):
            return self.violate("format")
        if self.version and parsed.version != self.version:
            return self.violate("version")
        return True


@dataclass
class Json(Rule):
    """Value must be valid JSON."""

    name = "json"
    message = "The {attribute} must be valid JSON"

    def is_valid(self, value: Any) -> bool:
        if isinstance(value, (dict, list)):
            return True
        if isinstance(value, str):
            try:
                json.loads(value)
                return True
            except json.JSONDecodeError:
                return False
        return False


@dataclass
class Array(Rule):
    """Value must be a list."""

    name = "array"
    message = "The {attribute} must be an array"

    def is_valid(self, value: Any) -> bool:
        return isinstance(value, list)


@dataclass
class Boolean(Rule):
    """Value must be a boolean or a common boolean spelling."""

    name = "boolean"
    message = "The {attribute} must be true or false"

    def is_valid(self, value: Any) -> bool:
        return value in [True, False, 1, 0, "1", "0", "true", "false", "yes", "no"]
