"""
Rule registry.
"""

from typing import Any

import pytest

from tests.conftest import Positive, Recorder
from validex import Validator
from validex.validation.exceptions import InvalidRuleError, UnknownRuleError
from validex.validation.registry import (
    RuleRegistry,
    extend_available_rules,
    get_registry,
)
from validex.validation.rules import Email, Length, Rule


class Even(Rule):
    def is_valid(self, value: Any) -> bool:
        return value % 2 == 0


class Unnamed(Rule):
    name = ""

    def is_valid(self, value: Any) -> bool:
        return False


class NeedsLimit(Rule):
    def __init__(self, limit: str) -> None:
        self.limit = int(limit)

    def is_valid(self, value: Any) -> bool:
        return value <= self.limit


class RejectsDefault(Rule):
    def __init__(self, limit: str = "none") -> None:
        self.limit = int(limit)

    def is_valid(self, value: Any) -> bool:
        return value <= self.limit


class TestDefaults:
    def test_defaults_loaded(self, registry):
        assert "email" in registry
        assert registry.resolve("email") is Email

    def test_without_defaults(self, empty_registry):
        assert len(empty_registry) == 0

    def test_unknown_identifier(self, empty_registry):
        with pytest.raises(UnknownRuleError) as exc_info:
            empty_registry.resolve("email")

        assert exc_info.value.identifier == "email"


class TestRegister:
    def test_explicit_identifier_overrides(self, registry):
        assert registry.register(Positive, "email") == "email"
        assert registry.resolve("email") is Positive

    def test_identifier_derived_from_name(self, registry):
        assert registry.register(Positive) == "positive"
        assert registry.resolve("positive") is Positive

    def test_instance_registration(self, registry):
        strict = Positive()

        assert registry.register(strict, "strict") == "strict"
        assert registry.identifier_of(strict) == "strict"

    def test_instance_without_identifier_uses_name(self, empty_registry):
        assert empty_registry.register(Positive()) == "positive"

    def test_factory_without_identifier(self, empty_registry):
        assert empty_registry.register(lambda: Positive()) == "positive"

    def test_factory_returning_non_rule(self, empty_registry):
        with pytest.raises(InvalidRuleError):
            empty_registry.register(lambda: object())

    def test_non_rule_class(self, empty_registry):
        with pytest.raises(InvalidRuleError):
            empty_registry.register(dict, "dict")

    def test_abstract_class(self, empty_registry):
        with pytest.raises(InvalidRuleError):
            empty_registry.register(Rule)

    def test_non_callable(self, empty_registry):
        with pytest.raises(InvalidRuleError):
            empty_registry.register(42, "answer")

    def test_class_needing_arguments(self, empty_registry):
        with pytest.raises(InvalidRuleError):
            empty_registry.register(NeedsLimit)

        assert empty_registry.register(NeedsLimit, "limit") == "limit"

    def test_class_rejecting_its_defaults(self, empty_registry):
        with pytest.raises(InvalidRuleError) as exc_info:
            empty_registry.register(RejectsDefault)

        assert isinstance(exc_info.value.__cause__, ValueError)
        assert "rejects_default" not in empty_registry

    def test_unnamed_rule_needs_identifier(self, empty_registry):
        with pytest.raises(InvalidRuleError):
            empty_registry.register(Unnamed)

    def test_empty_identifier(self, empty_registry):
        with pytest.raises(InvalidRuleError):
            empty_registry.register(Positive, "")


class TestExtend:
    def test_mapping_with_positional_keys(self, empty_registry):
        empty_registry.extend({"gt": Positive, 0: Even})

        assert empty_registry.identifiers() == ["gt", "even"]

    def test_iterable(self, empty_registry):
        empty_registry.extend([Positive, Even])

        assert "positive" in empty_registry
        assert "even" in empty_registry

    def test_later_entries_win(self, empty_registry):
        empty_registry.extend({"x": Positive})
        empty_registry.extend({"x": Even})

        assert empty_registry.resolve("x") is Even

    def test_nothing_merged_on_invalid_entry(self, empty_registry):
        with pytest.raises(InvalidRuleError):
            empty_registry.extend([Positive, object])

        assert "positive" not in empty_registry

    def test_empty_extend(self, registry):
        before = len(registry)

        assert registry.extend() is registry
        assert len(registry) == before


class TestBuild:
    def test_build_with_arguments(self, registry):
        rule = registry.build("length", ["2", "4"])

        assert isinstance(rule, Length)
        assert (rule.min_length, rule.max_length) == (2, 4)

    def test_missing_argument(self, registry):
        with pytest.raises(InvalidRuleError):
            registry.build("length", [])

    def test_bad_argument_is_chained(self, registry):
        with pytest.raises(InvalidRuleError) as exc_info:
            registry.build("min", ["abc"])

        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_instance_entry_takes_no_arguments(self, empty_registry):
        strict = Positive()
        empty_registry.register(strict, "strict")

        assert empty_registry.build("strict") is strict
        with pytest.raises(InvalidRuleError):
            empty_registry.build("strict", ["1"])


class TestIdentity:
    def test_identifier_of_unregistered_instance(self, registry):
        assert registry.identifier_of(Email()) is None

    def test_copy_is_independent(self, registry):
        clone = registry.copy()
        clone.register(Recorder, "recorder")

        assert "recorder" in clone
        assert "recorder" not in registry
        assert clone.parser is not registry.parser


class TestProcessRegistry:
    def test_get_registry_is_shared(self):
        assert get_registry() is get_registry()

    def test_extend_available_rules(self):
        extend_available_rules({"positive": Positive})

        assert get_registry().resolve("positive") is Positive

    def test_validator_extend_available_rules(self):
        Validator.extend_available_rules([Even])

        validator = Validator({"n": 3}, {"n": "even"})
        assert validator.validate() is False
