"""
Rule string parser.
"""

from typing import Any

import pytest

from tests.conftest import Recorder
from validex.validation.exceptions import (
    InvalidRuleError,
    MalformedRuleStringError,
    UnknownRuleError,
)
from validex.validation.rules import Email, Regex, Required, Rule


class Replacement(Rule):
    def __init__(self, *arguments: str) -> None:
        self.arguments = list(arguments)

    def is_valid(self, value: Any) -> bool:
        return False


@pytest.fixture
def recorder_registry(empty_registry):
    empty_registry.register(Recorder, "a")
    empty_registry.register(Recorder, "b")
    return empty_registry


class TestGrammar:
    def test_identifiers_and_arguments(self, recorder_registry):
        first, second = recorder_registry.parser.parse("a:1,2|b")

        assert first.arguments == ["1", "2"]
        assert second.arguments == []

    def test_declaration_order(self, registry):
        rules = registry.parser.parse("required|email")

        assert [type(rule) for rule in rules] == [Required, Email]

    def test_whitespace_around_tokens(self, registry):
        rules = registry.parser.parse(" required | email ")

        assert [type(rule) for rule in rules] == [Required, Email]

    def test_arguments_kept_verbatim(self, registry):
        (rule,) = registry.parser.parse("regex:^[a-z]+$")

        assert isinstance(rule, Regex)
        assert rule.check("abc") is True

    def test_parsed_tokens(self, recorder_registry):
        (parsed,) = recorder_registry.parser.parse_spec("a:x,y")

        assert parsed.identifier == "a"
        assert parsed.arguments == ("x", "y")
        assert parsed.factory is Recorder

    @pytest.mark.parametrize(
        "spec, position",
        [
            ("", 0),
            ("required||email", 1),
            ("|email", 0),
            ("required|", 1),
            (":3", 0),
        ],
    )
    def test_malformed(self, registry, spec, position):
        with pytest.raises(MalformedRuleStringError) as exc_info:
            registry.parser.parse(spec)

        assert exc_info.value.position == position

    def test_unknown_identifier(self, registry):
        with pytest.raises(UnknownRuleError) as exc_info:
            registry.parser.parse("required|nope")

        assert exc_info.value.identifier == "nope"

    def test_empty_argument_rejected_by_rule(self, registry):
        with pytest.raises(InvalidRuleError):
            registry.parser.parse("min:")


class TestCache:
    def test_tokens_are_cached_by_string(self, recorder_registry):
        parser = recorder_registry.parser

        first = parser.parse_spec("a:1|b")
        second = parser.parse_spec("a:1|b")

        assert first is second
        assert parser.cache_info() == {"hits": 1, "misses": 1, "size": 1}
        assert "a:1|b" in parser

    def test_each_parse_builds_fresh_instances(self, recorder_registry):
        parser = recorder_registry.parser

        first = parser.parse("a|b")
        second = parser.parse("a|b")

        assert first[0] is not second[0]
        assert first[1] is not second[1]

    def test_reregistration_only_affects_new_strings(self, recorder_registry):
        parser = recorder_registry.parser
        parser.parse("a")

        recorder_registry.register(Replacement, "a")

        (cached,) = parser.parse("a")
        fresh, _ = parser.parse("a|b")

        assert type(cached) is Recorder
        assert type(fresh) is Replacement

    def test_clear_cache(self, recorder_registry):
        parser = recorder_registry.parser
        parser.parse("a")
        parser.clear_cache()

        assert parser.cache_info() == {"hits": 0, "misses": 0, "size": 0}

    def test_failed_parse_is_not_cached(self, registry):
        with pytest.raises(UnknownRuleError):
            registry.parser.parse("nope")

        assert "nope" not in registry.parser
