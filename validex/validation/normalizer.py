"""
Validex Rule Normalizer
=======================

Turns the rules a caller writes into one ordered rule table.

Accepted forms per attribute:

- ``"required|email"``: parsed by the registry's parser
- ``Email()``: a single rule instance
- ``lambda value: ...``: a callable rule factory
- ``[Required(), lambda value: ...]``: an explicit sequence
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Sequence, Union

from validex.validation.exceptions import InvalidRuleError
from validex.validation.parser import RuleStringParser
from validex.validation.rules import CallableRuleWrapper, Rule


@dataclass(frozen=True)
class BoundRule:
    """Rule instance bound to an attribute."""

    rule: Rule

    @property
    def name(self) -> str:
        return self.rule.get_name()

    def resolve(self, value: Any) -> Rule:
        return self.rule


@dataclass(frozen=True)
class CallableFactory:
    """
    Callable rule, resolved per value.

    The callable receives the value and returns what to check: a
    truthy/falsy result or a mapping understood by
    `CallableRuleWrapper`. A returned `Rule` is used as is.
    """

    factory: Callable[[Any], Any]

    @property
    def name(self) -> str:
        return ""

    def resolve(self, value: Any) -> Rule:
        result = self.factory(value)
        if isinstance(result, Rule):
            return result
        return CallableRuleWrapper(result)


RuleEntry = Union[BoundRule, CallableFactory]
RuleTable = Dict[str, List[RuleEntry]]
RawRules = Union[str, Rule, Callable[[Any], Any], Sequence[Union[Rule, Callable[[Any], Any]]]]


class RuleNormalizer:
    """Builds rule tables, delegating rule strings to a parser."""

    def __init__(self, parser: RuleStringParser) -> None:
        self.parser = parser

    def normalize(self, rules: Mapping[str, RawRules]) -> RuleTable:
        """
        Normalize every attribute's rules, preserving attribute order.

        Raises:
            InvalidRuleError: If a rule is neither a Rule nor callable
        """
        if not isinstance(rules, Mapping):
            raise InvalidRuleError(
                f"Rules must be a mapping of attribute to rules, got {type(rules).__name__}.",
                rules,
            )

        return {
            attribute: self.normalize_attribute(raw)
            for attribute, raw in rules.items()
        }

    def normalize_attribute(self, rules: RawRules) -> List[RuleEntry]:
        if isinstance(rules, str):
            return [BoundRule(rule) for rule in self.parser.parse(rules)]

        if isinstance(rules, (list, tuple)):
            return [self._entry(rule) for rule in rules]

        return [self._entry(rules)]

    @staticmethod
    def _entry(rule: Any) -> RuleEntry:
        if isinstance(rule, Rule):
            return BoundRule(rule)

        # Classes are callable too, but calling one with the value is never meant
        if callable(rule) and not isinstance(rule, type):
            return CallableFactory(rule)

        raise InvalidRuleError(
            f"Rule must implement `{Rule.__name__}` or be callable, "
            f"got {type(rule).__name__}.",
            rule,
        )
