"""
Validex Rule String Parser
==========================

Turns ``"required|length:3,20|email"`` into rule instances.

Grammar::

    spec  := rule ("|" rule)*
    rule  := identifier [":" arg ("," arg)*]

Arguments are passed to the rule factory as strings, in order.
There is no escaping, so arguments cannot contain ``|`` or ``,``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from validex.utils.logger import get_logger
from validex.validation.exceptions import MalformedRuleStringError
from validex.validation.registry import RuleFactory, RuleRegistry, construct_rule
from validex.validation.rules import Rule


logger = get_logger(__name__)


@dataclass(frozen=True)
class ParsedRule:
    """
    One parsed token of a rule string.

    Attributes:
        identifier: Registry identifier
        arguments: Raw string arguments
        factory: Factory resolved when the string was first parsed
    """

    identifier: str
    arguments: Tuple[str, ...]
    factory: RuleFactory

    def build(self) -> Rule:
        return construct_rule(self.factory, self.arguments, self.identifier)


class RuleStringParser:
    """
    Memoizing rule string parser.

    The cache maps the exact raw string to its parsed tokens and is
    never invalidated. Every `parse` call builds fresh rule instances
    from the cached tokens, so validators never share rule state.

    Example:
        parser = RuleStringParser(registry)
        parser.parse("min:1|max:10")  # [Min(minimum=1), Max(maximum=10)]
    """

    def __init__(self, registry: RuleRegistry) -> None:
        self.registry = registry
        self._cache: Dict[str, Tuple[ParsedRule, ...]] = {}
        self._hits = 0
        self._misses = 0

    def parse(self, spec: str) -> List[Rule]:
        """
        Parse a rule string into rule instances.

        Raises:
            MalformedRuleStringError: On empty tokens or identifiers
            UnknownRuleError: If an identifier is not registered
            InvalidRuleError: If a rule rejects its arguments
        """
        return [parsed.build() for parsed in self.parse_spec(spec)]

    def parse_spec(self, spec: str) -> Tuple[ParsedRule, ...]:
        """Parse a rule string into cached tokens."""
        cached = self._cache.get(spec)
        if cached is not None:
            self._hits += 1
            return cached

        self._misses += 1
        parsed = tuple(
            self._parse_token(spec, token, position)
            for position, token in enumerate(spec.split("|"))
        )

        self._cache[spec] = parsed
        logger.debug("Parsed rule string", spec=spec, rules=len(parsed))
        return parsed

    def _parse_token(self, spec: str, token: str, position: int) -> ParsedRule:
        token = token.strip()
        if not token:
            raise MalformedRuleStringError(spec, "empty rule", position)

        identifier, delimiter, raw_arguments = token.partition(":")
        identifier = identifier.strip()
        if not identifier:
            raise MalformedRuleStringError(spec, "missing rule identifier", position)

        arguments = tuple(raw_arguments.split(",")) if delimiter else ()

        return ParsedRule(
            identifier=identifier,
            arguments=arguments,
            factory=self.registry.resolve(identifier),
        )

    def cache_info(self) -> Dict[str, int]:
        return {
            "hits": self._hits,
            "misses": self._misses,
            "size": len(self._cache),
        }

    def clear_cache(self) -> None:
        self._cache.clear()
        self._hits = 0
        self._misses = 0

    def __contains__(self, spec: object) -> bool:
        return spec in self._cache
