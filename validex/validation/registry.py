"""
Validex Rule Registry
=====================

Maps string identifiers to rule factories.

A factory is a concrete `Rule` subclass, any callable that returns a
`Rule`, or a ready `Rule` instance (shared by every rule string that
names it). Registration checks the entry up front, so parsing never
has to guess whether an identifier can be built.

Example:
    registry = RuleRegistry()
    registry.register(Positive)              # identifier from Positive().get_name()
    registry.register(Positive, "gt_zero")   # explicit identifier

    registry.resolve("gt_zero")  # Positive
"""

from __future__ import annotations

import inspect
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Type,
    Union,
)

from validex.utils.logger import get_logger
from validex.validation.aliases import DEFAULT_RULES
from validex.validation.exceptions import InvalidRuleError, UnknownRuleError
from validex.validation.rules import Rule

if TYPE_CHECKING:
    from validex.validation.parser import RuleStringParser


RuleFactory = Union[Type[Rule], Callable[..., Rule], Rule]
RuleEntries = Union[Mapping[Any, RuleFactory], Iterable[RuleFactory]]

logger = get_logger(__name__)


def construct_rule(
    factory: RuleFactory,
    arguments: Sequence[Any] = (),
    identifier: str = "",
) -> Rule:
    """
    Build a rule from a registry entry.

    Raises:
        InvalidRuleError: If the factory rejects the arguments or does
            not produce a Rule
    """
    if isinstance(factory, Rule):
        if arguments:
            raise InvalidRuleError(
                f"Rule `{identifier}` is registered as an instance and takes no arguments.",
                factory,
            )
        return factory

    try:
        rule = factory(*arguments)
    except (TypeError, ValueError) as exc:
        raise InvalidRuleError(
            f"Rule `{identifier}` could not be built with arguments {list(arguments)!r}: {exc}",
            factory,
        ) from exc

    if not isinstance(rule, Rule):
        raise InvalidRuleError(
            f"Factory for `{identifier}` returned {type(rule).__name__}, "
            f"expected an instance of {Rule.__name__}.",
            factory,
        )

    return rule


class RuleRegistry:
    """
    Identifier to rule factory mapping.

    Each registry owns a `RuleStringParser` whose cache is keyed by the
    raw rule string. Cached parses keep the factory they resolved, so
    re-registering an identifier only affects strings parsed afterwards.
    """

    def __init__(
        self,
        rules: Optional[RuleEntries] = None,
        load_defaults: bool = True,
    ) -> None:
        """
        Initialize registry.

        Args:
            rules: Extra entries merged over the defaults
            load_defaults: Start from the built-in rule identifiers
        """
        self._rules: Dict[str, RuleFactory] = {}
        self._parser: Optional[RuleStringParser] = None

        if load_defaults:
            self._rules.update(DEFAULT_RULES)

        if rules:
            self.extend(rules)

    @property
    def parser(self) -> RuleStringParser:
        """Parser bound to this registry."""
        if self._parser is None:
            from validex.validation.parser import RuleStringParser

            self._parser = RuleStringParser(self)
        return self._parser

    def register(self, rule: RuleFactory, identifier: Optional[str] = None) -> str:
        """
        Register a rule factory.

        Args:
            rule: Rule subclass, factory callable or Rule instance
            identifier: Explicit identifier; derived from the rule's
                name when omitted

        Returns:
            The identifier the rule was registered under

        Raises:
            InvalidRuleError: If the entry breaks the rule contract
        """
        identifier = self._prepare(rule, identifier)
        self._rules[identifier] = rule
        logger.debug("Rule registered", identifier=identifier)
        return identifier

    def extend(self, rules: Optional[RuleEntries] = None) -> RuleRegistry:
        """
        Merge entries into the registry.

        String keys are explicit identifiers; any other key (or a plain
        iterable of entries) means the identifier comes from the rule.
        Nothing is merged if any entry is invalid.
        """
        if not rules:
            return self

        if isinstance(rules, Mapping):
            items: Iterable[Tuple[Any, RuleFactory]] = rules.items()
        else:
            items = ((None, rule) for rule in rules)

        prepared: List[Tuple[str, RuleFactory]] = [
            (self._prepare(rule, key if isinstance(key, str) else None), rule)
            for key, rule in items
        ]

        for identifier, rule in prepared:
            self._rules[identifier] = rule

        logger.debug(
            "Registry extended",
            identifiers=",".join(identifier for identifier, _ in prepared),
        )
        return self

    def _prepare(self, rule: RuleFactory, identifier: Optional[str]) -> str:
        self._check_entry(rule)

        if identifier is not None:
            if not identifier:
                raise InvalidRuleError("Rule identifier must not be empty.", rule)
            return identifier

        instance = rule if isinstance(rule, Rule) else self._instantiate(rule)
        name = instance.get_name()

        if not name:
            raise InvalidRuleError(
                f"{instance!r} has no name; register it with an explicit identifier.",
                rule,
            )

        return name

    @staticmethod
    def _check_entry(rule: Any) -> None:
        if isinstance(rule, Rule):
            return

        if isinstance(rule, type):
            if not issubclass(rule, Rule):
                raise InvalidRuleError(
                    f"Rule must implement {Rule.__name__}, got {rule.__name__}.",
                    rule,
                )
            if inspect.isabstract(rule):
                raise InvalidRuleError(
                    f"Rule class {rule.__name__} must be instantiable.",
                    rule,
                )
            return

        if not callable(rule):
            raise InvalidRuleError(
                f"Rule must be a {Rule.__name__} subclass, instance or factory, "
                f"got {type(rule).__name__}.",
                rule,
            )

    @staticmethod
    def _instantiate(factory: Callable[..., Rule]) -> Rule:
        try:
            instance = factory()
        except (TypeError, ValueError) as exc:
            raise InvalidRuleError(
                f"{getattr(factory, '__name__', factory)!s} must be instantiable "
                f"without arguments to derive its identifier.",
                factory,
            ) from exc

        if not isinstance(instance, Rule):
            raise InvalidRuleError(
                f"Rule must implement {Rule.__name__}, got {type(instance).__name__}.",
                factory,
            )

        return instance

    def resolve(self, identifier: str) -> RuleFactory:
        """
        Get the factory registered under an identifier.

        Raises:
            UnknownRuleError: If nothing is registered under it
        """
        try:
            return self._rules[identifier]
        except KeyError:
            raise UnknownRuleError(identifier) from None

    def build(self, identifier: str, arguments: Sequence[Any] = ()) -> Rule:
        """Construct the rule registered under an identifier."""
        return construct_rule(self.resolve(identifier), arguments, identifier)

    def identifier_of(self, rule: Rule) -> Optional[str]:
        """Identifier whose entry is this exact rule object."""
        for identifier, entry in self._rules.items():
            if entry is rule:
                return identifier
        return None

    def identifiers(self) -> List[str]:
        return list(self._rules)

    def copy(self) -> RuleRegistry:
        """Independent registry with the same entries and an empty parse cache."""
        clone = RuleRegistry(load_defaults=False)
        clone._rules = dict(self._rules)
        return clone

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"RuleRegistry({len(self._rules)} rules)"


# Process-wide registry
_registry: Optional[RuleRegistry] = None


def get_registry() -> RuleRegistry:
    """Get the process-wide registry, loading the defaults on first use."""
    global _registry
    if _registry is None:
        _registry = RuleRegistry()
    return _registry


def extend_available_rules(rules: Optional[RuleEntries] = None) -> RuleRegistry:
    """
    Merge rules into the process-wide registry.

    Call once at startup; registration is shared by every validator in
    the process.

    Example:
        extend_available_rules({"positive": Positive})
        extend_available_rules([Positive])  # identifier "positive"
    """
    return get_registry().extend(rules)
