"""
Validex Message Resolver
========================

Selects the error messages recorded for a failed rule.

Override keys, from least to most specific::

    "email"                 any failure of the attribute
    "email.email"           any failure of the `email` rule
    "email.email.format"    the `format` violation of that rule

When a rule reports violation codes, both ``attribute.rule`` and
``attribute.rule.code`` are looked up for every code and all hits are
kept. Without codes, the first matching override wins. When nothing
matches, the rule's own message is used.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Union

from validex.validation.rules import Rule

if TYPE_CHECKING:
    from validex.validation.registry import RuleRegistry


RuleKey = Union[str, int]


class MessageResolver:
    """
    Message lookup for one validator.

    Example:
        resolver = MessageResolver({"email.email.format": "Bad format"})
        resolver.resolve("email", failed_rule)  # ["Bad format"]
    """

    def __init__(
        self,
        messages: Optional[Mapping[str, str]] = None,
        registry: Optional[RuleRegistry] = None,
    ) -> None:
        self.messages: Dict[str, str] = dict(messages or {})
        self.registry = registry

    def rule_key(self, rule: Rule, recorded: int = 0) -> RuleKey:
        """
        Key used to address a rule in override keys.

        The registry identifier of this exact object, else the rule's
        name, else the number of messages already recorded for the
        attribute.
        """
        if self.registry is not None:
            identifier = self.registry.identifier_of(rule)
            if identifier is not None:
                return identifier

        name = rule.get_name()
        if name:
            return name

        return recorded

    def candidates(self, attribute: str, key: RuleKey) -> Dict[str, str]:
        """Overrides addressing the attribute as a whole or this rule."""
        prefix = f"{attribute}.{key}"
        return {
            override: message
            for override, message in self.messages.items()
            if override in (attribute, prefix) or override.startswith(f"{prefix}.")
        }

    def resolve(self, attribute: str, rule: Rule, recorded: int = 0) -> List[str]:
        """
        Messages for a failed rule, in the order they are recorded.

        Args:
            attribute: Attribute that failed
            rule: The failed rule (after its check)
            recorded: Messages already recorded for the attribute
        """
        key = self.rule_key(rule, recorded)
        prefix = f"{attribute}.{key}"
        candidates = self.candidates(attribute, key)
        violations = rule.get_violations()

        if not violations:
            messages = list(candidates.values())[:1]
        else:
            messages = [
                candidates[override]
                for violation in violations
                for override in (prefix, f"{prefix}.{violation}")
                if override in candidates
            ]

        if not messages:
            messages = [rule.get_message(attribute.replace("_", " "))]

        return messages
