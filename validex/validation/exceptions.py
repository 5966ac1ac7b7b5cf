"""
Validex Rule Errors
===================

Configuration-time failures raised while registering, parsing or
normalizing rules. Validation failures are never raised; they end up
in the validator's error collection.
"""

from __future__ import annotations

from typing import Any, Optional


class RuleError(Exception):
    """Base class for rule configuration errors."""
    pass


class UnknownRuleError(RuleError):
    """Rule identifier is not registered."""

    def __init__(self, identifier: str) -> None:
        super().__init__(
            f"Rule identified by `{identifier}` could not be loaded. "
            f"It must be registered first."
        )
        self.identifier = identifier


class InvalidRuleError(RuleError):
    """Rule object does not satisfy the rule contract."""

    def __init__(self, message: str, rule: Any = None) -> None:
        super().__init__(message)
        self.rule = rule


class MalformedRuleStringError(RuleError):
    """Rule string does not follow the `name:arg,arg|name` grammar."""

    def __init__(
        self,
        spec: str,
        reason: str,
        position: Optional[int] = None,
    ) -> None:
        where = f" (token {position})" if position is not None else ""
        super().__init__(f"Malformed rule string {spec!r}{where}: {reason}")
        self.spec = spec
        self.reason = reason
        self.position = position
