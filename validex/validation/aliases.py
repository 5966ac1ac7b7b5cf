"""
Default rule identifiers loaded into every registry.
"""

from __future__ import annotations

from typing import Callable, Dict

from validex.validation.rules import (
    Alpha,
    AlphaNumeric,
    Array,
    Boolean,
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


DEFAULT_RULES: Dict[str, Callable[..., Rule]] = {
    "sometimes": Sometimes,
    "required": Required,
    "email": Email,
    "url": Url,
    "min": Min,
    "max": Max,
    "length": Length,
    "regex": Regex,
    "in": In,
    "not_in": NotIn,
    "numeric": Numeric,
    "integer": Integer,
    "alpha": Alpha,
    "alpha_numeric": AlphaNumeric,
    "date": Date,
    "uuid": Uuid,
    "json": Json,
    "array": Array,
    "boolean": Boolean,
}
