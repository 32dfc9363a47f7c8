"""Typed literal values carried by statements.

Five literal types are understood: text, floating point, integer,
timestamp and boolean. Anything else is unrecognised and callers decide
how to narrow (the key statement generator skips such values).
"""

from __future__ import annotations

import json
from datetime import datetime
from enum import Enum
from typing import Any


class ValueType(str, Enum):
    """Literal value types with a typed comparison in the pattern language."""

    STRING = "string"
    DOUBLE = "double"
    LONG = "long"
    DATETIME = "datetime"
    BOOLEAN = "boolean"


def value_type_of(value: Any) -> ValueType | None:
    """Classify a runtime value, or return None when it is not a supported literal."""
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return ValueType.BOOLEAN
    if isinstance(value, str):
        return ValueType.STRING
    if isinstance(value, int):
        return ValueType.LONG
    if isinstance(value, float):
        return ValueType.DOUBLE
    if isinstance(value, datetime):
        return ValueType.DATETIME
    return None


def render_value(value: Any) -> str:
    """Render a literal the way it appears inside a statement."""
    value_type = value_type_of(value)
    if value_type is ValueType.STRING:
        return json.dumps(value, ensure_ascii=False)
    if value_type is ValueType.BOOLEAN:
        return "true" if value else "false"
    if value_type is ValueType.DATETIME:
        return value.isoformat()
    if value_type is ValueType.DOUBLE:
        return repr(value)
    return str(value)
