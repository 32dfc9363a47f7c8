"""Pattern model: variables, properties, statements and patterns.

Patterns are only constructed, combined and rendered here; the query
language itself is never parsed.
"""

from veritrace.pattern.model import (
    HasAttribute,
    IdProperty,
    Isa,
    Pattern,
    Property,
    Relation,
    RolePlayer,
    Statement,
    ValueProperty,
    Variable,
    VerificationQuery,
    var,
)
from veritrace.pattern.normalizer import make_anon_vars_explicit
from veritrace.pattern.values import ValueType, render_value, value_type_of

__all__ = [
    "HasAttribute",
    "IdProperty",
    "Isa",
    "Pattern",
    "Property",
    "Relation",
    "RolePlayer",
    "Statement",
    "ValueProperty",
    "Variable",
    "VerificationQuery",
    "var",
    "make_anon_vars_explicit",
    "ValueType",
    "render_value",
    "value_type_of",
]
