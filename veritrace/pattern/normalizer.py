"""Rewrite anonymous statement subjects as named variables.

Later stages refer to statement subjects by name (reified facts point at
them through roles), so an anonymous subject is promoted to a returned
variable with the same name and properties.
"""

from __future__ import annotations

from veritrace.pattern.model import Pattern, Statement


def make_anon_var_explicit(statement: Statement) -> Statement:
    if statement.var.returned:
        return statement
    return Statement(statement.var.as_returned(), statement.properties)


def make_anon_vars_explicit(pattern: Pattern) -> Pattern:
    """Return a copy of *pattern* where every statement subject is a returned variable."""
    return Pattern(make_anon_var_explicit(s) for s in pattern)
