"""Strip statements that pin variables to engine-internal ids.

Internal ids are not stable across re-execution, so they must never
reach a verification query. Whatever externally meaningful constraint
the variable had is either a separate statement already or is restored
by the key statement generator.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from veritrace.pattern.model import IdProperty, Pattern, Statement

logger = logging.getLogger(__name__)

IdentityPredicate = Callable[[Statement], bool]


def rendered_marker_predicate(marker: str = " id ") -> IdentityPredicate:
    """Match statements whose rendering contains *marker*."""

    def predicate(statement: Statement) -> bool:
        return marker in str(statement)

    return predicate


def has_id_property(statement: Statement) -> bool:
    """Match statements carrying an IdProperty, regardless of rendering."""
    return any(isinstance(p, IdProperty) for p in statement.properties)


class IdentityFilter:
    """Remove the statements an identity predicate flags.

    The default predicate looks for the rendered id marker, which ties the
    filter to the rendering format; pass a different predicate to decouple it.
    """

    def __init__(self, predicate: IdentityPredicate | None = None) -> None:
        self._predicate = predicate or rendered_marker_predicate()

    def __call__(self, statements: Iterable[Statement]) -> Pattern:
        return self.apply(statements)

    def apply(self, statements: Iterable[Statement]) -> Pattern:
        kept = []
        for statement in statements:
            if self._predicate(statement):
                logger.debug("Dropping id statement: %s", statement)
                continue
            kept.append(statement)
        return Pattern(kept)
