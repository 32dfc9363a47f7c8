"""Re-establish instance identity through key attributes.

For each binding in an answer, emit statements that pin the variable to
the same instance without internal ids:

    attribute          ->  $x == "alice";
    entity / relation  ->  $x has name "alice";   (one per key attribute)
    type               ->  UnsupportedConceptError
"""

from __future__ import annotations

import logging
from typing import Mapping

from veritrace.answers import (
    AttributeConcept,
    Concept,
    EntityConcept,
    RelationConcept,
    TypeConcept,
)
from veritrace.lookup.base import Lookup
from veritrace.pattern.model import Pattern, Statement, Variable
from veritrace.pattern.values import value_type_of
from veritrace.utils import UnsupportedConceptError

logger = logging.getLogger(__name__)


def generate_key_statements(
    substitution: Mapping[Variable, Concept],
    lookup: Lookup,
) -> Pattern:
    """Build the key statements for every binding in *substitution*.

    Values of an unrecognised literal type produce no statement; that
    binding is simply left unconstrained.

    Raises:
        UnsupportedConceptError: a variable is bound to a schema-level type.
    """
    statements: list[Statement] = []

    for variable, concept in substitution.items():
        subject = Statement(variable)

        if isinstance(concept, AttributeConcept):
            if value_type_of(concept.value) is None:
                logger.debug(
                    "No key statement for %s: unsupported value type %s",
                    variable, type(concept.value).__name__,
                )
                continue
            statements.append(subject.val(concept.value))

        elif isinstance(concept, (EntityConcept, RelationConcept)):
            for type_label, value in lookup.key_attributes(concept):
                if value_type_of(value) is None:
                    logger.debug(
                        "Skipping key %s of %s: unsupported value type %s",
                        type_label, variable, type(value).__name__,
                    )
                    continue
                statements.append(subject.has(type_label, value))

        elif isinstance(concept, TypeConcept):
            raise UnsupportedConceptError(
                f"Only instances have keys; {variable} is bound to type '{concept.label}'",
                stage="keys",
            )

        else:
            raise UnsupportedConceptError(
                f"Unknown concept kind {type(concept).__name__} bound to {variable}",
                stage="keys",
            )

    return Pattern(statements)
