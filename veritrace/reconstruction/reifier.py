"""Reify statement properties into standalone facts.

Every recognised property of a statement becomes its own fact on a fresh
variable, so a verifier can ask generically which properties held for a
variable without understanding the original pattern:

    $x isa person                 ->  $f0 (instance: $x) isa isa-property, has type-label "person";
    $x has name "alice"           ->  $f1 (owner: $x) isa has-attribute-property, has name "alice";
    $r (a: $x, b: $y) isa t       ->  $f2 (rel: $r, roleplayer: $x) isa relation-property, has role-label "a";
                                      $f3 (rel: $r, roleplayer: $y) isa relation-property, has role-label "b";
                                      $f4 (instance: $r) isa isa-property, has type-label "t";

Other property kinds (ids, values) are dropped.
"""

from __future__ import annotations

import logging

from veritrace.pattern.model import HasAttribute, Isa, Relation, Statement, Variable
from veritrace.reconstruction.fresh import FreshVariableAllocator

logger = logging.getLogger(__name__)

HAS_ATTRIBUTE_PROPERTY = "has-attribute-property"
RELATION_PROPERTY = "relation-property"
ISA_PROPERTY = "isa-property"

OWNER_ROLE = "owner"
REL_ROLE = "rel"
ROLEPLAYER_ROLE = "roleplayer"
INSTANCE_ROLE = "instance"

ROLE_LABEL_ATTRIBUTE = "role-label"
TYPE_LABEL_ATTRIBUTE = "type-label"


class PropertyReifier:
    """Turn statements into fact statements keyed by fresh variable."""

    def __init__(self, allocator: FreshVariableAllocator) -> None:
        self._allocator = allocator

    def reify(self, statement: Statement) -> dict[Variable, Statement]:
        """Reify each property of *statement*, in property order.

        Property order only affects fresh variable numbering.
        """
        facts: dict[Variable, Statement] = {}
        subject = statement.var

        for prop in statement.properties:
            if isinstance(prop, HasAttribute):
                fresh = self._allocator.next()
                facts[fresh] = (
                    Statement(fresh)
                    .isa(HAS_ATTRIBUTE_PROPERTY)
                    .has(prop.attribute_type, prop.value)
                    .rel(OWNER_ROLE, subject)
                )

            elif isinstance(prop, Relation):
                for role_player in prop.role_players:
                    fresh = self._allocator.next()
                    fact = (
                        Statement(fresh)
                        .isa(RELATION_PROPERTY)
                        .rel(REL_ROLE, subject)
                        .rel(ROLEPLAYER_ROLE, role_player.player)
                    )
                    if role_player.role:
                        fact = fact.has(ROLE_LABEL_ATTRIBUTE, role_player.role)
                    facts[fresh] = fact

            elif isinstance(prop, Isa):
                fresh = self._allocator.next()
                facts[fresh] = (
                    Statement(fresh)
                    .isa(ISA_PROPERTY)
                    .rel(INSTANCE_ROLE, subject)
                    .has(TYPE_LABEL_ATTRIBUTE, prop.type_label)
                )

            else:
                logger.debug("Not reifying %s property of %s", type(prop).__name__, subject)

        return facts
