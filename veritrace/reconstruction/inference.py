"""Reify one rule application as a queryable resolution fact.

The premise ("when") and conclusion ("then") patterns are reified
property by property; a single ``resolution`` relation then links every
premise fact through a ``body`` role and every conclusion fact through a
``head`` role, labelled with the rule that fired.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from veritrace.pattern.model import Pattern, Statement, Variable
from veritrace.reconstruction.fresh import FreshVariableAllocator
from veritrace.reconstruction.reifier import PropertyReifier

logger = logging.getLogger(__name__)

RESOLUTION_TYPE = "resolution"
RULE_LABEL_ATTRIBUTE = "rule-label"
BODY_ROLE = "body"
HEAD_ROLE = "head"


def _reify_all(
    reifier: PropertyReifier,
    statements: Iterable[Statement],
) -> dict[Variable, Statement]:
    facts: dict[Variable, Statement] = {}
    for statement in statements:
        facts.update(reifier.reify(statement))
    return facts


def build_inference_facts(
    when: Iterable[Statement],
    then: Iterable[Statement],
    rule_label: str,
    allocator: Optional[FreshVariableAllocator] = None,
) -> Pattern:
    """Build the facts describing "rule_label turned `when` into `then`".

    Args:
        when: Premise statements; their reified facts are the body.
        then: Conclusion statements; their reified facts are the head.
        rule_label: Label of the rule that fired.
        allocator: Fresh variable source shared with the surrounding
            reconstruction. A private one is created when omitted.

    Returns:
        The premise facts, the conclusion facts and one resolution fact.
    """
    if allocator is None:
        allocator = FreshVariableAllocator()
    reifier = PropertyReifier(allocator)

    body = _reify_all(reifier, when)
    head = _reify_all(reifier, then)

    resolution = Statement(allocator.next()).isa(RESOLUTION_TYPE).has(RULE_LABEL_ATTRIBUTE, rule_label)
    for body_var in body:
        resolution = resolution.rel(BODY_ROLE, body_var)
    for head_var in head:
        resolution = resolution.rel(HEAD_ROLE, head_var)

    logger.debug(
        "Resolution %s for rule %s: %d body, %d head facts",
        resolution.var, rule_label, len(body), len(head),
    )
    return Pattern(list(body.values()) + list(head.values()) + [resolution])
