"""Recursive reconstruction of an answer's verification pattern.

For one answer the verification pattern is:

    base     = answer pattern without id statements
               + key statements for every binding
    one rule = base + reconstruct(premise)
               + resolution facts linking premise pattern to answer pattern
    conjunct = base + reconstruct(each premise)

The walk follows the explanation tree, which the reasoning engine
guarantees to be finite. It is not checked for cycles; a tree deeper
than ``max_explanation_depth`` is rejected instead of exhausting the
interpreter stack.
"""

from __future__ import annotations

import logging
from typing import Optional

from veritrace.answers import Answer
from veritrace.lookup.base import Lookup
from veritrace.pattern.model import Pattern
from veritrace.reconstruction.fresh import FreshVariableAllocator
from veritrace.reconstruction.identity import IdentityFilter, rendered_marker_predicate
from veritrace.reconstruction.inference import build_inference_facts
from veritrace.reconstruction.keys import generate_key_statements
from veritrace.settings import MAX_EXPLANATION_DEPTH, get_settings
from veritrace.utils import (
    ExplanationDepthError,
    MissingPatternError,
    ReconstructionError,
    UnsupportedConceptError,
)

logger = logging.getLogger(__name__)


class Reconstructor:
    """Build the statements needed to verify a single answer."""

    def __init__(
        self,
        lookup: Lookup,
        identity_filter: Optional[IdentityFilter] = None,
        fresh_var_prefix: Optional[str] = None,
        max_depth: Optional[int] = None,
    ) -> None:
        settings = get_settings()
        self._lookup = lookup
        self._identity_filter = identity_filter or IdentityFilter(
            rendered_marker_predicate(settings.id_marker)
        )
        self._prefix = fresh_var_prefix or settings.fresh_var_prefix
        if max_depth is None:
            max_depth = settings.max_explanation_depth
        if not 1 <= max_depth <= MAX_EXPLANATION_DEPTH:
            raise ValueError(
                f"max_depth must be between 1 and {MAX_EXPLANATION_DEPTH}, got {max_depth}"
            )
        self._max_depth = max_depth

    def reconstruct(self, answer: Answer) -> Pattern:
        """Return the deduplicated verification pattern for *answer*.

        A fresh variable allocator is created per call and shared by the
        whole explanation subtree, so fresh names are unique within the
        result and never reuse a name from the answer tree.

        Raises:
            MissingPatternError: an answer in the tree has no pattern.
            UnsupportedConceptError: a binding points at a schema type.
            ExplanationDepthError: the tree is deeper than the bound.
            ReconstructionError: a single-premise explanation has no rule.
        """
        allocator = FreshVariableAllocator(self._prefix, reserved=self._used_names(answer))
        pattern = self._reconstruct(answer, allocator, ())
        logger.debug(
            "Reconstructed %d statement(s), %d fresh variable(s)",
            len(pattern), allocator.issued,
        )
        return pattern

    def _used_names(self, answer: Answer) -> set[str]:
        """Collect variable names of the whole tree, enforcing the depth bound."""
        names: set[str] = set()
        stack: list[tuple[Answer, tuple[int, ...]]] = [(answer, ())]
        while stack:
            current, path = stack.pop()
            if len(path) > self._max_depth:
                raise ExplanationDepthError(
                    f"Explanation tree deeper than {self._max_depth}; "
                    "possibly cyclic input from the reasoner",
                    stage="explanation",
                    path=path,
                )
            names.update(v.name for v in current.substitution)
            if current.pattern is not None:
                names.update(v.name for v in current.pattern.variables())
            for i, premise in enumerate(current.premises):
                stack.append((premise, path + (i,)))
        return names

    def _reconstruct(
        self,
        answer: Answer,
        allocator: FreshVariableAllocator,
        path: tuple[int, ...],
    ) -> Pattern:
        if answer.pattern is None:
            raise MissingPatternError(
                "Answer is missing a pattern. Either patterns are broken "
                "or the initial query did not run with explanations enabled.",
                stage="pattern",
                path=path,
            )

        try:
            keys = generate_key_statements(answer.substitution, self._lookup)
        except UnsupportedConceptError as exc:
            exc.path = path
            raise

        statements = self._identity_filter(answer.pattern).union(keys)

        explanation = answer.explanation
        if explanation is None:
            return statements

        premises = explanation.answers
        if len(premises) == 1:
            premise = premises[0]
            if not explanation.rule_label:
                raise ReconstructionError(
                    "Single-premise explanation does not name the rule that fired",
                    stage="explanation",
                    path=path,
                )
            premise_statements = self._reconstruct(premise, allocator, path + (0,))
            inference = build_inference_facts(
                premise.pattern,
                answer.pattern,
                explanation.rule_label,
                allocator,
            )
            return statements.union(premise_statements, inference)

        # Conjunction: no single rule to attribute
        for i, premise in enumerate(premises):
            statements = statements.union(self._reconstruct(premise, allocator, path + (i,)))
        return statements


def reconstruct(answer: Answer, lookup: Lookup) -> Pattern:
    """Reconstruct *answer* with default settings."""
    return Reconstructor(lookup).reconstruct(answer)
