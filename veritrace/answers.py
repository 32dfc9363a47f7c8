"""Answers, explanations and the concept references they bind.

These mirror what the reasoning engine hands back for one query: a
substitution from variables to concepts, the pattern that held for the
binding, and optionally the explanation of how it was derived.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from veritrace.pattern.model import Pattern, Variable


@dataclass(frozen=True)
class AttributeConcept:
    """An attribute instance; identified by its own literal value."""

    value: Any
    type_label: str = ""


@dataclass(frozen=True)
class EntityConcept:
    """An entity instance; identified through its key attributes."""

    handle: str
    type_label: str = ""


@dataclass(frozen=True)
class RelationConcept:
    """A relation instance; identified through its key attributes."""

    handle: str
    type_label: str = ""


@dataclass(frozen=True)
class TypeConcept:
    """A schema-level type. Not an instance, so it has no keys."""

    label: str


Concept = Union[AttributeConcept, EntityConcept, RelationConcept, TypeConcept]


@dataclass
class Answer:
    """One solution to a query.

    Attributes:
        substitution: Variable -> concept binding
        pattern: Statements that held to produce the binding. Only present
            when the query ran with explanations enabled.
        explanation: How the answer was derived, if it was inferred
    """

    substitution: dict[Variable, Concept] = field(default_factory=dict)
    pattern: Optional[Pattern] = None
    explanation: Optional["Explanation"] = None

    @property
    def premises(self) -> list["Answer"]:
        if self.explanation is None:
            return []
        return self.explanation.answers


@dataclass
class Explanation:
    """The proof fragment behind an answer.

    A single premise answer is one rule firing labelled by ``rule_label``.
    Several premises are a conjunction of independently derived answers
    with no single rule to attribute, so the label may be absent.
    """

    rule_label: Optional[str] = None
    answers: list[Answer] = field(default_factory=list)

    @property
    def is_rule_application(self) -> bool:
        return len(self.answers) == 1
