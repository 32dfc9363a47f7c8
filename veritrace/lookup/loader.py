"""Load answers and key attributes from a scenario file.

A scenario stands in for the reasoner and the store: it lists instance
keys and, per query, the answers (with patterns and explanations) the
reasoner produced. YAML and JSON are both accepted::

    keys:
      V1: [{type: name, value: alice}]
    queries:
      - name: people
        query: "match $x0 isa person; get;"
        answers:
          - map: {x0: {kind: entity, handle: V1, type: person}}
            pattern:
              - {var: x0, isa: person}
              - {var: x0, id: V1}

Statement entries take ``var`` plus any of ``rel`` (``[role, player]``
pairs, role may be null), ``isa``, ``has`` (``[type, value]`` pairs; a
value starting with ``$`` is a variable), ``id`` and ``value``. A subject
marked ``anonymous: true`` is made explicit on load, since reconstruction
refers to statement subjects by name.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from veritrace.answers import (
    Answer,
    AttributeConcept,
    Concept,
    EntityConcept,
    Explanation,
    RelationConcept,
    TypeConcept,
)
from veritrace.lookup.memory import InMemoryLookup
from veritrace.pattern.model import Pattern, Statement, Variable
from veritrace.pattern.normalizer import make_anon_vars_explicit
from veritrace.utils import ScenarioError, read_json

logger = logging.getLogger(__name__)


def _var_name(name: str) -> str:
    return name[1:] if name.startswith("$") else name


# ---------------------------------------------------------------------------
# File schema
# ---------------------------------------------------------------------------

class KeySpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: str = Field(..., min_length=1)
    value: Any


class StatementSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    var: str = Field(..., min_length=1)
    anonymous: bool = False
    rel: list[tuple[Optional[str], str]] = Field(default_factory=list)
    isa: Optional[str] = None
    has: list[tuple[str, Any]] = Field(default_factory=list)
    id: Optional[str] = None
    value: Any = None

    def to_statement(self) -> Statement:
        statement = Statement(Variable(_var_name(self.var), returned=not self.anonymous))
        for role, player in self.rel:
            statement = statement.rel(role, Variable(_var_name(player)))
        if self.isa:
            statement = statement.isa(self.isa)
        for attribute_type, value in self.has:
            if isinstance(value, str) and value.startswith("$"):
                value = Variable(_var_name(value))
            statement = statement.has(attribute_type, value)
        if self.id:
            statement = statement.id(self.id)
        if self.value is not None:
            statement = statement.val(self.value)
        return statement


class ConceptSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["attribute", "entity", "relation", "type"]
    handle: Optional[str] = None
    type: str = ""
    value: Any = None

    @model_validator(mode="after")
    def check_kind_fields(self) -> "ConceptSpec":
        if self.kind in ("entity", "relation") and not self.handle:
            raise ValueError(f"{self.kind} concepts need a handle")
        if self.kind == "type" and not self.type:
            raise ValueError("type concepts need a type label")
        return self

    def to_concept(self) -> Concept:
        if self.kind == "attribute":
            return AttributeConcept(value=self.value, type_label=self.type)
        if self.kind == "entity":
            return EntityConcept(handle=self.handle, type_label=self.type)
        if self.kind == "relation":
            return RelationConcept(handle=self.handle, type_label=self.type)
        return TypeConcept(label=self.type)


class AnswerSpec(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    bindings: dict[str, ConceptSpec] = Field(default_factory=dict, alias="map")
    pattern: Optional[list[StatementSpec]] = None
    explanation: Optional["ExplanationSpec"] = None

    def to_answer(self) -> Answer:
        pattern = None
        if self.pattern is not None:
            pattern = make_anon_vars_explicit(Pattern(s.to_statement() for s in self.pattern))
        explanation = None
        if self.explanation is not None:
            explanation = Explanation(
                rule_label=self.explanation.rule,
                answers=[a.to_answer() for a in self.explanation.answers],
            )
        return Answer(
            substitution={Variable(_var_name(k)): c.to_concept() for k, c in self.bindings.items()},
            pattern=pattern,
            explanation=explanation,
        )

    def handles(self) -> set[str]:
        found = {c.handle for c in self.bindings.values() if c.handle}
        if self.explanation is not None:
            for premise in self.explanation.answers:
                found |= premise.handles()
        return found


class ExplanationSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    rule: Optional[str] = None
    answers: list[AnswerSpec] = Field(default_factory=list)


AnswerSpec.model_rebuild()


class QuerySpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    query: str = Field(..., min_length=1)
    answers: list[AnswerSpec] = Field(default_factory=list)


class ScenarioSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    keys: dict[str, list[KeySpec]] = Field(default_factory=dict)
    queries: list[QuerySpec] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

@dataclass
class Scenario:
    """A populated lookup plus the named queries it can answer."""

    lookup: InMemoryLookup
    queries: dict[str, str] = field(default_factory=dict)
    answer_counts: dict[str, int] = field(default_factory=dict)

    def query(self, name: str) -> str:
        if name not in self.queries:
            raise ScenarioError(f"Unknown query '{name}'. Available: {', '.join(self.queries) or 'none'}")
        return self.queries[name]


def build_scenario(spec: ScenarioSpec) -> Scenario:
    """Populate an InMemoryLookup from a validated scenario."""
    lookup = InMemoryLookup()
    for handle, keys in spec.keys.items():
        lookup.set_keys(handle, [(k.type, k.value) for k in keys])

    scenario = Scenario(lookup=lookup)
    names_by_text: dict[str, str] = {}
    for query_spec in spec.queries:
        if query_spec.name in scenario.queries:
            raise ScenarioError(f"Duplicate query name: {query_spec.name}")
        # The lookup answers by query text, so two names cannot share one
        if query_spec.query in names_by_text:
            raise ScenarioError(
                f"Duplicate query text in '{query_spec.name}', "
                f"already used by '{names_by_text[query_spec.query]}'"
            )
        names_by_text[query_spec.query] = query_spec.name

        for answer_spec in query_spec.answers:
            missing = sorted(h for h in answer_spec.handles() if h not in spec.keys)
            if missing:
                raise ScenarioError(
                    f"Query '{query_spec.name}' binds instances with no keys entry: {', '.join(missing)}"
                )

        lookup.add_answers(query_spec.query, [a.to_answer() for a in query_spec.answers])
        scenario.queries[query_spec.name] = query_spec.query
        scenario.answer_counts[query_spec.name] = len(query_spec.answers)

    logger.info(
        "Loaded scenario: %d quer(ies), %d instance(s)",
        len(scenario.queries), len(spec.keys),
    )
    return scenario


def load_scenario(path: str | Path) -> Scenario:
    """Read, validate and load a YAML or JSON scenario file.

    Raises:
        ScenarioError: the file is missing, unparsable or invalid.
    """
    path = Path(path)
    if not path.exists():
        raise ScenarioError(f"Scenario file not found: {path}")

    try:
        if path.suffix.lower() == ".json":
            data = read_json(path)
        else:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ScenarioError(f"Could not parse {path}: {exc}") from exc

    try:
        spec = ScenarioSpec.model_validate(data or {})
    except ValidationError as exc:
        raise ScenarioError(f"Invalid scenario {path}: {exc}") from exc

    return build_scenario(spec)
