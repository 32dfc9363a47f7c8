"""Immutable pattern data types.

A Pattern is a conjunction of Statements; a Statement is a subject
Variable with an ordered tuple of properties. Statements compare by
subject and by the *set* of their properties, and patterns compare as
sets of statements, so unioning the same facts twice never duplicates
them.

Statements render in the usual query syntax::

    $r (frienda: $x0, friendb: $x1) isa friendship, has since 2019;

Builder methods mirror that syntax and return new statements::

    var("x").isa("person").has("name", "alice")
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Iterator, Optional, Union

from veritrace.pattern.values import ValueType, render_value, value_type_of


@dataclass(frozen=True)
class Variable:
    """A pattern variable. Equality is by name only."""

    name: str
    returned: bool = field(default=True, compare=False)

    def as_returned(self) -> "Variable":
        return Variable(self.name, returned=True)

    def __str__(self) -> str:
        return f"${self.name}"


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

def _render_operand(value: Any) -> str:
    if isinstance(value, Variable):
        return str(value)
    return render_value(value)


@dataclass(frozen=True)
class HasAttribute:
    """Subject owns an attribute of a type, equal to a literal or bound to a variable."""

    attribute_type: str
    value: Any
    value_type: Optional[ValueType] = None

    def __post_init__(self) -> None:
        # keeps `has n 1` distinct from `has n true`
        if self.value_type is None and not isinstance(self.value, Variable):
            object.__setattr__(self, "value_type", value_type_of(self.value))

    def __str__(self) -> str:
        return f"has {self.attribute_type} {_render_operand(self.value)}"


@dataclass(frozen=True)
class Isa:
    """Subject is an instance of the named type."""

    type_label: str

    def __str__(self) -> str:
        return f"isa {self.type_label}"


@dataclass(frozen=True)
class RolePlayer:
    player: Variable
    role: Optional[str] = None

    def __str__(self) -> str:
        if self.role:
            return f"{self.role}: {self.player}"
        return str(self.player)


@dataclass(frozen=True)
class Relation:
    """Subject is a relation connecting the listed role players."""

    role_players: tuple[RolePlayer, ...] = ()

    def add(self, player: RolePlayer) -> "Relation":
        return Relation(self.role_players + (player,))

    def __str__(self) -> str:
        return "(" + ", ".join(str(rp) for rp in self.role_players) + ")"


@dataclass(frozen=True)
class IdProperty:
    """Subject is pinned to an engine-internal concept id."""

    concept_id: str

    def __str__(self) -> str:
        return f"id {self.concept_id}"


@dataclass(frozen=True)
class ValueProperty:
    """Subject is an attribute equal to a literal value."""

    value: Any
    value_type: Optional[ValueType] = None

    def __post_init__(self) -> None:
        if self.value_type is None:
            object.__setattr__(self, "value_type", value_type_of(self.value))

    def __str__(self) -> str:
        return f"== {render_value(self.value)}"


Property = Union[HasAttribute, Isa, Relation, IdProperty, ValueProperty]


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class Statement:
    """A subject variable and its properties."""

    var: Variable
    properties: tuple[Property, ...] = ()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Statement):
            return NotImplemented
        return self.var == other.var and frozenset(self.properties) == frozenset(other.properties)

    def __hash__(self) -> int:
        return hash((self.var, frozenset(self.properties)))

    # -- builders -------------------------------------------------------------

    def _with(self, prop: Property) -> "Statement":
        return replace(self, properties=self.properties + (prop,))

    def isa(self, type_label: str) -> "Statement":
        return self._with(Isa(type_label))

    def has(self, attribute_type: str, value: Any) -> "Statement":
        return self._with(HasAttribute(attribute_type, value))

    def val(self, value: Any) -> "Statement":
        return self._with(ValueProperty(value))

    def id(self, concept_id: str) -> "Statement":
        return self._with(IdProperty(concept_id))

    def rel(self, role: Optional[str], player: Variable | str) -> "Statement":
        """Add a role player, extending the statement's relation property if it has one."""
        if isinstance(player, str):
            player = Variable(player)
        role_player = RolePlayer(player, role)
        props = list(self.properties)
        for i, prop in enumerate(props):
            if isinstance(prop, Relation):
                props[i] = prop.add(role_player)
                return replace(self, properties=tuple(props))
        return replace(self, properties=(Relation((role_player,)),) + self.properties)

    # -- inspection -----------------------------------------------------------

    def variables(self) -> set[Variable]:
        """Every variable the statement mentions, subject included."""
        found = {self.var}
        for prop in self.properties:
            if isinstance(prop, Relation):
                found.update(rp.player for rp in prop.role_players)
            elif isinstance(prop, HasAttribute) and isinstance(prop.value, Variable):
                found.add(prop.value)
        return found

    def __str__(self) -> str:
        relation = [str(p) for p in self.properties if isinstance(p, Relation)]
        rest = [str(p) for p in self.properties if not isinstance(p, Relation)]
        head = " ".join([str(self.var)] + relation)
        if rest:
            return f"{head} {', '.join(rest)};"
        return f"{head};"


def var(name: str, returned: bool = True) -> Statement:
    """Start a statement about the named variable."""
    return Statement(Variable(name, returned=returned))


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

class Pattern:
    """An unordered, deduplicated conjunction of statements.

    Insertion order is kept only so that rendering is stable; equality
    and hashing ignore it.
    """

    __slots__ = ("_statements",)

    def __init__(self, statements: Iterable[Statement] = ()) -> None:
        self._statements: dict[Statement, None] = dict.fromkeys(statements)

    @property
    def statements(self) -> tuple[Statement, ...]:
        return tuple(self._statements)

    def union(self, *others: Iterable[Statement]) -> "Pattern":
        merged = dict(self._statements)
        for other in others:
            merged.update(dict.fromkeys(other))
        return Pattern(merged)

    def __or__(self, other: Iterable[Statement]) -> "Pattern":
        return self.union(other)

    def variables(self) -> set[Variable]:
        found: set[Variable] = set()
        for statement in self._statements:
            found.update(statement.variables())
        return found

    def __iter__(self) -> Iterator[Statement]:
        return iter(self._statements)

    def __len__(self) -> int:
        return len(self._statements)

    def __contains__(self, statement: object) -> bool:
        return statement in self._statements

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Pattern):
            return self._statements.keys() == other._statements.keys()
        if isinstance(other, (set, frozenset)):
            return self._statements.keys() == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._statements))

    def __str__(self) -> str:
        return " ".join(str(s) for s in self._statements)

    def __repr__(self) -> str:
        return f"Pattern({str(self)!r})"


@dataclass(frozen=True)
class VerificationQuery:
    """A reconstructed pattern wrapped as a standalone match/get query."""

    pattern: Pattern

    def __str__(self) -> str:
        return f"match {self.pattern} get;"

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": str(self),
            "statements": [str(s) for s in self.pattern],
            "statement_count": len(self.pattern),
        }
