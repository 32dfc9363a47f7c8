"""Shared test fixtures for the veritrace test suite."""

import os

import pytest
from unittest.mock import MagicMock

import veritrace.settings as _settings_mod
from veritrace.answers import Answer, EntityConcept, Explanation, RelationConcept
from veritrace.lookup.memory import InMemoryLookup
from veritrace.pattern.model import Pattern, Variable, var


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Every test starts from default settings."""
    for name in list(os.environ):
        if name.startswith("VERITRACE_"):
            monkeypatch.delenv(name)
    monkeypatch.setattr(_settings_mod, "_settings", None)


@pytest.fixture
def lookup():
    """In-memory lookup with three people keyed by name."""
    store = InMemoryLookup()
    store.set_keys("V1", [("name", "alice")])
    store.set_keys("V2", [("name", "bob")])
    store.set_keys("V3", [("name", "carol")])
    store.set_keys("R1", [])
    store.set_keys("R2", [])
    return store


@pytest.fixture
def mock_lookup():
    """A lookup collaborator mock with no keys and no answers."""
    mock = MagicMock()
    mock.key_attributes.return_value = []
    mock.execute.return_value = []
    return mock


@pytest.fixture
def person_answer():
    """x0 bound to alice, pattern `$x0 isa person`, no explanation."""
    return Answer(
        substitution={Variable("x0"): EntityConcept("V1", "person")},
        pattern=Pattern([var("x0").isa("person")]),
    )


@pytest.fixture
def friendship_premise_pattern():
    return Pattern([
        var("x0").isa("person"),
        var("x1").isa("person"),
        var("r1").rel("frienda", "x0").rel("friendb", "x1").isa("friendship"),
    ])


@pytest.fixture
def friendship_conclusion_pattern():
    return Pattern([
        var("x0").isa("person"),
        var("x2").isa("person"),
        var("r2").rel("frienda", "x0").rel("friendb", "x2").isa("friendship"),
    ])


@pytest.fixture
def inferred_friendship(friendship_premise_pattern, friendship_conclusion_pattern):
    """An answer derived from one premise by the transitive-friendship rule."""
    premise = Answer(
        substitution={
            Variable("x0"): EntityConcept("V1", "person"),
            Variable("x1"): EntityConcept("V2", "person"),
            Variable("r1"): RelationConcept("R1", "friendship"),
        },
        pattern=friendship_premise_pattern,
    )
    return Answer(
        substitution={
            Variable("x0"): EntityConcept("V1", "person"),
            Variable("x2"): EntityConcept("V3", "person"),
            Variable("r2"): RelationConcept("R2", "friendship"),
        },
        pattern=friendship_conclusion_pattern,
        explanation=Explanation("transitive-friendship", [premise]),
    )
