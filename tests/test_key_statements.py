"""Tests for key statement generation."""

from datetime import datetime
from decimal import Decimal

import pytest

from veritrace.answers import AttributeConcept, EntityConcept, RelationConcept, TypeConcept
from veritrace.pattern.model import Pattern, Variable, var
from veritrace.reconstruction.keys import generate_key_statements
from veritrace.utils import ReconstructionError, UnsupportedConceptError


class TestAttributeConcepts:
    @pytest.mark.parametrize("value", ["alice", 2.5, 7, datetime(2021, 5, 1), False])
    def test_value_statement(self, mock_lookup, value):
        result = generate_key_statements({Variable("a"): AttributeConcept(value, "v")}, mock_lookup)
        assert result == Pattern([var("a").val(value)])
        mock_lookup.key_attributes.assert_not_called()

    def test_unsupported_value_emits_nothing(self, mock_lookup):
        result = generate_key_statements({Variable("a"): AttributeConcept(Decimal("1.5"))}, mock_lookup)
        assert len(result) == 0

    def test_rendering(self, mock_lookup):
        result = generate_key_statements({Variable("a"): AttributeConcept("alice", "name")}, mock_lookup)
        assert str(result) == '$a == "alice";'


class TestInstanceConcepts:
    def test_entity_keys(self, mock_lookup):
        concept = EntityConcept("V1", "person")
        mock_lookup.key_attributes.return_value = [("name", "alice"), ("ssn", 12)]
        result = generate_key_statements({Variable("x"): concept}, mock_lookup)
        assert result == Pattern([var("x").has("name", "alice"), var("x").has("ssn", 12)])
        mock_lookup.key_attributes.assert_called_once_with(concept)

    def test_relation_keys(self, mock_lookup):
        mock_lookup.key_attributes.return_value = [("contract-id", "C-7")]
        result = generate_key_statements({Variable("r"): RelationConcept("R1")}, mock_lookup)
        assert str(result) == '$r has contract-id "C-7";'

    def test_key_count_matches(self, mock_lookup):
        mock_lookup.key_attributes.return_value = [("a", 1), ("b", 2), ("c", 3)]
        result = generate_key_statements({Variable("x"): EntityConcept("V1")}, mock_lookup)
        assert len([s for s in result if s.var == Variable("x")]) == 3

    def test_no_keys(self, mock_lookup):
        result = generate_key_statements({Variable("x"): EntityConcept("V1")}, mock_lookup)
        assert len(result) == 0

    def test_unsupported_key_value_skipped(self, mock_lookup):
        mock_lookup.key_attributes.return_value = [("name", "alice"), ("weight", Decimal("2"))]
        result = generate_key_statements({Variable("x"): EntityConcept("V1")}, mock_lookup)
        assert result == Pattern([var("x").has("name", "alice")])

    def test_typed_key_values(self, mock_lookup):
        born = datetime(1990, 4, 2, 8, 30)
        mock_lookup.key_attributes.return_value = [("born", born), ("active", True), ("score", 0.5)]
        result = generate_key_statements({Variable("x"): EntityConcept("V1")}, mock_lookup)
        assert str(result) == (
            "$x has born 1990-04-02T08:30:00; $x has active true; $x has score 0.5;"
        )

    def test_in_memory_lookup(self, lookup):
        result = generate_key_statements(
            {Variable("x0"): EntityConcept("V1"), Variable("x1"): EntityConcept("V2")},
            lookup,
        )
        assert result == Pattern([var("x0").has("name", "alice"), var("x1").has("name", "bob")])


class TestTypeConcepts:
    def test_type_concept_rejected(self, mock_lookup):
        with pytest.raises(UnsupportedConceptError) as excinfo:
            generate_key_statements({Variable("t"): TypeConcept("person")}, mock_lookup)
        assert excinfo.value.stage == "keys"
        assert "person" in str(excinfo.value)

    def test_is_reconstruction_error(self):
        assert issubclass(UnsupportedConceptError, ReconstructionError)

    def test_unions_groups(self, mock_lookup):
        mock_lookup.key_attributes.return_value = [("name", "alice")]
        result = generate_key_statements(
            {Variable("x"): EntityConcept("V1"), Variable("n"): AttributeConcept("alice")},
            mock_lookup,
        )
        assert result == Pattern([var("x").has("name", "alice"), var("n").val("alice")])
