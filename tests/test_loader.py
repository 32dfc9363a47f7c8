"""Tests for scenario loading, settings and export."""

import json
from datetime import datetime

import pytest
from pydantic import ValidationError

from veritrace.answers import AttributeConcept, EntityConcept, RelationConcept, TypeConcept
from veritrace.export import export_queries, queries_to_dict
from veritrace.lookup.loader import load_scenario
from veritrace.pattern.model import Pattern, Variable, VerificationQuery, var
from veritrace.reconstruction.batch import BatchDriver
from veritrace.settings import MAX_EXPLANATION_DEPTH, VeritraceSettings, get_settings, reload_settings
from veritrace.utils import ScenarioError

SCENARIO_YAML = """
keys:
  V1: [{type: name, value: alice}]
  V2: [{type: name, value: bob}]
  V3: [{type: name, value: carol}]
  R1: []
  R2: []
queries:
  - name: people
    query: "match $x0 isa person; get;"
    answers:
      - map: {x0: {kind: entity, handle: V1, type: person}}
        pattern:
          - {var: x0, isa: person}
          - {var: x0, id: V1}
  - name: friends
    query: "match ($x0, $x2) isa friendship; get;"
    answers:
      - map:
          x0: {kind: entity, handle: V1, type: person}
          x2: {kind: entity, handle: V3, type: person}
          r2: {kind: relation, handle: R2, type: friendship}
        pattern:
          - {var: x0, isa: person}
          - {var: x2, isa: person}
          - {var: r2, rel: [[frienda, x0], [friendb, x2]], isa: friendship}
        explanation:
          rule: transitive-friendship
          answers:
            - map:
                x0: {kind: entity, handle: V1, type: person}
                x1: {kind: entity, handle: V2, type: person}
                r1: {kind: relation, handle: R1, type: friendship}
              pattern:
                - {var: x0, isa: person}
                - {var: x1, isa: person}
                - {var: r1, rel: [[frienda, x0], [friendb, x1]], isa: friendship}
"""


@pytest.fixture
def scenario_file(tmp_path):
    path = tmp_path / "scenario.yaml"
    path.write_text(SCENARIO_YAML)
    return path


class TestLoadScenario:
    def test_queries(self, scenario_file):
        scenario = load_scenario(scenario_file)
        assert list(scenario.queries) == ["people", "friends"]
        assert scenario.answer_counts == {"people": 1, "friends": 1}

    def test_answers_built(self, scenario_file):
        scenario = load_scenario(scenario_file)
        (answer,) = scenario.lookup.execute(scenario.query("people"))
        assert answer.substitution == {Variable("x0"): EntityConcept("V1", "person")}
        assert answer.pattern == Pattern([var("x0").isa("person"), var("x0").id("V1")])
        assert answer.explanation is None

    def test_explanation_built(self, scenario_file):
        scenario = load_scenario(scenario_file)
        (answer,) = scenario.lookup.execute(scenario.query("friends"))
        assert answer.explanation.rule_label == "transitive-friendship"
        (premise,) = answer.explanation.answers
        assert premise.substitution[Variable("r1")] == RelationConcept("R1", "friendship")
        assert var("r1").rel("frienda", "x0").rel("friendb", "x1").isa("friendship") in premise.pattern

    def test_keys_loaded(self, scenario_file):
        scenario = load_scenario(scenario_file)
        assert scenario.lookup.key_attributes(EntityConcept("V2")) == [("name", "bob")]

    def test_end_to_end(self, scenario_file):
        scenario = load_scenario(scenario_file)
        (query,) = BatchDriver(scenario.lookup).build_verification_queries(scenario.query("friends"))
        assert len(query.pattern) == 19

    def test_unknown_query_name(self, scenario_file):
        with pytest.raises(ScenarioError, match="Unknown query"):
            load_scenario(scenario_file).query("missing")

    def test_json_file(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_text(json.dumps({
            "keys": {},
            "queries": [{
                "name": "n",
                "query": "match $a; get;",
                "answers": [{
                    "map": {"a": {"kind": "attribute", "type": "age", "value": 3}},
                    "pattern": [{"var": "$x", "has": [["age", "$a"]]}],
                }],
            }],
        }))
        scenario = load_scenario(path)
        (answer,) = scenario.lookup.execute("match $a; get;")
        assert answer.substitution == {Variable("a"): AttributeConcept(3, "age")}
        assert answer.pattern == Pattern([var("x").has("age", Variable("a"))])

    def test_anonymous_subjects_made_explicit(self, tmp_path):
        path = tmp_path / "s.yaml"
        path.write_text(
            "queries:\n"
            "  - name: n\n"
            "    query: q\n"
            "    answers:\n"
            "      - map: {t: {kind: type, type: person}}\n"
            "        pattern:\n"
            "          - var: anon\n"
            "            anonymous: true\n"
            "            value: 2020-01-01 10:00:00\n"
            "          - {var: r, rel: [[null, x]]}\n"
        )
        (answer,) = load_scenario(path).lookup.execute("q")
        assert answer.substitution[Variable("t")] == TypeConcept("person")
        anon, rel = answer.pattern.statements
        assert anon.var.returned is True
        assert anon == var("anon").val(datetime(2020, 1, 1, 10, 0))
        assert str(rel) == "$r ($x);"

    def test_missing_pattern_kept_as_none(self, tmp_path):
        path = tmp_path / "s.yaml"
        path.write_text("queries: [{name: n, query: q, answers: [{map: {}}]}]\n")
        (answer,) = load_scenario(path).lookup.execute("q")
        assert answer.pattern is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(ScenarioError, match="not found"):
            load_scenario(tmp_path / "nope.yaml")

    def test_unparsable_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("queries: [unclosed\n")
        with pytest.raises(ScenarioError, match="Could not parse"):
            load_scenario(path)

    def test_invalid_kind(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(
            "queries: [{name: n, query: q, answers: [{map: {x: {kind: widget}}, pattern: []}]}]\n"
        )
        with pytest.raises(ScenarioError, match="Invalid scenario"):
            load_scenario(path)

    def test_entity_without_handle(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(
            "queries: [{name: n, query: q, answers: [{map: {x: {kind: entity}}, pattern: []}]}]\n"
        )
        with pytest.raises(ScenarioError, match="handle"):
            load_scenario(path)

    def test_unknown_handle(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(
            "queries: [{name: n, query: q, answers: "
            "[{map: {x: {kind: entity, handle: V9}}, pattern: []}]}]\n"
        )
        with pytest.raises(ScenarioError, match="V9"):
            load_scenario(path)

    def test_duplicate_query_name(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("queries: [{name: n, query: a}, {name: n, query: b}]\n")
        with pytest.raises(ScenarioError, match="Duplicate"):
            load_scenario(path)

    def test_duplicate_query_text(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(
            "keys: {V1: [], V2: []}\n"
            "queries:\n"
            "  - name: a\n"
            "    query: 'match $x0 isa person; get;'\n"
            "    answers: [{map: {x0: {kind: entity, handle: V1}}, pattern: [{var: x0, isa: person}]}]\n"
            "  - name: b\n"
            "    query: 'match $x0 isa person; get;'\n"
            "    answers: [{map: {x0: {kind: entity, handle: V2}}, pattern: [{var: x0, isa: person}]}]\n"
        )
        with pytest.raises(ScenarioError, match="Duplicate query text in 'b', already used by 'a'"):
            load_scenario(path)

    def test_answer_counts_match_verification_queries(self, tmp_path):
        path = tmp_path / "s.yaml"
        path.write_text(
            "keys: {V1: [], V2: []}\n"
            "queries:\n"
            "  - name: a\n"
            "    query: 'match $x0 isa person; get;'\n"
            "    answers: [{map: {x0: {kind: entity, handle: V1}}, pattern: [{var: x0, isa: person}]}]\n"
            "  - name: b\n"
            "    query: 'match $x0 isa robot; get;'\n"
            "    answers: [{map: {x0: {kind: entity, handle: V2}}, pattern: [{var: x0, isa: robot}]}]\n"
        )
        scenario = load_scenario(path)
        driver = BatchDriver(scenario.lookup)
        for name, count in scenario.answer_counts.items():
            assert len(driver.build_verification_queries(scenario.query(name))) == count

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_scenario(path).queries == {}


class TestSettings:
    def test_defaults(self):
        settings = VeritraceSettings()
        assert settings.fresh_var_prefix == "f"
        assert settings.id_marker == " id "
        assert settings.max_explanation_depth == 200
        assert settings.max_workers == 1

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("VERITRACE_FRESH_VAR_PREFIX", "fact")
        assert get_settings().fresh_var_prefix == "fact"

    def test_invalid_prefix(self):
        with pytest.raises(ValidationError):
            VeritraceSettings(fresh_var_prefix="1bad")

    def test_depth_capped(self, monkeypatch):
        monkeypatch.setenv("VERITRACE_MAX_EXPLANATION_DEPTH", "5000")
        with pytest.raises(ValidationError):
            get_settings()

    def test_depth_at_cap_accepted(self):
        assert VeritraceSettings(max_explanation_depth=MAX_EXPLANATION_DEPTH).max_explanation_depth == MAX_EXPLANATION_DEPTH

    def test_yaml_overlay(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("max_workers: 4\nid_marker: ' iid '\n")
        settings = reload_settings(path)
        assert settings.max_workers == 4
        assert get_settings() is settings

    def test_yaml_missing_file_uses_defaults(self, tmp_path):
        assert VeritraceSettings.from_yaml(tmp_path / "none.yaml").max_workers == 1


class TestExport:
    def test_export_queries(self, tmp_path):
        queries = [VerificationQuery(Pattern([var("x").isa("person")]))]
        path = export_queries("match $x isa person; get;", queries, tmp_path / "out" / "q.json")
        data = json.loads(path.read_text())
        assert data["answer_count"] == 1
        assert data["query"] == "match $x isa person; get;"
        assert data["verification_queries"][0]["query"] == "match $x isa person; get;"
        assert data["verification_queries"][0]["answer_index"] == 0

    def test_queries_to_dict_empty(self):
        assert queries_to_dict("q", [])["verification_queries"] == []
