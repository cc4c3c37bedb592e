"""Tests for the nl2dsl command-line interface."""

import json

import pytest

from nl2dsl.cli import main

ENV_VARS = (
    "NL2DSL_AUTO_DECLARE",
    "NL2DSL_INDEFINITE_AS_ENTITY",
    "NL2DSL_ALLOW_VARIABLE_FACTS",
    "NL2DSL_OPAQUE_STATEMENTS",
    "NL2DSL_OPAQUE_QUESTIONS",
    "NL2DSL_EXPAND_QUESTIONS",
    "NL2DSL_EXTRACT_EXISTENTIALS",
    "NL2DSL_DEFAULT_VAR",
    "NL2DSL_CATALOG",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Translator options come only from the flags under test."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestQuestionCommand:

    def test_prints_goal(self, capsys):
        main(["question", "Is Rex a dog?"])
        assert capsys.readouterr().out.strip() == "@goal:goal isA Rex Dog"

    def test_json_output_for_untranslatable(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["question", "Hmm?", "--json-output"])
        assert exc.value.code == 1
        payload = json.loads(capsys.readouterr().out)
        assert payload == {"question": "Hmm?", "dsl": None}

    def test_opaque_flag(self, capsys):
        main(["question", "Hmm?", "--opaque-questions"])
        assert capsys.readouterr().out.startswith("@goal:goal hasProperty KB opaque_q_")


class TestTranslateCommand:

    def test_json_output(self, capsys):
        main(["translate", "All dogs are mammals. Rex is a dog.", "--json-output"])
        payload = json.loads(capsys.readouterr().out)
        assert payload["dsl"].splitlines()[-1] == "isA Rex Dog"
        assert payload["errors"] == []
        assert payload["stats"]["parsed"] == 2

    def test_unknown_operator_exits_with_error(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["translate", "Anne frobnicates Bob.", "--json-output"])
        assert exc.value.code == 1
        payload = json.loads(capsys.readouterr().out)
        assert payload["errors"][0]["unknown_operator"] == "frobnicate"

    def test_auto_declare(self, capsys):
        main(["translate", "Anne frobnicates Bob.", "--auto-declare"])
        out = capsys.readouterr().out
        assert "@frobnicate:frobnicate __Relation\nfrobnicate Anne Bob" in out

    def test_reads_file(self, tmp_path, capsys):
        source = tmp_path / "story.txt"
        source.write_text("Rex is a dog.\nTom is a cat.\n", encoding="utf-8")
        main(["translate", "--file", str(source), "--json-output", "--check"])
        payload = json.loads(capsys.readouterr().out)
        assert payload["dsl"] == "isA Rex Dog\nisA Tom Cat"
        assert payload["issues"] == []


class TestCatalogCommand:

    def test_json_listing(self, capsys):
        main(["catalog", "--json-output"])
        names = [e["name"] for e in json.loads(capsys.readouterr().out)]
        assert "isA" in names
        assert names == sorted(names)

    def test_check_valid_file(self, tmp_path, capsys):
        dsl = tmp_path / "ok.dsl"
        dsl.write_text("@base0 isA Rex Cat\nNot $base0\n", encoding="utf-8")
        main(["catalog", "--check", str(dsl), "--json-output"])
        assert json.loads(capsys.readouterr().out)["is_valid"] is True

    def test_check_invalid_file(self, tmp_path, capsys):
        dsl = tmp_path / "bad.dsl"
        dsl.write_text("frobnicate Anne Bob\n", encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            main(["catalog", "--check", str(dsl), "--json-output"])
        assert exc.value.code == 1
        issues = json.loads(capsys.readouterr().out)["issues"]
        assert issues[0]["code"] == "E_OP_UNKNOWN"


class TestRenderCommand:

    def test_prove_with_session(self, tmp_path, capsys):
        result = tmp_path / "result.json"
        result.write_text(json.dumps({
            "valid": True,
            "goal": "isA Rex Dog",
            "steps": [{"operation": "direct_match", "fact": "isA Rex Dog"}],
        }), encoding="utf-8")
        session = tmp_path / "session.json"
        session.write_text(json.dumps({
            "kbFacts": [{"id": "f1", "metadata": {"operator": "isA", "args": ["Rex", "Dog"]}}],
        }), encoding="utf-8")
        main(["render", str(result), "--action", "prove", "--session", str(session)])
        assert capsys.readouterr().out.strip() == "True: Rex is a dog. Proof: Fact in KB: Rex is a dog."

    def test_query_json_output(self, tmp_path, capsys):
        result = tmp_path / "result.json"
        result.write_text(json.dumps({"bindings": {"x": {"answer": "Rex", "steps": ["isA Rex Dog"]}}}), encoding="utf-8")
        main(["render", str(result), "--query", "@goal:goal isA ?x Dog", "--json-output"])
        payload = json.loads(capsys.readouterr().out)
        assert payload == {"action": "query", "text": "Rex is a dog. Proof: Rex is a dog."}

    def test_missing_result_file(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(["render", str(tmp_path / "nope.json")])
        assert exc.value.code == 1
