"""Tests for the operator catalog index and the emitted-DSL line validator."""

import json

import pytest

from catalog import CatalogError, DslLineValidator, ErrorCode, OperatorIndex, OpKind, validate_catalog


class TestOperatorIndex:
    """Loading, schema validation and lookup."""

    def test_default_catalog_arities(self, default_index):
        assert default_index.expected_arity("isA") == 2
        assert default_index.expected_arity("give") == 3
        assert default_index.expected_arity("And") is None
        assert default_index.lookup_by_name("Not").kind == OpKind.LOGIC

    def test_unknown_operator(self, default_index):
        assert not default_index.is_known("frobnicate")
        assert default_index.expected_arity("frobnicate") is None
        assert "frobnicate" not in default_index

    def test_names_sorted(self, small_index):
        names = small_index.names()
        assert names == sorted(names)
        assert len(small_index) == 8

    def test_with_declared_returns_extended_copy(self, small_index):
        extended = small_index.with_declared(["frobnicate", "isA"])
        entry = extended.lookup_by_name("frobnicate")
        assert entry.kind == OpKind.DECLARED
        assert entry.arity is None
        assert extended.expected_arity("isA") == 2
        assert not small_index.is_known("frobnicate")

    def test_schema_violation_raises(self):
        with pytest.raises(CatalogError):
            OperatorIndex.from_dict({"operators": [{"name": "1bad", "arity": 2}]})

    def test_unknown_field_rejected(self):
        problems = validate_catalog({"operators": [{"name": "isA", "arity": 2, "colour": "red"}]})
        assert problems
        assert problems[0].startswith("/operators/0")

    def test_valid_catalog_has_no_problems(self):
        assert validate_catalog({"version": "2", "operators": [{"name": "isA", "arity": 2}]}) == []

    def test_from_file_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogError):
            OperatorIndex.from_file(path)

    def test_from_file_round_trip(self, tmp_path):
        path = tmp_path / "ops.json"
        path.write_text(json.dumps({"operators": [{"name": "owns", "arity": 2}]}), encoding="utf-8")
        index = OperatorIndex.from_file(path)
        assert index.is_known("owns")
        assert index.version == "1"


class TestDslLineValidator:
    """Per-line checks of emitted DSL."""

    @staticmethod
    def codes(report):
        return [i.code for i in report.issues]

    def test_valid_text(self, small_index):
        report = DslLineValidator(small_index).validate(
            "// action:learn\n@base0 isA Rex Cat\nNot $base0\nlikes Anne Bob\n"
        )
        assert report.is_valid
        assert report.issues == []

    def test_unknown_operator(self, small_index):
        report = DslLineValidator(small_index).validate("frobnicate Anne Bob")
        assert self.codes(report) == [ErrorCode.OP_UNKNOWN]
        assert report.issues[0].details == {"operator": "frobnicate"}
        assert report.issues[0].line_no == 1

    def test_declared_operator_is_known_with_any_arity(self, small_index):
        report = DslLineValidator(small_index).validate(
            "@frobnicate:frobnicate __Relation\nfrobnicate Anne Bob Carol"
        )
        assert report.is_valid

    def test_arity_mismatch(self, small_index):
        report = DslLineValidator(small_index).validate("isA Rex")
        assert self.codes(report) == [ErrorCode.ARITY_MISMATCH]
        assert report.issues[0].details["expected"] == 2
        assert report.issues[0].details["actual"] == 1

    def test_variadic_operator_skips_arity(self, small_index):
        text = "@a isA Rex Dog\n@b isA Tom Cat\n@c isA Bob Cow\nAnd $a $b $c"
        assert DslLineValidator(small_index).validate(text).is_valid

    def test_reference_used_before_definition(self, small_index):
        report = DslLineValidator(small_index).validate("Not $base0\n@base0 isA Rex Cat")
        assert self.codes(report) == [ErrorCode.REF_UNDEFINED]

    def test_duplicate_reference(self, small_index):
        report = DslLineValidator(small_index).validate("@a isA Rex Dog\n@a isA Tom Cat")
        assert self.codes(report) == [ErrorCode.REF_DUPLICATE]
        assert report.issues[0].line_no == 2

    def test_invalid_identifiers(self, small_index):
        validator = DslLineValidator(small_index)
        assert self.codes(validator.validate("@1bad isA Rex Dog")) == [ErrorCode.IDENT_INVALID]
        assert self.codes(validator.validate("isA Rex Dog-1")) == [ErrorCode.IDENT_INVALID]

    def test_reference_without_statement(self, small_index):
        report = DslLineValidator(small_index).validate("@goal:goal")
        assert self.codes(report) == [ErrorCode.LINE_MALFORMED]

    def test_compound_goal_skips_arity_with_warning(self, small_index):
        report = DslLineValidator(small_index).validate("@goal:goal Not (hasProperty Rex big)")
        assert report.is_valid
        assert len(report.warnings) == 1
