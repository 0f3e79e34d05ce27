"""Tests for the directive comparison engine and assertion helpers."""

import json

import pytest

from flowcheck import (
    SmartJsonEngine,
    EngineConfig,
    MismatchType,
    DirectiveError,
    JsonParseError,
    compare,
    collect_validators,
    strip_directives,
    assert_json,
    assert_with_expected_file,
)


class TestBasicComparison:
    """Test literal comparison without directives."""

    def setup_method(self):
        self.engine = SmartJsonEngine()

    @pytest.mark.parametrize("document", [
        {"name": "Alice", "age": 30},
        [1, "two", None, True, {"x": [1.5]}],
        '"text"',
        0,
        None,
        {"a": {"b": {"c": []}}},
    ])
    def test_document_matches_itself(self, document):
        """Test a directive-free document always matches itself."""
        result = self.engine.compare(document, document)
        assert result.is_match is True
        assert result.mismatches == []

    def test_json_text_inputs(self):
        result = self.engine.compare('{"id": 1, "tags": ["a"]}', b'{"tags": ["a"], "id": 1}')
        assert result.is_match is True

    def test_value_mismatch(self):
        result = self.engine.compare({"name": "Alice"}, {"name": "Bob"})
        assert result.is_match is False
        assert result.paths == ["name"]
        assert result.mismatches[0].type == MismatchType.VALUE_MISMATCH

    def test_int_and_float_compare_numerically(self):
        result = self.engine.compare({"price": 10}, {"price": 10.0})
        assert result.is_match is True

    def test_bool_is_not_a_number(self):
        result = self.engine.compare({"flag": True}, {"flag": 1})
        assert result.is_match is False
        assert result.mismatches[0].type == MismatchType.TYPE_MISMATCH

    def test_missing_field(self):
        result = self.engine.compare({"id": 1, "name": "x"}, {"id": 1})
        assert result.is_match is False
        assert result.paths == ["name"]
        assert result.mismatches[0].type == MismatchType.MISSING_FIELD

    def test_extra_fields_ignored_by_default(self):
        result = self.engine.compare({"id": 1}, {"id": 1, "traceId": "abc"})
        assert result.is_match is True

    def test_extra_fields_reported_when_configured(self):
        engine = SmartJsonEngine(EngineConfig(ignore_extra_fields=False))
        result = engine.compare({"id": 1}, {"id": 1, "traceId": "abc"})
        assert result.is_match is False
        assert result.paths == ["traceId"]
        assert result.mismatches[0].type == MismatchType.EXTRA_FIELD

    def test_array_length_mismatch(self):
        result = self.engine.compare({"items": [1, 2, 3]}, {"items": [1, 2]})
        assert result.is_match is False
        assert result.mismatches[0].type == MismatchType.ARRAY_LENGTH_MISMATCH
        assert result.paths == ["items"]

    def test_arrays_are_ordered(self):
        result = self.engine.compare([1, 2], [2, 1])
        assert result.is_match is False
        assert result.paths == ["[0]", "[1]"]

    def test_object_vs_array(self):
        result = self.engine.compare({"data": {}}, {"data": []})
        assert result.is_match is False
        assert result.mismatches[0].type == MismatchType.TYPE_MISMATCH

    def test_unknown_directive_compares_literally(self):
        """Test a bracketed unknown keyword is just a string."""
        assert self.engine.compare({"v": "${unknown}"}, {"v": "${unknown}"}).is_match is True
        assert self.engine.compare({"v": "${unknown}"}, {"v": "x"}).is_match is False


class TestDirectiveComparison:
    """Test validator-driven paths."""

    def setup_method(self):
        self.engine = SmartJsonEngine()
        self.expected = '{"status": "${not-null}", "id": "${isnumber}", "name": "Alice"}'

    def test_directives_pass(self):
        result = self.engine.compare(self.expected, '{"status": "OK", "id": 42, "name": "Alice"}')
        assert result.is_match is True
        assert result.validators_applied == 2

    def test_null_status_fails(self):
        """Test a null value fails not-null and the failure names the path."""
        result = self.engine.compare(self.expected, '{"status": null, "id": 42, "name": "Alice"}')
        assert result.is_match is False
        assert result.paths == ["status"]
        assert "status" in result.message
        assert result.mismatches[0].type == MismatchType.VALIDATOR_FAILED
        assert result.mismatches[0].rule == "not-null"

    def test_missing_field_fails_validator(self):
        """Test an absent field is rejected by the validator, not a crash."""
        result = self.engine.compare(self.expected, '{"id": 42, "name": "Alice"}')
        assert result.is_match is False
        assert result.paths == ["status"]
        assert result.mismatches[0].type == MismatchType.VALIDATOR_FAILED

    def test_null_directive_distinguishes_absent(self):
        assert self.engine.compare({"x": "${null}"}, {"x": None}).is_match is True
        assert self.engine.compare({"x": "${null}"}, {}).is_match is False

    def test_ignore_passes_when_absent(self):
        assert self.engine.compare({"ts": "${ignore}"}, {}).is_match is True
        assert self.engine.compare({"ts": "${ignore}"}, {"ts": [1, {"a": 2}]}).is_match is True

    def test_directive_on_container_values(self):
        expected = {"items": "${is-array}", "meta": "${is-object}", "tags": "${not-empty}"}
        actual = {"items": [1, 2], "meta": {"page": 1}, "tags": ["a"]}
        assert self.engine.compare(expected, actual).is_match is True

        actual["tags"] = []
        result = self.engine.compare(expected, actual)
        assert result.is_match is False
        assert result.paths == ["tags"]

    def test_nested_array_paths(self):
        expected = {"data": {"items": [{"id": "${is-number}"}, {"id": "${is-number}"}]}}
        actual = {"data": {"items": [{"id": 1}, {"id": "x"}]}}
        result = self.engine.compare(expected, actual)
        assert result.is_match is False
        assert result.paths == ["data.items[1].id"]

    def test_directive_as_array_element(self):
        result = self.engine.compare(["${is-string}", "${gt:0}"], ["a", 5])
        assert result.is_match is True

    def test_directive_at_root(self):
        assert self.engine.compare('"${is-object}"', {"a": 1}).is_match is True
        assert self.engine.compare('"${is-object}"', [1]).is_match is False

    def test_all_failures_reported(self):
        """Test there is no fail-fast: every failing path is listed."""
        expected = {
            "code": "${in:0,200}",
            "user": {"email": "${is-email}", "phone": "${is-phone}"},
            "total": "${range:1,100}",
            "name": "Alice",
        }
        actual = {
            "code": 500,
            "user": {"email": "not-an-email", "phone": "13800000000"},
            "total": 0,
            "name": "Bob",
        }
        result = self.engine.compare(expected, actual)
        assert result.is_match is False
        assert sorted(result.paths) == ["code", "name", "total", "user.email"]
        assert len(result.message.splitlines()) == 4

    def test_bad_payload_raises(self):
        with pytest.raises(DirectiveError):
            self.engine.compare({"n": "${range:a,b}"}, {"n": 1})

    def test_malformed_json_raises(self):
        with pytest.raises(JsonParseError) as exc_info:
            self.engine.compare('{"a": 1', '{"a": 1}')
        assert exc_info.value.line == 1

    def test_result_to_dict(self):
        result = self.engine.compare({"a": "${not-null}"}, {})
        data = result.to_dict()
        assert data["is_match"] is False
        assert data["summary"]["mismatches_found"] == 1
        assert data["mismatches"][0]["path"] == "a"
        assert data["mismatches"][0]["actual"] is None
        json.dumps(data)


class TestStructuralWalk:
    """Test validator collection and directive stripping."""

    def test_collect_paths(self):
        expected = {"a": "${not-null}", "b": {"c": "${is-number}"}, "d": ["${is-string}"], "e": 1}
        actual = {"a": 1, "b": {"c": 2}, "d": ["x"], "e": 1}
        validators = collect_validators(expected, actual)
        assert set(validators) == {"a", "b.c", "d[0]"}
        assert validators["b.c"].describe() == "${is-number}"

    def test_collect_registers_absent_field(self):
        validators = collect_validators({"a": "${not-null}"}, {})
        assert set(validators) == {"a"}

    def test_collect_walks_shorter_array(self):
        validators = collect_validators(["${is-number}", "${is-number}"], [1])
        assert set(validators) == {"[0]"}

    def test_strip_replaces_directives(self):
        expected = {
            "id": "${is-number}",
            "items": "${is-array}",
            "meta": "${is-object}",
            "ok": "${is-boolean}",
            "gone": "${null}",
            "name": "${is-string}",
            "literal": "keep",
        }
        assert strip_directives(expected) == {
            "id": 0,
            "items": [],
            "meta": {},
            "ok": False,
            "gone": None,
            "name": "",
            "literal": "keep",
        }

    def test_strip_does_not_modify_input(self):
        expected = {"a": ["${is-number}"]}
        strip_directives(expected)
        assert expected == {"a": ["${is-number}"]}

    def test_strip_is_idempotent(self):
        expected = {"a": "${is-number}", "b": ["${not-empty}", {"c": "${matches:x+}"}]}
        once = strip_directives(expected)
        assert strip_directives(once) == once

    def test_stripped_template_matches_itself(self):
        """Test placeholders are valid values for every directive of a satisfied template."""
        expected = {"id": "${is-number}", "email": "${is-email}", "tags": "${is-array}", "name": "x"}
        stripped = strip_directives(expected)
        assert compare(stripped, stripped).is_match is True


class TestAssertions:
    """Test assertion helpers."""

    def test_assert_json_passes(self):
        result = assert_json({"id": "${not-null}"}, {"id": 7})
        assert result.is_match is True

    def test_assert_json_raises_with_report(self):
        with pytest.raises(AssertionError) as exc_info:
            assert_json({"id": "${not-null}", "name": "a"}, {"id": None, "name": "b"})
        message = str(exc_info.value)
        assert "id:" in message
        assert "name:" in message

    def test_assert_with_expected_file(self, tmp_path):
        expected_file = tmp_path / "expected.json"
        expected_file.write_text('{"orderId": "${matches:O-\\\\d+}"}', encoding="utf-8")
        assert_with_expected_file({"orderId": "O-12"}, expected_file)
        with pytest.raises(AssertionError):
            assert_with_expected_file({"orderId": "X-12"}, expected_file)

    def test_assert_with_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            assert_with_expected_file({}, tmp_path / "absent.json")
