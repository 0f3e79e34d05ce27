"""Tests for the flow context, template resolution and response extraction."""

import pytest

from flowcheck import (
    FlowContext,
    GeneratorRegistry,
    ParameterResolver,
    ExtractionRule,
    TemplateError,
    UndefinedVariableError,
    UnknownGeneratorError,
    InvalidPathError,
    parse_extraction_spec,
)
from flowcheck.jsonpath_utils import JSONPathMatcher, normalize_path


class FakeResponse:
    """Minimal stand-in for an HTTP client response."""

    def __init__(self, payload):
        self.payload = payload

    def json(self):
        return self.payload


class TestFlowContext:
    """Test the per-flow variable store."""

    def test_put_and_get(self):
        context = FlowContext()
        context.put("orderId", "O-1")
        assert context.get("orderId") == "O-1"
        assert "orderId" in context
        assert len(context) == 1

    def test_undefined_name_raises(self):
        context = FlowContext()
        with pytest.raises(UndefinedVariableError) as exc_info:
            context.get("token")
        assert exc_info.value.name == "token"

    def test_put_overwrites(self):
        context = FlowContext({"a": 1})
        context.put("a", 2)
        assert context.get("a") == 2

    def test_snapshot_is_a_copy(self):
        context = FlowContext({"a": 1, "b": 2})
        snapshot = context.snapshot()
        context.clear()
        assert snapshot == {"a": 1, "b": 2}
        assert len(context) == 0

    def test_iteration_keeps_insertion_order(self):
        context = FlowContext()
        for name in ("z", "a", "m"):
            context.put(name, name)
        assert list(context) == ["z", "a", "m"]

    def test_with_block_clears(self):
        with FlowContext({"userId": 42}) as context:
            assert context.get("userId") == 42
        assert len(context) == 0

    def test_separate_instances_are_isolated(self):
        first, second = FlowContext(), FlowContext()
        first.put("x", 1)
        assert "x" not in second


class TestTemplateResolution:
    """Test #{generator} and ${variable} substitution."""

    def setup_method(self):
        self.context = FlowContext()
        self.generators = GeneratorRegistry({"mobile": lambda: "13800000000"})
        self.resolver = ParameterResolver(self.context, self.generators)

    def test_generator_then_context(self):
        self.context.put("userId", 42)
        template = '{"phone":"#{mobile}","uid":"${userId}"}'
        assert self.resolver.render_request(template) == '{"phone":"13800000000","uid":"42"}'
        assert self.resolver.resolve_request(template) == {"phone": "13800000000", "uid": "42"}

    def test_context_string_value(self):
        self.context.put("userId", "42")
        assert self.resolver.resolve_request('{"uid":"${userId}"}') == {"uid": "42"}

    def test_non_string_value_substituted_as_json(self):
        self.context.put("ids", [1, 2])
        self.context.put("active", True)
        body = self.resolver.resolve_request('{"ids": ${ids}, "active": ${active}}')
        assert body == {"ids": [1, 2], "active": True}

    def test_each_generator_call_is_fresh(self):
        counter = iter(range(100))
        self.generators.register("seq", lambda: next(counter))
        assert self.resolver.resolve_request('["#{seq}", "#{seq}"]') == ["0", "1"]

    def test_undefined_variable(self):
        with pytest.raises(UndefinedVariableError) as exc_info:
            self.resolver.resolve_request('{"orderId":"${orderId}"}')
        assert exc_info.value.name == "orderId"

    def test_unknown_generator(self):
        with pytest.raises(UnknownGeneratorError):
            self.resolver.resolve_request('{"x":"#{nope}"}')

    def test_malformed_result(self):
        self.context.put("n", "abc")
        with pytest.raises(TemplateError) as exc_info:
            self.resolver.resolve_request('{"a": ${n}}')
        assert exc_info.value.template == '{"a": abc}'

    def test_empty_template(self):
        assert self.resolver.resolve_request("") is None
        assert self.resolver.resolve_request(None) is None

    def test_resolve_text(self):
        self.context.put("orderId", "O-1")
        sql = self.resolver.resolve_text("select * from orders where id = '${orderId}'")
        assert sql == "select * from orders where id = 'O-1'"

    def test_resolve_text_leaves_generators_alone(self):
        assert self.resolver.resolve_text("#{mobile}") == "#{mobile}"


class TestExtraction:
    """Test response value capture."""

    def setup_method(self):
        self.context = FlowContext()
        self.resolver = ParameterResolver(self.context)
        self.response = {
            "code": 0,
            "data": {
                "order": {"id": "O-1", "note": None},
                "items": [{"id": 10}, {"id": 11}],
            },
        }

    def test_parse_extraction_spec(self):
        rules = parse_extraction_spec("a:x, b : y.z ,bad, c:d:e,:nameless")
        assert rules == [ExtractionRule("a", "x"), ExtractionRule("b", "y.z")]
        assert parse_extraction_spec("") == []
        assert parse_extraction_spec(None) == []

    def test_extract_found_and_missing(self):
        """Test a path with no match is skipped, not stored."""
        extracted = self.resolver.extract("orderId:data.order.id,missing:data.nope", self.response)
        assert extracted == {"orderId": "O-1"}
        assert self.context.get("orderId") == "O-1"
        assert "missing" not in self.context

    def test_null_value_skipped(self):
        assert self.resolver.extract("note:data.order.note", self.response) == {}
        assert "note" not in self.context

    def test_multiple_matches_stored_as_list(self):
        extracted = self.resolver.extract("ids:data.items[*].id", self.response)
        assert extracted == {"ids": [10, 11]}

    def test_array_index(self):
        assert self.resolver.extract("first:data.items[0].id", self.response) == {"first": 10}

    def test_explicit_root(self):
        assert self.resolver.extract("code:$.code", self.response) == {"code": 0}

    def test_extract_from_response_object(self):
        extracted = self.resolver.extract("orderId:data.order.id", FakeResponse(self.response))
        assert extracted == {"orderId": "O-1"}

    def test_extract_from_text(self):
        extracted = self.resolver.extract("token:token", '{"token": "abc"}')
        assert extracted == {"token": "abc"}

    def test_invalid_path(self):
        with pytest.raises(InvalidPathError):
            self.resolver.extract("bad:data.'oops", self.response)

    def test_extracted_value_feeds_next_template(self):
        self.resolver.extract("orderId:data.order.id", self.response)
        assert self.resolver.resolve_request('{"orderId":"${orderId}"}') == {"orderId": "O-1"}


class TestPathHelpers:
    """Test path normalization and evaluation."""

    @pytest.mark.parametrize("path,expression", [
        ("", "$"),
        ("$", "$"),
        ("data.id", "$.data.id"),
        ("$.data.id", "$.data.id"),
        ("[0].id", "$[0].id"),
        (" data ", "$.data"),
    ])
    def test_normalize_path(self, path, expression):
        assert normalize_path(path) == expression

    def test_find_values(self):
        assert JSONPathMatcher.find_values({"a": [{"b": 1}, {"b": 2}]}, "a[*].b") == [1, 2]

    def test_evaluate_no_match(self):
        assert JSONPathMatcher.evaluate({"a": 1}, "b") is None
