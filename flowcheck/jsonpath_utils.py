"""JSONPath utilities for response extraction."""

from __future__ import annotations

from typing import Any

from jsonpath_ng import parse as jsonpath_parse
from jsonpath_ng.exceptions import JSONPathError

from .exceptions import InvalidPathError, JsonParseError
from .utils import load_json


def normalize_path(path: str) -> str:
    """Turn a dotted response path (``data.order.id``) into a JSONPath expression."""
    path = path.strip()
    if not path or path == "$":
        return "$"
    if path.startswith("$"):
        return path
    if path.startswith("["):
        return "$" + path
    return "$." + path


class JSONPathMatcher:
    """Compiles and evaluates path expressions against parsed JSON."""

    # Cache for compiled JSONPath expressions
    _cache: dict = {}

    @classmethod
    def compile(cls, path: str):
        """Compile and cache a JSONPath expression."""
        expression = normalize_path(path)
        if expression not in cls._cache:
            try:
                cls._cache[expression] = jsonpath_parse(expression)
            except JSONPathError as e:
                raise InvalidPathError(path, str(e))
        return cls._cache[expression]

    @classmethod
    def find_values(cls, data: Any, path: str) -> list[Any]:
        """Find all values matching a path expression."""
        expr = cls.compile(path)
        return [m.value for m in expr.find(data)]

    @classmethod
    def evaluate(cls, data: Any, path: str) -> Any:
        """
        Evaluate a path the way a response path lookup does.

        Returns the single matched value, a list when the path matches
        several nodes, or None when nothing matches.
        """
        values = cls.find_values(data, path)
        if not values:
            return None
        if len(values) == 1:
            return values[0]
        return values


def response_json(response: Any) -> Any:
    """
    Parsed JSON body of a response.

    Accepts anything with a ``json()`` method (an HTTP client response),
    JSON text or bytes, or an already-parsed tree.
    """
    json_method = getattr(response, "json", None)
    if callable(json_method):
        # HTTP clients raise ValueError subclasses for non-JSON bodies
        try:
            return json_method()
        except ValueError as e:
            raise JsonParseError(f"Invalid JSON in response body: {e}", reason=str(e))
    return load_json(response, "response body")
