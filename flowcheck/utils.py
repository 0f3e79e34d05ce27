"""Utility functions for flowcheck."""

from __future__ import annotations

import re
import json
from typing import Any, Optional

from .exceptions import JsonParseError


_IDENTIFIER = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_]*$')


def load_json(document: Any, label: str = "document") -> Any:
    """
    Parse JSON text into a tree; already-parsed trees pass through.

    Args:
        document: JSON text (str or bytes) or a parsed JSON value
        label: Name used in the error message

    Returns:
        The parsed JSON value
    """
    if isinstance(document, (bytes, bytearray)):
        document = document.decode('utf-8')
    if not isinstance(document, str):
        return document

    try:
        return json.loads(document)
    except json.JSONDecodeError as e:
        raise JsonParseError(
            f"Invalid JSON in {label}: {e.msg}",
            line=e.lineno,
            column=e.colno,
            reason=e.msg
        )


def build_path(parent_path: str, key: str | int) -> str:
    """Build a field path from parent path and key."""
    if isinstance(key, int):
        return f"{parent_path}[{key}]"
    if not _IDENTIFIER.match(str(key)):
        return f"{parent_path}['{key}']"
    if not parent_path:
        return str(key)
    return f"{parent_path}.{key}"


def is_numeric(value: Any) -> bool:
    """Check if a value is numeric (int or float)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_container(value: Any) -> bool:
    return isinstance(value, (dict, list))


def get_type_name(value: Any) -> str:
    """Get a friendly type name for a value."""
    if value is None:
        return "null"
    elif isinstance(value, bool):
        return "boolean"
    elif isinstance(value, int):
        return "integer"
    elif isinstance(value, float):
        return "number"
    elif isinstance(value, str):
        return "string"
    elif isinstance(value, list):
        return "array"
    elif isinstance(value, dict):
        return "object"
    else:
        return type(value).__name__


def json_kind(value: Any) -> str:
    """Like get_type_name, but integers and floats share the 'number' kind."""
    name = get_type_name(value)
    return "number" if name == "integer" else name


def values_equal(expected: Any, actual: Any) -> bool:
    """Check if two JSON scalars are equal (int/float compare numerically, bools never equal numbers)."""
    if isinstance(expected, bool) or isinstance(actual, bool):
        return isinstance(expected, bool) and isinstance(actual, bool) and expected == actual

    if is_numeric(expected) and is_numeric(actual):
        return float(expected) == float(actual)

    if type(expected) != type(actual):
        return False

    return expected == actual


def to_text(value: Any) -> str:
    """Render a JSON value the way it reads in JSON text; strings stay unquoted."""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def to_number(value: Any) -> Optional[float]:
    """Coerce numbers and numeric strings to float; anything else yields None."""
    if isinstance(value, bool):
        return None
    if is_numeric(value):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def format_value(value: Any) -> str:
    """Format a value for a failure message."""
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(value)
