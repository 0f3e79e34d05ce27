"""Directive grammar: the ``${...}`` tokens an expected document may carry instead of a literal."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .exceptions import DirectiveError


OPEN = "${"
CLOSE = "}"


class DirectiveKind(Enum):
    # Bare keywords
    IGNORE = "ignore"
    NOT_NULL = "not-null"
    NULL = "null"
    NOT_EMPTY = "not-empty"
    IS_NUMBER = "is-number"
    IS_STRING = "is-string"
    IS_BOOLEAN = "is-boolean"
    IS_ARRAY = "is-array"
    IS_OBJECT = "is-object"
    IS_EMAIL = "is-email"
    IS_PHONE = "is-phone"
    IS_ID_CARD = "is-id-card"
    IS_URL = "is-url"
    IS_IP = "is-ip"
    IS_UUID = "is-uuid"
    IS_DATE = "is-date"
    IS_DATETIME = "is-datetime"
    IS_TIMESTAMP = "is-timestamp"
    # Parameterized, written prefix:payload
    MATCHES = "matches"
    IN = "in"
    GT = "gt"
    LT = "lt"
    GTE = "gte"
    LTE = "lte"
    LENGTH = "length"
    RANGE = "range"

    @property
    def parameterized(self) -> bool:
        return self in _PARAMETERIZED


_PARAMETERIZED = frozenset({
    DirectiveKind.MATCHES,
    DirectiveKind.IN,
    DirectiveKind.GT,
    DirectiveKind.LT,
    DirectiveKind.GTE,
    DirectiveKind.LTE,
    DirectiveKind.LENGTH,
    DirectiveKind.RANGE,
})

_NUMERIC_KINDS = frozenset({
    DirectiveKind.IS_NUMBER,
    DirectiveKind.RANGE,
    DirectiveKind.GT,
    DirectiveKind.GTE,
    DirectiveKind.LT,
    DirectiveKind.LTE,
})


def _normalize(name: str) -> str:
    """'not-null', 'notNull' and 'not_null' all normalize to 'notnull'."""
    return name.strip().lower().replace("-", "").replace("_", "")


_LOOKUP = {_normalize(kind.value): kind for kind in DirectiveKind}


@dataclass(frozen=True)
class Directive:
    """
    A parsed directive.

    ``argument`` depends on ``kind``: a compiled pattern for MATCHES, a
    frozenset of strings for IN, a float threshold for GT/LT/GTE/LTE, and a
    (min, max) tuple for LENGTH (ints) and RANGE (floats). Bare keywords
    carry no argument.
    """
    kind: DirectiveKind
    raw: str
    argument: Any = None


def _parse_float(raw: str, text: str) -> float:
    try:
        return float(text.strip())
    except ValueError:
        raise DirectiveError(raw, f"'{text}' is not a number")


def _parse_int(raw: str, text: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        raise DirectiveError(raw, f"'{text}' is not an integer")


def _parse_matches(raw: str, payload: str):
    try:
        return re.compile(payload)
    except re.error as e:
        raise DirectiveError(raw, f"invalid regular expression: {e}")


def _parse_in(raw: str, payload: str) -> frozenset:
    return frozenset(value.strip() for value in payload.split(","))


def _parse_length(raw: str, payload: str) -> tuple[int, int]:
    parts = payload.split(",")
    if len(parts) > 2:
        raise DirectiveError(raw, "expected <min>[,<max>]")
    low = _parse_int(raw, parts[0])
    high = _parse_int(raw, parts[1]) if len(parts) > 1 else low
    if low < 0 or high < low:
        raise DirectiveError(raw, f"invalid length bounds {low},{high}")
    return low, high


def _parse_range(raw: str, payload: str) -> tuple[float, float]:
    parts = payload.split(",")
    if len(parts) != 2:
        raise DirectiveError(raw, "expected <min>,<max>")
    low = _parse_float(raw, parts[0])
    high = _parse_float(raw, parts[1])
    if high < low:
        raise DirectiveError(raw, f"min {parts[0].strip()} is greater than max {parts[1].strip()}")
    return low, high


_PAYLOAD_PARSERS = {
    DirectiveKind.MATCHES: _parse_matches,
    DirectiveKind.IN: _parse_in,
    DirectiveKind.GT: lambda raw, payload: _parse_float(raw, payload),
    DirectiveKind.LT: lambda raw, payload: _parse_float(raw, payload),
    DirectiveKind.GTE: lambda raw, payload: _parse_float(raw, payload),
    DirectiveKind.LTE: lambda raw, payload: _parse_float(raw, payload),
    DirectiveKind.LENGTH: _parse_length,
    DirectiveKind.RANGE: _parse_range,
}


def looks_like_directive(value: Any) -> bool:
    """Check for the reserved bracket syntax, without checking the keyword."""
    return (
        isinstance(value, str)
        and len(value) > len(OPEN)
        and value.startswith(OPEN)
        and value.endswith(CLOSE)
    )


def parse_directive(value: Any) -> Optional[Directive]:
    """
    Parse a candidate expected-side value.

    Returns None when the value is not a directive, including bracketed
    strings whose keyword or prefix is unknown, so such strings are compared
    literally. A known prefix with a bad payload raises DirectiveError.
    """
    if not looks_like_directive(value):
        return None

    body = value[len(OPEN):-len(CLOSE)]
    head, sep, payload = body.partition(":")
    kind = _LOOKUP.get(_normalize(head))
    if kind is None:
        return None

    if not sep:
        if kind.parameterized:
            return None
        return Directive(kind=kind, raw=value)

    if not kind.parameterized:
        return None
    return Directive(kind=kind, raw=value, argument=_PAYLOAD_PARSERS[kind](value, payload))


def is_directive(value: Any) -> bool:
    return parse_directive(value) is not None


def placeholder_for(directive: Directive) -> Any:
    """Type-appropriate value that replaces a directive in the stripped expected document."""
    kind = directive.kind
    if kind in (DirectiveKind.IS_ARRAY, DirectiveKind.NOT_EMPTY, DirectiveKind.IGNORE):
        return []
    if kind == DirectiveKind.IS_OBJECT:
        return {}
    if kind in _NUMERIC_KINDS:
        return 0
    if kind == DirectiveKind.IS_BOOLEAN:
        return False
    if kind == DirectiveKind.NULL:
        return None
    return ""
