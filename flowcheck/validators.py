"""Value validators: one predicate per directive, applied to a single actual value."""

from __future__ import annotations

import re
from typing import Any, Callable, Optional

from .directives import Directive, DirectiveKind, parse_directive
from .models import MISSING
from .utils import is_numeric, to_number, to_text


EMAIL_PATTERN = re.compile(r'^[A-Za-z0-9+_.-]+@([A-Za-z0-9-]+\.)+[A-Za-z]{2,6}$')
PHONE_PATTERN = re.compile(r'^1[3-9]\d{9}$')
ID_CARD_PATTERN = re.compile(
    r'^[1-9]\d{5}(18|19|20)\d{2}(0[1-9]|1[0-2])(0[1-9]|[12]\d|3[01])\d{3}[\dXx]$'
)
URL_PATTERN = re.compile(r'^(https?|ftp)://[^\s/$.?#].[^\s]*$')
IP_PATTERN = re.compile(r'^(\d{1,3}\.){3}\d{1,3}$')
UUID_PATTERN = re.compile(
    r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$',
    re.IGNORECASE
)
DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')
DATETIME_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$')
TIMESTAMP_PATTERN = re.compile(r'^\d{13}$')

FORMAT_PATTERNS = {
    DirectiveKind.IS_EMAIL: EMAIL_PATTERN,
    DirectiveKind.IS_PHONE: PHONE_PATTERN,
    DirectiveKind.IS_ID_CARD: ID_CARD_PATTERN,
    DirectiveKind.IS_URL: URL_PATTERN,
    DirectiveKind.IS_IP: IP_PATTERN,
    DirectiveKind.IS_UUID: UUID_PATTERN,
    DirectiveKind.IS_DATE: DATE_PATTERN,
    DirectiveKind.IS_DATETIME: DATETIME_PATTERN,
    DirectiveKind.IS_TIMESTAMP: TIMESTAMP_PATTERN,
}


def _present(value: Any) -> bool:
    return value is not MISSING and value is not None


def _is_empty(value: Any) -> bool:
    return value == "" or value == [] or value == {}


def _pattern_check(pattern: re.Pattern) -> Callable[[Any], bool]:
    return lambda value: _present(value) and pattern.fullmatch(to_text(value)) is not None


def _numeric_check(test: Callable[[float], bool]) -> Callable[[Any], bool]:
    def check(value: Any) -> bool:
        if not _present(value):
            return False
        number = to_number(value)
        return number is not None and test(number)
    return check


def _build_predicate(directive: Directive) -> Callable[[Any], bool]:
    kind = directive.kind
    arg = directive.argument

    if kind == DirectiveKind.IGNORE:
        return lambda value: True
    if kind == DirectiveKind.NOT_NULL:
        return _present
    if kind == DirectiveKind.NULL:
        return lambda value: value is None
    if kind == DirectiveKind.NOT_EMPTY:
        return lambda value: _present(value) and not _is_empty(value)
    if kind == DirectiveKind.IS_NUMBER:
        return is_numeric
    if kind == DirectiveKind.IS_STRING:
        return lambda value: isinstance(value, str)
    if kind == DirectiveKind.IS_BOOLEAN:
        return lambda value: isinstance(value, bool)
    if kind == DirectiveKind.IS_ARRAY:
        return lambda value: isinstance(value, list)
    if kind == DirectiveKind.IS_OBJECT:
        return lambda value: isinstance(value, dict)
    if kind in FORMAT_PATTERNS:
        return _pattern_check(FORMAT_PATTERNS[kind])
    if kind == DirectiveKind.MATCHES:
        return _pattern_check(arg)
    if kind == DirectiveKind.IN:
        return lambda value: _present(value) and to_text(value) in arg
    if kind == DirectiveKind.GT:
        return _numeric_check(lambda number: number > arg)
    if kind == DirectiveKind.LT:
        return _numeric_check(lambda number: number < arg)
    if kind == DirectiveKind.GTE:
        return _numeric_check(lambda number: number >= arg)
    if kind == DirectiveKind.LTE:
        return _numeric_check(lambda number: number <= arg)
    if kind == DirectiveKind.LENGTH:
        low, high = arg
        return lambda value: _present(value) and low <= len(to_text(value)) <= high
    if kind == DirectiveKind.RANGE:
        low, high = arg
        return _numeric_check(lambda number: low <= number <= high)

    raise ValueError(f"No validator for directive kind {kind}")


class Validator:
    """
    Predicate created once per directive occurrence.

    All parameters are closed over at creation time; calling the validator
    never raises for odd actual values, it just returns False.
    """

    def __init__(self, directive: Directive):
        self.directive = directive
        self._predicate = _build_predicate(directive)

    @property
    def kind(self) -> DirectiveKind:
        return self.directive.kind

    def __call__(self, value: Any) -> bool:
        return bool(self._predicate(value))

    def describe(self) -> str:
        return self.directive.raw

    def __repr__(self):
        return f"Validator({self.directive.raw!r})"


def create_validator(directive: Directive) -> Validator:
    return Validator(directive)


def validator_for(value: Any) -> Optional[Validator]:
    """Validator for a candidate expected value, or None if it is not a directive."""
    directive = parse_directive(value)
    if directive is None:
        return None
    return Validator(directive)
