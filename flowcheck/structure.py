"""Structural walk of an expected document: validator collection and directive stripping."""

from __future__ import annotations

from typing import Any

from .directives import parse_directive, placeholder_for
from .validators import Validator
from .utils import build_path


class StructuralComparator:
    """
    Walks an expected tree and an actual tree in lock-step.

    The walk is driven by the expected side: only fields the expected
    document declares are visited, and a directive stops the descent at its
    path. Arrays are walked by index up to the shorter of the two lengths.
    """

    def collect(self, expected: Any, actual: Any) -> dict[str, Validator]:
        """
        Collect every path-scoped validator declared by the expected document.

        Args:
            expected: Parsed expected document (may contain directives)
            actual: Parsed actual document

        Returns:
            Mapping of field path to the Validator registered there
        """
        validators: dict[str, Validator] = {}
        self._collect(expected, actual, "", validators)
        return validators

    def _collect(
        self,
        expected: Any,
        actual: Any,
        path: str,
        validators: dict[str, Validator]
    ):
        directive = parse_directive(expected)
        if directive is not None:
            validators[path] = Validator(directive)
            return

        if isinstance(expected, dict) and isinstance(actual, dict):
            # An absent actual child still registers a directive found at that key
            for key, value in expected.items():
                self._collect(value, actual.get(key), build_path(path, key), validators)

        elif isinstance(expected, list) and isinstance(actual, list):
            for i in range(min(len(expected), len(actual))):
                self._collect(expected[i], actual[i], build_path(path, i), validators)

    def strip_directives(self, expected: Any) -> Any:
        """
        Return a copy of the expected document with every directive replaced by its placeholder.

        The result contains no directives, so stripping twice gives the same
        document as stripping once.
        """
        directive = parse_directive(expected)
        if directive is not None:
            return placeholder_for(directive)
        if isinstance(expected, dict):
            return {key: self.strip_directives(value) for key, value in expected.items()}
        if isinstance(expected, list):
            return [self.strip_directives(item) for item in expected]
        return expected


def collect_validators(expected: Any, actual: Any) -> dict[str, Validator]:
    return StructuralComparator().collect(expected, actual)


def strip_directives(expected: Any) -> Any:
    return StructuralComparator().strip_directives(expected)
