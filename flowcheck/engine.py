"""Directive-based comparison engine."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .models import EngineConfig, ComparisonResult
from .structure import StructuralComparator
from .differ import Differ
from .utils import load_json

logger = logging.getLogger(__name__)


class SmartJsonEngine:
    """
    Validates an actual JSON document against an expected template.

    The expected template may hold directives such as ``${not-null}`` or
    ``${range:1,10}`` in place of literal values. A comparison runs in
    three stages:

    1. Validator collection: walk expected and actual together and register
       a validator at every directive path
    2. Stripping: replace every directive with a type-appropriate placeholder
    3. Diffing: strict structural equality, with directive paths judged by
       their validators

    Every failing path is reported; there is no fail-fast.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        self.structure = StructuralComparator()

    def compare(self, expected: Any, actual: Any) -> ComparisonResult:
        """
        Compare an actual document against an expected template.

        Args:
            expected: Expected JSON text or parsed tree, possibly with directives
            actual: Actual JSON text or parsed tree

        Returns:
            ComparisonResult listing every mismatch

        Raises:
            JsonParseError: if either document is not valid JSON
            DirectiveError: if a directive carries an invalid parameter
        """
        actual_tree = load_json(actual, "actual document")
        expected_tree = load_json(expected, "expected document")

        validators = self.structure.collect(expected_tree, actual_tree)
        cleaned = self.structure.strip_directives(expected_tree)

        differ = Differ(validators, self.config)
        is_match = differ.diff(cleaned, actual_tree)

        result = ComparisonResult(
            is_match=is_match and not differ.mismatches,
            mismatches=differ.mismatches,
            fields_checked=differ.fields_checked,
            validators_applied=differ.validators_applied
        )

        if result.is_match:
            logger.debug(
                "Comparison matched (%d fields, %d validators)",
                result.fields_checked, result.validators_applied
            )
        else:
            logger.debug("Comparison found %d mismatches", len(result.mismatches))

        return result


def compare(
    expected: Any,
    actual: Any,
    config: Optional[EngineConfig] = None
) -> ComparisonResult:
    """
    Convenience function to compare two JSON documents.

    Args:
        expected: Expected template (text or parsed)
        actual: Actual document (text or parsed)
        config: Optional engine configuration

    Returns:
        ComparisonResult
    """
    engine = SmartJsonEngine(config)
    return engine.compare(expected, actual)
