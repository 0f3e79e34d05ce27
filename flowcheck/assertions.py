"""Assertion helpers that raise AssertionError with the full mismatch report."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from .engine import SmartJsonEngine
from .flexible import CompareOptions, FlexibleComparator
from .models import ComparisonResult, EngineConfig


def assert_json(expected: Any, actual: Any, config: Optional[EngineConfig] = None) -> ComparisonResult:
    """Assert that ``actual`` satisfies the directive template ``expected``."""
    result = SmartJsonEngine(config).compare(expected, actual)
    result.raise_for_mismatch()
    return result


def assert_with_expected_file(
    actual: Any,
    expected_path: str | Path,
    config: Optional[EngineConfig] = None
) -> ComparisonResult:
    """Load the expected template from a file, then assert as ``assert_json`` does."""
    path = Path(expected_path)
    if not path.exists():
        raise FileNotFoundError(f"Expected file not found: {path}")
    return assert_json(path.read_text(encoding='utf-8'), actual, config)


def assert_flexible(
    expected: Any,
    actual: Any,
    options: Optional[CompareOptions] = None
) -> ComparisonResult:
    result = FlexibleComparator(options).compare(expected, actual)
    result.raise_for_mismatch()
    return result


def assert_strict_match(expected: Any, actual: Any) -> ComparisonResult:
    """Every field must match, no extra fields, arrays in order."""
    return assert_flexible(expected, actual, CompareOptions())


def assert_lenient_match(expected: Any, actual: Any) -> ComparisonResult:
    """Array order is ignored and the actual document may carry extra fields."""
    return assert_flexible(expected, actual, CompareOptions().ignore_order().allow_extra())
