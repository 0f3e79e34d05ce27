"""Flexible comparison engine with per-path ignores and custom comparators."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .models import ComparisonResult, Mismatch, MismatchType, MISSING
from .utils import build_path, is_container, json_kind, get_type_name, load_json, format_value

logger = logging.getLogger(__name__)

Predicate = Callable[[Any, Any], bool]


@dataclass
class CompareOptions:
    """Comparison options, assembled by the caller before comparing."""
    ignored_paths: set[str] = field(default_factory=set)
    comparators: dict[str, Predicate] = field(default_factory=dict)
    ignore_array_order: bool = False
    allow_extra_fields: bool = False

    def ignore_field(self, path: str) -> 'CompareOptions':
        self.ignored_paths.add(path)
        return self

    def with_comparator(self, path: str, predicate: Predicate) -> 'CompareOptions':
        self.comparators[path] = predicate
        return self

    def ignore_order(self) -> 'CompareOptions':
        self.ignore_array_order = True
        return self

    def allow_extra(self) -> 'CompareOptions':
        self.allow_extra_fields = True
        return self


class FlexibleComparator:
    """
    Compares two JSON trees walked jointly from both sides.

    Per path, in order of precedence:
    - an ignored path always matches
    - a custom comparator decides the whole subtree
    - scalars compare literally, objects field by field, arrays by index or,
      when array order is ignored, by greedy first-fit matching

    Greedy matching takes, for each expected element, the first remaining
    actual element that compares equal. It is not a maximum matching, and
    fixtures may rely on its first-fit order.
    """

    def __init__(self, options: Optional[CompareOptions] = None):
        self.options = options or CompareOptions()

    def compare(self, expected: Any, actual: Any) -> ComparisonResult:
        expected_tree = load_json(expected, "expected document")
        actual_tree = load_json(actual, "actual document")

        mismatches: list[Mismatch] = []
        is_match = self._compare(expected_tree, actual_tree, "", mismatches)
        return ComparisonResult(
            is_match=is_match and not mismatches,
            mismatches=mismatches
        )

    def _compare(self, expected: Any, actual: Any, path: str, errors: list[Mismatch]) -> bool:
        if path in self.options.ignored_paths:
            return True

        predicate = self.options.comparators.get(path)
        if predicate is not None:
            if predicate(expected, actual):
                return True
            errors.append(Mismatch(
                path=path,
                type=MismatchType.CUSTOM_COMPARATOR_FAILED,
                expected=expected,
                actual=actual,
                message="Custom comparison failed",
                rule=getattr(predicate, '__name__', None)
            ))
            return False

        if not is_container(expected) and not is_container(actual):
            # Literal: 1 and 1.0 differ, unlike the directive engine
            if get_type_name(expected) == get_type_name(actual) and expected == actual:
                return True
            errors.append(Mismatch(
                path=path,
                type=MismatchType.VALUE_MISMATCH,
                expected=expected,
                actual=actual,
                message=f"Value mismatch - expected: {format_value(expected)}, "
                        f"actual: {format_value(actual)}"
            ))
            return False

        if isinstance(expected, dict) and isinstance(actual, dict):
            return self._compare_objects(expected, actual, path, errors)

        if isinstance(expected, list) and isinstance(actual, list):
            return self._compare_arrays(expected, actual, path, errors)

        errors.append(Mismatch(
            path=path,
            type=MismatchType.TYPE_MISMATCH,
            expected=expected,
            actual=actual,
            message=f"Type mismatch - expected: {json_kind(expected)}, actual: {json_kind(actual)}"
        ))
        return False

    def _compare_objects(self, expected: dict, actual: dict, path: str, errors: list[Mismatch]) -> bool:
        all_match = True

        for key, value in expected.items():
            child_path = build_path(path, key)
            if key not in actual:
                if child_path in self.options.ignored_paths:
                    continue
                errors.append(Mismatch(
                    path=child_path,
                    type=MismatchType.MISSING_FIELD,
                    expected=value,
                    actual=MISSING,
                    message="Field missing"
                ))
                all_match = False
                continue

            if not self._compare(value, actual[key], child_path, errors):
                all_match = False

        if not self.options.allow_extra_fields:
            for key, value in actual.items():
                child_path = build_path(path, key)
                if key in expected or child_path in self.options.ignored_paths:
                    continue
                errors.append(Mismatch(
                    path=child_path,
                    type=MismatchType.EXTRA_FIELD,
                    expected=MISSING,
                    actual=value,
                    message="Unexpected field"
                ))
                all_match = False

        return all_match

    def _compare_arrays(self, expected: list, actual: list, path: str, errors: list[Mismatch]) -> bool:
        if not self.options.ignore_array_order and len(expected) != len(actual):
            errors.append(Mismatch(
                path=path,
                type=MismatchType.ARRAY_LENGTH_MISMATCH,
                expected=len(expected),
                actual=len(actual),
                message=f"Array length mismatch - expected: {len(expected)}, actual: {len(actual)}"
            ))
            return False

        if self.options.ignore_array_order:
            return self._compare_unordered(expected, actual, path, errors)

        all_match = True
        for i, item in enumerate(expected):
            if not self._compare(item, actual[i], build_path(path, i), errors):
                all_match = False
        return all_match

    def _compare_unordered(self, expected: list, actual: list, path: str, errors: list[Mismatch]) -> bool:
        all_match = True
        remaining = list(actual)
        candidate_path = f"{path}[?]"

        for item in expected:
            for j, candidate in enumerate(remaining):
                # Trial comparisons must not leak into the report
                if self._compare(item, candidate, candidate_path, []):
                    del remaining[j]
                    break
            else:
                errors.append(Mismatch(
                    path=path,
                    type=MismatchType.ARRAY_ITEM_UNMATCHED,
                    expected=item,
                    actual=None,
                    message=f"No matching element for {format_value(item)}"
                ))
                all_match = False

        if remaining:
            logger.debug("%d unmatched actual elements at %s", len(remaining), path or "$")

        return all_match


def compare_flexible(
    expected: Any,
    actual: Any,
    options: Optional[CompareOptions] = None
) -> ComparisonResult:
    return FlexibleComparator(options).compare(expected, actual)
