"""Strict structural equality pass with validator redirection."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .models import EngineConfig, Mismatch, MismatchType, MISSING
from .validators import Validator
from .utils import build_path, json_kind, values_equal, format_value

logger = logging.getLogger(__name__)


class Differ:
    """
    Compares a stripped expected document against the actual document.

    Paths that carry a validator are judged by that validator instead of by
    literal equality. Every failing path is accumulated into ``mismatches``;
    the walk never stops at the first failure.
    """

    def __init__(
        self,
        validators: Optional[dict[str, Validator]] = None,
        config: Optional[EngineConfig] = None
    ):
        self.validators = validators or {}
        self.config = config or EngineConfig()

        self.mismatches: list[Mismatch] = []
        self.fields_checked = 0
        self.validators_applied = 0

    def diff(self, expected: Any, actual: Any, path: str = "") -> bool:
        """
        Perform deep comparison.

        Args:
            expected: The stripped expected value
            actual: The actual value, or MISSING if the field is absent
            path: Current field path

        Returns:
            True if values match, False otherwise
        """
        validator = self.validators.get(path)
        if validator is not None:
            return self._apply_validator(validator, actual, path)

        if actual is MISSING:
            self._add_mismatch(
                path=path,
                mismatch_type=MismatchType.MISSING_FIELD,
                expected=expected,
                actual=MISSING,
                message=f"Expected {format_value(expected)} but field is missing"
            )
            return False

        if isinstance(expected, dict):
            if not isinstance(actual, dict):
                return self._type_mismatch(expected, actual, path)
            return self._diff_objects(expected, actual, path)

        if isinstance(expected, list):
            if not isinstance(actual, list):
                return self._type_mismatch(expected, actual, path)
            return self._diff_arrays(expected, actual, path)

        return self._diff_scalars(expected, actual, path)

    def _apply_validator(self, validator: Validator, actual: Any, path: str) -> bool:
        self.fields_checked += 1
        self.validators_applied += 1

        if validator(actual):
            logger.debug("Validator %s passed at %s", validator.describe(), path or "$")
            return True

        self._add_mismatch(
            path=path,
            mismatch_type=MismatchType.VALIDATOR_FAILED,
            expected=validator.describe(),
            actual=actual,
            message=f"Validator {validator.describe()} rejected {format_value(actual)}",
            rule=validator.kind.value
        )
        return False

    def _diff_objects(self, expected: dict, actual: dict, path: str) -> bool:
        """Compare two objects; only expected-declared fields are required."""
        all_match = True

        for key, value in expected.items():
            if not self.diff(value, actual.get(key, MISSING), build_path(path, key)):
                all_match = False

        if not self.config.ignore_extra_fields:
            for key, value in actual.items():
                if key in expected:
                    continue
                self._add_mismatch(
                    path=build_path(path, key),
                    mismatch_type=MismatchType.EXTRA_FIELD,
                    expected=MISSING,
                    actual=value,
                    message=f"Unexpected field with value {format_value(value)}"
                )
                all_match = False

        return all_match

    def _diff_arrays(self, expected: list, actual: list, path: str) -> bool:
        """Compare arrays index-by-index (order matters)."""
        all_match = True

        if self.config.check_array_length and len(expected) != len(actual):
            self._add_mismatch(
                path=path,
                mismatch_type=MismatchType.ARRAY_LENGTH_MISMATCH,
                expected=len(expected),
                actual=len(actual),
                message=f"Array length mismatch: expected {len(expected)}, got {len(actual)}"
            )
            all_match = False

        for i in range(min(len(expected), len(actual))):
            if not self.diff(expected[i], actual[i], build_path(path, i)):
                all_match = False

        return all_match

    def _diff_scalars(self, expected: Any, actual: Any, path: str) -> bool:
        self.fields_checked += 1

        if json_kind(expected) != json_kind(actual):
            return self._type_mismatch(expected, actual, path)

        if values_equal(expected, actual):
            return True

        self._add_mismatch(
            path=path,
            mismatch_type=MismatchType.VALUE_MISMATCH,
            expected=expected,
            actual=actual,
            message=f"Expected {format_value(expected)} but got {format_value(actual)}"
        )
        return False

    def _type_mismatch(self, expected: Any, actual: Any, path: str) -> bool:
        self._add_mismatch(
            path=path,
            mismatch_type=MismatchType.TYPE_MISMATCH,
            expected=expected,
            actual=actual,
            message=f"Type mismatch: expected {json_kind(expected)} but got {json_kind(actual)}"
        )
        return False

    def _add_mismatch(
        self,
        path: str,
        mismatch_type: MismatchType,
        expected: Any,
        actual: Any,
        message: str,
        rule: str = None
    ):
        self.mismatches.append(Mismatch(
            path=path,
            type=mismatch_type,
            expected=expected,
            actual=actual,
            message=message,
            rule=rule
        ))
