"""Data models for flowcheck."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class MismatchType(Enum):
    VALUE_MISMATCH = "VALUE_MISMATCH"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    MISSING_FIELD = "MISSING_FIELD"
    EXTRA_FIELD = "EXTRA_FIELD"
    ARRAY_LENGTH_MISMATCH = "ARRAY_LENGTH_MISMATCH"
    ARRAY_ITEM_UNMATCHED = "ARRAY_ITEM_UNMATCHED"
    VALIDATOR_FAILED = "VALIDATOR_FAILED"
    CUSTOM_COMPARATOR_FAILED = "CUSTOM_COMPARATOR_FAILED"


class _Missing:
    """Stands in for a field that is structurally absent from the actual document."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "<missing>"

    def __bool__(self):
        return False


MISSING = _Missing()


@dataclass
class EngineConfig:
    """Configuration for the directive comparison engine."""
    ignore_extra_fields: bool = True
    check_array_length: bool = True


@dataclass
class Mismatch:
    """A single failing path found during comparison."""
    path: str
    type: MismatchType
    expected: Any
    actual: Any
    message: str
    rule: Optional[str] = None

    def describe(self) -> str:
        return f"{self.path or '$'}: {self.message}"

    def to_dict(self) -> dict:
        return {
            "path": self.path or "$",
            "type": self.type.value,
            "expected": None if self.expected is MISSING else self.expected,
            "actual": None if self.actual is MISSING else self.actual,
            "message": self.message,
            "rule": self.rule,
        }


@dataclass
class ComparisonResult:
    """Outcome of one comparison: a match, or every failing path found in one pass."""
    is_match: bool
    mismatches: list[Mismatch] = field(default_factory=list)
    fields_checked: int = 0
    validators_applied: int = 0

    @property
    def message(self) -> str:
        return "\n".join(m.describe() for m in self.mismatches)

    @property
    def paths(self) -> list[str]:
        return [m.path for m in self.mismatches]

    def raise_for_mismatch(self, header: str = "JSON comparison failed"):
        if not self.is_match:
            raise AssertionError(f"{header}:\n{self.message}")

    def to_dict(self) -> dict:
        return {
            "is_match": self.is_match,
            "summary": {
                "fields_checked": self.fields_checked,
                "validators_applied": self.validators_applied,
                "mismatches_found": len(self.mismatches),
            },
            "mismatches": [m.to_dict() for m in self.mismatches],
        }


@dataclass(frozen=True)
class ExtractionRule:
    """One ``name:path`` pair of an extraction spec."""
    name: str
    path: str
