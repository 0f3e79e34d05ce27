"""
flowcheck - Declarative API flow checks

Describes multi-step API interactions as data: request templates resolved
from generated values and values captured from earlier responses, and
expected responses validated by a directive-aware JSON comparison engine.
"""

from .engine import SmartJsonEngine, compare
from .flexible import FlexibleComparator, CompareOptions, compare_flexible
from .models import (
    EngineConfig,
    ComparisonResult,
    Mismatch,
    MismatchType,
    ExtractionRule,
    LogLevel,
    MISSING,
)
from .directives import Directive, DirectiveKind, parse_directive, is_directive
from .validators import Validator, create_validator, validator_for
from .structure import StructuralComparator, collect_validators, strip_directives
from .context import FlowContext
from .generators import GeneratorRegistry
from .resolver import ParameterResolver, parse_extraction_spec
from .assertions import (
    assert_json,
    assert_with_expected_file,
    assert_flexible,
    assert_strict_match,
    assert_lenient_match,
)
from .runner import (
    FlowRunner,
    FlowConfig,
    FlowReport,
    StepResult,
    StepStatus,
    load_flow,
    run_flow_file,
)
from .exceptions import (
    FlowCheckError,
    DirectiveError,
    JsonParseError,
    TemplateError,
    UndefinedVariableError,
    UnknownGeneratorError,
    InvalidPathError,
)

__version__ = "1.0.0"
__all__ = [
    # Comparison
    "SmartJsonEngine",
    "compare",
    "EngineConfig",
    "ComparisonResult",
    "Mismatch",
    "MismatchType",
    "MISSING",
    # Flexible comparison
    "FlexibleComparator",
    "CompareOptions",
    "compare_flexible",
    # Directives
    "Directive",
    "DirectiveKind",
    "parse_directive",
    "is_directive",
    "Validator",
    "create_validator",
    "validator_for",
    "StructuralComparator",
    "collect_validators",
    "strip_directives",
    # Assertions
    "assert_json",
    "assert_with_expected_file",
    "assert_flexible",
    "assert_strict_match",
    "assert_lenient_match",
    # Flow state
    "FlowContext",
    "GeneratorRegistry",
    "ParameterResolver",
    "ExtractionRule",
    "parse_extraction_spec",
    # Runner
    "FlowRunner",
    "FlowConfig",
    "FlowReport",
    "StepResult",
    "StepStatus",
    "LogLevel",
    "load_flow",
    "run_flow_file",
    # Errors
    "FlowCheckError",
    "DirectiveError",
    "JsonParseError",
    "TemplateError",
    "UndefinedVariableError",
    "UnknownGeneratorError",
    "InvalidPathError",
]
