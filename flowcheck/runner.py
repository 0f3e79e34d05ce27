"""Data-driven flow runner: resolve, send, extract, compare, row by row."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

import yaml

from .context import FlowContext
from .engine import SmartJsonEngine
from .exceptions import FlowCheckError
from .generators import GeneratorRegistry
from .jsonpath_utils import response_json
from .models import ComparisonResult, EngineConfig, LogLevel
from .resolver import ParameterResolver

logger = logging.getLogger(__name__)

# transport(row, body) -> response; the runner never does I/O itself
Transport = Callable[[dict, Any], Any]

_LOGGING_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


def _parse_log_level(value: Any) -> LogLevel:
    name = str(value).strip().upper()
    if name == "WARNING":
        return LogLevel.WARN
    try:
        return LogLevel(name)
    except ValueError:
        allowed = ", ".join(level.value for level in LogLevel)
        raise ValueError(f"Invalid logLevel '{value}': expected one of {allowed}") from None


class StepStatus(Enum):
    PASSED = "PASSED"
    FAILED = "FAILED"
    ERROR = "ERROR"
    SKIPPED = "SKIPPED"


@dataclass
class FlowConfig:
    """Column names and failure policy for a flow run."""
    request_field: str = "requestBody"
    extract_field: str = "responseExtracts"
    expected_field: str = "expectedResponse"
    name_field: str = "caseName"
    stop_on_error: bool = False
    clear_context: bool = True
    log_level: LogLevel = LogLevel.INFO

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'FlowConfig':
        """Build a config from the ``config`` section of a flow file."""
        data = data or {}
        return cls(
            request_field=data.get('requestField', 'requestBody'),
            extract_field=data.get('extractField', 'responseExtracts'),
            expected_field=data.get('expectedField', 'expectedResponse'),
            name_field=data.get('nameField', 'caseName'),
            stop_on_error=bool(data.get('stopOnError', False)),
            clear_context=bool(data.get('clearContext', True)),
            log_level=_parse_log_level(data.get('logLevel', 'INFO'))
        )

    def apply_log_level(self):
        logging.getLogger("flowcheck").setLevel(_LOGGING_LEVELS[self.log_level])


@dataclass
class StepResult:
    """Result of a single flow step."""
    index: int
    name: str
    status: StepStatus
    request: Any = None
    response: Any = None
    extracted: dict[str, Any] = field(default_factory=dict)
    comparison: Optional[ComparisonResult] = None
    error: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status == StepStatus.PASSED

    def to_dict(self) -> dict:
        result = {
            "index": self.index,
            "name": self.name,
            "status": self.status.value,
        }
        if self.extracted:
            result["extracted"] = self.extracted
        if self.comparison:
            result["comparison"] = self.comparison.to_dict()
        if self.error:
            result["error"] = self.error
        return result


@dataclass
class FlowReport:
    """Report across all steps of one flow."""
    name: str = "flow"
    total: int = 0
    passed: int = 0
    failed: int = 0
    errors: int = 0
    skipped: int = 0
    steps: list[StepResult] = field(default_factory=list)
    context: dict[str, Any] = field(default_factory=dict)
    timestamp: str = ""

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')

    @property
    def succeeded(self) -> bool:
        return self.total > 0 and self.passed == self.total

    def add(self, step: StepResult):
        self.steps.append(step)
        self.total += 1
        if step.status == StepStatus.PASSED:
            self.passed += 1
        elif step.status == StepStatus.FAILED:
            self.failed += 1
        elif step.status == StepStatus.ERROR:
            self.errors += 1
        else:
            self.skipped += 1

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "timestamp": self.timestamp,
            "summary": {
                "total_steps": self.total,
                "passed": self.passed,
                "failed": self.failed,
                "errors": self.errors,
                "skipped": self.skipped,
            },
            "context": self.context,
            "steps": [s.to_dict() for s in self.steps],
        }

    def print_summary(self):
        print(f"\nFlow {self.name}: {self.passed}/{self.total} steps passed")
        for step in self.steps:
            print(f"  {step.status.value}: {step.name}")
            if step.error:
                print(f"    {step.error}")
            elif step.comparison and not step.comparison.is_match:
                for line in step.comparison.message.splitlines():
                    print(f"    {line}")


@dataclass
class FlowDefinition:
    """A flow loaded from file: its rows plus run configuration."""
    name: str
    config: FlowConfig
    steps: list[dict[str, Optional[str]]]


def _cell_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def load_flow(path: str | Path) -> FlowDefinition:
    """
    Load a flow from a YAML or JSON file.

    The file holds ``name``, an optional ``config`` section and a ``steps``
    list. Structured cells (e.g. a request body written as a mapping) are
    serialized to JSON text so every row is a mapping of column to text.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Flow file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        content = f.read()

    # YAML also handles JSON since JSON is valid YAML
    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse flow file: {e}")

    if not isinstance(data, dict) or not isinstance(data.get('steps', []), list):
        raise ValueError(f"Flow file must be a mapping with a 'steps' list: {path}")

    steps = [
        {str(column): _cell_text(value) for column, value in row.items()}
        for row in data.get('steps', [])
    ]
    return FlowDefinition(
        name=data.get('name', path.stem),
        config=FlowConfig.from_dict(data.get('config')),
        steps=steps
    )


class FlowRunner:
    """
    Runs flow rows strictly in order against a caller-supplied transport.

    Usage:
        runner = FlowRunner(lambda row, body: session.post(row["url"], json=body))
        report = runner.run(rows)
    """

    def __init__(
        self,
        transport: Transport,
        config: Optional[FlowConfig] = None,
        generators: Optional[GeneratorRegistry] = None,
        engine_config: Optional[EngineConfig] = None
    ):
        self.transport = transport
        self.config = config or FlowConfig()
        self.generators = generators or GeneratorRegistry()
        self.engine = SmartJsonEngine(engine_config)

    def run(
        self,
        rows: Iterable[dict],
        context: Optional[FlowContext] = None,
        name: str = "flow"
    ) -> FlowReport:
        """
        Run every row of a flow.

        Args:
            rows: Ordered rows, each a mapping of column name to text
            context: Context to run in (a fresh one by default)
            name: Flow name for the report

        Returns:
            FlowReport with one StepResult per row
        """
        self.config.apply_log_level()
        context = context if context is not None else FlowContext()
        resolver = ParameterResolver(context, self.generators)
        report = FlowReport(name=name)
        broken = False

        for index, row in enumerate(rows):
            if broken:
                report.add(StepResult(index, self._step_name(row, index), StepStatus.SKIPPED))
                continue

            result = self.run_step(row, index, resolver)
            report.add(result)
            if result.status == StepStatus.ERROR and self.config.stop_on_error:
                logger.warning("Flow %s stopped at step %s", name, result.name)
                broken = True

        report.context = context.snapshot()
        if self.config.clear_context:
            context.clear()

        logger.info("Flow %s: %d/%d steps passed", name, report.passed, report.total)
        return report

    def run_step(self, row: dict, index: int, resolver: ParameterResolver) -> StepResult:
        """Resolve, send, extract and compare one row."""
        name = self._step_name(row, index)

        try:
            body = resolver.resolve_request(row.get(self.config.request_field))
        except FlowCheckError as e:
            logger.warning("Step %s: request could not be built: %s", name, e)
            return StepResult(index, name, StepStatus.ERROR, error=str(e))

        response = self.transport(row, body)
        extracted: dict[str, Any] = {}

        try:
            response_body = response_json(response)
            extracted = resolver.extract(row.get(self.config.extract_field), response_body)
            expected = row.get(self.config.expected_field)
            comparison = self.engine.compare(expected, response_body) if expected else None
        except FlowCheckError as e:
            logger.warning("Step %s: response could not be processed: %s", name, e)
            return StepResult(
                index, name, StepStatus.ERROR, request=body, extracted=extracted, error=str(e)
            )

        status = StepStatus.PASSED
        if comparison is not None and not comparison.is_match:
            status = StepStatus.FAILED
            logger.warning("Step %s: response mismatch\n%s", name, comparison.message)

        return StepResult(
            index=index,
            name=name,
            status=status,
            request=body,
            response=response_body,
            extracted=extracted,
            comparison=comparison
        )

    def _step_name(self, row: dict, index: int) -> str:
        return row.get(self.config.name_field) or f"step-{index + 1}"


def run_flow_file(
    path: str | Path,
    transport: Transport,
    print_report: bool = True
) -> FlowReport:
    """
    Load a flow file and run it in one call.

        from flowcheck.runner import run_flow_file
        report = run_flow_file("flows/order.yaml", send)
    """
    flow = load_flow(path)
    runner = FlowRunner(transport, flow.config)
    report = runner.run(flow.steps, name=flow.name)
    if print_report:
        report.print_summary()
    return report
