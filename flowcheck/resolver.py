"""Request template resolution and response extraction."""

from __future__ import annotations

import re
import json
import logging
from typing import Any, Optional

from .context import FlowContext
from .exceptions import TemplateError
from .generators import GeneratorRegistry
from .jsonpath_utils import JSONPathMatcher, response_json
from .models import ExtractionRule

logger = logging.getLogger(__name__)

# ${name}: value from the flow context
CONTEXT_PLACEHOLDER = re.compile(r'\$\{([^}]+)\}')
# #{name}: freshly generated value
GENERATOR_PLACEHOLDER = re.compile(r'#\{([^}]+)\}')


def _substitution_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def parse_extraction_spec(spec: Optional[str]) -> list[ExtractionRule]:
    """
    Parse ``name:path,name:path`` into extraction rules.

    Pairs that do not split into exactly one name and one path are skipped.
    """
    rules: list[ExtractionRule] = []
    if not spec:
        return rules

    for item in spec.split(","):
        parts = item.strip().split(":")
        if len(parts) != 2:
            continue
        name, path = parts[0].strip(), parts[1].strip()
        if name and path:
            rules.append(ExtractionRule(name=name, path=path))

    return rules


class ParameterResolver:
    """
    Turns request templates into request bodies and responses into context entries.

    Resolution runs in two passes: ``#{generator}`` tokens first, then
    ``${variable}`` tokens from the flow context. The resolver never clears
    the context; its owner does.
    """

    def __init__(
        self,
        context: FlowContext,
        generators: Optional[GeneratorRegistry] = None
    ):
        self.context = context
        self.generators = generators or GeneratorRegistry()

    def resolve_generators(self, text: str) -> str:
        return GENERATOR_PLACEHOLDER.sub(
            lambda match: self.generators.generate(match.group(1).strip()),
            text
        )

    def resolve_context(self, text: str) -> str:
        """Substitute context variables; an undefined name raises UndefinedVariableError."""
        return CONTEXT_PLACEHOLDER.sub(
            lambda match: _substitution_text(self.context.get(match.group(1).strip())),
            text
        )

    def render_request(self, template: str) -> str:
        """Fully substituted request text, not yet parsed."""
        return self.resolve_context(self.resolve_generators(template))

    def resolve_request(self, template: Optional[str]) -> Any:
        """
        Resolve a request template into a parsed JSON body.

        Args:
            template: Request template text

        Returns:
            Parsed JSON body, or None for an empty template

        Raises:
            UnknownGeneratorError: a ``#{name}`` is not registered
            UndefinedVariableError: a ``${name}`` is not in the context
            TemplateError: the substituted text is not valid JSON
        """
        if not template:
            return None

        rendered = self.render_request(template)
        try:
            body = json.loads(rendered)
        except json.JSONDecodeError as e:
            raise TemplateError(rendered, e.msg, line=e.lineno, column=e.colno)

        logger.debug("Resolved request body: %s", rendered)
        return body

    def resolve_text(self, template: Optional[str]) -> Optional[str]:
        """Context-only substitution for plain-text templates such as SQL."""
        if not template:
            return None
        return self.resolve_context(template)

    def extract(self, spec: Optional[str], response: Any) -> dict[str, Any]:
        """
        Capture response values into the context.

        Args:
            spec: Extraction spec, ``name:path,name:path``
            response: Response object, JSON text or parsed body

        Returns:
            The values that were found and stored, by name
        """
        rules = parse_extraction_spec(spec)
        if not rules:
            return {}

        body = response_json(response)
        extracted: dict[str, Any] = {}

        for rule in rules:
            value = JSONPathMatcher.evaluate(body, rule.path)
            if value is None:
                logger.debug("Nothing found for %s at %s, skipped", rule.name, rule.path)
                continue
            self.context.put(rule.name, value)
            extracted[rule.name] = value
            logger.info("Extracted %s = %r (from %s)", rule.name, value, rule.path)

        return extracted
