"""Per-flow context store."""

from __future__ import annotations

from typing import Any, Iterator, Optional

from .exceptions import UndefinedVariableError


class FlowContext:
    """
    Ordered name -> value memory for one flow execution.

    Values extracted from earlier responses are written here and read back
    when later request templates are resolved. Reading an undefined name is
    a hard failure. Nothing is removed implicitly: leave a ``with`` block or
    call ``clear()`` when the flow is done.

    Not thread-safe; give each concurrently running flow its own instance.
    """

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._values: dict[str, Any] = {}
        if initial:
            self.update(initial)

    def get(self, name: str) -> Any:
        try:
            return self._values[name]
        except KeyError:
            raise UndefinedVariableError(name) from None

    def put(self, name: str, value: Any):
        self._values[name] = value

    def update(self, values: dict[str, Any]):
        for name, value in values.items():
            self.put(name, value)

    def clear(self):
        self._values.clear()

    def snapshot(self) -> dict[str, Any]:
        return dict(self._values)

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __enter__(self) -> 'FlowContext':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.clear()
        return False

    def __repr__(self):
        return f"FlowContext({self._values!r})"
