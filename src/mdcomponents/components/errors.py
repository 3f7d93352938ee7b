"""Domain-specific exceptions for component lookup and execution.

Parsers never raise; malformed documents and invocation lines come back as
``None``. These errors cover lookups made by programmatic callers and script
failures, which the renderer catches and logs.
"""

from __future__ import annotations

from typing import Iterable


class ComponentError(RuntimeError):
    """Base error for component failures."""


class ComponentNotFoundError(ComponentError):
    """Raised when an invocation names a component missing from the registry."""

    def __init__(self, name: str, available: Iterable[str] = ()) -> None:
        self.name = name
        self.available = tuple(sorted(available))
        message = f"Component {name!r} not found."
        if self.available:
            message += f" Available components: {', '.join(self.available)}"
        super().__init__(message)


class ComponentScriptError(ComponentError):
    """Raised by a script runtime when a script cannot be executed."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Script for component {name!r} failed: {reason}")


__all__ = [
    "ComponentError",
    "ComponentNotFoundError",
    "ComponentScriptError",
]
