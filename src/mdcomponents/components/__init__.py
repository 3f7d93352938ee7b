"""Component definitions, invocations and rendering for :mod:`mdcomponents`."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .definition import parse_definition
from .errors import (
    ComponentError,
    ComponentNotFoundError,
    ComponentScriptError,
)
from .invocation import (
    InlineMatch,
    format_block,
    format_invocation,
    is_quotable,
    iter_inline_invocations,
    parse_block,
    parse_invocation,
)
from .markup import Element, Markup
from .models import (
    ComponentDefinition,
    ComponentInvocation,
    DisplayMode,
    RenderOptions,
)
from .styles import scope_styles
from .text import escape_html

if TYPE_CHECKING:  # pragma: no cover - imports only used for typing
    from .registry import ComponentRegistry
    from .renderer import render, render_error
    from .scripts import (
        EmbeddedScriptRuntime,
        PythonScriptRuntime,
        ScriptRuntime,
        get_runtime,
    )
    from .service import ComponentService


__all__ = [
    "ComponentDefinition",
    "ComponentError",
    "ComponentInvocation",
    "ComponentNotFoundError",
    "ComponentRegistry",
    "ComponentScriptError",
    "ComponentService",
    "DisplayMode",
    "Element",
    "EmbeddedScriptRuntime",
    "InlineMatch",
    "Markup",
    "PythonScriptRuntime",
    "RenderOptions",
    "ScriptRuntime",
    "escape_html",
    "format_block",
    "format_invocation",
    "get_runtime",
    "is_quotable",
    "iter_inline_invocations",
    "parse_block",
    "parse_definition",
    "parse_invocation",
    "render",
    "render_error",
    "scope_styles",
]


_LAZY_IMPORTS = {
    "ComponentRegistry": "registry",
    "ComponentService": "service",
    "EmbeddedScriptRuntime": "scripts",
    "PythonScriptRuntime": "scripts",
    "ScriptRuntime": "scripts",
    "get_runtime": "scripts",
    "render": "renderer",
    "render_error": "renderer",
}


def __getattr__(name: str) -> Any:  # pragma: no cover - trivial delegation
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        raise AttributeError(
            f"module 'mdcomponents.components' has no attribute {name!r}"
        )

    module = __import__(f"mdcomponents.components.{module_name}", fromlist=[name])
    return getattr(module, name)
