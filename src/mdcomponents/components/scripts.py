"""Runtimes that execute a component's ``<script>`` body.

Running component-authored code is a capability, not a default behavior of
rendering: the renderer only calls a runtime when ``enable_scripts`` is set.
Either runtime receives the rendered inner element and the merged props.

* :class:`PythonScriptRuntime` runs the body in-process as the body of a
  function ``(el, props)`` with a reduced set of builtins.
* :class:`EmbeddedScriptRuntime` targets static HTML output and appends a
  browser ``<script>`` that invokes the body as ``function (el, props)``.
"""

from __future__ import annotations

import builtins
import json
import textwrap
from typing import Any, Mapping, Protocol

from .errors import ComponentScriptError
from .markup import INNER_CLASS, Element, Markup
from .models import ComponentDefinition

__all__ = [
    "EmbeddedScriptRuntime",
    "PythonScriptRuntime",
    "ScriptRuntime",
    "get_runtime",
]

_FUNCTION_NAME = "_component_script"

_ALLOWED_BUILTINS = (
    "abs",
    "all",
    "any",
    "bool",
    "dict",
    "enumerate",
    "Exception",
    "float",
    "int",
    "isinstance",
    "len",
    "list",
    "max",
    "min",
    "range",
    "reversed",
    "round",
    "set",
    "sorted",
    "str",
    "sum",
    "tuple",
    "ValueError",
    "zip",
)


class ScriptRuntime(Protocol):
    """Strategy executing a definition's script against a rendered root."""

    name: str

    def run(
        self,
        script: str,
        *,
        container: Element,
        element: Element,
        props: Mapping[str, str],
        definition: ComponentDefinition,
    ) -> None:
        """Execute ``script``; exceptions propagate to the renderer."""


class PythonScriptRuntime:
    """Execute script bodies as Python functions of ``(el, props)``.

    The namespace exposes only a small set of builtins; this narrows what a
    script can reach but is not a security boundary.

    Example:
        >>> root = Element("div")
        >>> PythonScriptRuntime().run(
        ...     "el.set_attribute('data-size', props['size'])",
        ...     container=root,
        ...     element=root,
        ...     props={"size": "large"},
        ...     definition=ComponentDefinition(name="x", template="<p></p>"),
        ... )
        >>> root.get_attribute("data-size")
        'large'
    """

    name = "python"

    def __init__(self, *, extra_globals: Mapping[str, Any] | None = None) -> None:
        self._extra_globals = dict(extra_globals or {})

    def _namespace(self) -> dict[str, Any]:
        allowed = {name: getattr(builtins, name) for name in _ALLOWED_BUILTINS}
        namespace: dict[str, Any] = {"__builtins__": allowed}
        namespace.update(self._extra_globals)
        return namespace

    def compile(self, script: str, *, filename: str = "<component>") -> Any:
        """Return the code object wrapping ``script`` in a function."""

        body = textwrap.indent(textwrap.dedent(script), "    ") or "    pass"
        source = f"def {_FUNCTION_NAME}(el, props):\n{body}\n    return None\n"
        return compile(source, filename, "exec")

    def run(
        self,
        script: str,
        *,
        container: Element,
        element: Element,
        props: Mapping[str, str],
        definition: ComponentDefinition,
    ) -> None:
        filename = definition.source_path or f"<component {definition.name}>"
        try:
            code = self.compile(script, filename=filename)
        except SyntaxError as exc:
            raise ComponentScriptError(
                definition.name, f"invalid script syntax: {exc.msg}"
            ) from exc
        namespace = self._namespace()
        exec(code, namespace)
        namespace[_FUNCTION_NAME](element, dict(props))


class EmbeddedScriptRuntime:
    """Emit a browser ``<script>`` hook instead of executing anything.

    The hook is appended to the container and locates the inner element
    through the container's ``data-scope`` attribute.
    """

    name = "embed"

    def run(
        self,
        script: str,
        *,
        container: Element,
        element: Element,
        props: Mapping[str, str],
        definition: ComponentDefinition,
    ) -> None:
        scope = container.get_attribute("data-scope") or ""
        target = json.dumps(f'[data-scope="{scope}"] > .{INNER_CLASS}')
        payload = _escape_script(json.dumps(dict(props), ensure_ascii=False))
        body = _escape_script(script)
        container.append(
            Markup(
                "<script>(function (el, props) {\n"
                f"{body}\n"
                f"}})(document.querySelector({target}), {payload});</script>"
            )
        )


def _escape_script(text: str) -> str:
    return text.replace("</", "<\\/")


def get_runtime(name: str) -> ScriptRuntime:
    """Return the runtime registered under ``name``.

    Raises:
        ValueError: If ``name`` is not a known runtime.
    """

    normalized = name.strip().lower()
    if normalized == PythonScriptRuntime.name:
        return PythonScriptRuntime()
    if normalized == EmbeddedScriptRuntime.name:
        return EmbeddedScriptRuntime()
    raise ValueError(f"Unknown script runtime: {name!r}")
