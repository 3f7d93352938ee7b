"""Render component definitions into a mount point.

:func:`render` is deterministic apart from the per-call scope token and never
raises to its caller: style scoping or script failures are logged and the
substituted markup stays in place.
"""

from __future__ import annotations

import re
import uuid
from typing import Callable, Mapping

from mdcomponents.core.logging import Logger, get_logger

from .markup import CONTAINER_CLASS, INNER_CLASS, Element
from .models import ComponentDefinition, DisplayMode, RenderOptions
from .scripts import PythonScriptRuntime, ScriptRuntime
from .styles import scope_attribute, scope_styles
from .text import PROP_KEY_PATTERN, escape_html

__all__ = [
    "BLOCK_CLASS",
    "ERROR_CLASS",
    "generate_scope",
    "merge_props",
    "render",
    "render_error",
    "substitute",
]

BLOCK_CLASS = "mdc-block"
ERROR_CLASS = "mdc-error"

_PLACEHOLDER_RE = re.compile(
    rf"\{{\{{\s*(?P<key>{PROP_KEY_PATTERN})\s*\}}\}}", re.ASCII
)


def generate_scope(name: str) -> str:
    """Return a fresh scope token for one render of ``name``.

    Example:
        >>> token = generate_scope("card")
        >>> token.startswith("mdc-card-") and len(token) == len("mdc-card-") + 6
        True
    """

    return f"mdc-{name}-{uuid.uuid4().hex[:6]}"


def merge_props(
    defaults: Mapping[str, str],
    overrides: Mapping[str, str] | None,
) -> dict[str, str]:
    """Return defaults overlaid with caller values; caller values win.

    Example:
        >>> merge_props({"a": "1", "b": "2"}, {"b": "3", "c": "4"})
        {'a': '1', 'b': '3', 'c': '4'}
    """

    merged = dict(defaults)
    merged.update(overrides or {})
    return merged


def substitute(template: str, props: Mapping[str, str]) -> str:
    """Replace ``{{ key }}`` placeholders with HTML-escaped values.

    Placeholders for unknown keys become empty strings. Substitution is a
    single pass, so values are never themselves scanned for placeholders.

    Example:
        >>> substitute("<b>{{ text }}</b>{{missing}}", {"text": "<hi>"})
        '<b>&lt;hi&gt;</b>'
    """

    def _replace(match: re.Match[str]) -> str:
        return escape_html(props.get(match.group("key"), ""))

    return _PLACEHOLDER_RE.sub(_replace, template)


def _scoped_css(
    definition: ComponentDefinition,
    scope: str,
    logger: Logger,
) -> str:
    if not definition.styles:
        return ""
    try:
        return scope_styles(definition.styles, scope)
    except Exception as exc:  # pragma: no cover - regex rewrite is total
        logger.warning(
            "component-style-scoping-failed",
            component=definition.name,
            error=str(exc),
        )
        return ""


def render(
    container: Element,
    definition: ComponentDefinition,
    user_props: Mapping[str, str] | None = None,
    options: RenderOptions | None = None,
    *,
    runtime: ScriptRuntime | None = None,
    scope_factory: Callable[[str], str] = generate_scope,
    logger: Logger | None = None,
) -> None:
    """Render ``definition`` with ``user_props`` into ``container``.

    Args:
        container: Mount point receiving attributes and child nodes.
        definition: Parsed component definition.
        user_props: Caller overrides for the definition's default props.
        options: Script and display switches; defaults when omitted.
        runtime: Script runtime used when scripts are enabled.
        scope_factory: Produces the scope token for this call.
        logger: Optional logger override.

    Example:
        >>> root = Element("div")
        >>> definition = ComponentDefinition(
        ...     name="badge", template="<b>{{text}}</b>", props={"text": "NEW"}
        ... )
        >>> render(root, definition, {"text": "beta"}, scope_factory=lambda n: "s1")
        >>> root.to_html()
        '<div class="md-component" data-component="badge" data-scope="s1"><div class="mdc-inner"><b>beta</b></div></div>'
    """

    opts = options or RenderOptions()
    log = logger or get_logger(__name__, component="renderer")

    scope = scope_factory(definition.name)
    container.add_class(CONTAINER_CLASS)
    if opts.display_mode is DisplayMode.BLOCK:
        container.add_class(BLOCK_CLASS)
    container.set_attribute("data-component", definition.name)
    container.set_attribute("data-scope", scope)

    props = merge_props(definition.props, user_props)
    html = substitute(definition.template, props)

    css = _scoped_css(definition, scope, log)
    if css:
        style = container.create_child("style")
        style.append_markup(css)

    inner = container.create_child("div", cls=INNER_CLASS)
    inner.append_markup(html)

    if not (definition.script and opts.enable_scripts):
        return

    active = runtime or PythonScriptRuntime()
    try:
        active.run(
            definition.script,
            container=container,
            element=inner,
            props=props,
            definition=definition,
        )
    except Exception as exc:
        log.error(
            "component-script-failed",
            component=definition.name,
            source=definition.source_path,
            scope=scope_attribute(scope),
            error=f"{type(exc).__name__}: {exc}",
        )


def render_error(container: Element, message: str) -> None:
    """Replace ``container`` contents with a visible error block.

    Example:
        >>> root = Element("div")
        >>> render_error(root, 'Component "x" not found')
        >>> root.has_class("mdc-error")
        True
    """

    container.clear()
    container.add_class(CONTAINER_CLASS, ERROR_CLASS)
    content = container.create_child("div", cls="mdc-error-content")
    content.create_child("span", cls="mdc-error-icon").append("⚠️")
    content.create_child("span", cls="mdc-error-text").append(message)
