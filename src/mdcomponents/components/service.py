"""Expand component invocations found in markdown documents."""

from __future__ import annotations

import re
from typing import Iterator

from mdcomponents.core.config import ComponentSettings
from mdcomponents.core.logging import Logger, get_logger

from .invocation import BLOCK_LANGUAGE, iter_inline_invocations, parse_block
from .markup import Element
from .models import ComponentInvocation, DisplayMode, RenderOptions
from .registry import ComponentRegistry
from .renderer import render, render_error
from .scripts import ScriptRuntime, get_runtime

__all__ = [
    "INLINE_WRAPPER_CLASS",
    "PARSE_ERROR_MESSAGE",
    "ComponentService",
]

INLINE_WRAPPER_CLASS = "mdc-inline-wrapper"
PARSE_ERROR_MESSAGE = (
    'Could not parse component invocation. Format: component_name(prop="value")'
)

_FENCE_RE = re.compile(
    r"^(?P<indent> {0,3})(?P<fence>`{3,}|~{3,})[ \t]*(?P<info>[^\n]*)$"
)
# A backtick run closes only on a run of the same length and never across a
# blank line; an unmatched run is literal text.
_CODE_SPAN_RE = re.compile(
    r"(?<!`)(?P<ticks>`+)(?!`)(?:(?!\n[ \t]*\n).)+?(?<!`)(?P=ticks)(?!`)",
    re.DOTALL,
)


class ComponentService:
    """Render invocations against a registry using workspace settings.

    Example:
        >>> from mdcomponents.components.models import ComponentDefinition
        >>> registry = ComponentRegistry()
        >>> _ = registry.register(
        ...     ComponentDefinition(name="hi", template="<b>{{who}}</b>")
        ... )
        >>> service = ComponentService(registry, ComponentSettings(live_reload=False))
        >>> "<b>there</b>" in service.render_inline('::hi(who="there")::')
        True
    """

    def __init__(
        self,
        registry: ComponentRegistry,
        settings: ComponentSettings | None = None,
        *,
        runtime: ScriptRuntime | None = None,
        logger: Logger | None = None,
    ) -> None:
        self._registry = registry
        self._settings = settings or ComponentSettings()
        self._runtime = runtime or get_runtime(self._settings.script_runtime)
        self._logger = logger or get_logger(
            __name__,
            component="component-service",
        )

    @property
    def registry(self) -> ComponentRegistry:
        return self._registry

    @property
    def settings(self) -> ComponentSettings:
        return self._settings

    def options(self, display_mode: DisplayMode | str | None = None) -> RenderOptions:
        """Return render options from settings, optionally overriding the mode."""

        return self._settings.render_options(display_mode)

    def _sync(self) -> None:
        if self._settings.live_reload and self._registry.root is not None:
            self._registry.refresh()

    def _missing_message(self, name: str) -> str:
        available = self._registry.names()
        if available:
            suggestion = f"Available components: {', '.join(available)}"
        else:
            suggestion = (
                "Create component definitions in the "
                f'"{self._settings.folder}" folder first.'
            )
        return f'Component "{name}" not found. {suggestion}'

    def render_invocation(
        self,
        invocation: ComponentInvocation,
        container: Element | None = None,
        *,
        options: RenderOptions | None = None,
    ) -> Element:
        """Render one invocation into ``container`` (a new ``div`` by default).

        Unknown names produce an error block instead of raising.
        """

        target = container if container is not None else Element("div")
        definition = self._registry.get(invocation.name)
        if definition is None:
            self._logger.warning(
                "component-not-found",
                name=invocation.name,
                available=len(self._registry),
            )
            render_error(target, self._missing_message(invocation.name))
            return target

        self._logger.debug(
            "component-rendering",
            name=invocation.name,
            props=dict(invocation.props),
        )
        render(
            target,
            definition,
            invocation.props,
            options or self.options(),
            runtime=self._runtime,
            logger=self._logger,
        )
        return target

    def render_block(
        self,
        source: str,
        *,
        display_mode: DisplayMode | str | None = None,
    ) -> Element:
        """Render the body of a ``component`` fence.

        Each parsed line becomes a child ``div`` of the returned container.
        """

        self._sync()
        return self._render_block(source, display_mode)

    def _render_block(
        self,
        source: str,
        display_mode: DisplayMode | str | None = None,
    ) -> Element:
        container = Element("div")
        invocations = parse_block(source)
        if not invocations:
            render_error(container, PARSE_ERROR_MESSAGE)
            return container

        options = self.options(display_mode)
        for invocation in invocations:
            self.render_invocation(
                invocation,
                container.create_child("div"),
                options=options,
            )
        return container

    def render_inline(self, text: str) -> str:
        """Expand ``::name(...)::`` markers in ``text`` into inline renders.

        Text outside markers is returned verbatim. Markers that do not parse
        or name an unknown component are kept as written.
        """

        self._sync()
        return self._expand_inline(text)

    def _expand_inline(self, text: str) -> str:
        options = RenderOptions(
            enable_scripts=self._settings.enable_scripts,
            display_mode=DisplayMode.INLINE,
        )
        parts: list[str] = []
        cursor = 0
        for found in iter_inline_invocations(text):
            parts.append(text[cursor : found.start])
            cursor = found.end
            invocation = found.invocation
            if invocation is None or invocation.name not in self._registry:
                parts.append(found.marker)
                continue
            wrapper = Element("span", classes=[INLINE_WRAPPER_CLASS])
            self.render_invocation(invocation, wrapper, options=options)
            parts.append(wrapper.to_html())
        parts.append(text[cursor:])
        return "".join(parts)

    def _expand_prose(self, text: str) -> str:
        parts: list[str] = []
        cursor = 0
        for span in _CODE_SPAN_RE.finditer(text):
            parts.append(self._expand_inline(text[cursor : span.start()]))
            parts.append(span.group(0))
            cursor = span.end()
        parts.append(self._expand_inline(text[cursor:]))
        return "".join(parts)

    def render_document(self, markdown: str) -> str:
        """Return ``markdown`` with every component fence and marker expanded.

        Fenced ``component`` blocks are replaced by their rendered HTML.
        Other fenced code and backtick code spans are left untouched.
        """

        self._sync()
        output: list[str] = []
        for kind, chunk in _split_fences(markdown):
            if kind == "component":
                output.append(self._render_block(chunk).to_html() + "\n")
            elif kind == "code":
                output.append(chunk)
            else:
                output.append(self._expand_prose(chunk))
        self._logger.debug("document-rendered", chunks=len(output))
        return "".join(output)


def _split_fences(markdown: str) -> Iterator[tuple[str, str]]:
    """Split ``markdown`` into ``("text" | "code" | "component", chunk)``.

    A ``component`` chunk is the fence body only; ``code`` chunks keep their
    fences. An unterminated fence runs to the end of the document.
    """

    lines = markdown.splitlines(keepends=True)
    prose: list[str] = []
    index = 0
    while index < len(lines):
        match = _FENCE_RE.match(lines[index].rstrip("\r\n"))
        if match is None:
            prose.append(lines[index])
            index += 1
            continue
        fence = match.group("fence")
        info = match.group("info").strip()
        if fence[0] == "`" and "`" in info:
            prose.append(lines[index])
            index += 1
            continue

        if prose:
            yield "text", "".join(prose)
            prose = []
        opening = lines[index]
        body: list[str] = []
        closing = ""
        index += 1
        while index < len(lines):
            stripped = lines[index].strip()
            if stripped.startswith(fence[0] * len(fence)) and not stripped.strip(
                fence[0]
            ):
                closing = lines[index]
                index += 1
                break
            body.append(lines[index])
            index += 1

        language = info.split()[0].lower() if info else ""
        if language == BLOCK_LANGUAGE:
            yield "component", "".join(body)
        else:
            yield "code", opening + "".join(body) + closing
    if prose:
        yield "text", "".join(prose)
