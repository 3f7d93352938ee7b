"""Tests for :mod:`mdcomponents.components.service`."""

from __future__ import annotations

import os
import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from mdcomponents.components import (
    ComponentDefinition,
    ComponentInvocation,
    DisplayMode,
    Element,
)
from mdcomponents.components.registry import ComponentRegistry
from mdcomponents.components.service import (
    INLINE_WRAPPER_CLASS,
    PARSE_ERROR_MESSAGE,
    ComponentService,
)
from mdcomponents.core.config import ComponentSettings


@pytest.fixture
def registry(button_definition: ComponentDefinition) -> ComponentRegistry:
    registry = ComponentRegistry()
    registry.register(button_definition)
    registry.register(
        ComponentDefinition(
            name="badge",
            template="<span>{{text}}</span>",
            props={"text": "NEW"},
        )
    )
    return registry


@pytest.fixture
def service(registry: ComponentRegistry) -> ComponentService:
    return ComponentService(registry, ComponentSettings(live_reload=False))


def test_render_block_renders_each_line_into_its_own_child(
    service: ComponentService,
) -> None:
    container = service.render_block('badge(text="beta")\nbutton\n')

    children = [child for child in container.children if isinstance(child, Element)]
    assert [child.get_attribute("data-component") for child in children] == [
        "badge",
        "button",
    ]
    assert "<span>beta</span>" in container.to_html()


def test_render_block_without_invocations_shows_parse_error(
    service: ComponentService,
) -> None:
    container = service.render_block("??? nothing here")

    assert container.has_class("mdc-error")
    assert "Could not parse component invocation" in container.to_html()
    assert PARSE_ERROR_MESSAGE.startswith("Could not parse")


def test_render_block_unknown_component_lists_available(
    service: ComponentService,
) -> None:
    container = service.render_block("ghost\nbadge")

    error, rendered = container.children
    assert isinstance(error, Element) and error.has_class("mdc-error")
    assert "Available components: badge, button" in error.to_html()
    assert "data-component" not in error.to_html()
    assert isinstance(rendered, Element)
    assert rendered.get_attribute("data-component") == "badge"


def test_unknown_component_with_empty_registry_points_at_folder() -> None:
    service = ComponentService(
        ComponentRegistry(),
        ComponentSettings(live_reload=False, folder="widgets"),
    )

    html = service.render_invocation(ComponentInvocation(name="ghost")).to_html()

    assert "mdc-error" in html
    assert "&quot;widgets&quot; folder" in html


def test_render_block_uses_configured_display_mode(
    registry: ComponentRegistry,
) -> None:
    service = ComponentService(
        registry,
        ComponentSettings(live_reload=False, display_mode="block"),
    )

    block = service.render_block("badge").children[0]
    inline = service.render_block("badge", display_mode=DisplayMode.INLINE).children[0]

    assert isinstance(block, Element) and block.has_class("mdc-block")
    assert isinstance(inline, Element) and not inline.has_class("mdc-block")


def test_render_inline_wraps_known_markers_and_keeps_others(
    service: ComponentService,
) -> None:
    text = 'Hello ::badge(text="beta"):: and ::ghost:: and ::badge::!'

    html = service.render_inline(text)

    assert html.startswith("Hello <span class=\"" + INLINE_WRAPPER_CLASS)
    assert "<span>beta</span>" in html
    assert "<span>NEW</span>" in html
    assert "::ghost::" in html
    assert html.endswith("!")
    assert "mdc-block" not in html


def test_render_inline_always_uses_inline_mode(registry: ComponentRegistry) -> None:
    service = ComponentService(
        registry,
        ComponentSettings(live_reload=False, display_mode="block"),
    )

    assert "mdc-block" not in service.render_inline("::badge::")


def test_render_document_expands_fences_and_markers(
    service: ComponentService,
) -> None:
    markdown = textwrap.dedent(
        """\
        # Title

        Inline ::badge(text="hi"):: but not `::badge::` in code.

        ```component
        button(text="Go")
        ```

        ```python
        print("::badge::")
        ```

        ~~~component
        badge
        ~~~
        """
    )

    html = service.render_document(markdown)

    assert html.startswith("# Title\n")
    assert "<span>hi</span>" in html
    assert "`::badge::`" in html
    assert ">Go</button>" in html
    assert "```component" not in html
    assert '```python\nprint("::badge::")\n```\n' in html
    assert "~~~component" not in html
    assert html.count('data-component="badge"') == 2


def test_render_document_leaves_unterminated_code_fence_alone(
    service: ComponentService,
) -> None:
    markdown = "```\n::badge::\n"

    assert service.render_document(markdown) == markdown


def test_service_uses_embed_runtime_from_settings(registry: ComponentRegistry) -> None:
    registry.register(
        ComponentDefinition(
            name="clock",
            template="<time></time>",
            script="el.textContent = new Date().toISOString();",
        )
    )
    service = ComponentService(
        registry,
        ComponentSettings(live_reload=False, script_runtime="embed"),
    )

    html = service.render_block("clock").to_html()

    assert "<script>(function (el, props) {" in html
    assert "new Date().toISOString()" in html


def test_service_respects_disabled_scripts(registry: ComponentRegistry) -> None:
    registry.register(
        ComponentDefinition(
            name="marker",
            template="<p></p>",
            script="el.set_attribute('data-ran', 'yes')",
        )
    )
    service = ComponentService(
        registry,
        ComponentSettings(live_reload=False, enable_scripts=False),
    )

    assert "data-ran" not in service.render_block("marker").to_html()


def test_live_reload_refreshes_before_rendering(
    components_dir: Path,
    write_component: Callable[[str, str], Path],
) -> None:
    path = write_component("note.md", "---\nname: note\n---\n<p>v1</p>\n")
    registry = ComponentRegistry(components_dir)
    registry.load_directory()
    service = ComponentService(registry, ComponentSettings(live_reload=True))

    path.write_text("---\nname: note\n---\n<p>v2</p>\n", encoding="utf-8")
    stat = path.stat()
    os.utime(path, (stat.st_atime, stat.st_mtime + 5))

    assert "<p>v2</p>" in service.render_block("note").to_html()

    frozen = ComponentService(registry, ComponentSettings(live_reload=False))
    path.write_text("---\nname: note\n---\n<p>v3</p>\n", encoding="utf-8")
    os.utime(path, (stat.st_atime, stat.st_mtime + 10))

    assert "<p>v2</p>" in frozen.render_block("note").to_html()


def test_render_document_unmatched_backtick_does_not_swallow_paragraphs(
    service: ComponentService,
) -> None:
    markdown = "Use the ` key.\n\n::badge::\n\nThen `::badge::` here.\n"

    html = service.render_document(markdown)

    assert html.startswith("Use the ` key.\n\n<span class=\"mdc-inline-wrapper")
    assert html.count("<span>NEW</span>") == 1
    assert html.endswith("Then `::badge::` here.\n")


def test_render_document_code_span_needs_matching_backtick_run(
    service: ComponentService,
) -> None:
    markdown = "``a ` ::badge:: `` and ``` ::badge:: `` ::badge::\n"

    html = service.render_document(markdown)

    assert html.startswith("``a ` ::badge:: `` and ``` ")
    assert html.count("<span>NEW</span>") == 2
