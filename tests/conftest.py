"""Shared pytest fixtures for component tests."""

from __future__ import annotations

import logging
import textwrap
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
import structlog

from mdcomponents.components import ComponentDefinition


_BUTTON_SOURCE = textwrap.dedent(
    """\
    ---
    name: button
    description: A customizable button
    props:
      text: Click Me
      color: "#7c5cbf"
    ---
    <button class="btn" style="background: {{color}}">{{ text }}</button>
    <style>
    .btn { border: none; }
    .btn:hover, .btn:focus { filter: brightness(1.1); }
    </style>
    """
)


def _clear_root_handlers() -> None:
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        try:
            handler.close()
        except Exception:  # pragma: no cover - close failures are irrelevant
            pass


@pytest.fixture(autouse=True)
def reset_logging_state() -> Iterator[None]:
    """Ensure each test runs with a clean logging configuration."""

    _clear_root_handlers()
    structlog.reset_defaults()
    yield
    _clear_root_handlers()
    structlog.reset_defaults()


@pytest.fixture
def button_source() -> str:
    """Return the raw document for a styled button component."""

    return _BUTTON_SOURCE


@pytest.fixture
def button_definition() -> ComponentDefinition:
    """Return a small button component with styles and defaults."""

    return ComponentDefinition(
        name="button",
        description="A customizable button",
        props={"text": "Click Me", "color": "#7c5cbf"},
        template='<button style="background: {{color}}">{{text}}</button>',
        styles=".btn { border: none; }",
    )


@pytest.fixture
def components_dir(tmp_path: Path) -> Path:
    """Provide an empty components folder."""

    folder = tmp_path / "components"
    folder.mkdir()
    return folder


@pytest.fixture
def write_component(components_dir: Path) -> Callable[[str, str], Path]:
    """Write ``content`` to ``relative`` under ``components_dir``."""

    def _write(relative: str, content: str) -> Path:
        path = components_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    return _write
