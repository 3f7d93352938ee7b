"""Records exchanged between the component parsers and the renderer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Mapping

from .text import is_identifier

__all__ = [
    "ComponentDefinition",
    "ComponentInvocation",
    "DisplayMode",
    "RenderOptions",
]


class DisplayMode(StrEnum):
    """Container styling applied to a rendered component."""

    INLINE = "inline"
    BLOCK = "block"


def _freeze(values: Mapping[str, str] | None) -> Mapping[str, str]:
    return MappingProxyType(dict(values or {}))


@dataclass(frozen=True, slots=True)
class ComponentDefinition:
    """A parsed component: template, default props, styles and script.

    ``props`` keeps the declaration order of the front matter and is exposed
    as a read-only mapping.

    Example:
        >>> definition = ComponentDefinition(
        ...     name="badge",
        ...     template="<span>{{text}}</span>",
        ...     props={"text": "NEW"},
        ... )
        >>> definition.props["text"]
        'NEW'
        >>> definition.is_invocable
        True
    """

    name: str
    template: str
    description: str = ""
    props: Mapping[str, str] = field(default_factory=dict)
    styles: str = ""
    script: str = ""
    source_path: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "props", _freeze(self.props))

    @property
    def is_invocable(self) -> bool:
        """Whether ``name`` can be referenced from an invocation."""

        return is_identifier(self.name)


@dataclass(frozen=True, slots=True)
class ComponentInvocation:
    """A use-site reference to a component with caller overrides."""

    name: str
    props: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "props", _freeze(self.props))


@dataclass(frozen=True, slots=True)
class RenderOptions:
    """Per-call rendering switches supplied by the host configuration."""

    enable_scripts: bool = True
    display_mode: DisplayMode = DisplayMode.INLINE

    def __post_init__(self) -> None:
        object.__setattr__(self, "display_mode", DisplayMode(self.display_mode))
