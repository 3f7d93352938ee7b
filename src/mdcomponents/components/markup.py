"""A minimal element tree used as the render mount point.

The renderer never parses HTML. Template output is attached as a
:class:`Markup` node (trusted, emitted verbatim) while plain strings appended
to an :class:`Element` are escaped on serialization.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Union

from .text import escape_html

__all__ = [
    "CONTAINER_CLASS",
    "INNER_CLASS",
    "Element",
    "Markup",
    "Node",
]

CONTAINER_CLASS = "md-component"
INNER_CLASS = "mdc-inner"

_VOID_TAGS = frozenset(
    {"area", "br", "col", "hr", "img", "input", "link", "meta", "source", "wbr"}
)


@dataclass(frozen=True, slots=True)
class Markup:
    """Raw markup emitted without escaping."""

    html: str

    def __str__(self) -> str:
        return self.html


Node = Union["Element", Markup, str]


@dataclass(slots=True, eq=False)
class Element:
    """An HTML element with attributes, classes and children.

    Example:
        >>> root = Element("div")
        >>> root.add_class("card")
        >>> root.set_attribute("data-x", "1")
        >>> _ = root.create_child("p").append("a < b")
        >>> root.to_html()
        '<div class="card" data-x="1"><p>a &lt; b</p></div>'
    """

    tag: str = "div"
    attributes: dict[str, str] = field(default_factory=dict)
    classes: list[str] = field(default_factory=list)
    children: list[Node] = field(default_factory=list)

    def set_attribute(self, name: str, value: str) -> None:
        """Set attribute ``name``; ``class`` replaces the class list."""

        if name == "class":
            self.classes = value.split()
            return
        self.attributes[name] = value

    def get_attribute(self, name: str) -> str | None:
        """Return attribute ``name`` or ``None``."""

        if name == "class":
            return " ".join(self.classes) if self.classes else None
        return self.attributes.get(name)

    def add_class(self, *names: str) -> None:
        """Add CSS classes, ignoring duplicates."""

        for name in names:
            if name and name not in self.classes:
                self.classes.append(name)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def append(self, child: Node) -> Node:
        """Append ``child`` and return it."""

        self.children.append(child)
        return child

    def append_markup(self, html: str) -> Markup:
        """Append trusted raw markup."""

        node = Markup(html)
        self.children.append(node)
        return node

    def create_child(self, tag: str = "div", *, cls: str | None = None) -> Element:
        """Create, append and return a child element."""

        child = Element(tag)
        if cls:
            child.add_class(*cls.split())
        self.children.append(child)
        return child

    def clear(self) -> None:
        """Remove every child."""

        self.children.clear()

    def iter_elements(self) -> Iterator[Element]:
        """Yield this element and every descendant element depth-first."""

        yield self
        for child in self.children:
            if isinstance(child, Element):
                yield from child.iter_elements()

    def find_class(self, name: str) -> Element | None:
        """Return the first element (self included) carrying class ``name``."""

        for element in self.iter_elements():
            if element.has_class(name):
                return element
        return None

    @property
    def inner_html(self) -> str:
        """Serialized children."""

        return "".join(_serialize(child) for child in self.children)

    def to_html(self) -> str:
        """Serialize the element and its subtree."""

        attrs = ""
        if self.classes:
            attrs += f' class="{escape_html(" ".join(self.classes))}"'
        for name, value in self.attributes.items():
            attrs += f' {name}="{escape_html(value)}"'
        if self.tag in _VOID_TAGS:
            return f"<{self.tag}{attrs}>"
        return f"<{self.tag}{attrs}>{self.inner_html}</{self.tag}>"

    def __str__(self) -> str:
        return self.to_html()


def _serialize(node: Node) -> str:
    if isinstance(node, Element):
        return node.to_html()
    if isinstance(node, Markup):
        return node.html
    return escape_html(str(node))
