"""Packaged resources for :mod:`mdcomponents`.

Holds the configuration defaults and the example components seeded into new
workspaces.
"""

from __future__ import annotations

from importlib import resources
from importlib.resources.abc import Traversable

EXAMPLES_DIRNAME = "examples"


def get_resource(relative_path: str) -> Traversable:
    """Return a traversable handle to a packaged resource.

    Raises:
        FileNotFoundError: If the resource is not shipped with the package.
    """

    candidate = resources.files(__package__).joinpath(relative_path)
    if not candidate.exists():
        raise FileNotFoundError(relative_path)
    return candidate


def iter_example_components() -> list[tuple[str, str]]:
    """Return ``(filename, content)`` pairs for the packaged examples.

    Example:
        >>> names = [name for name, _ in iter_example_components()]
        >>> "button.md" in names
        True
    """

    folder = get_resource(EXAMPLES_DIRNAME)
    examples = [
        (entry.name, entry.read_text(encoding="utf-8"))
        for entry in folder.iterdir()
        if entry.name.endswith(".md")
    ]
    return sorted(examples)


__all__ = ["EXAMPLES_DIRNAME", "get_resource", "iter_example_components"]
