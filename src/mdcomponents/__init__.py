"""Top-level package for :mod:`mdcomponents`.

Components are markdown files with YAML-like front matter and an HTML
template. The package parses them, resolves invocations such as
``button(text="Save")`` and renders isolated, scoped markup.

Example:
    >>> from mdcomponents import __version__
    >>> __version__.count(".") >= 1
    True
"""

from importlib import metadata

try:
    __version__ = metadata.version("mdcomponents")
except metadata.PackageNotFoundError:  # pragma: no cover - fallback for source checkouts
    __version__ = "0.0.0"

__all__ = ["__version__"]
