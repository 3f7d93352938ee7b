"""Shared text helpers: identifiers, escaping and quote handling."""

from __future__ import annotations

import re

__all__ = [
    "IDENTIFIER_PATTERN",
    "PROP_KEY_PATTERN",
    "base_name",
    "escape_html",
    "is_identifier",
    "strip_quotes",
]

IDENTIFIER_PATTERN = r"[A-Za-z_][\w-]*"
# Prop keys in front matter, invocation arguments and placeholders.
PROP_KEY_PATTERN = r"\w[\w-]*"

_IDENTIFIER_RE = re.compile(IDENTIFIER_PATTERN, re.ASCII)
_PATH_SEPARATORS_RE = re.compile(r"[\\/]")
_MARKDOWN_SUFFIX_RE = re.compile(r"\.md$", re.IGNORECASE)

_HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
)


def is_identifier(value: str) -> bool:
    """Return whether ``value`` is a valid component or prop identifier.

    Example:
        >>> is_identifier("info-box")
        True
        >>> is_identifier("9lives")
        False
    """

    return _IDENTIFIER_RE.fullmatch(value) is not None


def escape_html(value: str) -> str:
    """Escape ``&``, ``<``, ``>`` and ``"`` for safe insertion into markup.

    Single quotes are left alone; templates quote attributes with ``"``.

    Example:
        >>> escape_html('<b class="x">Tom & Jerry</b>')
        '&lt;b class=&quot;x&quot;&gt;Tom &amp; Jerry&lt;/b&gt;'
    """

    for raw, entity in _HTML_ESCAPES:
        value = value.replace(raw, entity)
    return value


def strip_quotes(value: str) -> str:
    """Remove one layer of matching single or double quotes.

    Example:
        >>> strip_quotes('"#7c5cbf"')
        '#7c5cbf'
        >>> strip_quotes("'it''s'")
        "it''s"
        >>> strip_quotes('"unbalanced')
        '"unbalanced'
    """

    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def base_name(path: str) -> str:
    """Return the last path segment with a ``.md`` suffix removed.

    Example:
        >>> base_name("_components/ui/Button.MD")
        'Button'
    """

    last = _PATH_SEPARATORS_RE.split(path)[-1]
    return _MARKDOWN_SUFFIX_RE.sub("", last)
