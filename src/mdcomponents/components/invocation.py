"""Parse and format component invocations.

Two surfaces reduce to the same :class:`ComponentInvocation`:

* a fenced ``component`` block holding one invocation per line::

      button(text="Save", color='#10b981')
      badge

* inline markers inside running text: ``::badge(text="beta")::``.

Arguments are discovered by scanning for ``key="value"`` / ``key='value'``
pairs, so separators between pairs are not significant and unquoted values
are skipped rather than rejected.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Mapping

from .models import ComponentInvocation
from .text import IDENTIFIER_PATTERN, PROP_KEY_PATTERN

__all__ = [
    "InlineMatch",
    "format_block",
    "format_invocation",
    "is_quotable",
    "iter_inline_invocations",
    "parse_arguments",
    "parse_block",
    "parse_invocation",
]

BLOCK_LANGUAGE = "component"

_INVOCATION_RE = re.compile(
    rf"(?P<name>{IDENTIFIER_PATTERN})\s*(?:\((?P<args>.*)\))?",
    re.ASCII | re.DOTALL,
)
_ARGUMENT_RE = re.compile(
    rf"""(?P<key>{PROP_KEY_PATTERN})\s*=\s*(?:"(?P<double>[^"]*)"|'(?P<single>[^']*)')""",
    re.ASCII,
)
_INLINE_RE = re.compile(
    rf"::(?P<call>{IDENTIFIER_PATTERN}(?:\([^)]*\))?)::",
    re.ASCII,
)


@dataclass(frozen=True, slots=True)
class InlineMatch:
    """An inline ``::name(...)::`` marker found in running text."""

    start: int
    end: int
    marker: str
    invocation: ComponentInvocation | None


def parse_arguments(text: str) -> dict[str, str]:
    """Return the quoted ``key=value`` pairs found in ``text``.

    Later duplicates overwrite earlier ones.

    Example:
        >>> parse_arguments('a="1", b=\\'2\\' c=3 a="4"')
        {'a': '4', 'b': '2'}
    """

    props: dict[str, str] = {}
    for match in _ARGUMENT_RE.finditer(text):
        value = match.group("double")
        if value is None:
            value = match.group("single")
        props[match.group("key")] = value
    return props


def parse_invocation(text: str) -> ComponentInvocation | None:
    """Parse ``name`` or ``name(key="value", ...)``.

    Returns ``None`` for blank input or when the text is not a single
    identifier optionally followed by a parenthesized argument list.

    Example:
        >>> parse_invocation('button(text="Hi")').props["text"]
        'Hi'
        >>> parse_invocation("!!!") is None
        True
    """

    trimmed = text.strip()
    if not trimmed:
        return None
    match = _INVOCATION_RE.fullmatch(trimmed)
    if match is None:
        return None
    args = match.group("args") or ""
    props = parse_arguments(args) if args.strip() else {}
    return ComponentInvocation(name=match.group("name"), props=props)


def parse_block(source: str) -> list[ComponentInvocation]:
    """Parse every line of a ``component`` block, dropping invalid lines.

    Example:
        >>> [inv.name for inv in parse_block('badge\\nbutton(text="Hi")\\n???')]
        ['badge', 'button']
    """

    invocations: list[ComponentInvocation] = []
    for line in source.splitlines():
        invocation = parse_invocation(line)
        if invocation is not None:
            invocations.append(invocation)
    return invocations


def iter_inline_invocations(text: str) -> Iterator[InlineMatch]:
    """Yield every inline ``::name(...)::`` marker in ``text``."""

    for match in _INLINE_RE.finditer(text):
        yield InlineMatch(
            start=match.start(),
            end=match.end(),
            marker=match.group(0),
            invocation=parse_invocation(match.group("call")),
        )


def _quote(value: str) -> str:
    if '"' in value and "'" not in value:
        return f"'{value}'"
    return f'"{value}"'


def is_quotable(value: str) -> bool:
    """Return whether ``value`` can be written as a quoted argument.

    Example:
        >>> is_quotable('say "hi"'), is_quotable("it's" + ' "hi"')
        (True, False)
    """

    return not ('"' in value and "'" in value)


def format_invocation(name: str, props: Mapping[str, str] | None = None) -> str:
    """Render an invocation string that :func:`parse_invocation` accepts.

    Values containing a double quote are wrapped in single quotes. A value
    holding both quote characters cannot be written as an argument at all;
    it is emitted in double quotes and will not read back. Check such values
    with :func:`is_quotable` first.

    Example:
        >>> format_invocation("button", {"text": "Go", "label": 'say "hi"'})
        'button(text="Go", label=\\'say "hi"\\')'
        >>> format_invocation("badge")
        'badge'
    """

    if not props:
        return name
    args = ", ".join(f"{key}={_quote(value)}" for key, value in props.items())
    return f"{name}({args})"


def format_block(*invocations: str) -> str:
    """Wrap invocation lines in a fenced ``component`` block."""

    body = "\n".join(invocations)
    return f"```{BLOCK_LANGUAGE}\n{body}\n```"
