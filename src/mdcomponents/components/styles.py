"""Scope component CSS to a single rendered instance.

This is a textual rewrite, not a CSS parser. Every selector list that opens a
rule block is split on top-level commas and each selector is prefixed with the
instance's ``[data-scope="..."]`` attribute selector. At-rule preludes are
left alone while the rules nested in them are rewritten. ``:root`` selectors
and keyframe stops pass through so custom properties and animations keep
working.
"""

from __future__ import annotations

import re

__all__ = [
    "scope_attribute",
    "scope_selector",
    "scope_styles",
    "split_selectors",
]

# A selector list starts after the beginning of the text, a block boundary
# or a statement terminator and runs to the next "{". "@" excludes at-rule
# preludes.
_RULE_RE = re.compile(r"(?P<before>^|[{};])(?P<space>\s*)(?P<selectors>[^{}@;]+?)\s*\{")
_KEYFRAME_STOP_RE = re.compile(r"(?:from|to|\d+(?:\.\d+)?%)", re.IGNORECASE)

_OPENERS = {"(": ")", "[": "]"}


def scope_attribute(scope: str) -> str:
    """Return the attribute selector matching a scope token.

    Example:
        >>> scope_attribute("mdc-card-1a2b3c")
        '[data-scope="mdc-card-1a2b3c"]'
    """

    return f'[data-scope="{scope}"]'


def split_selectors(selectors: str) -> list[str]:
    """Split a selector list on commas outside parentheses and brackets.

    Example:
        >>> split_selectors(".a, :is(.b, .c) > p, [data-x='1,2']")
        ['.a', ':is(.b, .c) > p', "[data-x='1,2']"]
    """

    parts: list[str] = []
    closers: list[str] = []
    current: list[str] = []
    quote: str | None = None
    for char in selectors:
        if quote is not None:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char in _OPENERS:
            closers.append(_OPENERS[char])
        elif closers and char == closers[-1]:
            closers.pop()
        elif char == "," and not closers:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    parts.append("".join(current).strip())
    return [part for part in parts if part]


def scope_selector(selector: str, prefix: str) -> str:
    """Prefix one selector unless it is exempt or already scoped.

    Example:
        >>> scope_selector(".btn:hover", '[data-scope="s"]')
        '[data-scope="s"] .btn:hover'
        >>> scope_selector("50%", '[data-scope="s"]')
        '50%'
    """

    if (
        selector.startswith(":root")
        or selector.startswith(prefix)
        or _KEYFRAME_STOP_RE.fullmatch(selector)
    ):
        return selector
    return f"{prefix} {selector}"


def scope_styles(css: str, scope: str) -> str:
    """Rewrite ``css`` so its rules only apply under ``scope``.

    Args:
        css: Raw stylesheet text from a component definition.
        scope: Per-render scope token.

    Returns:
        The rewritten stylesheet. Rescoping the output with the same token
        leaves it unchanged.

    Example:
        >>> scope_styles(".a, .b { color: red; }", "t")
        '[data-scope="t"] .a, [data-scope="t"] .b { color: red; }'
        >>> print(scope_styles("@keyframes spin { from { x: 0 } to { x: 1 } }", "t"))
        @keyframes spin { from { x: 0 } to { x: 1 } }
    """

    prefix = scope_attribute(scope)

    def _rewrite(match: re.Match[str]) -> str:
        selectors = split_selectors(match.group("selectors"))
        if not selectors:
            return match.group(0)
        scoped = ", ".join(scope_selector(sel, prefix) for sel in selectors)
        return f"{match.group('before')}{match.group('space')}{scoped} {{"

    return _RULE_RE.sub(_rewrite, css)
