"""Parse component definition documents.

A definition is a markdown file with front matter followed by the template
body, optionally carrying one ``<style>`` and one ``<script>`` block::

    ---
    name: button
    description: A customizable button
    props:
      text: Click Me
      color: "#7c5cbf"
    ---
    <button style="background: {{color}}">{{text}}</button>
    <style>button { border: none; }</style>

The front matter is read with line-oriented matching rather than a YAML
parser: scalar ``name``/``description`` fields and one flat ``props`` map.
Anything else is ignored, and nothing here raises for malformed input.
"""

from __future__ import annotations

import re

from .models import ComponentDefinition
from .text import PROP_KEY_PATTERN, base_name, strip_quotes

__all__ = [
    "extract_block",
    "extract_front_matter",
    "extract_map",
    "extract_scalar",
    "parse_definition",
]

_FRONT_MATTER_RE = re.compile(
    r"\A\s*---[ \t]*\r?\n(?P<front>.*?)^---[ \t]*\r?$",
    re.DOTALL | re.MULTILINE,
)
_MAP_ENTRY_RE = re.compile(rf"^\s{{2,}}({PROP_KEY_PATTERN}):\s*(.*)$", re.ASCII)


def _tag_re(tag: str) -> re.Pattern[str]:
    return re.compile(
        rf"<{tag}\b[^>]*>(?P<inner>.*?)</{tag}\s*>",
        re.IGNORECASE | re.DOTALL,
    )


_STYLE_RE = _tag_re("style")
_SCRIPT_RE = _tag_re("script")


def extract_front_matter(content: str) -> tuple[str, str] | None:
    """Split ``content`` into ``(front_matter, body)``.

    Returns ``None`` when the document does not open with a ``---`` line
    followed by a closing ``---`` line.

    Example:
        >>> extract_front_matter("---\\nname: x\\n---\\n<p>hi</p>")
        ('name: x\\n', '<p>hi</p>')
        >>> extract_front_matter("<p>no front matter</p>") is None
        True
    """

    match = _FRONT_MATTER_RE.match(content.lstrip("\ufeff"))
    if match is None:
        return None
    front = match.group("front")
    body = match.string[match.end():]
    return front, body.strip()


def extract_scalar(front_matter: str, key: str) -> str:
    """Return the first single-line value for ``key`` or ``""``."""

    pattern = re.compile(rf"^{re.escape(key)}:[ \t]*(\S.*)$", re.MULTILINE)
    match = pattern.search(front_matter)
    if match is None:
        return ""
    return strip_quotes(match.group(1).strip())


def extract_map(front_matter: str, key: str) -> dict[str, str]:
    """Return the flat ``key:`` mapping of indented ``name: value`` lines.

    Example:
        >>> extract_map("props:\\n  text: Hi\\n  color: '#fff'\\nother: 1", "props")
        {'text': 'Hi', 'color': '#fff'}
    """

    header = re.compile(rf"^{re.escape(key)}:\s*$")
    result: dict[str, str] = {}
    in_map = False
    for line in front_matter.splitlines():
        if header.match(line):
            in_map = True
            continue
        if not in_map:
            continue
        entry = _MAP_ENTRY_RE.match(line)
        if entry is None:
            in_map = False
            continue
        result[entry.group(1)] = strip_quotes(entry.group(2).strip())
    return result


def extract_block(body: str, pattern: re.Pattern[str]) -> tuple[str, str]:
    """Return ``(inner_text, remaining_body)`` for the first ``pattern`` match.

    Only the first block is kept as content; every matching block is removed
    from the remaining body so stray copies never reach the output markup.
    """

    match = pattern.search(body)
    if match is None:
        return "", body
    return match.group("inner").strip(), pattern.sub("", body)


def parse_definition(content: str, path: str) -> ComponentDefinition | None:
    """Parse a component document into a :class:`ComponentDefinition`.

    Args:
        content: Raw document text.
        path: Source path used for provenance and as the fallback name.

    Returns:
        The parsed definition, or ``None`` when the document has no front
        matter or its template is empty once styles and scripts are removed.

    Example:
        >>> text = "---\\nprops:\\n  text: NEW\\n---\\n<b>{{text}}</b>"
        >>> parse_definition(text, "ui/badge.md").name
        'badge'
        >>> parse_definition("---\\nname: x\\n---\\n<style>b{}</style>", "x.md") is None
        True
    """

    parts = extract_front_matter(content)
    if parts is None:
        return None
    front, body = parts

    styles, body = extract_block(body, _STYLE_RE)
    script, body = extract_block(body, _SCRIPT_RE)
    template = body.strip()
    if not template:
        return None

    return ComponentDefinition(
        name=extract_scalar(front, "name") or base_name(path),
        description=extract_scalar(front, "description"),
        props=extract_map(front, "props"),
        template=template,
        styles=styles,
        script=script,
        source_path=path,
    )
