"""Tests for :mod:`mdcomponents.components.invocation`."""

from __future__ import annotations

import pytest

from mdcomponents.components.invocation import (
    format_block,
    format_invocation,
    is_quotable,
    iter_inline_invocations,
    parse_arguments,
    parse_block,
    parse_invocation,
)


def test_parse_invocation_reads_quoted_arguments() -> None:
    invocation = parse_invocation(
        """  card(title="Hello", content='Body text', color = "#fff")  """
    )

    assert invocation is not None
    assert invocation.name == "card"
    assert dict(invocation.props) == {
        "title": "Hello",
        "content": "Body text",
        "color": "#fff",
    }


def test_parse_invocation_without_arguments_has_empty_props() -> None:
    for text in ("badge", "badge()", "badge(   )"):
        invocation = parse_invocation(text)
        assert invocation is not None
        assert invocation.name == "badge"
        assert dict(invocation.props) == {}


@pytest.mark.parametrize(
    "text",
    ["", "   ", "9button", "button(", "button) x", "two words", "btn(x='1') tail"],
)
def test_parse_invocation_rejects_malformed_text(text: str) -> None:
    assert parse_invocation(text) is None


def test_parse_arguments_skips_unquoted_values_and_last_duplicate_wins() -> None:
    props = parse_arguments('size=large, text="A", text="B", data-id=\'7\'')

    assert props == {"text": "B", "data-id": "7"}


def test_parse_arguments_keeps_commas_and_parens_inside_quotes() -> None:
    props = parse_arguments("label=\"a, b\", note='x=\"y\"'")

    assert props == {"label": "a, b", "note": 'x="y"'}


def test_parse_block_drops_invalid_lines() -> None:
    source = 'button(text="Save")\n\n!!! not an invocation\nbadge\n  card(title="T")  \n'

    names = [invocation.name for invocation in parse_block(source)]

    assert names == ["button", "badge", "card"]


def test_parse_block_of_garbage_is_empty() -> None:
    assert parse_block("???\n123\n") == []


def test_iter_inline_invocations_reports_spans() -> None:
    text = 'Status ::badge(text="beta"):: and ::spacer:: done'

    matches = list(iter_inline_invocations(text))

    assert [match.marker for match in matches] == [
        '::badge(text="beta")::',
        "::spacer::",
    ]
    first = matches[0]
    assert text[first.start : first.end] == first.marker
    assert first.invocation is not None
    assert dict(first.invocation.props) == {"text": "beta"}


def test_iter_inline_invocations_ignores_text_without_markers() -> None:
    assert list(iter_inline_invocations("a :: b :: c")) == []


def test_format_invocation_round_trips_through_parser() -> None:
    props = {"text": "Click Me", "color": "#7c5cbf", "quote": 'say "hi"'}

    snippet = format_invocation("button", props)
    parsed = parse_invocation(snippet)

    assert parsed is not None
    assert parsed.name == "button"
    assert dict(parsed.props) == props


def test_format_block_wraps_lines_in_component_fence() -> None:
    block = format_block("badge", 'button(text="Go")')

    assert block == '```component\nbadge\nbutton(text="Go")\n```'
    assert [inv.name for inv in parse_block(block)] == ["badge", "button"]


def test_values_mixing_both_quotes_are_not_quotable() -> None:
    mixed = "it's \"odd\""

    assert is_quotable('say "hi"')
    assert is_quotable("it's")
    assert not is_quotable(mixed)

    parsed = parse_invocation(format_invocation("badge", {"text": mixed}))
    assert parsed is not None
    assert parsed.props.get("text") != mixed
