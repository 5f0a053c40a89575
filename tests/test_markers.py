from __future__ import annotations

from article_reader.terminal.ansi import strip_ansi
from article_reader.terminal.markers import (
    COLLAPSED_REGION_MARKER,
    EXPANDED_REGION_MARKER,
    DocumentLine,
    RegionVisibility,
    encode_lines,
    marker_for,
    resolve_view,
    split_marker,
    strip_markers,
)

C = COLLAPSED_REGION_MARKER
E = EXPANDED_REGION_MARKER


def _toggle_document() -> str:
    return encode_lines(
        [
            DocumentLine("Title"),
            DocumentLine("Summary text"),
            DocumentLine("> open", RegionVisibility.EXPANDED_BY_DEFAULT),
            DocumentLine("v close", RegionVisibility.COLLAPSED_BY_DEFAULT),
            DocumentLine("article body", RegionVisibility.COLLAPSED_BY_DEFAULT),
            DocumentLine(""),
        ]
    )


def test_markers_are_distinct_invisible_code_points() -> None:
    assert C == "\u2064"
    assert E == "\u2063"
    assert marker_for(RegionVisibility.ALWAYS_VISIBLE) == ""
    assert marker_for(RegionVisibility.COLLAPSED_BY_DEFAULT) == C
    assert marker_for(RegionVisibility.EXPANDED_BY_DEFAULT) == E


def test_encode_lines_appends_markers_except_on_last_line() -> None:
    document = encode_lines(
        [
            DocumentLine("shown"),
            DocumentLine("hidden", RegionVisibility.COLLAPSED_BY_DEFAULT),
            DocumentLine("tail", RegionVisibility.COLLAPSED_BY_DEFAULT),
        ]
    )

    assert document == f"shown\nhidden{C}\ntail"


def test_encode_lines_of_nothing_is_empty() -> None:
    assert encode_lines([]) == ""


def test_split_marker_returns_text_and_trailing_marker() -> None:
    assert split_marker(f"body{C}") == ("body", C)
    assert split_marker(f"label{E}") == ("label", E)
    assert split_marker("plain") == ("plain", "")
    assert split_marker("") == ("", "")


def test_strip_markers_removes_every_occurrence() -> None:
    assert strip_markers(f"a{C}\nb{E}\nc") == "a\nb\nc"


def test_resolve_view_hides_article_until_expanded() -> None:
    document = _toggle_document()

    collapsed = resolve_view(document)
    expanded = resolve_view(document, expanded=True)

    assert collapsed.split("\n") == ["Title", "Summary text", "> open", ""]
    assert expanded.split("\n") == ["Title", "Summary text", "v close", "article body", ""]


def test_strip_ansi_removes_styling_sequences() -> None:
    styled = "\x1b[1mbold\x1b[0m \x1b]8;;https://example.com\x07link\x1b]8;;\x07 \x1b[2;3mdim\x1b[0m"

    assert strip_ansi(styled) == "bold link dim"
