from __future__ import annotations

import pytest

from article_reader.services.document_assembler import (
    ArticleRequest,
    DocumentAssembler,
    RenderedRegion,
    SummaryResult,
    build_toggle_affordance,
    center_label,
)
from article_reader.terminal.ansi import strip_ansi
from article_reader.terminal.markers import (
    COLLAPSED_REGION_MARKER,
    EXPANDED_REGION_MARKER,
    SENTINEL_MARKERS,
    RegionVisibility,
    resolve_view,
    split_marker,
    strip_markers,
)

ARTICLE_MARKDOWN = (
    "First paragraph of the article explains the premise in a few plain words.\n\n"
    "## Details\n\n"
    "Second paragraph with more words so that the renderer has something to wrap "
    "once the width gets narrow enough to matter for this test.\n\n"
    "- point one\n"
    "- point two"
)


def _request(*, summarize: bool, width: int = 80) -> ArticleRequest:
    return ArticleRequest(
        url="https://example.com/a",
        title="A",
        width=width,
        indentation_symbol="  ",
        summarize=summarize,
    )


def _has_markers(document: str) -> bool:
    return any(marker in document for marker in SENTINEL_MARKERS)


def test_plain_article_has_header_and_article_without_markers() -> None:
    assembled = DocumentAssembler().assemble(
        _request(summarize=False),
        ARTICLE_MARKDOWN,
        SummaryResult.not_requested(),
    )
    document = assembled.serialize()

    assert assembled.region_names() == ["header", "article"]
    assert not _has_markers(document)
    plain = strip_ansi(document)
    assert plain.startswith("A\nhttps://example.com/a\n")
    assert "  First paragraph of the article" in plain
    assert "  • point two" in plain


def test_successful_summary_hides_article_behind_toggle() -> None:
    assembled = DocumentAssembler().assemble(
        _request(summarize=True),
        ARTICLE_MARKDOWN,
        SummaryResult.succeeded("Short summary."),
    )
    document = assembled.serialize()
    lines = document.split("\n")

    assert assembled.region_names() == ["header", "summary", "toggle", "article"]

    collapsed_labels = [line for line in lines if "▶ Show Full Article" in line]
    expanded_labels = [line for line in lines if "▼ Show Full Article" in line]
    assert len(collapsed_labels) == 1
    assert len(expanded_labels) == 1
    assert split_marker(collapsed_labels[0]) == (
        center_label("▶ Show Full Article", 80),
        EXPANDED_REGION_MARKER,
    )
    assert split_marker(expanded_labels[0]) == (
        center_label("▼ Show Full Article", 80),
        COLLAPSED_REGION_MARKER,
    )

    collapsed_index = lines.index(collapsed_labels[0])
    expanded_index = lines.index(expanded_labels[0])
    assert expanded_index == collapsed_index + 1
    assert all(split_marker(line)[1] == "" for line in lines[:collapsed_index])

    article_lines = lines[expanded_index + 1 :]
    assert article_lines
    assert all(line.endswith(COLLAPSED_REGION_MARKER) for line in article_lines[:-1])
    assert split_marker(article_lines[-1])[1] == ""

    plain = strip_ansi(strip_markers(document))
    assert plain.startswith("A\nhttps://example.com/a\n")
    summary_heading = plain.index("  AI Summary\n")
    summary_text = plain.index("  Short summary.")
    collapsed_label = plain.index("▶ Show Full Article")
    expanded_label = plain.index("▼ Show Full Article")
    article_heading = plain.index("\n  Full Article\n")
    article_body = plain.index("First paragraph of the article")
    assert summary_heading < summary_text < collapsed_label < expanded_label
    assert expanded_label < article_heading < article_body


def test_failed_summary_shows_notice_and_full_article() -> None:
    assembled = DocumentAssembler().assemble(
        _request(summarize=True),
        ARTICLE_MARKDOWN,
        SummaryResult.failed("quota exceeded"),
    )
    document = assembled.serialize()

    assert assembled.region_names() == ["header", "summary_error", "article"]
    assert not _has_markers(document)

    plain = strip_ansi(document)
    notice = plain.index("**Error generating summary:** quota exceeded")
    separator = plain.index("─" * 20, notice)
    article = plain.index("First paragraph of the article")
    assert notice < separator < article
    assert "point two" in plain
    assert "Show Full Article" not in plain


def test_summary_is_ignored_when_request_does_not_ask_for_it() -> None:
    assembled = DocumentAssembler().assemble(
        _request(summarize=False),
        ARTICLE_MARKDOWN,
        SummaryResult.succeeded("Should not appear."),
    )

    assert assembled.region_names() == ["header", "article"]
    assert "Should not appear." not in assembled.serialize()


@pytest.mark.parametrize(
    "summary",
    [
        SummaryResult.not_requested(),
        SummaryResult.succeeded("Short summary."),
        SummaryResult.failed("quota exceeded"),
    ],
)
def test_assembly_is_repeatable_and_last_line_is_never_marked(summary: SummaryResult) -> None:
    assembler = DocumentAssembler()
    request = _request(summarize=True, width=48)

    first = assembler.assemble(request, ARTICLE_MARKDOWN, summary).serialize()
    second = assembler.assemble(request, ARTICLE_MARKDOWN, summary).serialize()

    assert first == second
    assert split_marker(first.split("\n")[-1])[1] == ""


def test_last_article_line_stays_unmarked_without_trailing_newline() -> None:
    assembler = DocumentAssembler(
        render_markdown_text=lambda markdown_text, width, indentation_symbol: markdown_text,
        render_header=lambda title, url, width: f"{title}\n",
    )

    document = assembler.assemble(
        _request(summarize=True),
        "line one\nline two",
        SummaryResult.succeeded("gist"),
    ).serialize()

    assert document.split("\n")[-4:] == [
        f"# Full Article{COLLAPSED_REGION_MARKER}",
        COLLAPSED_REGION_MARKER,
        f"line one{COLLAPSED_REGION_MARKER}",
        "line two",
    ]


def test_center_label_right_justifies_into_half_width() -> None:
    assert center_label("▶ Show Full Article", 80) == " " * 30 + "▶ Show Full Article"
    assert center_label("abcd", 20) == " " * 8 + "abcd"
    assert center_label("abcd", 21) == " " * 8 + "abcd"
    assert center_label("a label wider than the width", 10) == "a label wider than the width"


def test_toggle_affordance_tags_each_label_with_its_own_marker() -> None:
    toggle = build_toggle_affordance("Show Full Article", 40)

    assert [line.visibility for line in toggle.lines] == [
        RegionVisibility.ALWAYS_VISIBLE,
        RegionVisibility.EXPANDED_BY_DEFAULT,
        RegionVisibility.COLLAPSED_BY_DEFAULT,
    ]
    assert toggle.lines[0].text == ""
    assert toggle.lines[1].text.strip() == "▶ Show Full Article"
    assert toggle.lines[2].text.strip() == "▼ Show Full Article"


def test_rendered_region_tracks_trailing_newline() -> None:
    terminated = RenderedRegion.from_text("body", "a\nb\n")
    open_ended = RenderedRegion.from_text("body", "a\nb")
    empty = RenderedRegion.from_text("body", "")

    assert [line.text for line in terminated.lines] == ["a", "b"]
    assert terminated.terminated is True
    assert [line.text for line in open_ended.lines] == ["a", "b"]
    assert open_ended.terminated is False
    assert empty.lines == ()
    assert empty.terminated is False


def test_article_request_rejects_non_positive_width() -> None:
    with pytest.raises(ValueError):
        ArticleRequest(
            url="https://example.com/a",
            title="A",
            width=0,
            indentation_symbol="  ",
        )


def test_markers_in_summary_text_do_not_hide_summary_lines() -> None:
    document = DocumentAssembler().assemble(
        _request(summarize=True),
        ARTICLE_MARKDOWN,
        SummaryResult.succeeded(
            f"Key point{COLLAPSED_REGION_MARKER}\n\nMore.{EXPANDED_REGION_MARKER}"
        ),
    ).serialize()
    lines = document.split("\n")
    collapsed_index = next(
        index for index, line in enumerate(lines) if "▶ Show Full Article" in line
    )

    assert all(split_marker(line)[1] == "" for line in lines[:collapsed_index])
    collapsed_view = strip_ansi(resolve_view(document))
    assert "  Key point\n" in collapsed_view
    assert "  More.\n" in collapsed_view


def test_markers_and_escapes_in_title_and_reason_are_removed() -> None:
    plain = DocumentAssembler().assemble(
        ArticleRequest(
            url="https://example.com/a",
            title=f"\x1b[31mA{COLLAPSED_REGION_MARKER}\x1b[0m",
            width=80,
            indentation_symbol="  ",
        ),
        ARTICLE_MARKDOWN,
        SummaryResult.not_requested(),
    ).serialize()
    failed = DocumentAssembler().assemble(
        _request(summarize=True),
        ARTICLE_MARKDOWN,
        SummaryResult.failed(f"quota{EXPANDED_REGION_MARKER} exceeded{COLLAPSED_REGION_MARKER}"),
    ).serialize()

    assert not _has_markers(plain)
    assert strip_ansi(plain).startswith("A\nhttps://example.com/a\n")
    assert not _has_markers(failed)
    assert "**Error generating summary:** quota exceeded" in strip_ansi(failed)
