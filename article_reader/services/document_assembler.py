"""
Assembly of the terminal reading document.

Three document shapes exist:

- no summary: header, full article;
- summary failed: header, visible error notice, full article (nothing hidden);
- summary succeeded: header, summary, toggle affordance, full article hidden
  behind the toggle.

Regions are rendered independently with the same width and indentation
symbol and kept as `DocumentLine` records until `AssembledDocument.serialize`
encodes visibility as sentinel markers.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Literal

from article_reader.services.content_source import sanitize_markup
from article_reader.terminal.markers import DocumentLine, RegionVisibility, encode_lines
from article_reader.terminal.renderer import create_header, render_markdown

TOGGLE_LABEL = "Show Full Article"
COLLAPSED_GLYPH = "▶"
EXPANDED_GLYPH = "▼"

SummaryOutcome = Literal["not_requested", "succeeded", "failed"]
MarkdownRenderer = Callable[[str, int, str], str]
HeaderRenderer = Callable[[str, str, int], str]


@dataclass(frozen=True)
class ArticleRequest:
    url: str
    title: str
    width: int
    indentation_symbol: str
    summarize: bool = False

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError("width must be a positive integer")


@dataclass(frozen=True)
class SummaryResult:
    outcome: SummaryOutcome
    text: str | None = None

    @classmethod
    def not_requested(cls) -> SummaryResult:
        return cls(outcome="not_requested")

    @classmethod
    def succeeded(cls, summary: str) -> SummaryResult:
        return cls(outcome="succeeded", text=summary)

    @classmethod
    def failed(cls, reason: str) -> SummaryResult:
        return cls(outcome="failed", text=reason)


@dataclass(frozen=True)
class RenderedRegion:
    name: str
    lines: tuple[DocumentLine, ...]
    terminated: bool = True

    @classmethod
    def from_text(
        cls,
        name: str,
        text: str,
        visibility: RegionVisibility = RegionVisibility.ALWAYS_VISIBLE,
    ) -> RenderedRegion:
        if not text:
            return cls(name=name, lines=(), terminated=False)
        pieces = text.split("\n")
        terminated = pieces[-1] == ""
        if terminated:
            pieces = pieces[:-1]
        return cls(
            name=name,
            lines=tuple(DocumentLine(text=piece, visibility=visibility) for piece in pieces),
            terminated=terminated,
        )


@dataclass(frozen=True)
class AssembledDocument:
    regions: tuple[RenderedRegion, ...]

    def lines(self) -> list[DocumentLine]:
        flattened = [line for region in self.regions for line in region.lines]
        if self.regions and self.regions[-1].terminated:
            flattened.append(DocumentLine(text=""))
        return flattened

    def region_names(self) -> list[str]:
        return [region.name for region in self.regions]

    def serialize(self) -> str:
        return encode_lines(self.lines())


class DocumentAssembler:
    def __init__(
        self,
        *,
        render_markdown_text: MarkdownRenderer = render_markdown,
        render_header: HeaderRenderer = create_header,
        toggle_label: str = TOGGLE_LABEL,
    ) -> None:
        self._render_markdown = render_markdown_text
        self._render_header = render_header
        self._toggle_label = toggle_label

    def assemble(
        self,
        request: ArticleRequest,
        article_markdown: str,
        summary: SummaryResult,
    ) -> AssembledDocument:
        # Text from the network or the caller must not carry its own markers.
        request = replace(
            request,
            title=sanitize_markup(request.title),
            url=sanitize_markup(request.url),
        )
        article_markdown = sanitize_markup(article_markdown)
        if summary.text is not None:
            summary = replace(summary, text=sanitize_markup(summary.text))

        header = RenderedRegion.from_text(
            "header",
            self._render_header(request.title, request.url, request.width),
        )
        outcome = summary.outcome if request.summarize else "not_requested"

        if outcome == "failed":
            notice = f"**Error generating summary:** {summary.text or 'unknown error'}\n\n---\n\n"
            return AssembledDocument(
                regions=(
                    header,
                    self._region("summary_error", notice, request),
                    self._region("article", article_markdown, request),
                )
            )

        if outcome == "succeeded":
            return AssembledDocument(
                regions=(
                    header,
                    self._region("summary", f"# AI Summary\n\n{summary.text or ''}\n\n", request),
                    build_toggle_affordance(self._toggle_label, request.width),
                    self._region(
                        "article",
                        f"# Full Article\n\n{article_markdown}",
                        request,
                        visibility=RegionVisibility.COLLAPSED_BY_DEFAULT,
                    ),
                )
            )

        return AssembledDocument(
            regions=(header, self._region("article", article_markdown, request))
        )

    def _region(
        self,
        name: str,
        markdown_text: str,
        request: ArticleRequest,
        *,
        visibility: RegionVisibility = RegionVisibility.ALWAYS_VISIBLE,
    ) -> RenderedRegion:
        rendered = self._render_markdown(markdown_text, request.width, request.indentation_symbol)
        return RenderedRegion.from_text(name, rendered, visibility)


def center_label(label: str, width: int) -> str:
    """
    Right-justify `label` into a field of `(width + len(label)) // 2` characters.

    This approximates centering; for odd leftover space the label sits half a
    column left of true center.
    """
    return label.rjust((width + len(label)) // 2)


def build_toggle_affordance(label: str, width: int) -> RenderedRegion:
    """
    Build the blank line and the two mutually exclusive label lines.

    The `▶` line is tagged `EXPANDED_BY_DEFAULT`, so it shows while the article
    is folded away. The `▼` line is tagged `COLLAPSED_BY_DEFAULT`, the same
    marker as every article line, so it appears and disappears together with
    the article it closes.
    """
    return RenderedRegion(
        name="toggle",
        lines=(
            DocumentLine(text=""),
            DocumentLine(
                text=center_label(f"{COLLAPSED_GLYPH} {label}", width),
                visibility=RegionVisibility.EXPANDED_BY_DEFAULT,
            ),
            DocumentLine(
                text=center_label(f"{EXPANDED_GLYPH} {label}", width),
                visibility=RegionVisibility.COLLAPSED_BY_DEFAULT,
            ),
        ),
    )
