from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.*?)\s*#*\s*$")
_RULE_PATTERN = re.compile(r"^(?:-\s*){3,}$|^(?:\*\s*){3,}$|^(?:_\s*){3,}$")
_UNORDERED_ITEM_PATTERN = re.compile(r"^(\s*)[-*+]\s+(.*)$")
_ORDERED_ITEM_PATTERN = re.compile(r"^(\s*)(\d{1,9})[.)]\s+(.*)$")
_QUOTE_PATTERN = re.compile(r"^\s{0,3}>\s?(.*)$")
_FENCE_PATTERN = re.compile(r"^\s{0,3}(```|~~~)")


class BlockKind(str, Enum):
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST_ITEM = "list_item"
    QUOTE = "quote"
    CODE = "code"
    RULE = "rule"


@dataclass(frozen=True)
class MarkdownBlock:
    kind: BlockKind
    text: str
    level: int = 0
    ordinal: str | None = None


def parse_markdown_blocks(markdown_text: str) -> list[MarkdownBlock]:
    blocks: list[MarkdownBlock] = []
    paragraph: list[str] = []
    quote: list[str] = []
    code: list[str] = []
    fence: str | None = None

    def flush_paragraph() -> None:
        if paragraph:
            blocks.append(MarkdownBlock(kind=BlockKind.PARAGRAPH, text=" ".join(paragraph)))
            paragraph.clear()

    def flush_quote() -> None:
        if quote:
            text = " ".join(part for part in quote if part)
            if text:
                blocks.append(MarkdownBlock(kind=BlockKind.QUOTE, text=text))
            quote.clear()

    for raw_line in markdown_text.replace("\r\n", "\n").split("\n"):
        line = raw_line.rstrip()

        if fence is not None:
            if line.strip().startswith(fence):
                blocks.append(MarkdownBlock(kind=BlockKind.CODE, text="\n".join(code)))
                code.clear()
                fence = None
            else:
                code.append(line)
            continue

        fence_match = _FENCE_PATTERN.match(line)
        if fence_match is not None:
            flush_paragraph()
            flush_quote()
            fence = fence_match.group(1)
            continue

        stripped = line.strip()
        if not stripped:
            flush_paragraph()
            flush_quote()
            continue

        quote_match = _QUOTE_PATTERN.match(line)
        if quote_match is not None:
            flush_paragraph()
            quote.append(quote_match.group(1).strip())
            continue
        flush_quote()

        heading_match = _HEADING_PATTERN.match(stripped)
        if heading_match is not None:
            flush_paragraph()
            blocks.append(
                MarkdownBlock(
                    kind=BlockKind.HEADING,
                    text=heading_match.group(2),
                    level=len(heading_match.group(1)),
                )
            )
            continue

        if _RULE_PATTERN.match(stripped):
            flush_paragraph()
            blocks.append(MarkdownBlock(kind=BlockKind.RULE, text=""))
            continue

        ordered_match = _ORDERED_ITEM_PATTERN.match(line)
        if ordered_match is not None:
            flush_paragraph()
            blocks.append(
                MarkdownBlock(
                    kind=BlockKind.LIST_ITEM,
                    text=ordered_match.group(3).strip(),
                    level=_nesting_level(ordered_match.group(1)),
                    ordinal=f"{ordered_match.group(2)}.",
                )
            )
            continue

        unordered_match = _UNORDERED_ITEM_PATTERN.match(line)
        if unordered_match is not None:
            flush_paragraph()
            blocks.append(
                MarkdownBlock(
                    kind=BlockKind.LIST_ITEM,
                    text=unordered_match.group(2).strip(),
                    level=_nesting_level(unordered_match.group(1)),
                )
            )
            continue

        if not paragraph and blocks and _continues_list_item(raw_line, blocks[-1]):
            previous = blocks[-1]
            blocks[-1] = MarkdownBlock(
                kind=previous.kind,
                text=f"{previous.text} {stripped}",
                level=previous.level,
                ordinal=previous.ordinal,
            )
            continue

        paragraph.append(stripped)

    if fence is not None:
        blocks.append(MarkdownBlock(kind=BlockKind.CODE, text="\n".join(code)))
    flush_paragraph()
    flush_quote()
    return blocks


def _nesting_level(leading_whitespace: str) -> int:
    width = len(leading_whitespace.replace("\t", "    "))
    return width // 2


def _continues_list_item(raw_line: str, previous: MarkdownBlock) -> bool:
    if previous.kind is not BlockKind.LIST_ITEM:
        return False
    return raw_line.startswith((" ", "\t"))
