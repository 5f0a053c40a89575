from __future__ import annotations

import re
import textwrap
from collections.abc import Callable

from rich.style import Style

from article_reader.terminal.blocks import BlockKind, MarkdownBlock, parse_markdown_blocks

BULLET = "•"
QUOTE_PREFIX = "│ "
RULE_CHARACTER = "─"
CODE_INDENT = "  "
LIST_NESTING_INDENT = "  "
MIN_WRAP_WIDTH = 10

_BOLD = Style(bold=True)
_ITALIC = Style(italic=True)
_BOLD_ITALIC = Style(bold=True, italic=True)
_DIM = Style(dim=True)
_CODE = Style(reverse=True)

_IMAGE_PATTERN = re.compile(r"!\[([^\]]*)\]\([^)]*\)")
_LINK_PATTERN = re.compile(r"\[([^\]]*)\]\((?:[^()]|\([^)]*\))*\)")
_INLINE_SPAN_PATTERN = re.compile(
    r"(?P<bold>\*\*[^*\s](?:[^*]*[^*\s])?\*\*|__[^_\s](?:[^_]*[^_\s])?__)"
    r"|(?P<italic>(?<![*\w])\*[^*\s](?:[^*]*[^*\s])?\*(?![*\w])"
    r"|(?<![_\w])_[^_\s](?:[^_]*[^_\s])?_(?![_\w]))"
    r"|(?P<code>`[^`]+`)"
)


def render_markdown(markdown_text: str, width: int, indentation_symbol: str) -> str:
    return render_blocks(parse_markdown_blocks(markdown_text), width, indentation_symbol)


def render_blocks(blocks: list[MarkdownBlock], width: int, indentation_symbol: str) -> str:
    lines: list[str] = []
    for block in blocks:
        lines.extend(_render_block(block, width, indentation_symbol))
        lines.append("")
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def create_header(title: str, url: str, width: int) -> str:
    wrap_width = max(MIN_WRAP_WIDTH, width)
    lines = [_BOLD.render(line) for line in textwrap.wrap(title.strip(), wrap_width)]
    lines.append(_DIM.render(url))
    lines.append(RULE_CHARACTER * max(1, width))
    lines.append("")
    return "\n".join(lines) + "\n"


def _render_block(block: MarkdownBlock, width: int, indentation_symbol: str) -> list[str]:
    wrap_width = max(MIN_WRAP_WIDTH, width - len(indentation_symbol))

    if block.kind is BlockKind.HEADING:
        style = _BOLD if block.level <= 2 else _BOLD_ITALIC
        return _wrap(
            _flatten_inline(block.text),
            wrap_width,
            indentation_symbol,
            indentation_symbol,
            style=style.render,
        )

    if block.kind is BlockKind.PARAGRAPH:
        return _wrap(
            _flatten_inline(block.text),
            wrap_width,
            indentation_symbol,
            indentation_symbol,
            style=_style_inline_spans,
        )

    if block.kind is BlockKind.LIST_ITEM:
        nesting = LIST_NESTING_INDENT * block.level
        bullet = f"{block.ordinal or BULLET} "
        first_prefix = f"{indentation_symbol}{nesting}{bullet}"
        rest_prefix = f"{indentation_symbol}{nesting}{' ' * len(bullet)}"
        return _wrap(
            _flatten_inline(block.text),
            max(MIN_WRAP_WIDTH, width - len(first_prefix)),
            first_prefix,
            rest_prefix,
            style=_style_inline_spans,
        )

    if block.kind is BlockKind.QUOTE:
        prefix = f"{indentation_symbol}{QUOTE_PREFIX}"
        return _wrap(
            _flatten_inline(block.text),
            max(MIN_WRAP_WIDTH, width - len(prefix)),
            prefix,
            prefix,
            style=_ITALIC.render,
        )

    if block.kind is BlockKind.CODE:
        prefix = f"{indentation_symbol}{CODE_INDENT}"
        return [_DIM.render(f"{prefix}{line}") for line in block.text.split("\n")]

    return [f"{indentation_symbol}{RULE_CHARACTER * wrap_width}"]


def _wrap(
    text: str,
    wrap_width: int,
    first_prefix: str,
    rest_prefix: str,
    *,
    style: Callable[[str], str],
) -> list[str]:
    wrapped = textwrap.wrap(text, wrap_width, break_on_hyphens=False) or [""]
    lines = [f"{first_prefix}{style(wrapped[0])}"]
    lines.extend(f"{rest_prefix}{style(line)}" for line in wrapped[1:])
    return lines


def _flatten_inline(text: str) -> str:
    flattened = _IMAGE_PATTERN.sub(lambda match: _image_label(match.group(1)), text)
    return _LINK_PATTERN.sub(lambda match: match.group(1), flattened)


def _image_label(alt_text: str) -> str:
    alt = alt_text.strip()
    return f"[Image: {alt}]" if alt else "[Image]"


def _style_inline_spans(line: str) -> str:
    def _apply(match: re.Match[str]) -> str:
        span = match.group(0)
        if match.group("bold") is not None:
            return _BOLD.render(span)
        if match.group("italic") is not None:
            return _ITALIC.render(span)
        return _CODE.render(span)

    return _INLINE_SPAN_PATTERN.sub(_apply, line)
