from __future__ import annotations

import re

from markdownify import ATX, markdownify


class ConversionError(ValueError):
    pass


def convert_to_markdown(markup: str) -> str:
    if not markup.strip():
        raise ConversionError("article has no readable content")
    try:
        converted = markdownify(markup, heading_style=ATX, bullets="-")
    except (ValueError, RecursionError) as exc:
        raise ConversionError(f"markdown conversion failed: {exc}") from exc

    markdown_text = _tidy_markdown(converted)
    if not markdown_text:
        raise ConversionError("article converted to empty markdown")
    return markdown_text


def _tidy_markdown(markdown_text: str) -> str:
    lines = [line.rstrip() for line in markdown_text.replace("\r\n", "\n").split("\n")]
    tidied: list[str] = []
    in_code_block = False
    for line in lines:
        if line.strip().startswith("```"):
            in_code_block = not in_code_block
            tidied.append(line.strip())
            continue
        if in_code_block:
            tidied.append(line)
            continue
        if not line.strip():
            if tidied and tidied[-1] == "":
                continue
            tidied.append("")
            continue
        tidied.append(re.sub(r"(?<=\S)[ \t]{2,}", " ", line))
    return "\n".join(tidied).strip()
