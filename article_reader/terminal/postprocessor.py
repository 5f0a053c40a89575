from __future__ import annotations

import re
from collections.abc import Callable
from urllib.parse import urlparse

from rich.style import Style

from article_reader.terminal.ansi import strip_ansi
from article_reader.terminal.markers import split_marker

_DIM = Style(dim=True)
_REFERENCE_PATTERN = re.compile(r"\[\d{1,3}\]")

LineRule = Callable[[str], str]


def _remove_patterns(*patterns: str) -> LineRule:
    compiled = [re.compile(pattern) for pattern in patterns]

    def _apply(text: str) -> str:
        for pattern in compiled:
            text = pattern.sub("", text)
        return text

    return _apply


_HOST_RULES: dict[str, tuple[LineRule, ...]] = {
    "wikipedia.org": (_remove_patterns(r"\s?\[edit\]", r"\s?\[citation needed\]"),),
}


def process(document: str, url: str) -> str:
    """Apply cosmetic fixes to an assembled document without disturbing its markers."""
    rules = _rules_for_url(url)
    processed: list[str] = []
    previous_blank_marker: str | None = None

    for line in document.split("\n"):
        text, marker = split_marker(line)
        for rule in rules:
            text = rule(text)
        text = _dim_references(text.rstrip())

        is_blank = not strip_ansi(text).strip()
        if is_blank and previous_blank_marker == marker:
            continue
        previous_blank_marker = marker if is_blank else None
        processed.append(f"{text}{marker}")

    return "\n".join(processed)


def _rules_for_url(url: str) -> tuple[LineRule, ...]:
    host = (urlparse(url).hostname or "").lower()
    for suffix, rules in _HOST_RULES.items():
        if host == suffix or host.endswith(f".{suffix}"):
            return rules
    return ()


def _dim_references(text: str) -> str:
    return _REFERENCE_PATTERN.sub(lambda match: _DIM.render(match.group(0)), text)
