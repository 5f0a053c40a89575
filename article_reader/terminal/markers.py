"""
Line visibility classes and their sentinel-marker encoding.

Documents are built as lists of `DocumentLine` records. Only `encode_lines`
turns them into the text stream understood by the terminal reader, where each
line of a collapsible region ends in an invisible code point:

- `COLLAPSED_REGION_MARKER`: the line is hidden until the toggle is opened.
- `EXPANDED_REGION_MARKER`: the line is shown until the toggle is opened.

Lines without a marker are always visible. The last line of a document never
carries a marker.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

COLLAPSED_REGION_MARKER = "\u2064"
EXPANDED_REGION_MARKER = "\u2063"
SENTINEL_MARKERS: frozenset[str] = frozenset({COLLAPSED_REGION_MARKER, EXPANDED_REGION_MARKER})


class RegionVisibility(str, Enum):
    ALWAYS_VISIBLE = "always_visible"
    COLLAPSED_BY_DEFAULT = "collapsed_by_default"
    EXPANDED_BY_DEFAULT = "expanded_by_default"


_MARKER_BY_VISIBILITY: dict[RegionVisibility, str] = {
    RegionVisibility.ALWAYS_VISIBLE: "",
    RegionVisibility.COLLAPSED_BY_DEFAULT: COLLAPSED_REGION_MARKER,
    RegionVisibility.EXPANDED_BY_DEFAULT: EXPANDED_REGION_MARKER,
}


@dataclass(frozen=True)
class DocumentLine:
    text: str
    visibility: RegionVisibility = RegionVisibility.ALWAYS_VISIBLE


def marker_for(visibility: RegionVisibility) -> str:
    return _MARKER_BY_VISIBILITY[visibility]


def encode_lines(lines: Sequence[DocumentLine]) -> str:
    if not lines:
        return ""
    encoded = [f"{line.text}{marker_for(line.visibility)}" for line in lines[:-1]]
    encoded.append(lines[-1].text)
    return "\n".join(encoded)


def split_marker(line: str) -> tuple[str, str]:
    if line and line[-1] in SENTINEL_MARKERS:
        return line[:-1], line[-1]
    return line, ""


def strip_markers(text: str) -> str:
    for marker in SENTINEL_MARKERS:
        text = text.replace(marker, "")
    return text


def resolve_view(document: str, *, expanded: bool = False) -> str:
    """Return the plain text a reader sees with the toggle closed or open."""
    hidden_marker = EXPANDED_REGION_MARKER if expanded else COLLAPSED_REGION_MARKER
    visible: list[str] = []
    for line in document.split("\n"):
        text, marker = split_marker(line)
        if marker == hidden_marker:
            continue
        visible.append(text)
    return "\n".join(visible)
