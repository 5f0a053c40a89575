from __future__ import annotations

import re

# CSI sequences (colors, cursor moves), OSC sequences (hyperlinks, titles) and
# the remaining two-character escapes.
_ANSI_PATTERN = re.compile(
    r"""
    \x1b\[[0-?]*[ -/]*[@-~]
    |\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)
    |\x1b[@-Z\\-_]
    |\x9b[0-?]*[ -/]*[@-~]
    """,
    re.VERBOSE,
)


def strip_ansi(text: str) -> str:
    return _ANSI_PATTERN.sub("", text)
