"""Marker-delimited injection block inside a theme layout.

The block is located purely by its literal markers, so the surrounding Liquid
markup never has to be parsed. Insertion prefers the first ``</head>`` and
falls back to the first ``</body>``.
"""

from __future__ import annotations

import re

MARKER_START = "<!-- Page Speed Optimizer App -->"
MARKER_END = "<!-- End Page Speed Optimizer App -->"

HEAD_CLOSE = "</head>"
BODY_CLOSE = "</body>"

# A block never spans another start marker, so a stray start earlier in the
# layout cannot swallow the text between it and a later block.
_BLOCK_RE = re.compile(
    r"\n?"
    + re.escape(MARKER_START)
    + r"(?:(?!"
    + re.escape(MARKER_START)
    + r").)*?"
    + re.escape(MARKER_END),
    re.DOTALL,
)


def render_block(snippet_source: str) -> str:
    return f"\n{MARKER_START}\n<script>{snippet_source}</script>\n{MARKER_END}"


def find_anchor(template_text: str) -> str | None:
    for anchor in (HEAD_CLOSE, BODY_CLOSE):
        if anchor in template_text:
            return anchor
    return None


def contains_block(template_text: str) -> bool:
    return _BLOCK_RE.search(template_text) is not None


def remove(template_text: str) -> str:
    """Delete every injection block together with the newline just before it.

    Deleting a block can join the halves of a marker it was nested in, so the
    substitution repeats until nothing changes. Text after the end marker is
    left alone, which keeps a hand-written block on its own line from merging
    its neighbours.
    """
    text = template_text
    while (cleaned := _BLOCK_RE.sub("", text)) != text:
        text = cleaned
    return text


def inject(template_text: str, snippet_source: str) -> str:
    """Return ``template_text`` with exactly one block placed before the anchor.

    Blocks left by an earlier injection are dropped first. Without an anchor the
    text comes back unchanged; callers use :func:`find_anchor` to tell that case
    apart from a successful injection.
    """
    cleaned = remove(template_text)
    anchor = find_anchor(cleaned)
    if anchor is None:
        return template_text

    index = cleaned.index(anchor)
    return f"{cleaned[:index]}{render_block(snippet_source)}{cleaned[index:]}"
