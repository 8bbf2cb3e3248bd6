"""Split raw reply text into prose and fenced-code segments."""

from __future__ import annotations

import re

from .models import Segment

FENCE = "```"

_INFO_STRING_RE = re.compile(r"^[\w+#.-]+$")


def _code_segment(body: str) -> Segment | None:
    """Build a code segment from the text between two fences.

    A bare info string on the first line of a multi-line body (```python) is
    taken as the language rather than as code.
    """
    language = ""
    head, newline, rest = body.partition("\n")
    if newline and rest.strip() and _INFO_STRING_RE.match(head.strip()):
        language = head.strip()
        body = rest
    content = body.strip()
    if not content:
        return None
    return Segment.code(content, language)


def format_response(text: str) -> list[Segment]:
    """Split *text* into ordered text and code segments.

    Text without a fence comes back as one text segment holding the whole
    input. Otherwise every fence pair yields a code segment with the fences
    removed and surrounding whitespace trimmed. An unmatched trailing fence is
    kept, together with everything after it, as plain text. Whitespace-only
    text and empty code blocks are dropped.
    """
    parts = text.split(FENCE)
    if len(parts) == 1:
        return [Segment.text(text)]

    # An even part count means an odd number of fences; the last fence has no
    # partner and the final part is emitted verbatim with its fence.
    unmatched_tail: str | None = None
    if len(parts) % 2 == 0:
        unmatched_tail = FENCE + parts.pop()

    segments: list[Segment] = []
    for index, part in enumerate(parts):
        if index % 2 == 0:
            if part.strip():
                segments.append(Segment.text(part))
            continue
        code = _code_segment(part)
        if code is not None:
            segments.append(code)

    if unmatched_tail is not None:
        segments.append(Segment.text(unmatched_tail))
    return segments


def plain_text(segments: list[Segment]) -> str:
    """Concatenate segment contents without any fences."""
    return "".join(segment.content for segment in segments)
