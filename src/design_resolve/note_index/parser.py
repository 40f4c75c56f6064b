from __future__ import annotations

import re

from .models import LineSpan, NoteEntry

KEY_OPEN = "【"
KEY_CLOSE = "】"

# Tolerant grammar: 【key】 needs no separator. The value runs lazily up to a
# line break directly followed by another opening bracket, or end of input.
_NOTE_RE = re.compile(r"【([^】]+)】(.*?)(?=\n【|\Z)", re.DOTALL)

# Whitespace plus the byte order mark, which str.strip leaves in place
_TRIM_RE = re.compile(r"^[\s\ufeff]+|[\s\ufeff]+\Z")


def _trim(s: str) -> str:
    return _TRIM_RE.sub("", s)


def line_span_at(text: str, offset: int) -> LineSpan:
    """Return the full line of ``text`` containing ``offset``."""
    line_start = text.rfind("\n", 0, offset) + 1
    line_end = text.find("\n", offset)
    if line_end == -1:
        line_end = len(text)
    if line_end > line_start and text[line_end - 1] == "\r":
        line_end -= 1
    return LineSpan(
        line=text.count("\n", 0, line_start),
        start_offset=line_start,
        end_offset=line_end,
    )


def parse_note_text(source_id: str, text: str) -> list[NoteEntry]:
    """Extract ``【key】value`` entries from one note source, in text order.

    Candidates whose key or value is empty after trimming are dropped.
    Unclosed or empty brackets never match and are skipped silently.
    """
    entries: list[NoteEntry] = []
    for m in _NOTE_RE.finditer(text):
        key = _trim(m.group(1))
        value = _trim(m.group(2))
        if not key or not value:
            continue
        entries.append(
            NoteEntry(
                key=key,
                value=value,
                source_id=source_id,
                definition_span=line_span_at(text, m.start()),
            )
        )
    return entries
