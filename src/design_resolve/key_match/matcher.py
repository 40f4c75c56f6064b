"""Literal key matching over target text.

Keys are user-written note text, so they are always ``re.escape``d: a key
such as ``a.b`` matches the three characters ``a.b`` and nothing else.
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator, Optional

from design_resolve.note_index.models import NoteEntry

from .models import MatchSpan


def _key_pattern(key: str) -> re.Pattern[str]:
    return re.compile(re.escape(key))


def iter_key_spans(note: NoteEntry, text: str) -> Iterator[MatchSpan]:
    """Yield non-overlapping occurrences of ``note.key`` in ``text``, left to right."""
    if not note.key:
        return
    for m in _key_pattern(note.key).finditer(text):
        yield MatchSpan(key=note, start_offset=m.start(), end_offset=m.start() + len(note.key))


def find_all_spans(notes: Iterable[NoteEntry], target_text: str) -> list[MatchSpan]:
    """Every occurrence of every key, grouped by note in index order.

    Notes that share a key each contribute their own copy of the spans.
    """
    spans: list[MatchSpan] = []
    for note in notes:
        spans.extend(iter_key_spans(note, target_text))
    return spans


def match_at(notes: Iterable[NoteEntry], line_text: str, column: int) -> Optional[MatchSpan]:
    """First span (in index order) on ``line_text`` whose range contains ``column``.

    Containment includes both ends, so a cursor just after the key still hits.
    """
    for note in notes:
        for span in iter_key_spans(note, line_text):
            if span.start_offset <= column <= span.end_offset:
                return span
    return None


def find_at(notes: Iterable[NoteEntry], line_text: str, column: int) -> Optional[NoteEntry]:
    span = match_at(notes, line_text, column)
    return span.key if span is not None else None
