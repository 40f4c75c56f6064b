from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from design_resolve.note_index.models import NoteEntry

from .document import TextDocument
from .matcher import match_at
from .models import DefinitionTarget, Hover, MatchSpan, Position, Range


def relative_source(source_id: str, workspace_root: Optional[Path]) -> str:
    """Show ``source_id`` relative to the workspace when it lives inside it."""
    if workspace_root is None:
        return source_id
    try:
        return Path(source_id).resolve().relative_to(workspace_root.resolve()).as_posix()
    except ValueError:
        return source_id


def _line_match(
    notes: Iterable[NoteEntry],
    document: TextDocument,
    line: int,
    column: int,
) -> Optional[MatchSpan]:
    return match_at(notes, document.line_at(line), column)


def hover_at(
    notes: Iterable[NoteEntry],
    document: TextDocument,
    line: int,
    column: int,
    *,
    workspace_root: Optional[Path] = None,
) -> Optional[Hover]:
    span = _line_match(notes, document, line, column)
    if span is None:
        return None
    note = span.key
    return Hover(
        key=note.key,
        text=note.value,
        provenance=relative_source(note.source_id, workspace_root),
        range=Range(
            start=Position(line=line, character=span.start_offset),
            end=Position(line=line, character=span.end_offset),
        ),
    )


def definition_at(
    notes: Iterable[NoteEntry],
    document: TextDocument,
    line: int,
    column: int,
) -> Optional[DefinitionTarget]:
    span = _line_match(notes, document, line, column)
    if span is None:
        return None
    return DefinitionTarget(
        key=span.key.key,
        source_id=span.key.source_id,
        definition_span=span.key.definition_span,
    )
