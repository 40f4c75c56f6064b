"""Note index: parse 【key】value notes out of note sources."""

from .builder import build_note_index, build_note_index_async
from .models import LineSpan, NoteEntry, NoteIndex, NoteSource, SourceReadFailure
from .parser import parse_note_text
from .sources import file_sources, iter_note_files

__all__ = [
    "LineSpan",
    "NoteEntry",
    "NoteIndex",
    "NoteSource",
    "SourceReadFailure",
    "build_note_index",
    "build_note_index_async",
    "file_sources",
    "iter_note_files",
    "parse_note_text",
]
