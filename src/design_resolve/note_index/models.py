from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional


@dataclass(frozen=True)
class LineSpan:
    """A whole line of a note source.

    Offsets are character offsets into the source text; ``end_offset`` stops
    before the line break (and before a trailing ``\\r``).
    """

    line: int
    start_offset: int
    end_offset: int


@dataclass(frozen=True)
class NoteEntry:
    key: str
    value: str
    source_id: str
    definition_span: LineSpan


@dataclass(frozen=True)
class NoteSource:
    """A note-bearing unit: either pre-read ``text`` or a ``read_text`` callable."""

    source_id: str
    read_text: Optional[Callable[[], str]] = None
    text: Optional[str] = None

    def load(self) -> str:
        if self.text is not None:
            return self.text
        if self.read_text is None:
            raise OSError(f"Note source has neither text nor a reader: {self.source_id}")
        return self.read_text()


@dataclass(frozen=True)
class SourceReadFailure:
    source_id: str
    reason: str


@dataclass(frozen=True)
class NoteIndex:
    entries: list[NoteEntry] = field(default_factory=list)
    failures: list[SourceReadFailure] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.failures)

    @property
    def keys(self) -> list[str]:
        return [entry.key for entry in self.entries]

    def __iter__(self) -> Iterator[NoteEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
