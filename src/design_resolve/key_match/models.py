"""Match records and host-facing payloads."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field

from design_resolve.note_index.models import LineSpan, NoteEntry


@dataclass(frozen=True)
class MatchSpan:
    """One occurrence of ``key.key`` in a target text, half-open offsets."""

    key: NoteEntry
    start_offset: int
    end_offset: int


@dataclass(frozen=True)
class Position:
    line: int
    character: int


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position


class Hover(BaseModel):
    """Hover payload for a key under the cursor."""

    key: str = Field(description="Matched note key")
    text: str = Field(description="Note value shown in the hover")
    provenance: str = Field(description="Note source, relative to the workspace when possible")
    range: Range = Field(description="Matched key range in the target document")

    model_config = {"frozen": True}

    def to_markdown(self) -> str:
        return f"```text\n{self.text}\n```\n\n*from: `{self.provenance}`*"


class DefinitionTarget(BaseModel):
    """Jump target: the line in the note source where the key is defined."""

    key: str = Field(description="Matched note key")
    source_id: str = Field(description="Note source holding the definition")
    definition_span: LineSpan = Field(description="Line of the key marker")

    model_config = {"frozen": True}


class Decoration(BaseModel):
    key: str
    start_offset: int
    end_offset: int
    range: Range

    model_config = {"frozen": True}


class Highlight(BaseModel):
    """Spans to decorate in a document plus the style to draw them with."""

    color: str
    border_radius: str = Field(default="2px")
    decorations: list[Decoration] = Field(default_factory=list)

    model_config = {"frozen": True}
