"""Key matching: find note keys in target documents."""

from .document import DocumentPositionError, TextDocument
from .lookup import definition_at, hover_at, relative_source
from .matcher import find_all_spans, find_at, iter_key_spans, match_at
from .models import Decoration, DefinitionTarget, Highlight, Hover, MatchSpan, Position, Range

__all__ = [
    "Decoration",
    "DefinitionTarget",
    "DocumentPositionError",
    "Highlight",
    "Hover",
    "MatchSpan",
    "Position",
    "Range",
    "TextDocument",
    "definition_at",
    "find_all_spans",
    "find_at",
    "hover_at",
    "iter_key_spans",
    "match_at",
    "relative_source",
]
