"""Annotation service: the operations a host editor calls on its events.

Every query rebuilds the note index from scratch; nothing is cached between
calls. Rendering state (the highlight color) lives in ``ResolveConfig`` and
is returned with each ``Highlight`` rather than held by the service.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Iterable, Optional

from .config import ResolveConfig
from .key_match.document import TextDocument
from .key_match.lookup import definition_at, hover_at
from .key_match.matcher import find_all_spans
from .key_match.models import Decoration, DefinitionTarget, Highlight, Hover
from .note_index.builder import SourceLike, build_note_index
from .note_index.models import NoteIndex
from .note_index.sources import file_sources

logger = logging.getLogger(__name__)

HIGHLIGHT_COLOR_SETTING = "design-resolve.highlight.color"


class Trigger(str, Enum):
    ACTIVE_EDITOR_CHANGED = "active_editor_changed"
    DOCUMENT_SAVED = "document_saved"
    CONFIGURATION_CHANGED = "configuration_changed"


SourceProvider = Callable[[ResolveConfig], Iterable[SourceLike]]


def workspace_sources(config: ResolveConfig) -> Iterable[SourceLike]:
    return file_sources(config.workspace_root, config.note_glob, config.exclude_globs)


class AnnotationService:
    """Builds the note index on demand and answers highlight/hover/definition queries."""

    def __init__(
        self,
        config: ResolveConfig,
        source_provider: Optional[SourceProvider] = None,
        config_loader: Optional[Callable[[], ResolveConfig]] = None,
    ):
        self.config = config
        self.source_provider = source_provider or workspace_sources
        self.config_loader = config_loader

    def rebuild_index(self) -> NoteIndex:
        index = build_note_index(self.source_provider(self.config))
        if index.failures:
            logger.warning("%d note source(s) could not be read", index.skipped)
        return index

    def applies_to(self, language_id: Optional[str]) -> bool:
        return language_id is None or language_id == self.config.language_id

    def highlight(self, document_text: str, language_id: Optional[str] = None) -> Highlight:
        if not self.applies_to(language_id):
            return Highlight(color=self.config.highlight_color)

        index = self.rebuild_index()
        document = TextDocument(document_text)
        decorations = [
            Decoration(
                key=span.key.key,
                start_offset=span.start_offset,
                end_offset=span.end_offset,
                range=document.range_of(span.start_offset, span.end_offset),
            )
            for span in find_all_spans(index.entries, document_text)
        ]
        return Highlight(color=self.config.highlight_color, decorations=decorations)

    def hover(self, document_text: str, line: int, column: int) -> Optional[Hover]:
        index = self.rebuild_index()
        return hover_at(
            index.entries,
            TextDocument(document_text),
            line,
            column,
            workspace_root=self.config.workspace_root,
        )

    def definition(self, document_text: str, line: int, column: int) -> Optional[DefinitionTarget]:
        index = self.rebuild_index()
        return definition_at(index.entries, TextDocument(document_text), line, column)

    def reload_config(self) -> ResolveConfig:
        if self.config_loader is not None:
            self.config = self.config_loader()
        return self.config

    def handle(
        self,
        trigger: Trigger,
        document_text: Optional[str],
        language_id: Optional[str] = None,
        *,
        affected_settings: Iterable[str] = (),
    ) -> Optional[Highlight]:
        """Recompute highlights for the active document after a host event.

        Returns ``None`` when there is no active document, or when a
        configuration change does not touch the highlight color.
        """
        logger.debug("Handling %s", trigger.value)
        if trigger is Trigger.CONFIGURATION_CHANGED:
            if HIGHLIGHT_COLOR_SETTING not in set(affected_settings):
                return None
            self.reload_config()

        if document_text is None:
            return None
        return self.highlight(document_text, language_id)
