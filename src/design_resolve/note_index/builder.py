from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Optional, Union

from .models import NoteEntry, NoteIndex, NoteSource, SourceReadFailure
from .parser import parse_note_text

logger = logging.getLogger(__name__)

SourceLike = Union[NoteSource, tuple[str, str]]


def _as_source(source: SourceLike) -> NoteSource:
    if isinstance(source, NoteSource):
        return source
    source_id, text = source
    return NoteSource(source_id=source_id, text=text)


def _read_source(source: NoteSource) -> Union[str, SourceReadFailure]:
    try:
        return source.load()
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Skipping unreadable note source %s: %s", source.source_id, exc)
        return SourceReadFailure(source_id=source.source_id, reason=str(exc))


def _assemble(
    sources: list[NoteSource],
    texts: list[Union[str, SourceReadFailure]],
) -> NoteIndex:
    entries: list[NoteEntry] = []
    failures: list[SourceReadFailure] = []
    for source, text in zip(sources, texts):
        if isinstance(text, SourceReadFailure):
            failures.append(text)
            continue
        entries.extend(parse_note_text(source.source_id, text))

    logger.info(
        "Built note index: %d entries from %d sources (%d skipped)",
        len(entries),
        len(sources),
        len(failures),
    )
    return NoteIndex(entries=entries, failures=failures)


def build_note_index(sources: Iterable[SourceLike]) -> NoteIndex:
    """Parse every source into one ordered note index.

    Sources may be ``NoteSource`` objects or plain ``(source_id, text)``
    pairs. A source that cannot be read is recorded on
    ``NoteIndex.failures`` and the remaining sources still contribute.
    """
    resolved = [_as_source(s) for s in sources]
    texts = [_read_source(s) for s in resolved]
    return _assemble(resolved, texts)


async def build_note_index_async(
    sources: Iterable[SourceLike],
    *,
    concurrency: Optional[int] = None,
) -> NoteIndex:
    """Same as ``build_note_index`` but reads sources in worker threads.

    Reads run concurrently (bounded by ``concurrency`` when given); parsing
    happens afterwards in source order, so the result matches the sync build.
    """
    resolved = [_as_source(s) for s in sources]
    semaphore = asyncio.Semaphore(concurrency) if concurrency else None

    async def read(source: NoteSource) -> Union[str, SourceReadFailure]:
        if semaphore is None:
            return await asyncio.to_thread(_read_source, source)
        async with semaphore:
            return await asyncio.to_thread(_read_source, source)

    texts = await asyncio.gather(*(read(s) for s in resolved))
    return _assemble(resolved, list(texts))
