from __future__ import annotations

import fnmatch
from pathlib import Path
from typing import Optional

from .models import NoteSource


def _is_excluded(rel_posix: str, exclude_globs: list[str]) -> bool:
    for pat in exclude_globs:
        if fnmatch.fnmatchcase(rel_posix, pat):
            return True
    return False


def iter_note_files(
    root: Path,
    pattern: str = "**/*.des",
    exclude_globs: Optional[list[str]] = None,
) -> list[Path]:
    """List note files under ``root`` matching ``pattern``, sorted by relative path."""
    excludes = exclude_globs or []
    paths: list[Path] = []
    for p in root.glob(pattern):
        if not p.is_file():
            continue
        try:
            rel = p.relative_to(root)
        except ValueError:
            continue
        if _is_excluded(rel.as_posix(), excludes):
            continue
        paths.append(p)
    paths.sort(key=lambda p: p.relative_to(root).as_posix())
    return paths


def _reader(path: Path):
    def read() -> str:
        return path.read_text(encoding="utf-8-sig")

    return read


def file_sources(
    root: Path,
    pattern: str = "**/*.des",
    exclude_globs: Optional[list[str]] = None,
) -> list[NoteSource]:
    """Wrap every matching note file as a lazily-read ``NoteSource``.

    The source id is the file's absolute path. Reading decodes UTF-8
    strictly and drops a leading byte order mark. Undecodable files surface
    as read failures.
    """
    return [
        NoteSource(source_id=str(path.resolve()), read_text=_reader(path))
        for path in iter_note_files(root, pattern, exclude_globs)
    ]
