import asyncio
from pathlib import Path

from design_resolve.note_index import (
    NoteSource,
    build_note_index,
    build_note_index_async,
    file_sources,
    iter_note_files,
)


def _failing_reader() -> str:
    raise OSError("permission denied")


def test_build_preserves_source_then_text_order():
    index = build_note_index(
        [
            ("one.des", "【A】a\n【B】b"),
            ("two.des", "【C】c"),
        ]
    )

    assert [(e.source_id, e.key) for e in index] == [
        ("one.des", "A"),
        ("one.des", "B"),
        ("two.des", "C"),
    ]
    assert len(index) == 3
    assert index.keys == ["A", "B", "C"]
    assert index.failures == []


def test_build_is_idempotent():
    sources = [("one.des", "【A】a\nmore\n【B】b"), ("two.des", "【A】again")]
    assert build_note_index(sources) == build_note_index(sources)


def test_duplicate_keys_across_sources_are_kept():
    index = build_note_index([("one.des", "【A】first"), ("two.des", "【A】second")])
    assert [e.value for e in index] == ["first", "second"]


def test_failed_source_is_isolated():
    sources = [
        NoteSource(source_id="one.des", text="【A】a"),
        NoteSource(source_id="two.des", read_text=_failing_reader),
        NoteSource(source_id="three.des", read_text=lambda: "【C】c"),
    ]

    index = build_note_index(sources)

    assert [e.key for e in index] == ["A", "C"]
    assert index.skipped == 1
    assert index.failures[0].source_id == "two.des"
    assert "permission denied" in index.failures[0].reason


def test_source_without_text_or_reader_is_a_failure():
    index = build_note_index([NoteSource(source_id="ghost.des")])
    assert index.entries == []
    assert index.skipped == 1


def test_undecodable_file_is_skipped(tmp_path: Path):
    (tmp_path / "good.des").write_text("【A】fine", encoding="utf-8")
    (tmp_path / "bad.des").write_bytes(b"\xff\xfe\xfa\x00")

    index = build_note_index(file_sources(tmp_path))

    assert [e.key for e in index] == ["A"]
    assert index.skipped == 1
    assert index.failures[0].source_id.endswith("bad.des")


def test_deleted_file_between_listing_and_reading_is_skipped(tmp_path: Path):
    gone = tmp_path / "gone.des"
    gone.write_text("【A】a", encoding="utf-8")
    (tmp_path / "kept.des").write_text("【B】b", encoding="utf-8")

    sources = file_sources(tmp_path)
    gone.unlink()
    index = build_note_index(sources)

    assert [e.key for e in index] == ["B"]
    assert index.skipped == 1


def test_iter_note_files_sorts_and_excludes(tmp_path: Path):
    (tmp_path / "b").mkdir()
    (tmp_path / "node_modules").mkdir()
    (tmp_path / "b" / "x.des").write_text("", encoding="utf-8")
    (tmp_path / "a.des").write_text("", encoding="utf-8")
    (tmp_path / "node_modules" / "y.des").write_text("", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("", encoding="utf-8")

    files = iter_note_files(tmp_path, "**/*.des", ["node_modules/**"])

    assert [p.relative_to(tmp_path).as_posix() for p in files] == ["a.des", "b/x.des"]


def test_file_sources_use_absolute_paths(tmp_path: Path):
    note = tmp_path / "a.des"
    note.write_text("【A】a", encoding="utf-8")

    sources = file_sources(tmp_path)

    assert [s.source_id for s in sources] == [str(note.resolve())]
    assert sources[0].load() == "【A】a"


def test_leading_byte_order_mark_is_dropped_on_read(tmp_path: Path):
    (tmp_path / "bom.des").write_bytes("\ufeff【A】v".encode("utf-8"))

    sources = file_sources(tmp_path)
    index = build_note_index(sources)

    assert sources[0].load() == "【A】v"
    assert index.entries[0].key == "A"
    assert index.entries[0].definition_span.start_offset == 0


def test_async_build_matches_sync_build():
    sources = [
        NoteSource(source_id="one.des", text="【A】a\n【B】b"),
        NoteSource(source_id="two.des", read_text=_failing_reader),
        NoteSource(source_id="three.des", read_text=lambda: "【C】c"),
    ]

    sync_index = build_note_index(sources)
    async_index = asyncio.run(build_note_index_async(sources))
    bounded_index = asyncio.run(build_note_index_async(sources, concurrency=1))

    assert async_index == sync_index
    assert bounded_index == sync_index
