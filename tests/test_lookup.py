from pathlib import Path

from design_resolve.key_match import TextDocument, definition_at, hover_at, relative_source
from design_resolve.key_match.models import Position
from design_resolve.note_index import build_note_index


def _index(tmp_path: Path):
    source = tmp_path / "notes" / "world.des"
    return build_note_index([(str(source), "intro\n【Gate】The north gate.\nClosed at night.\n【Moat】Deep.")])


def test_hover_payload(tmp_path: Path):
    notes = _index(tmp_path).entries
    doc = TextDocument("Chapter\nThey reach the Gate at dusk.")

    hover = hover_at(notes, doc, 1, 16, workspace_root=tmp_path)

    assert hover is not None
    assert hover.key == "Gate"
    assert hover.text == "The north gate.\nClosed at night."
    assert hover.provenance == "notes/world.des"
    assert hover.range.start == Position(1, 15)
    assert hover.range.end == Position(1, 19)


def test_hover_markdown_rendering(tmp_path: Path):
    notes = _index(tmp_path).entries
    hover = hover_at(notes, TextDocument("Moat"), 0, 0, workspace_root=tmp_path)

    assert hover.to_markdown() == "```text\nDeep.\n```\n\n*from: `notes/world.des`*"


def test_hover_without_workspace_root_keeps_source_id(tmp_path: Path):
    notes = _index(tmp_path).entries
    hover = hover_at(notes, TextDocument("Moat"), 0, 2)
    assert hover.provenance == str(tmp_path / "notes" / "world.des")


def test_hover_misses_return_none(tmp_path: Path):
    notes = _index(tmp_path).entries
    doc = TextDocument("Gate\nnothing here")

    assert hover_at(notes, doc, 1, 3) is None
    assert hover_at([], doc, 0, 1) is None


def test_hover_only_searches_the_queried_line(tmp_path: Path):
    notes = _index(tmp_path).entries
    doc = TextDocument("Gate\nxxxx")
    assert hover_at(notes, doc, 1, 1) is None


def test_definition_target(tmp_path: Path):
    notes = _index(tmp_path).entries
    target = definition_at(notes, TextDocument("the Moat"), 0, 5)

    assert target is not None
    assert target.key == "Moat"
    assert target.source_id == str(tmp_path / "notes" / "world.des")
    assert target.definition_span.line == 3
    assert definition_at(notes, TextDocument("the Moat"), 0, 1) is None


def test_definition_target_dumps_to_json(tmp_path: Path):
    notes = _index(tmp_path).entries
    target = definition_at(notes, TextDocument("Gate"), 0, 0)

    data = target.model_dump(mode="json")
    assert data["definition_span"] == {"line": 1, "start_offset": 6, "end_offset": 27}


def test_relative_source_outside_root(tmp_path: Path):
    assert relative_source("/elsewhere/x.des", tmp_path) == "/elsewhere/x.des"
    assert relative_source("opaque-handle", None) == "opaque-handle"
