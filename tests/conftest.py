"""Pytest fixtures for design-resolve tests."""

from pathlib import Path

import pytest

from design_resolve.config import ResolveConfig

ENV_VARS = (
    "DESIGN_RESOLVE_ROOT",
    "DESIGN_RESOLVE_HIGHLIGHT_COLOR",
    "DESIGN_RESOLVE_NOTE_GLOB",
    "DESIGN_RESOLVE_LANGUAGE_ID",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's DESIGN_RESOLVE_* settings out of tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def workspace(tmp_path) -> Path:
    """Create a temporary workspace with two note files.

    Args:
        tmp_path: pytest's built-in temporary directory fixture

    Returns:
        Path to the workspace root
    """
    root = tmp_path / "workspace"
    (root / ".git").mkdir(parents=True)
    (root / "notes").mkdir()
    (root / "notes" / "characters.des").write_text(
        "【Alice】A curious girl.\nFalls down a rabbit hole.\n【Queen】Rules with a temper.\n",
        encoding="utf-8",
    )
    (root / "places.des").write_text("【Wonderland】Where it all happens.\n", encoding="utf-8")
    (root / "story.outline").write_text(
        "Chapter 1\nAlice arrives in Wonderland.\nThe Queen is angry at Alice.\n",
        encoding="utf-8",
    )
    return root


@pytest.fixture
def workspace_config(workspace) -> ResolveConfig:
    return ResolveConfig(workspace_root=workspace)
