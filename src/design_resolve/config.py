"""Configuration management for design-resolve."""

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

DEFAULT_HIGHLIGHT_COLOR = "rgba(207, 174, 174, 0.82)"
DEFAULT_NOTE_GLOB = "**/*.des"
DEFAULT_LANGUAGE_ID = "outline"
DEFAULT_EXCLUDE_GLOBS = [".git/**", "node_modules/**"]

CONFIG_DIR_NAME = ".design_resolve"


class ConfigError(ValueError):
    """Raised when a configuration value has the wrong type or is empty."""


def _find_repo_root(start_dir: Path) -> Path:
    """Find repository root by walking upward looking for .git or pyproject.toml."""
    current_dir = start_dir

    while True:
        if (
            (current_dir / ".git").exists()
            or (current_dir / "pyproject.toml").exists()
            or (current_dir / CONFIG_DIR_NAME).is_dir()
        ):
            return current_dir

        parent_dir = current_dir.parent

        # Stop if we reach filesystem root
        if parent_dir == current_dir:
            # No repo found, return the start directory
            return start_dir

        current_dir = parent_dir


def _load_repo_config_data(repo_root: Path) -> Optional[dict]:
    """Load repo config data from .design_resolve/config.toml if it exists."""
    config_file = repo_root / CONFIG_DIR_NAME / "config.toml"

    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        # If config file is malformed, ignore it
        return None


def _nested_get(data: Optional[dict[str, Any]], path: list[str]) -> Any:
    cur: Any = data or {}
    for key in path:
        if not isinstance(cur, dict) or key not in cur:
            return None
        cur = cur[key]
    return cur


def _as_str(value: Any, *, name: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"Invalid config: {name} must be a non-empty string")
    return value.strip()


def _as_color(value: Any, *, name: str) -> Optional[str]:
    # Passed through to the host as-is; an empty string falls back to the default
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"Invalid config: {name} must be a string")
    return value


def _as_str_list(value: Any, *, name: str) -> Optional[list[str]]:
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(x, str) for x in value):
        raise ConfigError(f"Invalid config: {name} must be a list of strings")
    return list(value)


def _first(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value:
            return value
    return None


class ResolveConfig(BaseModel):
    """Configuration for note indexing and document annotation.

    ``highlight_color`` is passed through to the host untouched; it is never
    parsed or validated beyond being a string.
    """

    workspace_root: Path = Field(default_factory=Path.cwd)
    note_glob: str = Field(default=DEFAULT_NOTE_GLOB)
    language_id: str = Field(default=DEFAULT_LANGUAGE_ID)
    highlight_color: str = Field(default=DEFAULT_HIGHLIGHT_COLOR)
    exclude_globs: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_GLOBS))

    model_config = {"frozen": True}

    @classmethod
    def load(
        cls,
        cli_root: Optional[str] = None,
        cli_color: Optional[str] = None,
        start_dir: Optional[Path] = None,
    ) -> "ResolveConfig":
        """Load configuration with the following precedence:

        1. CLI options (--root, --color)
        2. DESIGN_RESOLVE_* environment variables
        3. repo-local .design_resolve/config.toml (walk upward from start_dir)
        4. Defaults

        Args:
            cli_root: Workspace root from the CLI --root option
            cli_color: Highlight color from the CLI --color option
            start_dir: Directory to start the repo search from (default: CWD)

        Raises:
            ConfigError: If a config.toml value has the wrong type
        """
        start = (start_dir or Path.cwd()).resolve()
        repo_root = _find_repo_root(start)
        data = _load_repo_config_data(repo_root)

        file_root = _as_str(_nested_get(data, ["workspace_root"]), name="workspace_root")
        file_color = _as_color(_nested_get(data, ["highlight", "color"]), name="[highlight].color")
        file_glob = _as_str(_nested_get(data, ["notes", "glob"]), name="[notes].glob")
        file_excludes = _as_str_list(
            _nested_get(data, ["notes", "exclude_globs"]), name="[notes].exclude_globs"
        )
        file_language = _as_str(
            _nested_get(data, ["document", "language_id"]), name="[document].language_id"
        )

        root_value = _first(os.environ.get("DESIGN_RESOLVE_ROOT"), file_root)
        if cli_root:
            # Relative CLI paths follow the shell's CWD
            workspace_root = Path(cli_root).expanduser()
        elif root_value:
            workspace_root = Path(root_value).expanduser()
            if not workspace_root.is_absolute():
                workspace_root = repo_root / workspace_root
        else:
            workspace_root = repo_root

        return cls(
            workspace_root=workspace_root.resolve(),
            note_glob=_first(os.environ.get("DESIGN_RESOLVE_NOTE_GLOB"), file_glob) or DEFAULT_NOTE_GLOB,
            language_id=(
                _first(os.environ.get("DESIGN_RESOLVE_LANGUAGE_ID"), file_language) or DEFAULT_LANGUAGE_ID
            ),
            highlight_color=(
                _first(cli_color, os.environ.get("DESIGN_RESOLVE_HIGHLIGHT_COLOR"), file_color)
                or DEFAULT_HIGHLIGHT_COLOR
            ),
            exclude_globs=file_excludes if file_excludes is not None else list(DEFAULT_EXCLUDE_GLOBS),
        )

    def with_color(self, color: Optional[str]) -> "ResolveConfig":
        """Return a copy using ``color``, or the default color when it is empty."""
        return self.model_copy(update={"highlight_color": color or DEFAULT_HIGHLIGHT_COLOR})
